"""WeatherAPI (api.weatherapi.com) weather provider implementation."""

from __future__ import annotations

import datetime as dt
from typing import Any

from .base import WeatherProvider
from .models import ProviderId, WeatherQuery, WeatherReport

# WeatherAPI error code for "No matching location found."
LOCATION_NOT_FOUND_CODE = 1006


class WeatherApiProvider(WeatherProvider):
    """Fetches current, historical and short-range forecast weather from WeatherAPI.

    Current conditions come from ``/current.json``. Past dates (and today) use
    ``/history.json`` and upcoming dates use ``/forecast.json``; both return
    hourly entries, and the entry closest to local noon is reported.
    WeatherAPI already answers in metric units (Celsius, mb == hPa, km/h).
    """

    provider_id = ProviderId.WEATHERAPI
    display_name = "WeatherAPI"
    default_base_url = "https://api.weatherapi.com/v1"
    api_key_param = "key"
    supports_history = True
    max_forecast_days = 14

    def _build_request(self, query: WeatherQuery) -> tuple[str, dict[str, Any]]:
        params: dict[str, Any] = {"q": query.location, "aqi": "no"}
        if query.date is None:
            return "/current.json", params

        params["dt"] = query.date.isoformat()
        if query.date <= dt.date.today():
            return "/history.json", params
        params["days"] = self.max_forecast_days
        params["alerts"] = "no"
        return "/forecast.json", params

    def _is_location_not_found(self, status_code: int, payload: Any) -> bool:
        if status_code == 404:
            return True
        error = payload.get("error") if isinstance(payload, dict) else None
        return (
            status_code == 400
            and isinstance(error, dict)
            and error.get("code") == LOCATION_NOT_FOUND_CODE
        )

    def _error_message(self, payload: Any) -> str | None:
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        return None

    def _normalize(self, payload: dict[str, Any], query: WeatherQuery) -> WeatherReport:
        if query.date is None:
            entry = self._require_dict(payload, "current")
            timestamp_key = "last_updated_epoch"
        else:
            entry = self._select_hour(payload, query.date)
            timestamp_key = "time_epoch"

        condition = self._require_dict(entry, "condition")
        return WeatherReport(
            location=self._location_name(payload, fallback=query.location),
            condition=self._require_str(condition, "text"),
            timestamp=self._epoch_to_utc(self._require_number(entry, timestamp_key)),
            temperature_celsius=self._require_number(entry, "temp_c"),
            humidity_pct=self._number_or_zero(entry, "humidity"),
            pressure_hpa=self._number_or_zero(entry, "pressure_mb"),
            wind_speed=self._number_or_zero(entry, "wind_kph"),
            wind_degree=self._number_or_zero(entry, "wind_degree"),
            source_provider=self.provider_id,
        )

    def _select_hour(self, payload: dict[str, Any], date: dt.date) -> dict[str, Any]:
        forecast = self._require_dict(payload, "forecast")
        days = forecast.get("forecastday")
        if not isinstance(days, list) or not days:
            raise self._malformed("missing 'forecast.forecastday' list")

        wanted = date.isoformat()
        day = next(
            (d for d in days if isinstance(d, dict) and d.get("date") == wanted),
            days[0],
        )
        if not isinstance(day, dict):
            raise self._malformed("has non-object 'forecastday' entry")

        raw_hours = day.get("hour")
        if raw_hours is None:
            raw_hours = []
        if not isinstance(raw_hours, list):
            raise self._malformed(f"has non-list 'hour' for {wanted}")
        hours = [hour for hour in raw_hours if isinstance(hour, dict)]
        if not hours:
            raise self._malformed(f"has no hourly entries for {wanted}")
        return min(hours, key=self._distance_from_noon)

    @staticmethod
    def _distance_from_noon(hour: dict[str, Any]) -> int:
        # "time" is local wall clock, e.g. "2026-01-01 13:00".
        raw = hour.get("time")
        if isinstance(raw, str):
            try:
                parsed = dt.datetime.strptime(raw.strip(), "%Y-%m-%d %H:%M")
            except ValueError:
                return 24
            return abs(parsed.hour - 12)
        return 24

    @staticmethod
    def _location_name(payload: dict[str, Any], fallback: str) -> str:
        location = payload.get("location")
        if not isinstance(location, dict):
            return fallback
        name = location.get("name")
        country = location.get("country")
        if isinstance(name, str) and name.strip():
            if isinstance(country, str) and country.strip():
                return f"{name.strip()}, {country.strip()}"
            return name.strip()
        return fallback
