"""OpenWeather current weather provider implementation."""

from __future__ import annotations

from typing import Any

from .base import WeatherProvider
from .models import ProviderId, WeatherQuery, WeatherReport

MS_TO_KMH = 3.6


class OpenWeatherProvider(WeatherProvider):
    """Fetches current conditions from the OpenWeather ``/weather`` endpoint.

    Historical data lives behind a separate paid product, so any dated query
    is rejected with ``UnsupportedOperationError`` before network I/O.
    """

    provider_id = ProviderId.OPENWEATHER
    display_name = "OpenWeather"
    default_base_url = "https://api.openweathermap.org/data/2.5"
    api_key_param = "appid"
    supports_history = False
    max_forecast_days = 0

    def _build_request(self, query: WeatherQuery) -> tuple[str, dict[str, Any]]:
        return "/weather", {"q": query.location, "units": "metric", "lang": "en"}

    def _normalize(self, payload: dict[str, Any], query: WeatherQuery) -> WeatherReport:
        main = self._require_dict(payload, "main")
        wind = payload.get("wind") or {}
        if not isinstance(wind, dict):
            raise self._malformed("has non-object 'wind'")

        conditions = payload.get("weather")
        if not isinstance(conditions, list):
            raise self._malformed("missing 'weather' list")
        first = conditions[0] if conditions and isinstance(conditions[0], dict) else {}
        # "description" is the detailed text; "main" is a one-word group.
        condition = first.get("description") or first.get("main") or "unknown"

        name = payload.get("name")
        location = name.strip() if isinstance(name, str) and name.strip() else query.location

        return WeatherReport(
            location=location,
            condition=str(condition),
            timestamp=self._epoch_to_utc(self._require_number(payload, "dt")),
            temperature_celsius=self._require_number(main, "temp"),
            humidity_pct=self._number_or_zero(main, "humidity"),
            pressure_hpa=self._number_or_zero(main, "pressure"),
            wind_speed=round(self._number_or_zero(wind, "speed") * MS_TO_KMH, 2),
            wind_degree=self._number_or_zero(wind, "deg"),
            source_provider=self.provider_id,
        )
