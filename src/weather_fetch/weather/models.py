"""Typed models for weather queries and normalized reports."""

from __future__ import annotations

import datetime as dt
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderId(StrEnum):
    """Closed set of supported weather providers, in display order."""

    WEATHERAPI = "weatherapi"
    OPENWEATHER = "openweather"


DEFAULT_PROVIDER = ProviderId.WEATHERAPI


class WeatherQuery(BaseModel):
    """Location plus optional calendar date; no date means current conditions."""

    model_config = ConfigDict(frozen=True)

    location: str
    date: dt.date | None = None

    @field_validator("location")
    @classmethod
    def location_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("location must not be empty")
        return value


class WeatherReport(BaseModel):
    """Normalized, unit-consistent result returned by every provider."""

    location: str
    condition: str
    timestamp: dt.datetime
    temperature_celsius: float
    humidity_pct: float
    pressure_hpa: float
    wind_speed: float = Field(description="Wind speed in km/h")
    wind_degree: float
    source_provider: ProviderId
