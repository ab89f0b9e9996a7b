"""Weather provider integrations."""

from .base import WeatherProvider
from .models import DEFAULT_PROVIDER, ProviderId, WeatherQuery, WeatherReport
from .openweather import OpenWeatherProvider
from .registry import ProviderRegistry, parse_provider_id
from .weatherapi import WeatherApiProvider

__all__ = [
    "DEFAULT_PROVIDER",
    "OpenWeatherProvider",
    "ProviderId",
    "ProviderRegistry",
    "WeatherApiProvider",
    "WeatherProvider",
    "WeatherQuery",
    "WeatherReport",
    "parse_provider_id",
]
