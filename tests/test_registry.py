"""Provider registry lookups and provider id parsing."""

from __future__ import annotations

import logging

import pytest
from helpers import RecordingTransport

from weather_fetch.config import Settings
from weather_fetch.exceptions import UnknownProviderError
from weather_fetch.weather.models import ProviderId
from weather_fetch.weather.openweather import OpenWeatherProvider
from weather_fetch.weather.registry import ProviderRegistry, parse_provider_id
from weather_fetch.weather.weatherapi import WeatherApiProvider


def _make_registry(**env: str) -> ProviderRegistry:
    settings = Settings(_env_file=None, **env)
    return ProviderRegistry(
        settings=settings,
        logger=logging.getLogger("test_registry"),
        transport=RecordingTransport(json={}),
    )


@pytest.mark.parametrize("provider_id", list(ProviderId))
def test_resolve_returns_provider_with_matching_identity(provider_id: ProviderId) -> None:
    with _make_registry() as registry:
        provider = registry.resolve(provider_id)
        assert provider is not None
        assert provider.provider_id is provider_id


def test_resolve_maps_ids_to_concrete_classes() -> None:
    with _make_registry() as registry:
        assert isinstance(registry.resolve(ProviderId.WEATHERAPI), WeatherApiProvider)
        assert isinstance(registry.resolve(ProviderId.OPENWEATHER), OpenWeatherProvider)


def test_resolve_caches_instances() -> None:
    with _make_registry() as registry:
        first = registry.resolve(ProviderId.OPENWEATHER)
        assert registry.resolve(ProviderId.OPENWEATHER) is first


def test_list_is_deterministic_and_in_declaration_order() -> None:
    registry = _make_registry()
    first = registry.list()
    assert first == [ProviderId.WEATHERAPI, ProviderId.OPENWEATHER]
    assert registry.list() == first
    assert registry.list() == first


def test_providers_receive_credentials_and_settings() -> None:
    with _make_registry(
        WEATHERAPI_API_KEY="wa-key",
        WEATHER_TIMEOUT_SECONDS="2.5",
        WEATHERAPI_BASE_URL="https://weather.example.com/v1/",
    ) as registry:
        weatherapi = registry.resolve(ProviderId.WEATHERAPI)
        openweather = registry.resolve(ProviderId.OPENWEATHER)
        assert weatherapi.has_credentials
        assert not openweather.has_credentials
        assert weatherapi.timeout_seconds == 2.5
        assert weatherapi.base_url == "https://weather.example.com/v1"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("weatherapi", ProviderId.WEATHERAPI),
        ("OpenWeather", ProviderId.OPENWEATHER),
        ("  OPENWEATHER ", ProviderId.OPENWEATHER),
    ],
)
def test_parse_provider_id_is_case_insensitive(raw: str, expected: ProviderId) -> None:
    assert parse_provider_id(raw) is expected


def test_parse_unknown_provider_raises() -> None:
    with pytest.raises(UnknownProviderError, match="Provider `darksky` not supported"):
        parse_provider_id("darksky")
