"""Lookup table from provider ids to provider implementations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import httpx

from ..exceptions import UnknownProviderError
from .base import WeatherProvider
from .models import ProviderId
from .openweather import OpenWeatherProvider
from .weatherapi import WeatherApiProvider

if TYPE_CHECKING:
    from ..config import Settings

ProviderFactory = Callable[..., WeatherProvider]

PROVIDER_CLASSES: dict[ProviderId, type[WeatherProvider]] = {
    ProviderId.WEATHERAPI: WeatherApiProvider,
    ProviderId.OPENWEATHER: OpenWeatherProvider,
}


def parse_provider_id(name: str) -> ProviderId:
    """Parse a user-supplied provider name, case-insensitively."""
    try:
        return ProviderId(name.strip().lower())
    except ValueError as exc:
        raise UnknownProviderError(name) from exc


class ProviderRegistry:
    """Creates providers on first use and caches one instance per id."""

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        transport: httpx.BaseTransport | None = None,
        factories: dict[ProviderId, ProviderFactory] | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._transport = transport
        self._factories: dict[ProviderId, ProviderFactory] = dict(
            factories or PROVIDER_CLASSES
        )
        self._instances: dict[ProviderId, WeatherProvider] = {}

    def __enter__(self) -> ProviderRegistry:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def list(self) -> list[ProviderId]:
        """Return all known providers in declaration order."""
        return [provider_id for provider_id in ProviderId if provider_id in self._factories]

    def resolve(self, provider_id: ProviderId) -> WeatherProvider:
        provider = self._instances.get(provider_id)
        if provider is None:
            factory = self._factories[provider_id]
            provider = factory(
                self.settings.api_key_for(provider_id),
                logger=self.logger,
                base_url=self.settings.base_url_for(provider_id),
                timeout_seconds=self.settings.weather_timeout_seconds,
                transport=self._transport,
            )
            self._instances[provider_id] = provider
            self.logger.debug("Provider %s initialized", provider_id.value)
        return provider

    def close(self) -> None:
        """Close every provider created so far."""
        for provider in self._instances.values():
            provider.close()
        self._instances.clear()
