"""Command dispatch: turns parsed commands into provider and settings calls."""

from __future__ import annotations

import datetime as dt
import logging

from pydantic import BaseModel, ValidationError

from .config import Settings
from .exceptions import InvalidQueryError
from .preferences import ProviderPreferences
from .weather.models import ProviderId, WeatherQuery, WeatherReport
from .weather.registry import ProviderRegistry, parse_provider_id


class GetCommand(BaseModel):
    """Fetch weather for a location, optionally for a date and provider."""

    location: str
    date: dt.date | None = None
    provider: str | None = None


class ConfigureCommand(BaseModel):
    """List providers (no argument) or persist a new default provider."""

    provider: str | None = None


Command = GetCommand | ConfigureCommand


class ProviderStatus(BaseModel):
    provider: ProviderId
    display_name: str
    has_credentials: bool
    is_default: bool
    supports_history: bool


class ProviderListing(BaseModel):
    default_provider: ProviderId
    env_override: ProviderId | None = None
    config_path: str
    providers: list[ProviderStatus]


class ConfigureResult(BaseModel):
    default_provider: ProviderId
    config_path: str


CommandResult = WeatherReport | ProviderListing | ConfigureResult


class WeatherApp:
    """Executes CLI commands against the registry and stored preferences.

    Settings and preferences are built once per process and passed in; the
    app holds no other state between commands.
    """

    def __init__(
        self,
        settings: Settings,
        registry: ProviderRegistry,
        preferences: ProviderPreferences,
        logger: logging.Logger,
    ) -> None:
        self.settings = settings
        self.registry = registry
        self.preferences = preferences
        self.logger = logger

    def execute(self, command: Command) -> CommandResult:
        if isinstance(command, GetCommand):
            return self.get_weather(command)
        if isinstance(command, ConfigureCommand):
            if command.provider is None:
                return self.list_providers()
            return self.configure(command.provider)
        raise TypeError(f"Unsupported command type: {type(command).__name__}")

    def list_providers(self) -> ProviderListing:
        default = self.preferences.get_default()
        # The marker follows what `get` would use without --provider.
        effective = self.settings.default_provider or default
        credentials = self.preferences.credential_status(self.settings)
        statuses = []
        for provider_id in self.registry.list():
            provider = self.registry.resolve(provider_id)
            statuses.append(
                ProviderStatus(
                    provider=provider_id,
                    display_name=provider.display_name,
                    has_credentials=credentials[provider_id],
                    is_default=provider_id is effective,
                    supports_history=provider.supports_history,
                )
            )
        return ProviderListing(
            default_provider=default,
            env_override=self.settings.default_provider,
            config_path=str(self.preferences.path),
            providers=statuses,
        )

    def configure(self, provider_name: str) -> ConfigureResult:
        provider_id = parse_provider_id(provider_name)
        self.preferences.set_default(provider_id)
        return ConfigureResult(
            default_provider=provider_id,
            config_path=str(self.preferences.path),
        )

    def get_weather(self, command: GetCommand) -> WeatherReport:
        try:
            query = WeatherQuery(location=command.location, date=command.date)
        except ValidationError as exc:
            reason = exc.errors()[0]["msg"] if exc.errors() else str(exc)
            raise InvalidQueryError(f"Invalid weather query: {reason}") from exc

        override = (
            parse_provider_id(command.provider)
            if command.provider is not None
            else self.settings.default_provider
        )
        provider_id = self.preferences.resolve_active(override)
        self.logger.info(
            "Fetching weather for %s (date=%s) from %s",
            query.location,
            query.date.isoformat() if query.date else "now",
            provider_id.value,
        )
        return self.registry.resolve(provider_id).fetch(query)
