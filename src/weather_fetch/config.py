"""Typed settings loader for the weather fetch CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError, UnknownProviderError
from .weather.models import ProviderId


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weatherapi_api_key: str | None = Field(
        default=None, alias="WEATHERAPI_API_KEY", repr=False
    )
    openweather_api_key: str | None = Field(
        default=None, alias="OPENWEATHER_API_KEY", repr=False
    )

    config_path: Path = Field(
        default=Path("./weather_settings.json"),
        alias="WEATHER_CONFIG_PATH",
    )
    default_provider: ProviderId | None = Field(default=None, alias="DEFAULT_PROVIDER")

    weather_timeout_seconds: float = Field(default=5.0, alias="WEATHER_TIMEOUT_SECONDS")
    weatherapi_base_url: str = Field(
        default="https://api.weatherapi.com/v1",
        alias="WEATHERAPI_BASE_URL",
    )
    openweather_base_url: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        alias="OPENWEATHER_BASE_URL",
    )
    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")

    @field_validator("default_provider", mode="before")
    @classmethod
    def parse_default_provider(cls, value: Any) -> Any:
        """Accept provider names case-insensitively; treat empty as unset."""
        if isinstance(value, str):
            value = value.strip().lower()
            if not value:
                return None
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if not self.weatherapi_base_url.startswith(("http://", "https://")):
            raise ValueError("WEATHERAPI_BASE_URL must be an http(s) URL.")
        if not self.openweather_base_url.startswith(("http://", "https://")):
            raise ValueError("OPENWEATHER_BASE_URL must be an http(s) URL.")
        self.log_level = self.log_level.strip().upper()
        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL.")
        return self

    def api_key_for(self, provider_id: ProviderId) -> str | None:
        """Return the raw credentials for a provider, or None when absent."""
        if provider_id is ProviderId.WEATHERAPI:
            return self.weatherapi_api_key
        if provider_id is ProviderId.OPENWEATHER:
            return self.openweather_api_key
        raise UnknownProviderError(str(provider_id))

    def base_url_for(self, provider_id: ProviderId) -> str:
        if provider_id is ProviderId.WEATHERAPI:
            return self.weatherapi_base_url.rstrip("/")
        if provider_id is ProviderId.OPENWEATHER:
            return self.openweather_base_url.rstrip("/")
        raise UnknownProviderError(str(provider_id))

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "config_path": str(self.config_path),
            "default_provider_override": (
                self.default_provider.value if self.default_provider else None
            ),
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "weatherapi_base_url": self.weatherapi_base_url,
            "openweather_base_url": self.openweather_base_url,
            "credentials_present": {
                provider_id.value: bool(self.api_key_for(provider_id))
                for provider_id in ProviderId
            },
            "log_level": self.log_level,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
