"""Application exception classes."""

from __future__ import annotations


class ConfigError(Exception):
    """Raised when configuration is invalid, unreadable or incomplete."""


class ConfigWriteError(ConfigError):
    """Raised when the persisted configuration cannot be written."""


class UnknownProviderError(Exception):
    """Raised when a provider name does not match any known provider."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Provider `{name}` not supported")
        self.name = name


class InvalidQueryError(Exception):
    """Raised when a weather command carries an unusable location or date."""


class WeatherProviderError(Exception):
    """Raised when weather provider requests or normalization fail."""

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class MissingCredentialsError(WeatherProviderError):
    """Raised when a provider is invoked without an API key."""


class NetworkFailureError(WeatherProviderError):
    """Raised for transport failures and timeouts."""


class UpstreamError(WeatherProviderError):
    """Raised for non-2xx provider responses other than "not found"."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, provider=provider)
        self.status_code = status_code


class MalformedResponseError(WeatherProviderError):
    """Raised when a provider payload does not have the expected shape."""


class LocationNotFoundError(WeatherProviderError):
    """Raised when the provider does not know the requested location."""


class UnsupportedOperationError(WeatherProviderError):
    """Raised when a provider cannot serve the requested kind of query."""
