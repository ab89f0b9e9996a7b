"""Provider-agnostic weather interface and shared HTTP handling."""

from __future__ import annotations

import datetime as dt
import logging
from abc import ABC, abstractmethod
from datetime import UTC
from typing import Any, ClassVar

import httpx

from ..exceptions import (
    LocationNotFoundError,
    MalformedResponseError,
    MissingCredentialsError,
    NetworkFailureError,
    UnsupportedOperationError,
    UpstreamError,
)
from ..redaction import sanitize_for_logging, sanitize_text
from .models import ProviderId, WeatherQuery, WeatherReport

USER_AGENT = "weather-fetch/0.1"


class WeatherProvider(ABC):
    """Base contract for weather providers.

    A provider performs exactly one GET per ``fetch`` call and never retries.
    Credentials are checked before any network I/O. Subclasses describe the
    request to make and how to turn the decoded JSON into a ``WeatherReport``;
    status mapping and payload decoding live here.
    """

    provider_id: ClassVar[ProviderId]
    display_name: ClassVar[str]
    default_base_url: ClassVar[str]
    api_key_param: ClassVar[str]
    supports_history: ClassVar[bool] = False
    max_forecast_days: ClassVar[int] = 0

    def __init__(
        self,
        api_key: str | None,
        *,
        logger: logging.Logger,
        base_url: str | None = None,
        timeout_seconds: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self.logger = logger
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        )

    def __enter__(self) -> WeatherProvider:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP client."""
        self._client.close()

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)

    def fetch(self, query: WeatherQuery) -> WeatherReport:
        """Fetch weather for ``query`` and normalize it to a ``WeatherReport``."""
        if not self.has_credentials:
            raise MissingCredentialsError(
                f"Missing API key for {self.display_name}; "
                f"set {self.provider_id.value.upper()}_API_KEY.",
                provider=self.provider_id.value,
            )
        self._check_date_supported(query.date)

        path, params = self._build_request(query)
        payload = self._request_json(path, params)
        report = self._normalize(payload, query)
        self.logger.info(
            "%s returned %s for %s",
            self.display_name,
            report.condition,
            report.location,
        )
        return report

    @abstractmethod
    def _build_request(self, query: WeatherQuery) -> tuple[str, dict[str, Any]]:
        """Return the request path and query params, without credentials."""

    @abstractmethod
    def _normalize(self, payload: dict[str, Any], query: WeatherQuery) -> WeatherReport:
        """Map a decoded provider payload to a ``WeatherReport``."""

    def _is_location_not_found(self, status_code: int, payload: Any) -> bool:
        return status_code == 404

    def _error_message(self, payload: Any) -> str | None:
        """Extract a human-readable message from a provider error body."""
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            return payload["message"]
        return None

    def _check_date_supported(self, date: dt.date | None) -> None:
        if date is None:
            return
        today = dt.date.today()
        if date <= today:
            if not self.supports_history:
                raise UnsupportedOperationError(
                    f"{self.display_name} does not support historical queries "
                    f"(requested {date.isoformat()}).",
                    provider=self.provider_id.value,
                )
            return
        days_ahead = (date - today).days
        if days_ahead > self.max_forecast_days:
            raise UnsupportedOperationError(
                f"{self.display_name} supports dates at most {self.max_forecast_days} "
                f"days ahead; requested {date.isoformat()} ({days_ahead} days ahead).",
                provider=self.provider_id.value,
            )

    def _request_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        provider = self.provider_id.value
        url = f"{self.base_url}{path}"
        request_params = {**params, self.api_key_param: self._api_key}
        self.logger.debug(
            "%s GET %s params=%s",
            self.display_name,
            url,
            sanitize_for_logging(request_params),
            extra={"provider": provider},
        )
        try:
            response = self._client.get(path, params=request_params)
        except httpx.TimeoutException as exc:
            self.logger.warning(
                "%s request timed out", self.display_name, extra={"provider": provider}
            )
            raise NetworkFailureError(
                f"{self.display_name} request to {url} timed out after "
                f"{self.timeout_seconds:g}s.",
                provider=provider,
            ) from exc
        except httpx.HTTPError as exc:
            self.logger.warning(
                "%s request failed (%s)",
                self.display_name,
                type(exc).__name__,
                extra={"provider": provider},
            )
            raise NetworkFailureError(
                f"{self.display_name} request to {url} failed: {sanitize_text(str(exc))}",
                provider=provider,
            ) from exc

        try:
            payload: Any = response.json()
        except ValueError:
            payload = None

        # Redirects are not followed, so 1xx and 3xx land here too.
        if not response.is_success:
            status = response.status_code
            message = self._error_message(payload) or sanitize_text(response.text[:300])
            if self._is_location_not_found(status, payload):
                raise LocationNotFoundError(
                    f"{self.display_name} could not find location: {message}",
                    provider=provider,
                )
            self.logger.warning(
                "%s returned HTTP %d",
                self.display_name,
                status,
                extra={"provider": provider, "status_code": status},
            )
            raise UpstreamError(
                f"{self.display_name} returned HTTP {status}: {message}",
                status_code=status,
                provider=provider,
            )

        if payload is None:
            raise MalformedResponseError(
                f"{self.display_name} returned non-JSON response from {url}.",
                provider=provider,
            )
        if not isinstance(payload, dict):
            raise MalformedResponseError(
                f"{self.display_name} returned unexpected payload type "
                f"{type(payload).__name__} from {url}.",
                provider=provider,
            )
        return payload

    def _malformed(self, detail: str) -> MalformedResponseError:
        return MalformedResponseError(
            f"{self.display_name} payload {detail}.", provider=self.provider_id.value
        )

    def _require_dict(self, payload: dict[str, Any], key: str) -> dict[str, Any]:
        value = payload.get(key)
        if not isinstance(value, dict):
            raise self._malformed(f"missing '{key}' object")
        return value

    def _require_number(self, payload: dict[str, Any], key: str) -> float:
        value = payload.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._malformed(f"missing numeric '{key}'")
        return float(value)

    def _number_or_zero(self, payload: dict[str, Any], key: str) -> float:
        """Return a numeric field, or 0.0 when the provider omits it."""
        value = payload.get(key)
        if value is None:
            return 0.0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._malformed(f"has non-numeric '{key}'")
        return float(value)

    def _require_str(self, payload: dict[str, Any], key: str) -> str:
        value = payload.get(key)
        if not isinstance(value, str):
            raise self._malformed(f"missing string '{key}'")
        return value.strip()

    def _epoch_to_utc(self, value: float) -> dt.datetime:
        try:
            return dt.datetime.fromtimestamp(value, tz=UTC)
        except (OverflowError, ValueError, OSError) as exc:
            raise self._malformed(f"has out-of-range timestamp {value!r}") from exc
