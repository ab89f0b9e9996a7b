"""Persisted default-provider setting."""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ValidationError

from .config import Settings
from .exceptions import ConfigError, ConfigWriteError
from .weather.models import DEFAULT_PROVIDER, ProviderId


class StoredPreferences(BaseModel):
    """On-disk record: ``{"default_provider": "<id>"}``."""

    default_provider: ProviderId


class ProviderPreferences:
    """Reads and writes the default provider from a small JSON file.

    The file is either absent (no default ever written; the WeatherAPI
    fallback applies) or holds an explicit provider. Writing is the only
    transition and there is no way to remove a stored default. Missing
    credentials never cause a different provider to be chosen here.
    """

    def __init__(self, path: Path, logger: logging.Logger | None = None) -> None:
        self.path = path
        self.logger = logger or logging.getLogger(__name__)
        self._loaded = False
        self._stored: ProviderId | None = None

    def stored_default(self) -> ProviderId | None:
        """Return the persisted provider, or None when nothing has been saved.

        The file is read on first use only; later calls (and ``set_default``)
        work from the cached value.
        """
        if not self._loaded:
            self._stored = self._read()
            self._loaded = True
        return self._stored

    def _read(self) -> ProviderId | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ConfigError(f"Failed reading {self.path}: {exc}") from exc

        try:
            stored = StoredPreferences.model_validate_json(raw)
        except ValidationError as exc:
            raise ConfigError(f"Invalid settings file {self.path}: {exc}") from exc
        return stored.default_provider

    def get_default(self) -> ProviderId:
        return self.stored_default() or DEFAULT_PROVIDER

    def set_default(self, provider_id: ProviderId) -> None:
        """Persist ``provider_id`` as the default, replacing the file atomically."""
        record = StoredPreferences(default_provider=provider_id)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(record.model_dump_json(indent=2) + "\n", encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
            raise ConfigWriteError(f"Failed to save settings to {self.path}: {exc}") from exc
        self._stored = provider_id
        self._loaded = True
        self.logger.info("Default provider set to %s in %s", provider_id.value, self.path)

    def resolve_active(self, override: ProviderId | None = None) -> ProviderId:
        """Return the provider to use: an explicit override, else the default."""
        if override is not None:
            return override
        return self.get_default()

    @staticmethod
    def credential_status(settings: Settings) -> dict[ProviderId, bool]:
        return {
            provider_id: bool(settings.api_key_for(provider_id)) for provider_id in ProviderId
        }
