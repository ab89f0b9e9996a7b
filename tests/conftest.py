"""Shared fixtures: keep real credentials and .env files out of tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from weather_fetch.log_setup import JsonConsoleFormatter

_ENV_VARS = (
    "WEATHERAPI_API_KEY",
    "OPENWEATHER_API_KEY",
    "WEATHER_CONFIG_PATH",
    "DEFAULT_PROVIDER",
    "WEATHER_TIMEOUT_SECONDS",
    "WEATHERAPI_BASE_URL",
    "OPENWEATHER_BASE_URL",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("COLUMNS", "200")
    # The console handler binds to the sys.stderr current when it was created.
    logger = logging.getLogger("weather_fetch")
    for handler in list(logger.handlers):
        if isinstance(handler.formatter, JsonConsoleFormatter):
            logger.removeHandler(handler)
