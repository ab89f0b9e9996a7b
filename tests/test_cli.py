"""CLI smoke tests: argument parsing, exit codes and printed output."""

from __future__ import annotations

import argparse
import datetime as dt
import functools
import json
from datetime import UTC
from pathlib import Path
from typing import Any

import pytest
from helpers import KHARKIV_CURRENT, RecordingTransport

from weather_fetch import cli
from weather_fetch.weather.models import ProviderId
from weather_fetch.weather.openweather import OpenWeatherProvider
from weather_fetch.weather.registry import ProviderRegistry
from weather_fetch.weather.weatherapi import WeatherApiProvider


def test_parse_date_accepts_plain_date() -> None:
    assert cli.parse_date_arg("2026-01-05") == dt.date(2026, 1, 5)


def test_parse_date_accepts_date_time() -> None:
    assert cli.parse_date_arg("2026-01-05 10:11:12") == dt.date(2026, 1, 5)


def test_parse_date_converts_rfc3339_to_local_date() -> None:
    expected = dt.datetime(2026, 1, 5, 12, tzinfo=UTC).astimezone().date()
    assert cli.parse_date_arg("2026-01-05T12:00:00Z") == expected


def test_parse_date_rejects_garbage() -> None:
    with pytest.raises(argparse.ArgumentTypeError, match="Invalid datetime format"):
        cli.parse_date_arg("next tuesday")


def test_get_rejects_blank_location() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args(["get", "  "])


def test_configure_saves_default(tmp_path: Path, capsys: Any) -> None:
    config_path = tmp_path / "settings.json"
    exit_code = cli.main(["--config-path", str(config_path), "configure", "openweather"])

    assert exit_code == 0
    assert json.loads(config_path.read_text(encoding="utf-8")) == {
        "default_provider": "openweather"
    }
    assert "Default provider saved to" in capsys.readouterr().out


def test_configure_lists_providers(monkeypatch: pytest.MonkeyPatch, capsys: Any) -> None:
    monkeypatch.setenv("OPENWEATHER_API_KEY", "ow-key")
    exit_code = cli.main(["configure"])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "Available providers:" in output
    assert "openweather" in output
    assert "weatherapi" in output
    assert "unavailable" in output


def test_configure_unknown_provider_exits_2(capsys: Any) -> None:
    exit_code = cli.main(["configure", "not_supported_provider"])

    assert exit_code == 2
    assert "Provider `not_supported_provider` not supported" in capsys.readouterr().err


def test_get_without_credentials_exits_3(capsys: Any) -> None:
    exit_code = cli.main(["get", "London,UK"])

    assert exit_code == 3
    assert "WEATHERAPI_API_KEY" in capsys.readouterr().err


def test_get_prints_report(monkeypatch: pytest.MonkeyPatch, capsys: Any) -> None:
    monkeypatch.setenv("WEATHERAPI_API_KEY", "wa-key")
    transport = RecordingTransport(json=KHARKIV_CURRENT)
    monkeypatch.setattr(
        cli, "ProviderRegistry", functools.partial(ProviderRegistry, transport=transport)
    )

    exit_code = cli.main(["get", "Kharkiv,Ua"])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "Sunny" in output
    assert "2.1 °C" in output
    assert "weatherapi" in output
    assert len(transport.requests) == 1


def test_get_upstream_failure_exits_4(monkeypatch: pytest.MonkeyPatch, capsys: Any) -> None:
    monkeypatch.setenv("WEATHERAPI_API_KEY", "wa-key")
    transport = RecordingTransport(status_code=500, content=b"boom")
    monkeypatch.setattr(
        cli, "ProviderRegistry", functools.partial(ProviderRegistry, transport=transport)
    )

    exit_code = cli.main(["get", "London"])

    assert exit_code == 4
    err = capsys.readouterr().err
    assert "UpstreamError" in err
    assert "wa-key" not in err


def test_invalid_settings_exit_2(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEATHER_TIMEOUT_SECONDS", "-1")
    assert cli.main(["configure"]) == 2


def test_no_command_prints_settings(capsys: Any) -> None:
    exit_code = cli.main([])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "default_provider=weatherapi" in output
    assert "stored=no" in output


def test_interrupt_exits_130_and_closes_clients(
    monkeypatch: pytest.MonkeyPatch, capsys: Any
) -> None:
    monkeypatch.setenv("WEATHERAPI_API_KEY", "wa-key")
    transport = RecordingTransport(exc=KeyboardInterrupt())
    created: list[WeatherApiProvider] = []

    def weatherapi_factory(*args: Any, **kwargs: Any) -> WeatherApiProvider:
        provider = WeatherApiProvider(*args, **kwargs)
        created.append(provider)
        return provider

    factories = {
        ProviderId.WEATHERAPI: weatherapi_factory,
        ProviderId.OPENWEATHER: OpenWeatherProvider,
    }
    monkeypatch.setattr(
        cli,
        "ProviderRegistry",
        functools.partial(ProviderRegistry, transport=transport, factories=factories),
    )

    exit_code = cli.main(["get", "London"])

    assert exit_code == 130
    assert len(transport.requests) == 1
    assert len(created) == 1
    assert created[0]._client.is_closed
    assert "Interrupted" in capsys.readouterr().err


def test_get_unknown_provider_exits_2(capsys: Any) -> None:
    exit_code = cli.main(["get", "London", "--provider", "darksky"])

    assert exit_code == 2
    assert "Provider `darksky` not supported" in capsys.readouterr().err
