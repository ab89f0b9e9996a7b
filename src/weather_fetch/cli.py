"""CLI: configure the default provider or fetch weather for a location."""

from __future__ import annotations

import argparse
import datetime as dt
import sys
from datetime import UTC
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .app import (
    ConfigureCommand,
    ConfigureResult,
    GetCommand,
    ProviderListing,
    WeatherApp,
)
from .config import Settings, load_settings
from .exceptions import (
    ConfigError,
    InvalidQueryError,
    MissingCredentialsError,
    UnknownProviderError,
    WeatherProviderError,
)
from .log_setup import setup_logger
from .preferences import ProviderPreferences
from .weather.models import WeatherReport
from .weather.registry import ProviderRegistry


def parse_date_arg(value: str) -> dt.date:
    """Parse ``YYYY-MM-DD``, ``YYYY-MM-DD HH:MM:SS`` or RFC 3339 into a date.

    RFC 3339 timestamps with an offset are converted to the local calendar date.
    """
    candidate = value.strip()
    try:
        return dt.date.fromisoformat(candidate)
    except ValueError:
        pass
    try:
        parsed = dt.datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid datetime format: {value}") from exc
    if parsed.tzinfo is not None:
        return parsed.astimezone().date()
    return parsed.date()


def _location_arg(value: str) -> str:
    if not value.strip():
        raise argparse.ArgumentTypeError("location must not be empty")
    return value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weather-fetch",
        description="Fetch current or historical weather from a configurable provider.",
    )
    parser.add_argument(
        "-c",
        "--config-path",
        type=Path,
        default=None,
        help="Settings file holding the default provider (overrides WEATHER_CONFIG_PATH).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr."
    )
    subparsers = parser.add_subparsers(dest="command")

    configure = subparsers.add_parser(
        "configure", help="List providers, or set the default provider."
    )
    configure.add_argument("provider", nargs="?", default=None, help="Provider to make default.")

    get = subparsers.add_parser("get", help="Fetch weather for a location.")
    get.add_argument("location", type=_location_arg, help='City, e.g. "London,UK".')
    get.add_argument(
        "--date",
        type=parse_date_arg,
        default=None,
        help="YYYY-MM-DD, 'YYYY-MM-DD HH:MM:SS' or RFC 3339; defaults to now.",
    )
    get.add_argument(
        "-p", "--provider", default=None, help="Use this provider instead of the default."
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    return build_parser().parse_args(argv)


def _print_report(console: Console, report: WeatherReport) -> None:
    table = Table(title=f"Weather for {report.location}")
    table.add_column("Field")
    table.add_column("Value", overflow="fold")
    table.add_row("Provider", report.source_provider.value)
    table.add_row("Time (UTC)", report.timestamp.astimezone(UTC).isoformat())
    table.add_row("Condition", report.condition)
    table.add_row("Temperature", f"{report.temperature_celsius:g} °C")
    table.add_row("Humidity", f"{report.humidity_pct:g} %")
    table.add_row("Pressure", f"{report.pressure_hpa:g} hPa")
    table.add_row("Wind", f"{report.wind_speed:g} km/h @ {report.wind_degree:g}°")
    console.print(table)


def _print_listing(console: Console, listing: ProviderListing) -> None:
    console.print("Available providers:")
    table = Table()
    table.add_column("Provider")
    table.add_column("Name")
    table.add_column("Default")
    table.add_column("Credentials")
    table.add_column("History")
    for status in listing.providers:
        credentials = (
            "available"
            if status.has_credentials
            else f"unavailable (set {status.provider.value.upper()}_API_KEY)"
        )
        table.add_row(
            status.provider.value,
            status.display_name,
            "*" if status.is_default else "",
            credentials,
            "yes" if status.supports_history else "no",
        )
    console.print(table)
    console.print(f"Default provider: {listing.default_provider.value} ({listing.config_path})")
    if listing.env_override is not None:
        console.print(f"DEFAULT_PROVIDER override in effect: {listing.env_override.value}")


def _print_settings(console: Console, settings: Settings, preferences: ProviderPreferences) -> None:
    stored = preferences.stored_default()
    console.print(
        f"Settings config_path={settings.config_path} "
        f"default_provider={preferences.get_default().value} "
        f"stored={'yes' if stored else 'no'}"
    )
    for key, value in settings.safe_summary().items():
        console.print(f"  {key}: {value}")


def main(argv: list[str] | None = None) -> int:
    """Run the weather CLI and return a process exit code."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    logger = setup_logger(level="DEBUG" if args.verbose else settings.log_level)
    if args.config_path is not None:
        settings = settings.model_copy(update={"config_path": args.config_path})
    logger.debug("Settings %s", settings.safe_summary())

    preferences = ProviderPreferences(settings.config_path, logger=logger)
    exit_code = 0
    try:
        with ProviderRegistry(settings=settings, logger=logger) as registry:
            app = WeatherApp(settings, registry, preferences, logger)
            if args.command == "configure":
                result = app.execute(ConfigureCommand(provider=args.provider))
                if isinstance(result, ConfigureResult):
                    console.print(
                        f"Default provider saved to {result.config_path}: "
                        f"{result.default_provider.value}"
                    )
                else:
                    _print_listing(console, result)
            elif args.command == "get":
                report = app.execute(
                    GetCommand(location=args.location, date=args.date, provider=args.provider)
                )
                _print_report(console, report)
            else:
                _print_settings(console, settings, preferences)
    except (ConfigError, UnknownProviderError, InvalidQueryError) as exc:
        exit_code = 2
        logger.error("Configuration failure: %s", exc)
    except MissingCredentialsError as exc:
        exit_code = 3
        logger.error("Missing credentials: %s", exc)
    except WeatherProviderError as exc:
        exit_code = 4
        logger.error("Weather request failed (%s): %s", type(exc).__name__, exc)
    except KeyboardInterrupt:
        exit_code = 130
        logger.warning("Interrupted; request abandoned.")
    except Exception as exc:  # pragma: no cover - defensive catch for CLI runtime
        exit_code = 99
        logger.exception("Unexpected failure: %s", exc)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
