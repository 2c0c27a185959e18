"""
yangkit CLI utilities.

Shared helpers used across CLI modules.
"""

import logging
import platform
from pathlib import Path

import typer

from yangkit.core.errors import ConfigError
from yangkit.core.settings import ParserSettings, find_settings, load_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_version() -> str:
    """Get yangkit version from package metadata."""
    from yangkit import __version__

    return __version__


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"yangkit {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send library debug logging to stderr when --verbose is given."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def resolve_settings(config: Path | None, source: Path) -> ParserSettings:
    """
    Settings from an explicit --config file, else the nearest yangkit.toml.

    Exits with code 1 on an invalid configuration file.
    """
    try:
        if config is not None:
            return load_settings(config)
        return find_settings(source.resolve().parent)
    except ConfigError as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(code=1) from e
    except OSError as e:
        typer.echo(f"Cannot read config: {e}", err=True)
        raise typer.Exit(code=1) from e


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "get_version",
    "resolve_settings",
    "version_callback",
]
