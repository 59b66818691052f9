"""Options and setup shared by the ``resolve`` and ``publish`` commands."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

import click
from rich.logging import RichHandler

from p2bridge.cli.output import err_console
from p2bridge.config import Config

DEFAULT_BASE = Path("target") / "tmp"

# Environment variable -> MavenConfig field; values override the file.
CREDENTIAL_ENV: dict[str, str] = {
    "P2BRIDGE_USERNAME": "username",
    "P2BRIDGE_PASSWORD": "password",
    "P2BRIDGE_GPG_PASSPHRASE": "gpg_passphrase",
}

_LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options every pipeline command accepts."""
    options = [
        click.argument("config_file", type=click.Path(exists=True, dir_okay=False)),
        click.option(
            "--base",
            type=click.Path(file_okay=False),
            default=str(DEFAULT_BASE),
            show_default=True,
            help="Work directory for downloaded catalogs and artifacts.",
        ),
        click.option(
            "--resolve/--no-resolve",
            "resolve",
            default=None,
            help="Query Maven Central for already published coordinates.",
        ),
        click.option("--group", default=None, help="Force this groupId on every published unit."),
        click.option("-v", "--verbose", count=True, help="Increase log output (-v, -vv)."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def setup_logging(verbose: int) -> None:
    """Route log records through rich on stderr."""
    level = _LOG_LEVELS[min(verbose, len(_LOG_LEVELS) - 1)]
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_config(path: str, resolve: bool | None, group: str | None) -> Config:
    """Load ``path`` and apply command-line and environment overrides.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    config = Config.load(Path(path))
    overrides: dict[str, Any] = {
        field: os.environ[var] for var, field in CREDENTIAL_ENV.items() if os.environ.get(var)
    }
    if resolve is not None:
        overrides["resolve"] = resolve
    if group:
        overrides["group"] = group
    if overrides:
        config = replace(config, maven=replace(config.maven, **overrides))
    return config


def run_async(coro: Any) -> Any:
    """Run an async coroutine in a synchronous context."""
    return asyncio.run(coro)
