"""Rich output formatting helpers for the p2bridge CLI.

Tables go to stdout; log records and errors go to ``err_console`` so that
``--format json`` output stays machine readable.
"""

from __future__ import annotations

import json
from typing import Any

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from p2bridge.core.metadata import ResolvedUnit
from p2bridge.core.resolution import ResolutionResult

console = Console()
err_console = Console(stderr=True)


def _coordinate(unit: ResolvedUnit) -> str:
    return str(unit.maven) if unit.maven is not None else "-"


def unit_to_dict(unit: ResolvedUnit) -> dict[str, Any]:
    """Serialize a resolved unit and its direct dependency edges."""

    def edge(dep: ResolvedUnit) -> dict[str, Any]:
        return {"id": dep.id, "maven": _coordinate(dep), "external": dep.external}

    return {
        "id": unit.id,
        "version": unit.version,
        "name": unit.name,
        "maven": _coordinate(unit),
        "dependencies": [edge(dep) for dep in unit.dependencies],
        "optional_dependencies": [edge(dep) for dep in unit.optional_dependencies],
    }


def print_resolution(result: ResolutionResult) -> None:
    """Print the publishable units as a table.

    Args:
        result: Outcome of a resolution run.
    """
    if not result.publishable:
        console.print("[dim]Nothing to publish.[/dim]")
        return

    table = Table(title="Units to publish", show_header=True, header_style="bold")
    table.add_column("Unit", style="bold")
    table.add_column("Version", style="dim")
    table.add_column("Maven coordinate")
    table.add_column("Deps", justify="right")
    table.add_column("Optional", justify="right")
    table.add_column("External", justify="right")

    for unit in result.publishable:
        edges = unit.dependencies + unit.optional_dependencies
        external = sum(1 for dep in edges if dep.external)
        table.add_row(
            unit.id,
            unit.version,
            Text(_coordinate(unit), style="cyan"),
            str(len(unit.dependencies)),
            str(len(unit.optional_dependencies)),
            Text(str(external), style="green" if external else "dim"),
        )

    console.print(table)
    _print_summary(result)


def _print_summary(result: ResolutionResult) -> None:
    """Print a one-line summary after the table."""
    external = sum(1 for unit in result.resolved.values() if unit.external)
    parts = [
        f"[bold]{len(result.resolved)}[/bold] units resolved",
        f"[cyan]{len(result.publishable)} to publish[/cyan]",
        f"[green]{external} external[/green]",
    ]
    console.print(" | ".join(parts))


def print_resolution_json(result: ResolutionResult) -> None:
    """Print the resolution result as JSON."""
    output = {
        "roots": [unit.id for unit in result.roots],
        "publishable": [unit_to_dict(unit) for unit in result.publishable],
        "external": [
            {"id": unit.id, "maven": _coordinate(unit)}
            for unit in result.resolved.values()
            if unit.external
        ],
    }
    click.echo(json.dumps(output, indent=2))


def print_error(message: str) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {message}", highlight=False)
