"""``p2bridge publish CONFIG``: resolve, download, and deploy.

Exit Codes:
    0 Every publishable unit was deployed (or listed, with ``--dry-run``).
    1 Configuration, catalog, resolution, download, or deploy error.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from p2bridge.cli.options import common_options, load_config, run_async, setup_logging
from p2bridge.cli.output import console, print_error, print_resolution
from p2bridge.exceptions import P2BridgeError
from p2bridge.publish import Publisher


@click.command("publish")
@common_options
@click.option("--dry-run", is_flag=True, help="Resolve and list units without deploying.")
def publish_command(
    config_file: str,
    base: str,
    resolve: bool | None,
    group: str | None,
    verbose: int,
    dry_run: bool,
) -> None:
    """Publish the units named in CONFIG_FILE to the target repository.

    Examples:

        p2bridge publish birt.yaml

        p2bridge publish birt.yaml --group org.example.birt --dry-run
    """
    setup_logging(verbose)
    try:
        config = load_config(config_file, resolve, group)
        publisher = Publisher(config, Path(base))
        result = run_async(publisher.publish(dry_run=dry_run))
    except P2BridgeError as exc:
        print_error(str(exc))
        sys.exit(1)

    print_resolution(result)
    if dry_run:
        console.print("[dim]Dry run: nothing was deployed.[/dim]")
    else:
        console.print(f"Deployed {len(result.publishable)} units to {publisher.deployer.url}")
