"""``p2bridge resolve CONFIG``: show which units would be published.

Exit Codes:
    0 Resolution succeeded.
    1 Configuration, catalog, or resolution error.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from p2bridge.cli.options import common_options, load_config, run_async, setup_logging
from p2bridge.cli.output import print_error, print_resolution, print_resolution_json
from p2bridge.exceptions import P2BridgeError
from p2bridge.publish import Publisher


@click.command("resolve")
@common_options
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def resolve_command(
    config_file: str,
    base: str,
    resolve: bool | None,
    group: str | None,
    verbose: int,
    output_format: str,
) -> None:
    """Resolve the publish targets of CONFIG_FILE without deploying.

    Examples:

        p2bridge resolve birt.yaml

        p2bridge resolve birt.yaml --resolve --format json
    """
    setup_logging(verbose)
    try:
        config = load_config(config_file, resolve, group)
        result = run_async(Publisher(config, Path(base)).resolve())
    except P2BridgeError as exc:
        print_error(str(exc))
        sys.exit(1)

    if output_format == "json":
        print_resolution_json(result)
    else:
        print_resolution(result)
