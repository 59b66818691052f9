"""p2bridge CLI: republish Eclipse p2 update-site units to Maven.

Entry point for the ``p2bridge`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve  Load the sites and show which units would be published.
    publish  Resolve, download, and deploy units with generated POMs.

Usage::

    p2bridge resolve birt.yaml
    p2bridge resolve birt.yaml --resolve --format json
    p2bridge publish birt.yaml --group org.example.birt
    p2bridge publish birt.yaml --dry-run -v
"""

from __future__ import annotations

import click

from p2bridge import __version__
from p2bridge.cli.publish_cmd import publish_command
from p2bridge.cli.resolve_cmd import resolve_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """p2bridge: publish p2 installable units as Maven artifacts.

    Reads a YAML configuration naming p2 sites, coordinate mapping rules,
    exclusions, and publish targets, then resolves the targets' dependency
    graph and deploys every unit not already available in Maven.
    """


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(publish_command)
