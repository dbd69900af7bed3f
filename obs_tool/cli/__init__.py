"""
Unified CLI entry point for obs-tool operations using Click.

This module provides the main CLI group and shared options.
"""

import sys
from typing import Optional

import click

from . import build, monitor, source
from .._version import __version__

# ============================================================================
# CLI Group
# ============================================================================


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="obs-tool")
@click.option(
    "-A",
    "--apiurl",
    help="API URL or osc alias of the OBS instance (default: [general] apiurl of the config)",
)
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to the osc config file (default: ~/.oscrc)",
)
@click.option("-u", "--user", help="OBS user name, requires --password")
@click.option("-p", "--password", help="OBS password, requires --user")
@click.option(
    "-d",
    "--debug",
    count=True,
    help="Increase verbosity (use -d for INFO, -dd for DEBUG, -ddd for DEBUG with HTTP logs)",
)
@click.pass_context
def cli(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    ctx: click.Context,
    apiurl: Optional[str],
    config: Optional[str],
    user: Optional[str],
    password: Optional[str],
    debug: int,
) -> None:
    """obs-tool - Query builds and sources on an Open Build Service instance."""
    if (user is None) != (password is None):
        raise click.UsageError("--user and --password must be given together")

    # Store shared options in context for subcommands to access
    ctx.ensure_object(dict)
    ctx.obj["apiurl"] = apiurl
    ctx.obj["config"] = config
    ctx.obj["user"] = user
    ctx.obj["password"] = password
    ctx.obj["debug"] = debug


# Register subcommands
cli.add_command(monitor.monitor)
cli.add_command(build.result)
cli.add_command(build.jobstatus)
cli.add_command(build.history)
cli.add_command(build.status)
cli.add_command(build.log)
cli.add_command(source.list_files)
cli.add_command(source.meta)
cli.add_command(source.download)


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()  # pylint: disable=no-value-for-parameter  # Click handles parameters
    except KeyboardInterrupt:
        click.echo("\n\nOperation cancelled by user", err=True)
        sys.exit(130)


__all__ = ["cli", "main"]
