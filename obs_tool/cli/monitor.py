"""
Monitor command for obs-tool CLI.

This module provides the monitor command following the builds of a package
until they are all finished.
"""

import click

from ..api import ObsClient
from ..services import MonitorService
from ..utils.constants import DEFAULT_MONITOR_INTERVAL
from .common import run_with_client


@click.command()
@click.argument("project")
@click.argument("package")
@click.option(
    "--interval",
    type=click.IntRange(min=1),
    default=DEFAULT_MONITOR_INTERVAL,
    show_default=True,
    help="Seconds between two polls of the build results",
)
@click.pass_context
def monitor(ctx: click.Context, project: str, package: str, interval: int) -> None:
    """Follow the builds of PACKAGE in PROJECT until they are all finished.

    Exits with status 1 when the build failed somewhere or the package is
    excluded/disabled everywhere.
    """

    def action(client: ObsClient) -> None:
        handle = client.project(project).package(package)
        click.echo(f"Monitoring package: {package}  project: {project}")
        MonitorService(handle, interval=interval, report=click.echo).run()

    run_with_client(ctx, "monitor", action)


__all__ = ["monitor"]
