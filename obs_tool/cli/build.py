"""
Build commands for obs-tool CLI.

This module provides the commands inspecting builds: results, job status,
build history, build status and build logs.
"""

from datetime import datetime, timezone
from typing import Optional

import click

from ..api import ObsClient
from ..models import PackageLogStreamOptions, ResultList
from .common import run_with_client


def _format_time(timestamp: Optional[int]) -> str:
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _echo_results(results: ResultList) -> None:
    for result in results.results:
        state = f" ({result.state})" if result.state is not None and result.state != result.code else ""
        dirty = " [dirty]" if result.dirty else ""
        click.echo(f"{result.repository} {result.arch}: {result.code}{state}{dirty}")
        for status in result.statuses:
            details = f" ({status.details})" if status.details else ""
            click.echo(f"  {status.package}: {status.code}{details}")


@click.command()
@click.argument("project")
@click.argument("package", required=False)
@click.pass_context
def result(ctx: click.Context, project: str, package: Optional[str]) -> None:
    """Show the build results of PROJECT, or only of PACKAGE."""

    def action(client: ObsClient) -> None:
        handle = client.project(project)
        _echo_results(handle.package(package).result() if package else handle.result())

    run_with_client(ctx, "result", action)


@click.command()
@click.argument("project")
@click.argument("package")
@click.argument("repository")
@click.argument("arch")
@click.pass_context
def jobstatus(ctx: click.Context, project: str, package: str, repository: str, arch: str) -> None:
    """Show the current build job of PACKAGE."""

    def action(client: ObsClient) -> None:
        status = client.project(project).package(package).jobstatus(repository, arch)
        if status.code is None:
            click.echo("No build job")
            return
        for name, value in status.model_dump(exclude_none=True).items():
            if name in ("starttime", "endtime"):
                value = _format_time(value)
            click.echo(f"{name}: {value}")

    run_with_client(ctx, "jobstatus", action)


@click.command()
@click.argument("project")
@click.argument("package")
@click.argument("repository")
@click.argument("arch")
@click.pass_context
def history(ctx: click.Context, project: str, package: str, repository: str, arch: str) -> None:
    """Show the finished builds of PACKAGE."""

    def action(client: ObsClient) -> None:
        builds = client.project(project).package(package).history(repository, arch)
        for entry in builds.entries:
            duration = f"{entry.duration}s" if entry.duration is not None else "-"
            click.echo(
                f"{_format_time(entry.time)}  rev {entry.rev}  {entry.versrel}-{entry.bcnt}  "
                f"{entry.srcmd5}  {duration}"
            )

    run_with_client(ctx, "history", action)


@click.command()
@click.argument("project")
@click.argument("package")
@click.argument("repository")
@click.argument("arch")
@click.pass_context
def status(ctx: click.Context, project: str, package: str, repository: str, arch: str) -> None:
    """Show the build state of PACKAGE in REPOSITORY/ARCH."""

    def action(client: ObsClient) -> None:
        build = client.project(project).package(package).status(repository, arch)
        dirty = " [dirty]" if build.dirty else ""
        click.echo(f"{build.package}: {build.code}{dirty}")
        if build.details:
            click.echo(f"  {build.details}")

    run_with_client(ctx, "status", action)


@click.command()
@click.argument("project")
@click.argument("package")
@click.argument("repository")
@click.argument("arch")
@click.option("--offset", type=click.IntRange(min=0), default=None, help="Start at this byte of the log")
@click.option("--end", type=click.IntRange(min=0), default=None, help="Stop at this byte of the log")
@click.option("--info", is_flag=True, help="Only show the size and modification time of the log")
@click.pass_context
def log(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    ctx: click.Context,
    project: str,
    package: str,
    repository: str,
    arch: str,
    offset: Optional[int],
    end: Optional[int],
    info: bool,
) -> None:
    """Print the build log of PACKAGE in REPOSITORY/ARCH."""

    def action(client: ObsClient) -> None:
        package_log = client.project(project).package(package).log(repository, arch)
        if info:
            size, mtime = package_log.entry()
            click.echo(f"size: {size}")
            click.echo(f"mtime: {_format_time(mtime)}")
            return

        options = PackageLogStreamOptions(offset=offset, end=end)
        stdout = click.get_binary_stream("stdout")
        for chunk in package_log.stream(options):
            stdout.write(chunk)
        stdout.flush()

    run_with_client(ctx, "log", action)


__all__ = ["result", "jobstatus", "history", "status", "log"]
