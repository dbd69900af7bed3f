"""
Source commands for obs-tool CLI.

This module provides the commands reading package sources: file listings,
meta documents and file downloads.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ..api import ObsClient
from .common import run_with_client


@click.command(name="list")
@click.argument("project")
@click.argument("package")
@click.option("--rev", help="Revision number or srcmd5 (default: latest)")
@click.pass_context
def list_files(ctx: click.Context, project: str, package: str, rev: Optional[str]) -> None:
    """List the source files of PACKAGE."""

    def action(client: ObsClient) -> None:
        listing = client.project(project).package(package).list(rev)
        click.echo(f"{listing.name} rev {listing.rev or '-'} ({listing.srcmd5})")
        for entry in listing.entries:
            click.echo(f"  {entry.md5}  {entry.size:>10}  {entry.name}")
        for link in listing.linkinfo:
            click.echo(f"  links to {link.project}/{link.package}")

    run_with_client(ctx, "list", action)


@click.command()
@click.argument("project")
@click.argument("package", required=False)
@click.pass_context
def meta(ctx: click.Context, project: str, package: Optional[str]) -> None:
    """Print the meta of PROJECT, or of PACKAGE."""

    def action(client: ObsClient) -> None:
        handle = client.project(project)
        document = handle.package(package).meta() if package else handle.meta()
        click.echo(document.to_xml().decode("utf-8"))

    run_with_client(ctx, "meta", action)


@click.command()
@click.argument("project")
@click.argument("package")
@click.argument("filename")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Where to write the file (default: FILENAME in the current directory)",
)
@click.pass_context
def download(ctx: click.Context, project: str, package: str, filename: str, output: Optional[str]) -> None:
    """Download a source file of PACKAGE, verifying its MD5."""

    def action(client: ObsClient) -> None:
        contents = client.project(project).package(package).download_source_file(filename)
        target = Path(output or filename)
        target.write_bytes(contents)
        logging.info("Wrote %d bytes to %s", len(contents), target)
        click.echo(str(target))

    run_with_client(ctx, "download", action)


__all__ = ["list_files", "meta", "download"]
