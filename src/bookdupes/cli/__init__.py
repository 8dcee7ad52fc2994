# ABOUTME: CLI package for bookdupes, built on Click.
# ABOUTME: Defines the root command group and registers subcommands.

import logging

import click

from bookdupes.cli.commands import duplicates_cmd, library_cmd, ls_cmd, scan_cmd


@click.group()
@click.version_option(package_name="bookdupes")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """bookdupes - find and rank duplicate books in your ebook libraries."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s"
        )


cli.add_command(library_cmd.library)
cli.add_command(scan_cmd.scan)
cli.add_command(ls_cmd.ls)
cli.add_command(duplicates_cmd.duplicates)
