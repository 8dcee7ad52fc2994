# ABOUTME: The `bookdupes scan` command for cataloging a library's root directories.
# ABOUTME: Walks every root, reads EPUB metadata, and stores new books in the library DB.

from pathlib import Path

import click
from rich.console import Console

from bookdupes.cli.options import db_option
from bookdupes.core.importer import import_library
from bookdupes.db.catalog import LibraryCatalog, LibraryNotFoundError
from bookdupes.db.connection import DEFAULT_DB_PATH, open_library

console = Console()


@click.command("scan")
@click.argument("library_id", type=int)
@db_option
def scan(library_id: int, db_path: Path | None) -> None:
    """Scan the roots of a library and catalog any new books."""
    conn = open_library(db_path or DEFAULT_DB_PATH)
    try:
        catalog = LibraryCatalog(conn)
        try:
            result = import_library(catalog, library_id)
        except LibraryNotFoundError as exc:
            console.print(f"[red]Library {library_id} not found.[/red]")
            raise SystemExit(1) from exc
    finally:
        conn.close()

    parts = [f"[green]{result.added} added[/green]"]
    if result.updated:
        parts.append(f"[cyan]{result.updated} updated[/cyan]")
    if result.skipped:
        parts.append(f"[yellow]{result.skipped} skipped[/yellow]")
    if result.errors:
        parts.append(f"[red]{result.errors} error(s)[/red]")

    console.print(", ".join(parts))

    if result.error_details:
        console.print(f"\n[yellow]{result.errors} problem(s) while scanning:[/yellow]")
        for path, msg in result.error_details:
            console.print(f"  [dim]{path.name}:[/dim] {msg}")
