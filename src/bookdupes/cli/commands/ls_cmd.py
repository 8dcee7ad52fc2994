# ABOUTME: The `bookdupes ls` command for listing cataloged books in a library.
# ABOUTME: Displays a Rich table of books with their location and formats.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bookdupes.cli.options import db_option
from bookdupes.db.catalog import LibraryCatalog
from bookdupes.db.connection import DEFAULT_DB_PATH, open_library
from bookdupes.db.mapping import BookRecord

console = Console()


def _formats(record: BookRecord) -> str:
    types = {f.book_type.value for f in record.files if f.is_book_format and f.book_type}
    return ", ".join(sorted(types))


@click.command("ls")
@click.argument("library_id", type=int)
@db_option
def ls(library_id: int, db_path: Path | None) -> None:
    """List all books in a library."""
    conn = open_library(db_path or DEFAULT_DB_PATH)
    try:
        catalog = LibraryCatalog(conn)
        if catalog.get_library(library_id) is None:
            console.print(f"[red]Library {library_id} not found.[/red]")
            raise SystemExit(1)
        records = catalog.list_books(library_id)
    finally:
        conn.close()

    if not records:
        console.print("[yellow]No books in the library.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Directory")
    table.add_column("Formats")

    for record in records:
        primary = record.primary_file
        table.add_row(
            str(record.id),
            record.display_title,
            (record.metadata.author if record.metadata else "") or "[dim]unknown[/dim]",
            primary.file_sub_path if primary else "",
            _formats(record),
        )

    console.print(table)
    console.print(f"\n[dim]{len(records)} book(s)[/dim]")
