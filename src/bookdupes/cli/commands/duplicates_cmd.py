# ABOUTME: The `bookdupes duplicates` command for reporting duplicate book groups.
# ABOUTME: Runs the enabled matching signals and prints groups with their suggested merge target.

import json as json_lib
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bookdupes.cli.options import db_option
from bookdupes.core.duplicates import DuplicateDetectionRequest, find_duplicates
from bookdupes.core.matchers import DuplicateGroup
from bookdupes.db.catalog import LibraryCatalog, LibraryNotFoundError
from bookdupes.db.connection import DEFAULT_DB_PATH, open_library
from bookdupes.db.mapping import BookRecord

console = Console()


@click.command("duplicates")
@click.argument("library_id", type=int)
@click.option("--isbn/--no-isbn", "by_isbn", default=True, help="Match on ISBN.")
@click.option(
    "--external-id/--no-external-id",
    "by_external_id",
    default=True,
    help="Match on provider ids (Goodreads, ASIN, ...).",
)
@click.option(
    "--title-author/--no-title-author",
    "by_title_author",
    default=True,
    help="Match on normalized title plus a shared author.",
)
@click.option(
    "--directory/--no-directory",
    "by_directory",
    default=True,
    help="Match books stored in the same directory.",
)
@click.option(
    "--filename/--no-filename",
    "by_filename",
    default=True,
    help="Match on normalized file name.",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Output as JSON for scripting.",
)
@db_option
def duplicates(
    library_id: int,
    by_isbn: bool,
    by_external_id: bool,
    by_title_author: bool,
    by_directory: bool,
    by_filename: bool,
    json_output: bool,
    db_path: Path | None,
) -> None:
    """Find groups of books in a library that are likely the same work."""
    request = DuplicateDetectionRequest(
        library_id=library_id,
        match_by_isbn=by_isbn,
        match_by_external_id=by_external_id,
        match_by_title_author=by_title_author,
        match_by_directory=by_directory,
        match_by_filename=by_filename,
    )

    conn = open_library(db_path or DEFAULT_DB_PATH)
    try:
        catalog = LibraryCatalog(conn)
        try:
            groups = find_duplicates(catalog, request)
        except LibraryNotFoundError as exc:
            console.print(f"[red]Library {library_id} not found.[/red]")
            raise SystemExit(1) from exc
    finally:
        conn.close()

    if json_output:
        _print_json(library_id, groups)
        return

    if not groups:
        console.print("[green]No duplicates found.[/green]")
        return

    for index, group in enumerate(groups, start=1):
        _print_group(index, group)

    grouped = sum(len(g.books) for g in groups)
    console.print(f"[dim]{len(groups)} group(s), {grouped} book(s)[/dim]")


def _book_to_dict(book: BookRecord) -> dict:
    primary = book.primary_file
    metadata = book.metadata
    return {
        "id": book.id,
        "title": metadata.title if metadata else None,
        "authors": list(metadata.authors) if metadata else [],
        "isbn13": metadata.isbn13 if metadata else None,
        "isbn10": metadata.isbn10 if metadata else None,
        "sub_path": primary.file_sub_path if primary else None,
        "file_name": primary.file_name if primary else None,
        "formats": sorted(
            {f.book_type.value for f in book.files if f.is_book_format and f.book_type}
        ),
    }


def _print_json(library_id: int, groups: list[DuplicateGroup]) -> None:
    data = {
        "library_id": library_id,
        "groups": [
            {
                "match_reason": group.match_reason.value,
                "suggested_target_id": group.suggested_target_id,
                "book_ids": group.book_ids,
                "books": [_book_to_dict(book) for book in group.books],
            }
            for group in groups
        ],
    }
    click.echo(json_lib.dumps(data, indent=2))


def _print_group(index: int, group: DuplicateGroup) -> None:
    table = Table(title=f"Group {index} [dim]({group.match_reason.value})[/dim]")
    table.add_column("", width=1)
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Location")
    table.add_column("Formats")

    for book in group.books:
        info = _book_to_dict(book)
        is_target = book.id == group.suggested_target_id
        location = "/".join(p for p in (info["sub_path"], info["file_name"]) if p)
        table.add_row(
            "[green]*[/green]" if is_target else "",
            str(book.id),
            book.display_title,
            ", ".join(info["authors"]) or "[dim]unknown[/dim]",
            location,
            ", ".join(info["formats"]),
        )

    console.print(table)
    console.print("[dim]* suggested merge target[/dim]\n")
