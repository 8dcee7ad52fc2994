# ABOUTME: The `bookdupes library` command group for managing libraries.
# ABOUTME: Provides add, ls, and priority subcommands for library configuration.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bookdupes.cli.options import db_option, parse_format_list
from bookdupes.core.ranking import DEFAULT_FORMAT_PRIORITY
from bookdupes.db.catalog import DuplicateLibraryError, LibraryCatalog, LibraryNotFoundError
from bookdupes.db.connection import DEFAULT_DB_PATH, open_library
from bookdupes.formats.filetypes import BookFileType

console = Console()


def _format_names(formats: list[BookFileType] | tuple[BookFileType, ...]) -> str:
    return ", ".join(f.value for f in formats)


@click.group("library")
def library() -> None:
    """Manage libraries and their root directories."""


@library.command("add")
@click.argument("name")
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--format-priority",
    "format_priority",
    callback=parse_format_list,
    default=None,
    help="Comma-separated preferred formats, best first (e.g. epub,pdf,mobi).",
)
@db_option
def library_add(
    name: str,
    paths: tuple[Path, ...],
    format_priority: list[BookFileType] | None,
    db_path: Path | None,
) -> None:
    """Create a library NAME rooted at one or more PATHS."""
    conn = open_library(db_path or DEFAULT_DB_PATH)
    try:
        catalog = LibraryCatalog(conn)
        try:
            library_id = catalog.add_library(name, format_priority)
        except DuplicateLibraryError as exc:
            console.print(f"[red]{exc}.[/red]")
            raise SystemExit(1) from exc

        for path in paths:
            catalog.add_library_path(library_id, path.resolve())

        console.print(
            f"Created library [bold]{name}[/bold] (id {library_id}) "
            f"with {len(paths)} root(s)."
        )
    finally:
        conn.close()


@library.command("ls")
@db_option
def library_ls(db_path: Path | None) -> None:
    """List libraries with their roots and format priority."""
    conn = open_library(db_path or DEFAULT_DB_PATH)
    try:
        catalog = LibraryCatalog(conn)
        libraries = catalog.list_libraries()

        if not libraries:
            console.print("[yellow]No libraries defined.[/yellow]")
            return

        table = Table()
        table.add_column("ID", style="dim", width=4)
        table.add_column("Name", style="bold")
        table.add_column("Roots")
        table.add_column("Format priority")

        for lib in libraries:
            roots = "\n".join(str(p.path) for p in catalog.list_library_paths(lib.id))
            priority = (
                _format_names(lib.format_priority)
                if lib.format_priority
                else "[dim]default[/dim]"
            )
            table.add_row(str(lib.id), lib.name, roots, priority)

        console.print(table)
    finally:
        conn.close()


@library.command("priority")
@click.argument("library_id", type=int)
@click.argument("formats", required=False, callback=parse_format_list)
@click.option("--reset", is_flag=True, default=False, help="Revert to the default priority.")
@db_option
def library_priority(
    library_id: int,
    formats: list[BookFileType] | None,
    reset: bool,
    db_path: Path | None,
) -> None:
    """Show or set the format priority used to pick merge targets.

    FORMATS is a comma-separated list, best first (e.g. mobi,epub).
    """
    conn = open_library(db_path or DEFAULT_DB_PATH)
    try:
        catalog = LibraryCatalog(conn)
        try:
            if reset:
                catalog.set_format_priority(library_id, None)
            elif formats:
                catalog.set_format_priority(library_id, formats)
            current = catalog.get_format_priority(library_id)
        except LibraryNotFoundError as exc:
            console.print(f"[red]Library {library_id} not found.[/red]")
            raise SystemExit(1) from exc

        if current:
            console.print(f"Format priority: [bold]{_format_names(current)}[/bold]")
        else:
            console.print(
                f"Format priority: [bold]{_format_names(DEFAULT_FORMAT_PRIORITY)}[/bold] "
                "[dim](default)[/dim]"
            )
    finally:
        conn.close()
