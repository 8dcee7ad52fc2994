# ABOUTME: Shared Click options for bookdupes CLI commands.
# ABOUTME: Provides reusable decorators and parsers for flags like --db and format lists.

from pathlib import Path

import click

from bookdupes.db.connection import DEFAULT_DB_PATH
from bookdupes.formats.filetypes import BookFileType

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    help=f"Path to library database (default: {DEFAULT_DB_PATH})",
)


def parse_format_list(
    ctx: click.Context | None, param: click.Parameter | None, value: str | None
) -> list[BookFileType] | None:
    """Click callback: parse "epub,mobi,pdf" into an ordered, de-duplicated type list."""
    if value is None:
        return None

    formats: list[BookFileType] = []
    for name in value.split(","):
        if not name.strip():
            continue
        try:
            file_type = BookFileType.parse(name)
        except ValueError as exc:
            raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc
        if file_type not in formats:
            formats.append(file_type)

    if not formats:
        raise click.BadParameter("at least one format is required", ctx=ctx, param=param)
    return formats
