# ABOUTME: Converts between the catalog dataclasses and SQLite row dictionaries.
# ABOUTME: Handles JSON serialization for list fields (authors, format priority).

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bookdupes.formats.filetypes import BookFileType
from bookdupes.metadata.types import EXTERNAL_ID_FIELDS, BookMetadata

_METADATA_COLUMNS = ("isbn13", "isbn10", *(attr for _, attr in EXTERNAL_ID_FIELDS))


@dataclass
class FileRef:
    """One file attached to a cataloged book."""

    file_name: str
    file_sub_path: str
    is_book_format: bool = True
    book_type: BookFileType | None = None
    id: int | None = None


@dataclass
class BookRecord:
    """A cataloged book: optional metadata, its files, and where they live."""

    id: int
    library_id: int
    metadata: BookMetadata | None
    files: list[FileRef] = field(default_factory=list)
    library_path_id: int | None = None
    metadata_match_score: float | None = None
    date_added: str | None = None

    @property
    def primary_file(self) -> FileRef | None:
        """The first primary-format file, or None if the book has none."""
        return next((f for f in self.files if f.is_book_format), None)

    @property
    def primary_file_count(self) -> int:
        """Number of attached primary-format files."""
        return sum(1 for f in self.files if f.is_book_format)

    @property
    def display_title(self) -> str:
        """Title for display, falling back to the primary file name."""
        if self.metadata is not None and self.metadata.title:
            return self.metadata.title
        primary = self.primary_file
        return primary.file_name if primary else f"Book {self.id}"


@dataclass
class Library:
    """A named collection of books spread over one or more root directories."""

    id: int
    name: str
    format_priority: list[BookFileType] | None = None


@dataclass
class LibraryPath:
    """A physical root directory belonging to a library."""

    id: int
    library_id: int
    path: Path


def metadata_to_row(metadata: BookMetadata | None) -> dict[str, Any]:
    """Convert a BookMetadata instance to the books-table metadata columns.

    A missing metadata object is stored as all-NULL columns.
    """
    if metadata is None:
        return {"title": None, "authors": None, **{col: None for col in _METADATA_COLUMNS}}
    return {
        "title": metadata.title,
        "authors": json.dumps(metadata.authors),
        **{col: getattr(metadata, col) for col in _METADATA_COLUMNS},
    }


def row_to_metadata(row: Any) -> BookMetadata | None:
    """Convert a books row back to BookMetadata, or None if nothing was stored."""
    authors = json.loads(row["authors"]) if row["authors"] else []
    values = {col: row[col] for col in _METADATA_COLUMNS}
    if row["title"] is None and not authors and not any(values.values()):
        return None
    return BookMetadata(title=row["title"], authors=authors, **values)


def row_to_file(row: Any) -> FileRef:
    """Convert a book_files row to a FileRef."""
    book_type = row["book_type"]
    return FileRef(
        id=row["id"],
        file_name=row["file_name"],
        file_sub_path=row["file_sub_path"],
        is_book_format=bool(row["is_book_format"]),
        book_type=BookFileType(book_type) if book_type else None,
    )


def row_to_record(row: Any, files: list[FileRef] | None = None) -> BookRecord:
    """Convert a full books row plus its files to a BookRecord."""
    return BookRecord(
        id=row["id"],
        library_id=row["library_id"],
        metadata=row_to_metadata(row),
        files=files or [],
        library_path_id=row["library_path_id"],
        metadata_match_score=row["metadata_match_score"],
        date_added=row["date_added"],
    )


def priority_to_json(priority: list[BookFileType] | None) -> str | None:
    """Serialize a format priority list; empty or None is stored as NULL."""
    if not priority:
        return None
    return json.dumps([t.value for t in priority])


def priority_from_json(raw: str | None) -> list[BookFileType] | None:
    """Deserialize a stored format priority list."""
    if not raw:
        return None
    return [BookFileType(value) for value in json.loads(raw)]


def row_to_library(row: Any) -> Library:
    """Convert a libraries row to a Library."""
    return Library(
        id=row["id"],
        name=row["name"],
        format_priority=priority_from_json(row["format_priority"]),
    )


def row_to_library_path(row: Any) -> LibraryPath:
    """Convert a library_paths row to a LibraryPath."""
    return LibraryPath(id=row["id"], library_id=row["library_id"], path=Path(row["path"]))
