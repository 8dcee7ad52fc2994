# ABOUTME: CRUD operations for the bookdupes library catalog.
# ABOUTME: Libraries, their root paths, books, and attached files in the SQLite database.

import sqlite3
from collections import defaultdict
from pathlib import Path

from bookdupes.db.mapping import (
    BookRecord,
    FileRef,
    Library,
    LibraryPath,
    metadata_to_row,
    priority_to_json,
    row_to_file,
    row_to_library,
    row_to_library_path,
    row_to_record,
)
from bookdupes.formats.filetypes import BookFileType
from bookdupes.metadata.types import BookMetadata


class LibraryNotFoundError(Exception):
    """Raised when a library id does not exist in the catalog."""


class DuplicateLibraryError(Exception):
    """Raised when attempting to add a library whose name is already taken."""


class DuplicateFileError(Exception):
    """Raised when a book lists the same file (sub-path and name) twice."""


class LibraryCatalog:
    """Wraps a sqlite3 connection and provides typed CRUD for the catalog tables."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- Library operations ---

    def add_library(
        self, name: str, format_priority: list[BookFileType] | None = None
    ) -> int:
        """Create a library.

        Args:
            name: Unique library name.
            format_priority: Optional ordered format preference, best first.

        Returns:
            The row ID of the new library.

        Raises:
            DuplicateLibraryError: If a library with this name already exists.
        """
        try:
            cursor = self._conn.execute(
                "INSERT INTO libraries (name, format_priority) VALUES (?, ?)",
                (name, priority_to_json(format_priority)),
            )
            self._conn.commit()
        except sqlite3.IntegrityError as exc:
            if "UNIQUE constraint failed: libraries.name" in str(exc):
                raise DuplicateLibraryError(f"Library '{name}' already exists") from exc
            raise

        return cursor.lastrowid  # type: ignore[return-value]

    def get_library(self, library_id: int) -> Library | None:
        """Retrieve a library by its row ID."""
        cursor = self._conn.execute("SELECT * FROM libraries WHERE id = ?", (library_id,))
        row = cursor.fetchone()
        return row_to_library(row) if row else None

    def list_libraries(self) -> list[Library]:
        """Return all libraries, ordered by name."""
        cursor = self._conn.execute("SELECT * FROM libraries ORDER BY name")
        return [row_to_library(row) for row in cursor.fetchall()]

    def set_format_priority(
        self, library_id: int, format_priority: list[BookFileType] | None
    ) -> None:
        """Replace a library's format priority. None or empty clears it.

        Raises:
            LibraryNotFoundError: If the library does not exist.
        """
        cursor = self._conn.execute(
            "UPDATE libraries SET format_priority = ? WHERE id = ?",
            (priority_to_json(format_priority), library_id),
        )
        self._conn.commit()

        if cursor.rowcount == 0:
            raise LibraryNotFoundError(f"Library with id {library_id} not found")

    def get_format_priority(self, library_id: int) -> list[BookFileType] | None:
        """Return the library's custom format priority, or None if unset.

        Raises:
            LibraryNotFoundError: If the library does not exist.
        """
        library = self._require_library(library_id)
        return library.format_priority

    def add_library_path(self, library_id: int, path: Path) -> int:
        """Register a root directory for a library. Idempotent per (library, path).

        Returns:
            The row ID of the library path.

        Raises:
            LibraryNotFoundError: If the library does not exist.
        """
        self._require_library(library_id)
        self._conn.execute(
            "INSERT OR IGNORE INTO library_paths (library_id, path) VALUES (?, ?)",
            (library_id, str(path)),
        )
        self._conn.commit()
        cursor = self._conn.execute(
            "SELECT id FROM library_paths WHERE library_id = ? AND path = ?",
            (library_id, str(path)),
        )
        return cursor.fetchone()[0]

    def list_library_paths(self, library_id: int) -> list[LibraryPath]:
        """Return the root directories of a library, in registration order."""
        cursor = self._conn.execute(
            "SELECT * FROM library_paths WHERE library_id = ? ORDER BY id",
            (library_id,),
        )
        return [row_to_library_path(row) for row in cursor.fetchall()]

    # --- Book operations ---

    def add_book(
        self,
        library_id: int,
        metadata: BookMetadata | None,
        files: list[FileRef],
        *,
        library_path_id: int | None = None,
        metadata_match_score: float | None = None,
    ) -> int:
        """Add a book and its files to the catalog.

        Args:
            library_id: The owning library.
            metadata: The book's metadata, or None when nothing is known.
            files: Attached files, in order. The first primary-format file is
                the one directory and filename matching look at.
            library_path_id: Root directory the files live under.
            metadata_match_score: Externally computed metadata confidence.

        Returns:
            The row ID of the inserted book.

        Raises:
            LibraryNotFoundError: If the library does not exist.
            DuplicateFileError: If the same file appears twice in files.
        """
        self._require_library(library_id)

        row = metadata_to_row(metadata)
        row["library_id"] = library_id
        row["library_path_id"] = library_path_id
        row["metadata_match_score"] = metadata_match_score

        columns = ", ".join(row.keys())
        placeholders = ", ".join("?" for _ in row)

        try:
            cursor = self._conn.execute(
                f"INSERT INTO books ({columns}) VALUES ({placeholders})",
                list(row.values()),
            )
            book_id = cursor.lastrowid
            self._insert_files(book_id, files)  # type: ignore[arg-type]
            self._conn.commit()
        except sqlite3.IntegrityError as exc:
            self._conn.rollback()
            if "UNIQUE constraint failed: book_files" in str(exc):
                raise DuplicateFileError(f"Book lists the same file twice: {exc}") from exc
            raise

        return book_id  # type: ignore[return-value]

    def get_by_id(self, book_id: int) -> BookRecord | None:
        """Retrieve a book and its files by the book's row ID."""
        cursor = self._conn.execute("SELECT * FROM books WHERE id = ?", (book_id,))
        row = cursor.fetchone()
        if row is None:
            return None
        return row_to_record(row, self._files_where("b.id = ?", (book_id,)).get(book_id))

    def list_books(self, library_id: int) -> list[BookRecord]:
        """Return every book in a library with files loaded, ordered by id."""
        cursor = self._conn.execute(
            "SELECT * FROM books WHERE library_id = ? ORDER BY id", (library_id,)
        )
        rows = cursor.fetchall()
        files = self._files_where("b.library_id = ?", (library_id,))
        return [row_to_record(row, files.get(row["id"])) for row in rows]

    def list_for_duplicate_detection(self, library_id: int) -> list[BookRecord]:
        """Return a snapshot of a library's books for duplicate detection.

        Metadata and files are fully loaded; callers issue no further queries.

        Raises:
            LibraryNotFoundError: If the library does not exist.
        """
        self._require_library(library_id)
        return self.list_books(library_id)

    def find_file(
        self, library_path_id: int, file_sub_path: str, file_name: str
    ) -> BookRecord | None:
        """Find the book that already owns a file at a location under a root."""
        cursor = self._conn.execute(
            "SELECT b.id FROM books b "
            "JOIN book_files f ON f.book_id = b.id "
            "WHERE b.library_path_id = ? AND f.file_sub_path = ? AND f.file_name = ? "
            "ORDER BY b.id LIMIT 1",
            (library_path_id, file_sub_path, file_name),
        )
        row = cursor.fetchone()
        return self.get_by_id(row[0]) if row else None

    def add_files(self, book_id: int, files: list[FileRef]) -> None:
        """Attach more files to an existing book, after the ones it already has.

        Raises:
            ValueError: If the book_id does not exist.
            DuplicateFileError: If a file is already attached to the book.
        """
        if self.get_by_id(book_id) is None:
            raise ValueError(f"Book with id {book_id} not found")

        try:
            self._insert_files(book_id, files)
            self._conn.commit()
        except sqlite3.IntegrityError as exc:
            self._conn.rollback()
            if "UNIQUE constraint failed: book_files" in str(exc):
                raise DuplicateFileError(f"Book already has this file: {exc}") from exc
            raise

    def delete_book(self, book_id: int) -> None:
        """Delete a book and its files from the catalog.

        Raises:
            ValueError: If the book_id does not exist.
        """
        cursor = self._conn.execute("DELETE FROM books WHERE id = ?", (book_id,))
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ValueError(f"Book with id {book_id} not found")

    def _insert_files(self, book_id: int, files: list[FileRef]) -> None:
        """Insert book_files rows without committing."""
        self._conn.executemany(
            "INSERT INTO book_files "
            "(book_id, file_name, file_sub_path, is_book_format, book_type) "
            "VALUES (?, ?, ?, ?, ?)",
            [
                (
                    book_id,
                    file.file_name,
                    file.file_sub_path,
                    int(file.is_book_format),
                    file.book_type.value if file.book_type else None,
                )
                for file in files
            ],
        )

    def _require_library(self, library_id: int) -> Library:
        library = self.get_library(library_id)
        if library is None:
            raise LibraryNotFoundError(f"Library with id {library_id} not found")
        return library

    def _files_where(self, where: str, params: tuple[int, ...]) -> dict[int, list[FileRef]]:
        """Load files matching a books/book_files filter, keyed by book id."""
        files: dict[int, list[FileRef]] = defaultdict(list)
        cursor = self._conn.execute(
            "SELECT f.* FROM book_files f JOIN books b ON f.book_id = b.id "
            f"WHERE {where} ORDER BY f.id",
            params,
        )
        for row in cursor.fetchall():
            files[row["book_id"]].append(row_to_file(row))
        return files
