# ABOUTME: Public API for the bookdupes catalog database layer.
# ABOUTME: Exports connection management, catalog operations, and data types.

from bookdupes.db.catalog import (
    DuplicateFileError,
    DuplicateLibraryError,
    LibraryCatalog,
    LibraryNotFoundError,
)
from bookdupes.db.connection import DEFAULT_DB_PATH, open_library
from bookdupes.db.mapping import BookRecord, FileRef, Library, LibraryPath

__all__ = [
    "DEFAULT_DB_PATH",
    "BookRecord",
    "DuplicateFileError",
    "DuplicateLibraryError",
    "FileRef",
    "Library",
    "LibraryCatalog",
    "LibraryNotFoundError",
    "LibraryPath",
    "open_library",
]
