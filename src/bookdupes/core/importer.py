# ABOUTME: Import pipeline that catalogs every root directory of a library.
# ABOUTME: Scans roots, reads EPUB metadata, skips already-cataloged files, and stores records.

import logging
from dataclasses import dataclass, field
from pathlib import Path

from bookdupes.core.scanner import ScannedBook, scan_library_path
from bookdupes.db.catalog import LibraryCatalog, LibraryNotFoundError
from bookdupes.db.mapping import BookRecord, LibraryPath
from bookdupes.formats.epub import EpubReadError, read_epub_metadata
from bookdupes.formats.filetypes import BookFileType
from bookdupes.metadata.types import BookMetadata

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Summary of an import operation."""

    added: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    error_details: list[tuple[Path, str]] = field(default_factory=list)

    def record_error(self, path: Path, message: str) -> None:
        self.errors += 1
        self.error_details.append((path, message))


def _read_metadata(root: Path, scanned: ScannedBook, result: ImportResult) -> BookMetadata:
    """Metadata for a scanned book: EPUB metadata if available, else the file stem.

    An unreadable EPUB is recorded as an error; the book still gets a title.
    """
    for file in scanned.files:
        if file.book_type is not BookFileType.EPUB:
            continue
        path = root / file.file_sub_path / file.file_name
        try:
            return read_epub_metadata(path)
        except EpubReadError as exc:
            logger.warning("Could not read EPUB metadata from %s: %s", path, exc)
            result.record_error(path, str(exc))
            break
    return BookMetadata(title=scanned.stem)


def _attach_new_files(
    catalog: LibraryCatalog,
    existing: BookRecord,
    scanned: ScannedBook,
    owners: dict[str, BookRecord | None],
    result: ImportResult,
) -> None:
    """Add a re-scanned book's uncataloged files to the record that owns its siblings."""
    known = {(f.file_sub_path, f.file_name) for f in existing.files}
    new_files = [
        f
        for f in scanned.files
        if (f.file_sub_path, f.file_name) not in known and owners.get(f.file_name) is None
    ]
    if not new_files:
        result.skipped += 1
        return

    logger.debug(
        "Attaching %d new file(s) to book %d: %s",
        len(new_files),
        existing.id,
        ", ".join(f.file_name for f in new_files),
    )
    catalog.add_files(existing.id, new_files)
    result.updated += 1


def import_library_path(
    catalog: LibraryCatalog, library_path: LibraryPath, result: ImportResult
) -> None:
    """Catalog every book found under one library root into result's counts."""
    root = library_path.path
    if not root.is_dir():
        logger.warning("Library root %s is not a directory", root)
        result.record_error(root, "Library root does not exist or is not a directory")
        return

    for scanned in scan_library_path(root):
        if scanned.primary_file is None:
            continue

        owners = {
            f.file_name: catalog.find_file(library_path.id, f.file_sub_path, f.file_name)
            for f in scanned.files
            if f.is_book_format
        }
        existing = next((book for book in owners.values() if book is not None), None)

        if existing is not None:
            _attach_new_files(catalog, existing, scanned, owners, result)
            continue

        metadata = _read_metadata(root, scanned, result)
        catalog.add_book(
            library_path.library_id,
            metadata,
            scanned.files,
            library_path_id=library_path.id,
        )
        result.added += 1


def import_library(catalog: LibraryCatalog, library_id: int) -> ImportResult:
    """Scan every root of a library and catalog the books found.

    A file is identified by its root, sub-path, and file name. When any
    primary file of a scanned book is already cataloged, its new siblings are
    attached to that record instead of creating a second one, and a book with
    nothing new is skipped. Re-running an import therefore only adds new books.

    Args:
        catalog: The library catalog to add books to.
        library_id: The library whose roots are scanned.

    Returns:
        ImportResult with counts of added, updated, skipped, and errored entries.

    Raises:
        LibraryNotFoundError: If the library does not exist.
    """
    if catalog.get_library(library_id) is None:
        raise LibraryNotFoundError(f"Library with id {library_id} not found")

    result = ImportResult()
    for library_path in catalog.list_library_paths(library_id):
        import_library_path(catalog, library_path, result)
    return result
