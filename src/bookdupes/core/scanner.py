# ABOUTME: Directory scanner that turns a library root into candidate book records.
# ABOUTME: Groups same-stem format siblings per directory and attaches cover images.

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path

from bookdupes.db.mapping import FileRef
from bookdupes.formats.filetypes import ASSET_EXTENSIONS, BookFileType

# Image stems that belong to every book in their directory.
_SHARED_COVER_STEMS = frozenset({"cover", "folder"})


@dataclass
class ScannedBook:
    """One book found on disk: its directory, shared stem, and files."""

    sub_path: str
    stem: str
    files: list[FileRef] = field(default_factory=list)

    @property
    def primary_file(self) -> FileRef | None:
        """The first primary-format file in scan order."""
        return next((f for f in self.files if f.is_book_format), None)

    @property
    def formats(self) -> set[BookFileType]:
        """Formats present among the primary files."""
        return {f.book_type for f in self.files if f.is_book_format and f.book_type}


def _sub_path(directory: Path, root: Path) -> str:
    """Directory relative to root in POSIX form; the root itself is ""."""
    relative = directory.relative_to(root)
    return "" if relative == Path(".") else relative.as_posix()


def scan_library_path(root: Path) -> list[ScannedBook]:
    """Walk a library root and collect one ScannedBook per directory and stem.

    Every file with a known book extension is a primary-format file. Files in
    the same directory with the same stem (e.g. "Dune.epub" and "Dune.mobi")
    become a single book. Images sharing a book's stem, or named "cover" or
    "folder", are attached as non-primary files.

    Args:
        root: The library root directory.

    Returns:
        Books sorted by sub-path, then stem. Within a book, primary files come
        first, ordered by file name.
    """
    book_files: dict[tuple[Path, str], list[Path]] = defaultdict(list)
    assets: dict[Path, list[Path]] = defaultdict(list)

    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        suffix = path.suffix.lower()
        if BookFileType.from_extension(suffix) is not None:
            book_files[(path.parent, path.stem)].append(path)
        elif suffix in ASSET_EXTENSIONS:
            assets[path.parent].append(path)

    books: list[ScannedBook] = []
    for (directory, stem), paths in sorted(book_files.items()):
        sub_path = _sub_path(directory, root)
        files = [
            FileRef(
                file_name=p.name,
                file_sub_path=sub_path,
                is_book_format=True,
                book_type=BookFileType.from_extension(p.suffix),
            )
            for p in paths
        ]
        for image in assets.get(directory, []):
            if image.stem == stem or image.stem.lower() in _SHARED_COVER_STEMS:
                files.append(
                    FileRef(file_name=image.name, file_sub_path=sub_path, is_book_format=False)
                )
        books.append(ScannedBook(sub_path=sub_path, stem=stem, files=files))

    return books
