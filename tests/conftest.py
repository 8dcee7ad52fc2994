# ABOUTME: Shared pytest fixtures for bookdupes tests.
# ABOUTME: Provides EPUB builders, in-memory book records, and on-disk library trees.

from collections.abc import Callable
from pathlib import Path

import pytest
from ebooklib import epub

from bookdupes.db.catalog import LibraryCatalog
from bookdupes.db.connection import open_library
from bookdupes.db.mapping import BookRecord, FileRef
from bookdupes.formats.filetypes import BookFileType
from bookdupes.metadata.types import BookMetadata

OPF_NS = "http://www.idpf.org/2007/opf"


def write_epub(
    path: Path,
    title: str | None,
    authors: tuple[str, ...] = (),
    identifier: str = "urn:uuid:test-book",
    extra_identifiers: dict[str, str] | None = None,
) -> Path:
    """Write a minimal, structurally valid EPUB with the given metadata."""
    book = epub.EpubBook()
    book.set_identifier(identifier)
    if title is not None:
        book.set_title(title)
    book.set_language("en")
    for author in authors:
        book.add_author(author)
    for scheme, value in (extra_identifiers or {}).items():
        book.add_metadata("DC", "identifier", value, {f"{{{OPF_NS}}}scheme": scheme})

    chapter = epub.EpubHtml(title="Chapter 1", file_name="chap01.xhtml", lang="en")
    chapter.content = b"<html><body><h1>Chapter 1</h1><p>Content.</p></body></html>"
    book.add_item(chapter)

    book.toc = [epub.Link("chap01.xhtml", "Chapter 1", "chap01")]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    path.parent.mkdir(parents=True, exist_ok=True)
    epub.write_epub(str(path), book)
    return path


@pytest.fixture
def make_epub() -> Callable[..., Path]:
    """Factory that writes an EPUB with chosen metadata; see write_epub."""
    return write_epub


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    """An EPUB with a title, author, and ISBN-13 identifier."""
    return write_epub(
        tmp_path / "dune.epub",
        "Dune",
        authors=("Frank Herbert",),
        identifier="9780441013593",
    )


@pytest.fixture
def corrupt_epub(tmp_path: Path) -> Path:
    """A file with an .epub extension that is not a valid EPUB."""
    filepath = tmp_path / "corrupt.epub"
    filepath.write_text("this is not a valid epub file")
    return filepath


@pytest.fixture
def library_tree(tmp_path: Path) -> Path:
    """Create a library root with a known set of duplicates.

    Layout:
        books/
            Foundation.epub                  (unique)
            Frank Herbert/Dune/Dune.epub     (ISBN-13 9780441013593)
            Frank Herbert/Dune/Dune.mobi     (same book, second format)
            Frank Herbert/Dune/cover.jpg
            incoming/dune_copy.epub          (ISBN-10 0441013597, same ISBN)
            misc/neuromancer.pdf             (filename duplicate)
            other/Neuromancer.pdf            (filename duplicate)
    """
    root = tmp_path / "books"
    write_epub(root / "Foundation.epub", "Foundation", authors=("Isaac Asimov",))

    dune_dir = root / "Frank Herbert" / "Dune"
    write_epub(
        dune_dir / "Dune.epub", "Dune", authors=("Frank Herbert",), identifier="9780441013593"
    )
    (dune_dir / "Dune.mobi").write_bytes(b"mobi")
    (dune_dir / "cover.jpg").write_bytes(b"jpg")

    write_epub(
        root / "incoming" / "dune_copy.epub",
        "Dune (Deluxe Edition)",
        authors=("Herbert, Frank",),
        identifier="0441013597",
    )

    (root / "misc").mkdir()
    (root / "misc" / "neuromancer.pdf").write_bytes(b"%PDF-1.4")
    (root / "other").mkdir()
    (root / "other" / "Neuromancer.pdf").write_bytes(b"%PDF-1.4")
    return root


@pytest.fixture
def catalog(tmp_path: Path) -> LibraryCatalog:
    """Provide a LibraryCatalog backed by a temporary database."""
    conn = open_library(tmp_path / "test.db")
    yield LibraryCatalog(conn)
    conn.close()


@pytest.fixture
def make_book() -> Callable[..., BookRecord]:
    """Factory for in-memory BookRecords with a single primary file by default."""

    def _make(
        book_id: int,
        title: str | None = None,
        authors: list[str] | None = None,
        *,
        isbn13: str | None = None,
        isbn10: str | None = None,
        stem: str | None = None,
        sub_path: str = "",
        library_path_id: int | None = 1,
        formats: tuple[BookFileType, ...] = (BookFileType.EPUB,),
        score: float | None = None,
        no_metadata: bool = False,
        **external_ids: str,
    ) -> BookRecord:
        base = stem or f"book{book_id}"
        files = [
            FileRef(
                file_name=f"{base}{min(fmt.extensions)}",
                file_sub_path=sub_path,
                is_book_format=True,
                book_type=fmt,
            )
            for fmt in formats
        ]
        metadata = None
        if not no_metadata:
            metadata = BookMetadata(
                title=title,
                authors=list(authors or []),
                isbn13=isbn13,
                isbn10=isbn10,
                **external_ids,
            )
        return BookRecord(
            id=book_id,
            library_id=1,
            metadata=metadata,
            files=files,
            library_path_id=library_path_id,
            metadata_match_score=score,
        )

    return _make
