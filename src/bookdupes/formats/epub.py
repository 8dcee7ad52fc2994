# ABOUTME: EPUB metadata extraction using ebooklib for cataloging scanned books.
# ABOUTME: Defensive wrapper that handles malformed files gracefully.

import logging
import re
from pathlib import Path

from ebooklib import epub

from bookdupes.metadata.types import BookMetadata

logger = logging.getLogger(__name__)

_ISBN_STRIP_RE = re.compile(r"[\s-]")
_ISBN_PREFIX_RE = re.compile(r"^(?:urn:)?isbn:", re.IGNORECASE)
_ISBN10_RE = re.compile(r"^\d{9}[\dX]$")

# Identifier schemes (lowercased) that map onto external-id fields.
_SCHEME_FIELDS: dict[str, str] = {
    "goodreads": "goodreads_id",
    "hardcover": "hardcover_id",
    "google": "google_id",
    "amazon": "asin",
    "asin": "asin",
    "mobi-asin": "asin",
    "audible": "audible_id",
    "comicvine": "comicvine_id",
}


class EpubReadError(Exception):
    """Raised when an EPUB file cannot be read or parsed."""


def _get_metadata_value(book: epub.EpubBook, namespace: str, name: str) -> str | None:
    """Extract a single metadata value from an EpubBook, or None if missing."""
    values = book.get_metadata(namespace, name)
    if not values:
        return None
    # Metadata entries are tuples of (value, attributes)
    value = values[0][0]
    return str(value).strip() if value else None


def _get_authors(book: epub.EpubBook) -> list[str]:
    """Extract all author names from an EpubBook."""
    creators = book.get_metadata("DC", "creator")
    if not creators:
        return []
    return [str(entry[0]).strip() for entry in creators if entry[0]]


def _get_scheme(attrs: dict[str, str]) -> str:
    """Find the identifier scheme whether keyed "scheme", "opf:scheme", or "{ns}scheme"."""
    for key, value in attrs.items():
        if key.rsplit("}", 1)[-1].rsplit(":", 1)[-1] == "scheme":
            return value
    return "id"


def _get_identifiers(book: epub.EpubBook) -> dict[str, str]:
    """Extract all identifiers (ISBN, ASIN, UUID, etc.) keyed by lowercase scheme."""
    identifiers = {}
    entries = book.get_metadata("DC", "identifier")
    for value, attrs in entries:
        if not value:
            continue
        identifiers[_get_scheme(attrs).lower()] = str(value).strip()
    return identifiers


def _clean_isbn(value: str) -> str:
    return _ISBN_STRIP_RE.sub("", _ISBN_PREFIX_RE.sub("", value.strip())).upper()


def _detect_isbns(identifiers: dict[str, str]) -> tuple[str | None, str | None]:
    """Split ISBN-like identifiers into (isbn13, isbn10).

    Explicit isbn schemes are checked first, then any identifier value that
    looks like an ISBN, including "urn:isbn:" style values.
    """
    isbn13: str | None = None
    isbn10: str | None = None

    explicit = [v for k, v in identifiers.items() if k.startswith("isbn")]
    others = [v for k, v in identifiers.items() if not k.startswith("isbn")]
    for value in explicit + others:
        cleaned = _clean_isbn(value)
        if len(cleaned) == 13 and cleaned.isdigit():
            isbn13 = isbn13 or cleaned
        elif _ISBN10_RE.match(cleaned):
            isbn10 = isbn10 or cleaned

    return isbn13, isbn10


def _external_ids(identifiers: dict[str, str]) -> dict[str, str]:
    """Map known identifier schemes onto BookMetadata external-id fields."""
    found: dict[str, str] = {}
    for scheme, value in identifiers.items():
        attr = _SCHEME_FIELDS.get(scheme)
        if attr and attr not in found:
            found[attr] = value
    return found


def read_epub_metadata(path: Path) -> BookMetadata:
    """Extract metadata from an EPUB file.

    Args:
        path: Path to the EPUB file.

    Returns:
        BookMetadata populated with title, authors, ISBNs, and external ids.

    Raises:
        EpubReadError: If the file cannot be read or parsed.
    """
    if not path.exists():
        raise EpubReadError(f"File not found: {path}")

    try:
        book = epub.read_epub(str(path), options={"ignore_ncx": True})
    except Exception as exc:
        raise EpubReadError(f"Failed to read EPUB: {path}: {exc}") from exc

    title = _get_metadata_value(book, "DC", "title")
    if not title:
        title = path.stem

    identifiers = _get_identifiers(book)
    isbn13, isbn10 = _detect_isbns(identifiers)
    logger.debug("Read %s: %d identifier(s)", path.name, len(identifiers))

    return BookMetadata(
        title=title,
        authors=_get_authors(book),
        isbn13=isbn13,
        isbn10=isbn10,
        **_external_ids(identifiers),
    )
