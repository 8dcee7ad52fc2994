# ABOUTME: Core metadata data structures for cataloged book records.
# ABOUTME: BookMetadata carries the titles, authors, and identifiers duplicate matching reads.

from dataclasses import dataclass, field

# Namespace prefix for each external identifier field, in extraction order.
EXTERNAL_ID_FIELDS: tuple[tuple[str, str], ...] = (
    ("goodreads", "goodreads_id"),
    ("hardcover", "hardcover_id"),
    ("google", "google_id"),
    ("asin", "asin"),
    ("audible", "audible_id"),
    ("comicvine", "comicvine_id"),
)


@dataclass
class BookMetadata:
    """Structured metadata for a cataloged book.

    Every field is optional: a record scanned from a badly-formed file may carry
    nothing but a filename-derived title, and some carry no title at all.
    """

    title: str | None = None
    authors: list[str] = field(default_factory=list)
    isbn13: str | None = None
    isbn10: str | None = None
    goodreads_id: str | None = None
    hardcover_id: str | None = None
    google_id: str | None = None
    asin: str | None = None
    audible_id: str | None = None
    comicvine_id: str | None = None

    @property
    def author(self) -> str:
        """Convenience property: joined author string for display."""
        return ", ".join(a for a in self.authors if a) if self.authors else ""

    def external_ids(self) -> dict[str, str | None]:
        """Map each external-id namespace to its raw field value."""
        return {ns: getattr(self, attr) for ns, attr in EXTERNAL_ID_FIELDS}
