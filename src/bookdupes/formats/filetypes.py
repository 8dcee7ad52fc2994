# ABOUTME: Book file type enumeration shared by the catalog, scanner, and target ranking.
# ABOUTME: Maps file extensions to book, comic, and audiobook formats.

from enum import Enum


class BookFileType(str, Enum):
    """Primary content formats a cataloged book file can have."""

    EPUB = "EPUB"
    PDF = "PDF"
    AZW3 = "AZW3"
    MOBI = "MOBI"
    FB2 = "FB2"
    CBX = "CBX"
    AUDIOBOOK = "AUDIOBOOK"

    @property
    def extensions(self) -> frozenset[str]:
        """Lowercase, dot-prefixed extensions recognized for this type."""
        return _TYPE_EXTENSIONS[self]

    @classmethod
    def from_extension(cls, ext: str) -> "BookFileType | None":
        """Resolve a file extension (with or without dot, any case) to a type."""
        normalized = ext.lower() if ext.startswith(".") else f".{ext.lower()}"
        return _EXTENSION_TYPES.get(normalized)

    @classmethod
    def parse(cls, name: str) -> "BookFileType":
        """Resolve a user-supplied type name or extension, e.g. "epub" or ".cbz".

        Raises:
            ValueError: If the name matches no known type.
        """
        cleaned = name.strip()
        try:
            return cls(cleaned.upper())
        except ValueError:
            pass
        found = cls.from_extension(cleaned) if cleaned else None
        if found is None:
            raise ValueError(f"Unknown book file type: {name!r}")
        return found


_TYPE_EXTENSIONS: dict[BookFileType, frozenset[str]] = {
    BookFileType.EPUB: frozenset({".epub"}),
    BookFileType.PDF: frozenset({".pdf"}),
    BookFileType.AZW3: frozenset({".azw3", ".azw"}),
    BookFileType.MOBI: frozenset({".mobi"}),
    BookFileType.FB2: frozenset({".fb2"}),
    BookFileType.CBX: frozenset({".cbz", ".cbr", ".cb7"}),
    BookFileType.AUDIOBOOK: frozenset({".m4b", ".m4a", ".mp3"}),
}

_EXTENSION_TYPES: dict[str, BookFileType] = {
    ext: file_type for file_type, exts in _TYPE_EXTENSIONS.items() for ext in exts
}

BOOK_EXTENSIONS: frozenset[str] = frozenset(_EXTENSION_TYPES)

# Supplementary assets attached to a book as non-primary files.
ASSET_EXTENSIONS: frozenset[str] = frozenset({".jpg", ".jpeg", ".png"})
