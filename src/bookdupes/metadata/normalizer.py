# ABOUTME: Turns raw textual record fields into comparable keys for duplicate matching.
# ABOUTME: ISBN-10 to ISBN-13 conversion, search-key normalization, and filename keys.

import re

_ISBN_STRIP_RE = re.compile(r"[\s-]")
_ISBN10_RE = re.compile(r"^\d{9}[\dX]$")

# Pre-compiled regexes for filename key normalization.
_FILENAME_SEPARATOR_RE = re.compile(r"[_\-]")
_FILENAME_DISALLOWED_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def isbn10_to_13(isbn10: str | None) -> str | None:
    """Convert an ISBN-10 to its ISBN-13 form.

    Hyphens and spaces are ignored. The ISBN-10 check digit is not validated;
    the ISBN-13 check digit is recomputed over the ``978`` prefix.

    Returns:
        The 13-digit ISBN, or None if the input is not shaped like an ISBN-10.
    """
    if not isbn10:
        return None

    cleaned = _ISBN_STRIP_RE.sub("", isbn10).upper()
    if not _ISBN10_RE.match(cleaned):
        return None

    body = "978" + cleaned[:9]
    total = sum(int(digit) * (1 if i % 2 == 0 else 3) for i, digit in enumerate(body))
    check = (10 - total % 10) % 10
    return f"{body}{check}"


def normalize_for_search(text: str | None) -> str:
    """Lowercase a string and collapse runs of whitespace. Blank input gives ""."""
    if not text:
        return ""
    return " ".join(text.lower().split())


def normalize_filename(file_name: str | None) -> str:
    """Reduce a filename to a comparable key.

    Pipeline:
    1. Drop the extension (a leading dot is not an extension separator)
    2. Lowercase, turn underscores and hyphens into spaces
    3. Strip everything outside [a-z0-9] and whitespace
    4. Collapse whitespace and trim
    """
    if not file_name:
        return ""

    dot = file_name.rfind(".")
    base = file_name[:dot] if dot > 0 else file_name

    key = _FILENAME_SEPARATOR_RE.sub(" ", base.lower())
    key = _FILENAME_DISALLOWED_RE.sub("", key)
    return _WHITESPACE_RE.sub(" ", key).strip()
