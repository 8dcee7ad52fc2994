# ABOUTME: Metadata package for book record metadata and match-key normalization.
# ABOUTME: Exports the BookMetadata dataclass and the normalizer functions.

from bookdupes.metadata.normalizer import (
    isbn10_to_13,
    normalize_filename,
    normalize_for_search,
)
from bookdupes.metadata.types import EXTERNAL_ID_FIELDS, BookMetadata

__all__ = [
    "EXTERNAL_ID_FIELDS",
    "BookMetadata",
    "isbn10_to_13",
    "normalize_filename",
    "normalize_for_search",
]
