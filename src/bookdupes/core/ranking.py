# ABOUTME: Picks the suggested merge target among the members of a duplicate group.
# ABOUTME: Ranks by format priority, primary file count, match score, then highest id.

from collections.abc import Sequence

from bookdupes.db.mapping import BookRecord
from bookdupes.formats.filetypes import BookFileType

DEFAULT_FORMAT_PRIORITY: tuple[BookFileType, ...] = (
    BookFileType.EPUB,
    BookFileType.PDF,
    BookFileType.AZW3,
    BookFileType.MOBI,
    BookFileType.FB2,
    BookFileType.CBX,
    BookFileType.AUDIOBOOK,
)


def resolve_format_priority(
    custom: Sequence[BookFileType] | None,
) -> tuple[BookFileType, ...]:
    """Return a library's own priority list if it has one, else the default.

    A non-empty custom list replaces the default entirely.
    """
    if custom:
        return tuple(custom)
    return DEFAULT_FORMAT_PRIORITY


def format_priority_score(book: BookRecord, priority: Sequence[BookFileType]) -> int:
    """Score a book by its best primary-format file.

    The first format in the priority list scores len(priority), the last
    scores 1. Files of unknown or unlisted type, and non-primary files, score 0.
    """
    best = 0
    for file in book.files:
        if not file.is_book_format or file.book_type is None:
            continue
        if file.book_type in priority:
            best = max(best, len(priority) - priority.index(file.book_type))
    return best


def _rank_key(
    book: BookRecord, priority: Sequence[BookFileType]
) -> tuple[int, int, float, int]:
    score = book.metadata_match_score if book.metadata_match_score is not None else 0.0
    return (
        format_priority_score(book, priority),
        book.primary_file_count,
        score,
        book.id,
    )


def suggest_target(
    books: Sequence[BookRecord],
    priority: Sequence[BookFileType] = DEFAULT_FORMAT_PRIORITY,
) -> BookRecord | None:
    """Choose which member of a duplicate group the others should merge into.

    Args:
        books: The group members.
        priority: Ordered format preference, best first.

    Returns:
        The best-ranked book, or None for an empty group.
    """
    if not books:
        return None
    return max(books, key=lambda book: _rank_key(book, priority))
