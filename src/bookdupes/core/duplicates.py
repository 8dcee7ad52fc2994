# ABOUTME: Duplicate detection orchestrator for one library of the catalog.
# ABOUTME: Runs the enabled matching signals in confidence order over a record snapshot.

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from bookdupes.core.matchers import (
    ClaimedIds,
    DuplicateGroup,
    MatchReason,
    match_by_directory,
    match_by_external_id,
    match_by_filename,
    match_by_isbn,
    match_by_title_author,
)
from bookdupes.core.ranking import resolve_format_priority
from bookdupes.db.catalog import LibraryCatalog
from bookdupes.db.mapping import BookRecord
from bookdupes.formats.filetypes import BookFileType

logger = logging.getLogger(__name__)

Matcher = Callable[
    [Sequence[BookRecord], ClaimedIds, Sequence[BookFileType]], list[DuplicateGroup]
]


@dataclass(frozen=True)
class DuplicateDetectionRequest:
    """Which library to scan and which signals to use."""

    library_id: int
    match_by_isbn: bool = True
    match_by_external_id: bool = True
    match_by_title_author: bool = True
    match_by_directory: bool = True
    match_by_filename: bool = True

    def enabled_signals(self) -> list[MatchReason]:
        """Enabled signals, in the order they run."""
        flags = {
            MatchReason.ISBN: self.match_by_isbn,
            MatchReason.EXTERNAL_ID: self.match_by_external_id,
            MatchReason.TITLE_AUTHOR: self.match_by_title_author,
            MatchReason.DIRECTORY: self.match_by_directory,
            MatchReason.FILENAME: self.match_by_filename,
        }
        return [reason for reason in SIGNAL_ORDER if flags[reason]]


# Strongest signal first. Books grouped by an earlier signal are never
# regrouped by a later one.
SIGNAL_ORDER: tuple[MatchReason, ...] = (
    MatchReason.ISBN,
    MatchReason.EXTERNAL_ID,
    MatchReason.TITLE_AUTHOR,
    MatchReason.DIRECTORY,
    MatchReason.FILENAME,
)

_MATCHERS: dict[MatchReason, Matcher] = {
    MatchReason.ISBN: match_by_isbn,
    MatchReason.EXTERNAL_ID: match_by_external_id,
    MatchReason.TITLE_AUTHOR: match_by_title_author,
    MatchReason.DIRECTORY: match_by_directory,
    MatchReason.FILENAME: match_by_filename,
}


def detect_duplicates(
    books: Sequence[BookRecord],
    request: DuplicateDetectionRequest,
    format_priority: Sequence[BookFileType] | None = None,
) -> list[DuplicateGroup]:
    """Partition a snapshot of books into disjoint duplicate groups.

    Signals run in SIGNAL_ORDER. Each one sees only books no earlier signal
    has grouped, so every book appears in at most one group.

    Args:
        books: Every book of one library, with files and metadata loaded.
        request: Signal toggles. library_id is not consulted here.
        format_priority: The library's own format preference, or None for
            the default ordering.

    Returns:
        Groups in signal execution order. Empty when fewer than two books are
        given or no signal is enabled.
    """
    if len(books) < 2:
        return []

    priority = resolve_format_priority(format_priority)
    claimed: ClaimedIds = set()
    groups: list[DuplicateGroup] = []

    for reason in request.enabled_signals():
        found = _MATCHERS[reason](books, claimed, priority)
        logger.debug(
            "%s: %d group(s), %d book(s) claimed so far", reason.value, len(found), len(claimed)
        )
        groups.extend(found)

    return groups


def find_duplicates(
    catalog: LibraryCatalog, request: DuplicateDetectionRequest
) -> list[DuplicateGroup]:
    """Find duplicate groups within one cataloged library.

    Loads the library's books and format priority from the catalog, then runs
    detect_duplicates over that snapshot.

    Raises:
        LibraryNotFoundError: If request.library_id does not exist.
    """
    books = catalog.list_for_duplicate_detection(request.library_id)
    format_priority = catalog.get_format_priority(request.library_id)

    groups = detect_duplicates(books, request, format_priority)
    logger.debug(
        "Library %d: %d book(s) scanned, %d duplicate group(s)",
        request.library_id,
        len(books),
        len(groups),
    )
    return groups
