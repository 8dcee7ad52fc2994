# ABOUTME: The five duplicate-matching signals and the group assembly they share.
# ABOUTME: ISBN, external id, title+author, directory, and filename matchers over book records.

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from bookdupes.core.ranking import suggest_target
from bookdupes.core.union_find import UnionFind
from bookdupes.db.mapping import BookRecord
from bookdupes.formats.filetypes import BookFileType
from bookdupes.metadata.normalizer import (
    isbn10_to_13,
    normalize_filename,
    normalize_for_search,
)
from bookdupes.metadata.types import BookMetadata

# Ids already placed in a group by an earlier, higher-confidence signal.
ClaimedIds = set[int]


class MatchReason(str, Enum):
    """Which signal produced a duplicate group."""

    ISBN = "ISBN"
    EXTERNAL_ID = "EXTERNAL_ID"
    TITLE_AUTHOR = "TITLE_AUTHOR"
    DIRECTORY = "DIRECTORY"
    FILENAME = "FILENAME"


@dataclass
class DuplicateGroup:
    """Two or more books judged to be the same work by one signal."""

    suggested_target_id: int
    match_reason: MatchReason
    books: list[BookRecord] = field(default_factory=list)

    @property
    def book_ids(self) -> list[int]:
        """Ids of all members, in member order."""
        return [book.id for book in self.books]


def _to_group(
    members: list[BookRecord],
    reason: MatchReason,
    claimed: ClaimedIds,
    priority: Sequence[BookFileType],
) -> DuplicateGroup:
    """Claim every member and wrap them in a ranked DuplicateGroup."""
    claimed.update(book.id for book in members)
    target = suggest_target(members, priority) or members[0]
    return DuplicateGroup(suggested_target_id=target.id, match_reason=reason, books=members)


def _build_groups(
    buckets: dict[str, list[BookRecord]],
    reason: MatchReason,
    claimed: ClaimedIds,
    priority: Sequence[BookFileType],
) -> list[DuplicateGroup]:
    """Turn key buckets into groups, dropping buckets with fewer than two books."""
    return [
        _to_group(members, reason, claimed, priority)
        for members in buckets.values()
        if len(members) >= 2
    ]


def _bucket(keyed: Iterable[tuple[str | None, BookRecord]]) -> dict[str, list[BookRecord]]:
    """Collect books under their match key, skipping books without one."""
    buckets: dict[str, list[BookRecord]] = {}
    for key, book in keyed:
        if key is None:
            continue
        buckets.setdefault(key, []).append(book)
    return buckets


def _unclaimed(books: Iterable[BookRecord], claimed: ClaimedIds) -> list[BookRecord]:
    return [book for book in books if book.id not in claimed]


def _clusters(uf: UnionFind[int], books_by_id: dict[int, BookRecord]) -> list[list[BookRecord]]:
    return [[books_by_id[book_id] for book_id in ids] for ids in uf.groups()]


# --- ISBN ---


def isbn_key(metadata: BookMetadata | None) -> str | None:
    """ISBN-13 of a book, converting from ISBN-10 when no ISBN-13 is stored."""
    if metadata is None:
        return None
    isbn = metadata.isbn13
    if isbn is None and metadata.isbn10 is not None:
        isbn = isbn10_to_13(metadata.isbn10)
    if isbn is None or not isbn.strip():
        return None
    return isbn.strip()


def match_by_isbn(
    books: Iterable[BookRecord],
    claimed: ClaimedIds,
    priority: Sequence[BookFileType],
) -> list[DuplicateGroup]:
    """Group books sharing an ISBN-13 (ISBN-10s are converted first)."""
    buckets = _bucket((isbn_key(book.metadata), book) for book in _unclaimed(books, claimed))
    return _build_groups(buckets, MatchReason.ISBN, claimed, priority)


# --- External ids ---


def external_id_tokens(metadata: BookMetadata) -> list[str]:
    """Namespaced external ids of a book, e.g. "goodreads:12345". Blanks are omitted."""
    return [
        f"{namespace}:{value.strip()}"
        for namespace, value in metadata.external_ids().items()
        if value is not None and value.strip()
    ]


def match_by_external_id(
    books: Iterable[BookRecord],
    claimed: ClaimedIds,
    priority: Sequence[BookFileType],
) -> list[DuplicateGroup]:
    """Group books connected through any shared external id.

    Matches are transitive: A and B sharing a Goodreads id and B and C sharing
    an ASIN put all three in one group.
    """
    books_by_id = {
        book.id: book for book in _unclaimed(books, claimed) if book.metadata is not None
    }

    uf: UnionFind[int] = UnionFind(books_by_id)
    owner: dict[str, int] = {}
    for book_id, book in books_by_id.items():
        for token in external_id_tokens(book.metadata):  # type: ignore[arg-type]
            if token in owner:
                uf.union(book_id, owner[token])
            else:
                owner[token] = book_id

    return [
        _to_group(members, MatchReason.EXTERNAL_ID, claimed, priority)
        for members in _clusters(uf, books_by_id)
        if len(members) >= 2
    ]


# --- Title + author ---


def _title_key(book: BookRecord) -> str | None:
    if book.metadata is None:
        return None
    return normalize_for_search(book.metadata.title) or None


def _author_keys(book: BookRecord) -> set[str]:
    """Normalized author names. Names that normalize to blank are dropped."""
    names = book.metadata.authors if book.metadata is not None else []
    keys = {normalize_for_search(name) for name in names if name}
    keys.discard("")
    return keys


def match_by_title_author(
    books: Iterable[BookRecord],
    claimed: ClaimedIds,
    priority: Sequence[BookFileType],
) -> list[DuplicateGroup]:
    """Group books with the same normalized title and at least one shared author.

    A title bucket needs two or more books that list authors; books without
    authors never match on this signal, even when titles are identical.
    """
    buckets = _bucket((_title_key(book), book) for book in _unclaimed(books, claimed))

    groups: list[DuplicateGroup] = []
    for bucket in buckets.values():
        if len(bucket) < 2:
            continue

        authors = {book.id: _author_keys(book) for book in bucket}
        with_authors = [book for book in bucket if authors[book.id]]
        if len(with_authors) < 2:
            continue

        books_by_id = {book.id: book for book in with_authors}
        uf: UnionFind[int] = UnionFind(books_by_id)
        for i, first in enumerate(with_authors):
            for second in with_authors[i + 1 :]:
                if authors[first.id] & authors[second.id]:
                    uf.union(first.id, second.id)

        for members in _clusters(uf, books_by_id):
            if len(members) >= 2:
                groups.append(_to_group(members, MatchReason.TITLE_AUTHOR, claimed, priority))
    return groups


# --- Directory ---


def directory_key(book: BookRecord) -> str | None:
    """Library root plus sub-directory of the book's primary file."""
    if book.library_path_id is None:
        return None
    primary = book.primary_file
    if primary is None or not primary.file_sub_path or not primary.file_sub_path.strip():
        return None
    return f"{book.library_path_id}:{primary.file_sub_path}"


def match_by_directory(
    books: Iterable[BookRecord],
    claimed: ClaimedIds,
    priority: Sequence[BookFileType],
) -> list[DuplicateGroup]:
    """Group books whose primary files sit in the same directory of the same root."""
    buckets = _bucket((directory_key(book), book) for book in _unclaimed(books, claimed))
    return _build_groups(buckets, MatchReason.DIRECTORY, claimed, priority)


# --- Filename ---


def filename_key(book: BookRecord) -> str | None:
    """Normalized base name of the book's primary file."""
    primary = book.primary_file
    if primary is None:
        return None
    return normalize_filename(primary.file_name) or None


def match_by_filename(
    books: Iterable[BookRecord],
    claimed: ClaimedIds,
    priority: Sequence[BookFileType],
) -> list[DuplicateGroup]:
    """Group books whose primary files share a normalized base name."""
    buckets = _bucket((filename_key(book), book) for book in _unclaimed(books, claimed))
    return _build_groups(buckets, MatchReason.FILENAME, claimed, priority)
