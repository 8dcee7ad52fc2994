# ABOUTME: Unit tests for the individual duplicate-matching signals.
# ABOUTME: Exercises each matcher's keying, skipping rules, and claimed-set handling.

from collections.abc import Callable

from bookdupes.core.matchers import (
    MatchReason,
    directory_key,
    external_id_tokens,
    filename_key,
    isbn_key,
    match_by_directory,
    match_by_external_id,
    match_by_filename,
    match_by_isbn,
    match_by_title_author,
)
from bookdupes.core.ranking import DEFAULT_FORMAT_PRIORITY
from bookdupes.db.mapping import BookRecord
from bookdupes.metadata.types import BookMetadata

MakeBook = Callable[..., BookRecord]
PRIORITY = DEFAULT_FORMAT_PRIORITY


class TestIsbnKey:
    """Tests for isbn_key."""

    def test_prefers_isbn13(self) -> None:
        """A stored ISBN-13 is used as-is."""
        meta = BookMetadata(isbn13="9780306406157", isbn10="0000000000")
        assert isbn_key(meta) == "9780306406157"

    def test_converts_isbn10(self) -> None:
        """Without an ISBN-13 the ISBN-10 is converted."""
        assert isbn_key(BookMetadata(isbn10="0306406152")) == "9780306406157"

    def test_trims(self) -> None:
        """Surrounding whitespace is trimmed."""
        assert isbn_key(BookMetadata(isbn13=" 9780306406157 ")) == "9780306406157"

    def test_missing_or_blank(self) -> None:
        """No metadata, no ISBN, or a blank ISBN gives no key."""
        assert isbn_key(None) is None
        assert isbn_key(BookMetadata()) is None
        assert isbn_key(BookMetadata(isbn13="   ")) is None
        assert isbn_key(BookMetadata(isbn10="bogus")) is None


class TestMatchByIsbn:
    """Tests for match_by_isbn."""

    def test_groups_equal_isbns(self, make_book: MakeBook) -> None:
        """Books sharing an ISBN form one group; others are left alone."""
        books = [
            make_book(1, isbn13="9780306406157"),
            make_book(2, isbn10="0-306-40615-2"),
            make_book(3, isbn13="9780441013593"),
        ]
        claimed: set[int] = set()
        groups = match_by_isbn(books, claimed, PRIORITY)

        assert len(groups) == 1
        assert groups[0].match_reason is MatchReason.ISBN
        assert sorted(groups[0].book_ids) == [1, 2]
        assert claimed == {1, 2}

    def test_skips_claimed(self, make_book: MakeBook) -> None:
        """Already-claimed books do not participate."""
        books = [make_book(1, isbn13="9780306406157"), make_book(2, isbn13="9780306406157")]
        assert match_by_isbn(books, {1}, PRIORITY) == []

    def test_null_metadata_skipped(self, make_book: MakeBook) -> None:
        """Books with no metadata never match on ISBN."""
        books = [make_book(1, no_metadata=True), make_book(2, no_metadata=True)]
        assert match_by_isbn(books, set(), PRIORITY) == []


class TestMatchByExternalId:
    """Tests for match_by_external_id."""

    def test_tokens_are_namespaced(self) -> None:
        """The same raw value under different providers gives different tokens."""
        meta = BookMetadata(goodreads_id="123", asin="123", google_id="  ")
        assert external_id_tokens(meta) == ["goodreads:123", "asin:123"]

    def test_transitive_grouping(self, make_book: MakeBook) -> None:
        """A-B via goodreads and B-C via asin make one group of three."""
        books = [
            make_book(1, goodreads_id="111"),
            make_book(2, goodreads_id="111", asin="B00X"),
            make_book(3, asin="B00X"),
            make_book(4, asin="B00Y"),
        ]
        groups = match_by_external_id(books, set(), PRIORITY)

        assert len(groups) == 1
        assert groups[0].match_reason is MatchReason.EXTERNAL_ID
        assert sorted(groups[0].book_ids) == [1, 2, 3]

    def test_cross_namespace_values_do_not_match(self, make_book: MakeBook) -> None:
        """goodreads:5 and hardcover:5 are unrelated ids."""
        books = [make_book(1, goodreads_id="5"), make_book(2, hardcover_id="5")]
        assert match_by_external_id(books, set(), PRIORITY) == []

    def test_claimed_book_cannot_bridge(self, make_book: MakeBook) -> None:
        """A claimed book is ignored, so it cannot link two others."""
        books = [
            make_book(1, goodreads_id="111"),
            make_book(2, goodreads_id="111", asin="B00X"),
            make_book(3, asin="B00X"),
        ]
        assert match_by_external_id(books, {2}, PRIORITY) == []


class TestMatchByTitleAuthor:
    """Tests for match_by_title_author."""

    def test_shared_author_matches(self, make_book: MakeBook) -> None:
        """Same normalized title and one common author is enough."""
        books = [
            make_book(1, "The Talisman", ["Stephen King", "Peter Straub"]),
            make_book(2, "  the talisman ", ["peter straub"]),
        ]
        groups = match_by_title_author(books, set(), PRIORITY)

        assert len(groups) == 1
        assert groups[0].match_reason is MatchReason.TITLE_AUTHOR
        assert sorted(groups[0].book_ids) == [1, 2]

    def test_disjoint_authors_do_not_match(self, make_book: MakeBook) -> None:
        """Identical titles by different authors stay apart."""
        books = [
            make_book(1, "Collected Poems", ["Sylvia Plath"]),
            make_book(2, "Collected Poems", ["W. H. Auden"]),
        ]
        assert match_by_title_author(books, set(), PRIORITY) == []

    def test_books_without_authors_never_match(self, make_book: MakeBook) -> None:
        """A title bucket with fewer than two authored books is discarded."""
        books = [
            make_book(1, "Dune", ["Frank Herbert"]),
            make_book(2, "Dune"),
            make_book(3, "Dune", [""]),
        ]
        assert match_by_title_author(books, set(), PRIORITY) == []

    def test_whitespace_only_authors_never_match(self, make_book: MakeBook) -> None:
        """Author names that normalize to blank are not shared keys."""
        books = [make_book(1, "T", [" "]), make_book(2, "T", ["  \t"])]
        assert match_by_title_author(books, set(), PRIORITY) == []

    def test_bucket_splits_into_clusters(self, make_book: MakeBook) -> None:
        """One title bucket can yield several groups by author overlap."""
        books = [
            make_book(1, "Poems", ["A"]),
            make_book(2, "Poems", ["B"]),
            make_book(3, "Poems", ["A"]),
            make_book(4, "Poems", ["B", "C"]),
            make_book(5, "Poems", ["D"]),
        ]
        groups = match_by_title_author(books, set(), PRIORITY)
        assert sorted(sorted(g.book_ids) for g in groups) == [[1, 3], [2, 4]]

    def test_blank_title_skipped(self, make_book: MakeBook) -> None:
        """Blank titles never form a bucket."""
        books = [make_book(1, "  ", ["A"]), make_book(2, None, ["A"])]
        assert match_by_title_author(books, set(), PRIORITY) == []


class TestMatchByDirectory:
    """Tests for match_by_directory."""

    def test_same_root_and_sub_path(self, make_book: MakeBook) -> None:
        """Books in one directory of one root form a group."""
        books = [
            make_book(1, sub_path="Herbert/Dune"),
            make_book(2, sub_path="Herbert/Dune"),
            make_book(3, sub_path="Herbert/Dune", library_path_id=2),
        ]
        groups = match_by_directory(books, set(), PRIORITY)

        assert len(groups) == 1
        assert groups[0].match_reason is MatchReason.DIRECTORY
        assert sorted(groups[0].book_ids) == [1, 2]

    def test_root_directory_and_missing_root_skipped(self, make_book: MakeBook) -> None:
        """Books at a root itself or without a root have no directory key."""
        at_root = make_book(1, sub_path="")
        no_root = make_book(2, sub_path="x", library_path_id=None)
        assert directory_key(at_root) is None
        assert directory_key(no_root) is None
        assert match_by_directory([at_root, make_book(3, sub_path="")], set(), PRIORITY) == []

    def test_no_primary_file_skipped(self, make_book: MakeBook) -> None:
        """A book with no primary-format files has no directory key."""
        book = make_book(1, sub_path="x", formats=())
        assert directory_key(book) is None


class TestMatchByFilename:
    """Tests for match_by_filename."""

    def test_normalized_names_match(self, make_book: MakeBook) -> None:
        """File names equal after normalization form a group."""
        books = [
            make_book(1, stem="The_Hobbit", sub_path="a"),
            make_book(2, stem="the-hobbit", sub_path="b"),
            make_book(3, stem="The Hobbit!", sub_path="c"),
        ]
        groups = match_by_filename(books, set(), PRIORITY)

        assert len(groups) == 1
        assert groups[0].match_reason is MatchReason.FILENAME
        assert sorted(groups[0].book_ids) == [1, 2, 3]

    def test_key_uses_primary_file(self, make_book: MakeBook) -> None:
        """The key comes from the first primary-format file."""
        assert filename_key(make_book(1, stem="Dune_Messiah")) == "dune messiah"
        assert filename_key(make_book(2, formats=())) is None
