# ABOUTME: Unit tests for the record normalizer functions.
# ABOUTME: Covers ISBN-10 to ISBN-13 conversion, search keys, and filename keys.

import pytest

from bookdupes.metadata.normalizer import (
    isbn10_to_13,
    normalize_filename,
    normalize_for_search,
)


class TestIsbn10To13:
    """Tests for isbn10_to_13."""

    def test_known_conversion(self) -> None:
        """A well-known ISBN-10 converts to its published ISBN-13."""
        assert isbn10_to_13("0306406152") == "9780306406157"

    def test_ignores_hyphens_and_spaces(self) -> None:
        """Formatting characters are stripped before conversion."""
        assert isbn10_to_13("0-306-40615-2") == "9780306406157"
        assert isbn10_to_13("0 306 40615 2") == "9780306406157"

    def test_x_check_digit(self) -> None:
        """An X check digit is accepted, in either case."""
        assert isbn10_to_13("080442957X") == "9780804429573"
        assert isbn10_to_13("080442957x") == "9780804429573"

    def test_check_digit_not_validated(self) -> None:
        """A wrong ISBN-10 check digit still converts; the new one is recomputed."""
        assert isbn10_to_13("0306406153") == "9780306406157"

    @pytest.mark.parametrize(
        "value", [None, "", "12345", "03064061521", "03064X6152", "abcdefghij"]
    )
    def test_rejects_malformed(self, value: str | None) -> None:
        """Inputs not shaped like an ISBN-10 give None."""
        assert isbn10_to_13(value) is None


class TestNormalizeForSearch:
    """Tests for normalize_for_search."""

    def test_lowercases_and_collapses(self) -> None:
        """Case and whitespace runs do not matter."""
        assert normalize_for_search("  The   Name of\tthe ROSE ") == "the name of the rose"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_gives_empty(self, value: str | None) -> None:
        """Null or blank input gives the empty string."""
        assert normalize_for_search(value) == ""

    def test_keeps_punctuation(self) -> None:
        """Only case and whitespace are normalized."""
        assert normalize_for_search("Dune: Messiah") == "dune: messiah"


class TestNormalizeFilename:
    """Tests for normalize_filename."""

    def test_strips_extension_and_separators(self) -> None:
        """Extension is dropped and underscores/hyphens become spaces."""
        assert normalize_filename("The_Name-of_the-Rose.epub") == "the name of the rose"

    def test_strips_disallowed_characters(self) -> None:
        """Characters outside [a-z0-9 ] are removed."""
        assert normalize_filename("Dune (1965) [Ace]!.mobi") == "dune 1965 ace"

    def test_only_last_extension_removed(self) -> None:
        """Dots before the last one are treated as characters and stripped."""
        assert normalize_filename("vol.1.final.pdf") == "vol1final"

    def test_leading_dot_is_not_extension(self) -> None:
        """A dot at position zero is not an extension separator."""
        assert normalize_filename(".hidden") == "hidden"

    def test_no_extension(self) -> None:
        """Names without a dot are normalized whole."""
        assert normalize_filename("Neuromancer") == "neuromancer"

    @pytest.mark.parametrize("value", [None, "", "!!!.epub"])
    def test_blank_result(self, value: str | None) -> None:
        """Inputs with nothing comparable left give the empty string."""
        assert normalize_filename(value) == ""
