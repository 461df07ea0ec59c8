"""Tests for text utility functions."""

from __future__ import annotations

from rulefinder.utils.text import flatten_value, fold_case, normalize_whitespace, slugify, truncate


class TestSlugify:
    """Test slugify function."""

    def test_simple_name(self) -> None:
        assert slugify("Great Sword") == "great-sword"

    def test_punctuation_collapses(self) -> None:
        """Runs of punctuation become one hyphen and edges are trimmed."""
        assert slugify("  Push -- for Success!? ") == "push-for-success"

    def test_accents_are_stripped(self) -> None:
        assert slugify("Élan Vital") == "elan-vital"

    def test_empty(self) -> None:
        assert slugify("") == ""
        assert slugify("!!!") == ""

    def test_stable(self) -> None:
        """Same name always yields the same slug."""
        assert slugify("Shield Bash") == slugify("Shield Bash")


class TestNormalizeWhitespace:
    """Test normalize_whitespace function."""

    def test_joins_stripped_parts(self) -> None:
        assert normalize_whitespace(["  One ", "Two  "]) == "One Two"

    def test_skips_empty_parts(self) -> None:
        assert normalize_whitespace(["One", "", "   ", "Two"]) == "One Two"

    def test_all_empty(self) -> None:
        assert normalize_whitespace(["", " ", "\n"]) == ""


class TestFlattenValue:
    """Test flatten_value function."""

    def test_none(self) -> None:
        assert flatten_value(None) == ""

    def test_scalars(self) -> None:
        assert flatten_value("text") == "text"
        assert flatten_value(2) == "2"

    def test_list_of_paragraphs(self) -> None:
        assert flatten_value(["First.", "Second."]) == "First. Second."

    def test_mapping_paragraph(self) -> None:
        """Mappings become 'key: value' pairs."""
        assert flatten_value({"Range": "5ft", "Target": "Single"}) == "Range: 5ft; Target: Single"

    def test_nested(self) -> None:
        value = ["Intro.", {"Cost": 1}, None]

        assert flatten_value(value) == "Intro. Cost: 1"


class TestFoldCase:
    """Test fold_case function."""

    def test_lowercases(self) -> None:
        assert fold_case("Stunned PRONE") == "stunned prone"

    def test_preserves_length(self) -> None:
        """Characters that expand when lowercased are left alone."""
        text = "İ Stunned"

        folded = fold_case(text)

        assert len(folded) == len(text)
        assert folded[2:] == "stunned"


class TestTruncate:
    """Test truncate function."""

    def test_short_text_unchanged(self) -> None:
        assert truncate("short", 10) == "short"

    def test_limit_is_inclusive(self) -> None:
        text = "x" * 200

        assert truncate(text, 200) == text

    def test_default_keep_fits_marker(self) -> None:
        result = truncate("x" * 201, 200)

        assert result == "x" * 197 + "..."
        assert len(result) == 200

    def test_custom_keep_and_marker(self) -> None:
        assert truncate("abcdef", 3, keep=3, marker="…") == "abc…"
