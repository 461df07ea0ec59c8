"""Tests for core data models."""

from __future__ import annotations

import pytest

from rulefinder.models import PhraseSpan, ReferenceTable, RuleNode, SearchRecord


class TestRuleNode:
    """Test RuleNode construction from loosely shaped data."""

    def test_from_mapping_full(self) -> None:
        """Should copy every field and build children recursively."""
        node = RuleNode.from_mapping(
            {
                "id": "conditions",
                "title": "Conditions",
                "summary": "Status effects.",
                "body": ["First.", "Second."],
                "children": [{"id": "stunned", "title": "Stunned", "body": "Lose actions."}],
            }
        )

        assert node.id == "conditions"
        assert node.summary == "Status effects."
        assert node.body == ("First.", "Second.")
        assert len(node.children) == 1
        assert node.children[0].body == "Lose actions."

    def test_from_mapping_missing_fields(self) -> None:
        """Missing optional fields default to empty values."""
        node = RuleNode.from_mapping({"id": "bare"})

        assert node.title == ""
        assert node.summary == ""
        assert node.body == ""
        assert node.children == ()
        assert node.paragraphs == ()

    def test_from_mapping_skips_invalid_children(self) -> None:
        """Non-mapping children are ignored."""
        node = RuleNode.from_mapping({"id": "x", "children": ["oops", {"id": "y"}, None]})

        assert [child.id for child in node.children] == ["y"]

    def test_from_mapping_keeps_null_paragraph_positions(self) -> None:
        """A null paragraph becomes an empty one instead of disappearing."""
        node = RuleNode.from_mapping({"id": "x", "body": [None, "Second."]})

        assert node.paragraphs == ("", "Second.")

    def test_paragraphs_from_string_body(self) -> None:
        """A string body is a single paragraph."""
        node = RuleNode(id="x", body="Only paragraph.")

        assert node.paragraphs == ("Only paragraph.",)

    def test_nodes_are_immutable(self) -> None:
        """Nodes cannot be mutated in place."""
        node = RuleNode(id="x")

        with pytest.raises(AttributeError):
            node.title = "changed"  # type: ignore[misc]


class TestSearchRecord:
    """Test SearchRecord derived properties."""

    def test_depth_follows_parent_path(self) -> None:
        """Depth always equals the parent path length."""
        record = SearchRecord(
            id="a", title="A > B > C", short_title="C", content="", kind="section",
            parent_path=("A", "B"),
        )

        assert record.depth == 2

    def test_is_header(self) -> None:
        """Sections pointing at themselves are table headers."""
        header = SearchRecord(
            id="weapons--table", title="Weapons", short_title="Weapons", content="",
            kind="section", parent_section_id="weapons--table",
        )
        outline = SearchRecord(
            id="combat", title="Combat", short_title="Combat", content="", kind="section",
        )

        assert header.is_header
        assert not outline.is_header

    def test_preview_truncates(self) -> None:
        """Preview keeps 160 characters and appends an ellipsis."""
        record = SearchRecord(id="a", title="A", short_title="A", content="x" * 200, kind="rule")

        assert record.preview() == "x" * 160 + "…"
        assert record.preview(limit=500) == "x" * 200


class TestPhraseSpan:
    """Test span overlap detection."""

    def test_overlapping(self) -> None:
        a = PhraseSpan("Character Classes", "classes", 4, 21)
        b = PhraseSpan("Classes", "classes-short", 14, 21)

        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_adjacent_spans_do_not_overlap(self) -> None:
        a = PhraseSpan("Prone", "prone", 0, 5)
        b = PhraseSpan("Stunned", "stunned", 5, 12)

        assert not a.overlaps(b)


class TestReferenceTable:
    """Test ReferenceTable helpers."""

    def test_group_placeholder(self) -> None:
        """Grouped rows without a name only announce their group."""
        table = ReferenceTable(
            kind="trait", title="Trait Group", row_label="Trait", name_field="name",
            group_field="groupId",
        )

        assert table.grouped
        assert table.is_group_placeholder({"groupId": "combat"})
        assert not table.is_group_placeholder({"groupId": "combat", "name": "Brave"})

    def test_ungrouped_table_has_no_placeholders(self) -> None:
        table = ReferenceTable(kind="weapons", title="Weapons", row_label="Weapon", name_field="weapon")

        assert not table.grouped
        assert not table.is_group_placeholder({})
