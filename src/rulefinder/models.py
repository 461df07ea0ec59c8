"""Core RuleFinder data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

from rulefinder.utils.text import truncate

RecordKind = Literal["section", "rule"]


@dataclass(frozen=True, slots=True)
class RuleNode:
    """One node of the hierarchical rule tree."""

    id: str
    title: str = ""
    summary: str = ""
    body: str | Tuple[str, ...] = ""
    children: Tuple["RuleNode", ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RuleNode":
        """Build a node (and its subtree) from a loosely shaped mapping.

        Missing optional fields default to empty values.
        """
        body = data.get("body") or ""
        if isinstance(body, (list, tuple)):
            # Null paragraphs keep their position so the first paragraph stays first.
            body = tuple("" if paragraph is None else str(paragraph) for paragraph in body)
        else:
            body = str(body)
        children = data.get("children") or ()
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            summary=str(data.get("summary") or ""),
            body=body,
            children=tuple(
                cls.from_mapping(child) for child in children if isinstance(child, Mapping)
            ),
        )

    @property
    def paragraphs(self) -> Tuple[str, ...]:
        if isinstance(self.body, tuple):
            return self.body
        return (self.body,) if self.body else ()


@dataclass(frozen=True, slots=True)
class ReferenceTable:
    """Flat reference table (weapons, armour, traits, abilities).

    Grouped tables carry the group key and group title on every row under
    ``group_field`` and ``group_title_field``.
    """

    kind: str
    title: str
    row_label: str
    name_field: str
    rows: Tuple[Mapping[str, Any], ...] = ()
    content_fields: Tuple[str, ...] = ()
    description: str = ""
    parent_path: Tuple[str, ...] = ()
    group_field: Optional[str] = None
    group_title_field: Optional[str] = None
    group_content_fields: Tuple[str, ...] = ()

    @property
    def grouped(self) -> bool:
        return self.group_field is not None

    def is_group_placeholder(self, row: Mapping[str, Any]) -> bool:
        """Rows without a name field only announce an (empty) group."""
        return self.grouped and self.name_field not in row


@dataclass(frozen=True, slots=True)
class SearchRecord:
    """One searchable unit of content."""

    id: str
    title: str
    short_title: str
    content: str
    kind: RecordKind
    parent_section_id: Optional[str] = None
    parent_path: Tuple[str, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.parent_path)

    @property
    def is_header(self) -> bool:
        """True for synthetic table and group headers."""
        return self.kind == "section" and self.parent_section_id == self.id

    def preview(self, limit: int = 160) -> str:
        return truncate(self.content, limit, keep=limit, marker="…")


@dataclass(frozen=True, slots=True)
class PhraseRule:
    """Canonical annotation target plus its literal surface forms."""

    id: str
    phrases: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PhraseSpan:
    phrase: str
    tooltip_id: str
    start_index: int
    end_index: int

    def overlaps(self, other: "PhraseSpan") -> bool:
        return self.start_index < other.end_index and self.end_index > other.start_index


@dataclass(frozen=True, slots=True)
class TextSegment:
    """Piece of rendered text, annotated when ``tooltip_id`` is set."""

    text: str
    tooltip_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ContentBundle:
    """Everything loaded from the rulebook content files."""

    sections: Tuple[RuleNode, ...] = ()
    tables: Tuple[ReferenceTable, ...] = ()
    phrase_rules: Tuple[PhraseRule, ...] = ()
    sources: Dict[str, int] = field(default_factory=dict)
