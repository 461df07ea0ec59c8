"""Flatten the rule tree and reference tables into search records.

Synthesized table ids use ``--`` as a structural separator, which slugs never
contain, so headers and rows cannot collide:

* ungrouped header ``weapons--table``, rows ``weapons-<name>``
* grouped header ``trait--<group>``, rows ``trait-<group>--<name>``

Table kinds must be distinct and none may be a hyphenated prefix of another.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Tuple

from rulefinder.models import ReferenceTable, RuleNode, SearchRecord
from rulefinder.utils.text import flatten_value, normalize_whitespace, slugify

LOGGER = logging.getLogger(__name__)

PATH_SEPARATOR = " > "
UNGROUPED_KEY = "ungrouped"
ID_SEPARATOR = "--"


def iter_nodes(sections: Sequence[RuleNode]) -> Iterator[RuleNode]:
    """Depth-first, pre-order walk over every node of the rule tree."""
    for node in sections:
        yield node
        yield from iter_nodes(node.children)


def find_duplicate_ids(records: Sequence[SearchRecord]) -> Dict[str, int]:
    """Return ``{id: occurrences}`` for every id used more than once."""
    counts = Counter(record.id for record in records)
    return {record_id: count for record_id, count in counts.items() if count > 1}


@dataclass(slots=True)
class _IndexBuilder:
    records: List[SearchRecord] = field(default_factory=list)
    seen: set = field(default_factory=set)

    def add(self, record: SearchRecord) -> None:
        if record.id in self.seen:
            LOGGER.warning(
                "Duplicate search record id %r (%s); content authors must keep names unique",
                record.id,
                record.title,
            )
        self.seen.add(record.id)
        self.records.append(record)


def flatten(
    sections: Sequence[RuleNode], tables: Sequence[ReferenceTable] = ()
) -> List[SearchRecord]:
    """Convert the rule tree and reference tables into one ordered record list."""
    builder = _IndexBuilder()
    _flatten_sections(builder, sections, parent_id=None, parent_path=())
    for table in tables:
        if table.grouped:
            _flatten_grouped_table(builder, table)
        else:
            _flatten_table(builder, table)
    LOGGER.debug(
        "Flattened %d sections and %d tables into %d records",
        len(sections),
        len(tables),
        len(builder.records),
    )
    return builder.records


def _flatten_sections(
    builder: _IndexBuilder,
    nodes: Sequence[RuleNode],
    *,
    parent_id: str | None,
    parent_path: Tuple[str, ...],
) -> None:
    for node in nodes:
        builder.add(
            SearchRecord(
                id=node.id,
                title=PATH_SEPARATOR.join(parent_path + (node.title,)),
                short_title=node.title,
                content=normalize_whitespace((node.summary, *node.paragraphs)),
                kind="section",
                parent_section_id=parent_id,
                parent_path=parent_path,
            )
        )
        if node.children:
            _flatten_sections(
                builder,
                node.children,
                parent_id=node.id,
                parent_path=parent_path + (node.title,),
            )


def _row_name(table: ReferenceTable, row: Mapping[str, Any]) -> str:
    return flatten_value(row.get(table.name_field)).strip()


def _row_content(fields: Sequence[str], row: Mapping[str, Any]) -> str:
    return normalize_whitespace(flatten_value(row.get(name)) for name in fields)


def _row_slug(name: str, position: int) -> str:
    return slugify(name) or str(position)


def _flatten_table(builder: _IndexBuilder, table: ReferenceTable) -> None:
    header_id = f"{table.kind}{ID_SEPARATOR}table"
    builder.add(
        SearchRecord(
            id=header_id,
            title=table.title,
            short_title=table.title,
            content=table.description,
            kind="section",
            parent_section_id=header_id,
            parent_path=table.parent_path,
        )
    )
    for position, row in enumerate(table.rows):
        name = _row_name(table, row)
        builder.add(
            SearchRecord(
                id=f"{table.kind}-{_row_slug(name, position)}",
                title=f"{table.row_label}: {name}",
                short_title=name,
                content=_row_content(table.content_fields, row),
                kind="rule",
                parent_section_id=header_id,
                parent_path=table.parent_path,
            )
        )


def _group_key(table: ReferenceTable, row: Mapping[str, Any]) -> str:
    return flatten_value(row.get(table.group_field)).strip()


def _group_rows(table: ReferenceTable) -> Dict[str, List[Mapping[str, Any]]]:
    """Bucket rows by group slug so keys differing only in case or punctuation merge."""
    groups: Dict[str, List[Mapping[str, Any]]] = {}
    for row in table.rows:
        slug = slugify(_group_key(table, row)) or UNGROUPED_KEY
        groups.setdefault(slug, []).append(row)
    return groups


def _flatten_grouped_table(builder: _IndexBuilder, table: ReferenceTable) -> None:
    for group_slug, rows in _group_rows(table).items():
        first = rows[0]
        group_title = ""
        if table.group_title_field:
            group_title = flatten_value(first.get(table.group_title_field)).strip()
        group_title = group_title or _group_key(table, first) or UNGROUPED_KEY
        header_id = f"{table.kind}{ID_SEPARATOR}{group_slug}"
        builder.add(
            SearchRecord(
                id=header_id,
                title=f"{table.title}: {group_title}",
                short_title=group_title,
                content=_row_content(table.group_content_fields, first) or table.description,
                kind="section",
                parent_section_id=header_id,
                parent_path=table.parent_path,
            )
        )
        row_path = table.parent_path + (group_title,)
        for position, row in enumerate(rows):
            if table.is_group_placeholder(row):
                continue
            name = _row_name(table, row)
            builder.add(
                SearchRecord(
                    id=f"{table.kind}-{group_slug}{ID_SEPARATOR}{_row_slug(name, position)}",
                    title=f"{table.row_label}: {name} ({group_title})",
                    short_title=name,
                    content=_row_content(table.content_fields, row),
                    kind="rule",
                    parent_section_id=header_id,
                    parent_path=row_path,
                )
            )
