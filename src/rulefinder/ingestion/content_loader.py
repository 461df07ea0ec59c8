"""Rulebook YAML loading.

Reads the rule tree, the reference tables and the tooltip phrase list from a
content directory. Missing or broken files are logged and skipped so a partial
rulebook still loads.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import yaml

from rulefinder.annotate.phrases import parse_phrase_rules
from rulefinder.models import ContentBundle, ReferenceTable, RuleNode
from rulefinder.utils.files import find_content_file

LOGGER = logging.getLogger(__name__)

MAIN_RULES = "main_rules"
CLASS_ABILITIES = "class_abilities"
ARMOUR = "armour"
WEAPONS = "weapons"
TRAITS = "traits"
CORE_ABILITIES = "core_abilities"
TOOLTIPS = "tooltips"
CONTENT_FILES = (MAIN_RULES, CLASS_ABILITIES, ARMOUR, WEAPONS, TRAITS, CORE_ABILITIES, TOOLTIPS)

ARMOUR_TABLE = ReferenceTable(
    kind="armour",
    title="Armour Types",
    row_label="Armour",
    name_field="type",
    content_fields=("armour", "movement", "notes"),
    description="Armour equipment and protection",
    parent_path=("Equipment", "Armour"),
)
WEAPONS_TABLE = ReferenceTable(
    kind="weapons",
    title="Weapons",
    row_label="Weapon",
    name_field="weapon",
    content_fields=("notes", "modifier", "range"),
    description="Weapon equipment and combat statistics",
    parent_path=("Equipment", "Weapons"),
)
TRAITS_TABLE = ReferenceTable(
    kind="trait",
    title="Trait Group",
    row_label="Trait",
    name_field="name",
    content_fields=("desc", "type", "usage"),
    parent_path=("Creating a Character", "Traits"),
    group_field="groupId",
    group_title_field="groupName",
    group_content_fields=("groupDescription",),
)
CORE_ABILITIES_TABLE = ReferenceTable(
    kind="core-abilities",
    title="Core Abilities",
    row_label="Core Ability",
    name_field="name",
    content_fields=("description", "target", "apCost"),
    description="Core combat abilities available to all characters",
    parent_path=("Combat", "Abilities"),
)
CLASS_ABILITIES_TABLE = ReferenceTable(
    kind="class",
    title="Class",
    row_label="Class Ability",
    name_field="name",
    content_fields=("description", "target", "apCost"),
    parent_path=("Classes",),
    group_field="classId",
    group_title_field="className",
    group_content_fields=("classType", "classAttributes", "classSummary"),
)


def load_yaml(path: Path) -> Any:
    """Parse a YAML file, returning ``None`` when it cannot be read."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        LOGGER.error("Failed to load %s: %s", path, exc)
        return None


def read_document(content_dir: Path, stem: str) -> Mapping[str, Any]:
    path = find_content_file(content_dir, stem)
    if path is None:
        LOGGER.warning("Content file %s.yaml not found in %s", stem, content_dir)
        return {}
    data = load_yaml(path)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        LOGGER.warning("Ignoring %s: expected a mapping at the top level", path)
        return {}
    return data


def _entries(document: Mapping[str, Any], key: str) -> List[Any]:
    value = document.get(key)
    return list(value) if isinstance(value, list) else []


def _mappings(items: List[Any]) -> List[Mapping[str, Any]]:
    return [item for item in items if isinstance(item, Mapping)]


def build_trait_rows(trait_groups: List[Mapping[str, Any]]) -> Tuple[Mapping[str, Any], ...]:
    rows: List[Mapping[str, Any]] = []
    for group in trait_groups:
        base = {
            "groupId": group.get("id") or group.get("name") or "",
            "groupName": group.get("name") or "",
            "groupDescription": group.get("description") or "",
        }
        traits = _mappings(_entries(group, "traits"))
        if not traits:
            rows.append(base)
        rows.extend({**base, "name": "", **trait} for trait in traits)
    return tuple(rows)


def build_class_rows(classes: Mapping[str, Any]) -> Tuple[Mapping[str, Any], ...]:
    rows: List[Mapping[str, Any]] = []
    for class_id, info in classes.items():
        if not isinstance(info, Mapping):
            continue
        base = {
            "classId": str(class_id),
            "className": info.get("name") or str(class_id),
            "classType": info.get("type") or "",
            "classAttributes": info.get("attributes") or "",
            "classSummary": info.get("summary") or "",
        }
        abilities = _mappings(_entries(info, "abilities"))
        if not abilities:
            rows.append(base)
        rows.extend({**base, "name": "", **ability} for ability in abilities)
    return tuple(rows)


def _with_rows(table: ReferenceTable, rows: Tuple[Mapping[str, Any], ...]) -> ReferenceTable:
    return replace(table, rows=rows)


def load_content(content_dir: Path) -> ContentBundle:
    """Load every rulebook content file found in ``content_dir``."""
    content_dir = Path(content_dir)
    main_rules = read_document(content_dir, MAIN_RULES)
    class_abilities = read_document(content_dir, CLASS_ABILITIES)

    section_data = _mappings(_entries(main_rules, "sections")) + _mappings(
        _entries(class_abilities, "sections")
    )
    sections = tuple(RuleNode.from_mapping(data) for data in section_data)

    classes = class_abilities.get("classes")
    tables = (
        _with_rows(ARMOUR_TABLE, tuple(_mappings(_entries(read_document(content_dir, ARMOUR), "armour")))),
        _with_rows(WEAPONS_TABLE, tuple(_mappings(_entries(read_document(content_dir, WEAPONS), "weapons")))),
        _with_rows(
            TRAITS_TABLE,
            build_trait_rows(_mappings(_entries(read_document(content_dir, TRAITS), "trait_groups"))),
        ),
        _with_rows(
            CORE_ABILITIES_TABLE,
            tuple(_mappings(_entries(read_document(content_dir, CORE_ABILITIES), "core_abilities"))),
        ),
        _with_rows(
            CLASS_ABILITIES_TABLE,
            build_class_rows(classes) if isinstance(classes, Mapping) else (),
        ),
    )
    phrase_rules = tuple(parse_phrase_rules(_entries(read_document(content_dir, TOOLTIPS), "tooltips")))

    sources: Dict[str, int] = {"sections": len(sections), "phrase_rules": len(phrase_rules)}
    sources.update({table.kind: len(table.rows) for table in tables})
    LOGGER.info(
        "Loaded %d sections, %d table rows and %d phrase rules from %s",
        len(sections),
        sum(len(table.rows) for table in tables),
        len(phrase_rules),
        content_dir,
    )
    return ContentBundle(sections=sections, tables=tables, phrase_rules=phrase_rules, sources=sources)
