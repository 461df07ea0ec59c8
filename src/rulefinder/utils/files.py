"""Utility helpers for locating rulebook content files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Optional

CONTENT_SUFFIXES = (".yaml", ".yml")


def iter_content_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield YAML paths from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_content_paths(
                sorted(child for child in item.rglob("*") if child.is_file())
            )
        elif item.is_file() and item.suffix.lower() in CONTENT_SUFFIXES:
            yield item


def find_content_file(content_dir: Path, stem: str) -> Optional[Path]:
    """Return ``<stem>.yaml`` (or ``.yml``) inside ``content_dir`` if present."""
    for suffix in CONTENT_SUFFIXES:
        candidate = content_dir / f"{stem}{suffix}"
        if candidate.is_file():
            return candidate
    return None
