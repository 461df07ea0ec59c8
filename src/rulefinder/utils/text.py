"""Text helpers shared by the flattener, loader and tooltip resolver."""

from __future__ import annotations

import re
import unicodedata
from typing import Any, Iterable, Mapping

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Stable, lowercase, hyphenated slug for synthesized ids."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return _SLUG_STRIP.sub("-", normalized.lower()).strip("-")


def normalize_whitespace(parts: Iterable[str]) -> str:
    """Strip each part and join the non-empty ones with a single space."""
    return " ".join(part.strip() for part in parts if part and part.strip())


def flatten_value(value: Any) -> str:
    """Render a loosely typed content field as plain text.

    Lists are joined paragraph by paragraph and mappings become
    ``"key: value; key: value"``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return "; ".join(f"{key}: {flatten_value(item)}" for key, item in value.items())
    if isinstance(value, (list, tuple)):
        return normalize_whitespace(flatten_value(item) for item in value)
    return str(value)


def fold_case(text: str) -> str:
    """Lowercase ``text`` without changing its length.

    Characters whose lowercase form expands (e.g. ``"İ"``) are kept as-is so
    offsets into the folded text stay valid for the original.
    """
    return "".join(_fold_char(char) for char in text)


def _fold_char(char: str) -> str:
    lowered = char.lower()
    return lowered if len(lowered) == 1 else char


def truncate(text: str, max_chars: int, *, keep: int | None = None, marker: str = "...") -> str:
    """Cut ``text`` to ``keep`` characters plus ``marker`` once it exceeds ``max_chars``."""
    if len(text) <= max_chars:
        return text
    if keep is None:
        keep = max(max_chars - len(marker), 0)
    return text[:keep] + marker
