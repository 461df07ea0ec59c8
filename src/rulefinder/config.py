"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

DEFAULT_FIELD_WEIGHTS = {"short_title": 0.5, "title": 0.3, "content": 0.2}


def _get_default_content_dir() -> Path:
    """Prefer a local ``content/`` directory, else the user's Documents folder."""
    local_dir = Path("content")
    if local_dir.exists():
        return local_dir
    return Path.home() / "Documents" / "RuleFinder" / "content"


@dataclass(slots=True)
class AppConfig:
    content_dir: Path | None = None
    threshold: float = 0.4
    field_weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_FIELD_WEIGHTS))
    min_match_chars: int = 2
    max_results: int = 20
    tooltip_max_chars: int = 200

    def __post_init__(self) -> None:
        if self.content_dir is None:
            self.content_dir = _get_default_content_dir()
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {self.threshold}")
        unknown = set(self.field_weights) - set(DEFAULT_FIELD_WEIGHTS)
        if unknown:
            raise ValueError(f"Unknown search fields: {', '.join(sorted(unknown))}")
        if any(weight < 0 for weight in self.field_weights.values()):
            raise ValueError("field weights must be non-negative")

    def resolve_content_dir(self, base_dir: Path | None = None) -> Path:
        if self.content_dir is None:
            self.content_dir = _get_default_content_dir()
        if Path(self.content_dir).is_absolute() or base_dir is None:
            return Path(self.content_dir)
        return base_dir / self.content_dir
