"""Deterministic re-ranking of fuzzy matches.

Each adjustment multiplies the raw match quality by a factor <= 1 (lower
scores rank higher), so every rule can only move a record up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from rulefinder.index.matcher import Match
from rulefinder.models import SearchRecord

EXACT_SHORT_TITLE = 0.1
PREFIX_SHORT_TITLE = 0.3
SUBSTRING_SHORT_TITLE = 0.5
SUBSTRING_TITLE = 0.7
HEADER_SECTION = 0.6
OUTLINE_SECTION = 0.8
DEPTH_STEP = 0.05
MIN_DEPTH_FACTOR = 0.05
SHORT_TITLE_LENGTH = 30
SHORT_TITLE_FACTOR = 0.9


@dataclass(frozen=True, slots=True)
class RankedRecord:
    record: SearchRecord
    score: float


def relevance_score(query: str, match: Match) -> float:
    needle = query.strip().lower()
    record = match.record
    short_title = (record.short_title or record.title).lower()
    score = match.score

    if short_title == needle:
        score *= EXACT_SHORT_TITLE
    elif short_title.startswith(needle):
        score *= PREFIX_SHORT_TITLE
    elif needle in short_title:
        score *= SUBSTRING_SHORT_TITLE

    if needle in record.title.lower():
        score *= SUBSTRING_TITLE

    if record.kind == "section":
        score *= HEADER_SECTION if record.is_header else OUTLINE_SECTION
    elif record.depth > 0:
        score *= max(1 - record.depth * DEPTH_STEP, MIN_DEPTH_FACTOR)

    if len(record.short_title or record.title) < SHORT_TITLE_LENGTH:
        score *= SHORT_TITLE_FACTOR

    return score


def rank_with_scores(query: str, matches: Sequence[Match]) -> List[RankedRecord]:
    """Score and sort matches; ties keep the matcher's order."""
    if not query.strip():
        return []
    ranked = [RankedRecord(match.record, relevance_score(query, match)) for match in matches]
    ranked.sort(key=lambda item: item.score)
    return ranked


def rank(query: str, matches: Sequence[Match]) -> List[SearchRecord]:
    return [item.record for item in rank_with_scores(query, matches)]
