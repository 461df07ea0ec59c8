"""Search-box interface: fuzzy match, re-rank, cap."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from rulefinder.config import AppConfig
from rulefinder.index.matcher import FuzzyMatcher
from rulefinder.index.ranker import rank_with_scores
from rulefinder.models import SearchRecord


@dataclass(slots=True)
class SearchResult:
    record: SearchRecord
    score: float

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def title(self) -> str:
        return self.record.title


class Searcher:
    """High-level API to query the flattened rulebook index."""

    def __init__(self, records: Sequence[SearchRecord], config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self.matcher = FuzzyMatcher(
            records,
            threshold=self.config.threshold,
            weights=self.config.field_weights,
            min_match_chars=self.config.min_match_chars,
        )

    def search(self, query: str, *, top_k: int | None = None) -> List[SearchResult]:
        if top_k is None:
            top_k = self.config.max_results
        matches = self.matcher.match(query)
        ranked = rank_with_scores(query, matches)
        return [SearchResult(record=item.record, score=item.score) for item in ranked[: max(top_k, 0)]]
