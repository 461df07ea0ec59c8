"""Approximate multi-field matching over the flattened search index.

Every record field is compared against the query with rapidfuzz's
``partial_ratio`` so a hit anywhere in a field scores the same as a hit at its
start. Fields shorter than the query are scaled by the share of the query they
can cover, so a short name inside a long query is not an exact hit. Field similarities are turned into dissimilarities (0 = exact) and
combined the way Fuse-style engines do: each field within the threshold
contributes ``dissimilarity ** weight`` to a product, fields outside the
threshold are ignored, and records without any matching field are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence

import numpy as np
from rapidfuzz import fuzz, process, utils

from rulefinder.config import DEFAULT_FIELD_WEIGHTS
from rulefinder.models import SearchRecord

LOGGER = logging.getLogger(__name__)

SEARCH_FIELDS = ("short_title", "title", "content")
# Exact hits still need a non-zero factor so the other fields keep their say.
EPSILON = float(np.finfo(np.float64).eps)


@dataclass(frozen=True, slots=True)
class Match:
    """Matched record with its raw quality (lower is better, 0 = exact)."""

    record: SearchRecord
    score: float
    field_scores: Dict[str, float]


class FuzzyMatcher:
    """Matches queries against a fixed, pre-processed record index."""

    def __init__(
        self,
        records: Sequence[SearchRecord],
        *,
        threshold: float = 0.4,
        weights: Mapping[str, float] | None = None,
        min_match_chars: int = 2,
    ) -> None:
        self.records = tuple(records)
        self.threshold = threshold
        self.min_match_chars = min_match_chars
        weights = dict(DEFAULT_FIELD_WEIGHTS if weights is None else weights)
        self._weights = np.array([weights.get(name, 0.0) for name in SEARCH_FIELDS])[:, None]
        self._choices = {
            name: [utils.default_process(getattr(record, name)) for record in self.records]
            for name in SEARCH_FIELDS
        }
        self._lengths = np.array(
            [[len(choice) for choice in self._choices[name]] for name in SEARCH_FIELDS],
            dtype=np.float64,
        ).reshape(len(SEARCH_FIELDS), len(self.records))

    def match(self, query: str) -> List[Match]:
        """Return all records approximately matching ``query``, best first.

        Ties keep index order.
        """
        needle = utils.default_process(query or "")
        if not needle or len(needle) < self.min_match_chars or not self.records:
            return []

        similarity = np.vstack(
            [
                process.cdist(
                    [needle], self._choices[name], scorer=fuzz.partial_ratio, dtype=np.float64
                )[0]
                for name in SEARCH_FIELDS
            ]
        )
        # partial_ratio aligns the shorter string inside the longer one; a field
        # shorter than the query only covers that fraction of it.
        similarity *= np.minimum(self._lengths / len(needle), 1.0)
        dissimilarity = 1.0 - similarity / 100.0
        matched = dissimilarity <= self.threshold
        factors = np.where(
            matched, np.power(np.maximum(dissimilarity, EPSILON), self._weights), 1.0
        )
        scores = factors.prod(axis=0)

        hits = np.flatnonzero(matched.any(axis=0))
        order = hits[np.argsort(scores[hits], kind="stable")]
        LOGGER.debug("Query %r matched %d of %d records", query, len(order), len(self.records))

        return [
            Match(
                record=self.records[idx],
                score=float(scores[idx]),
                field_scores={
                    name: float(dissimilarity[row, idx])
                    for row, name in enumerate(SEARCH_FIELDS)
                    if matched[row, idx]
                },
            )
            for idx in order
        ]


def match(query: str, index: Sequence[SearchRecord], **options) -> List[Match]:
    """One-shot helper; build a :class:`FuzzyMatcher` once for repeated queries."""
    return FuzzyMatcher(index, **options).match(query)
