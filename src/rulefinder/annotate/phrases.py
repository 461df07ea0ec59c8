"""Annotate prose with registered rulebook phrases.

The registry compiles every phrase into a single flashtext keyword trie once;
each annotation call is then one linear scan of the text. Phrases match
case-insensitively and only on word boundaries.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

from flashtext import KeywordProcessor

from rulefinder.models import PhraseRule, PhraseSpan, TextSegment
from rulefinder.utils.text import fold_case

LOGGER = logging.getLogger(__name__)


class PhraseRegistry:
    """Immutable set of phrase rules compiled for scanning."""

    def __init__(self, rules: Iterable[PhraseRule] = ()) -> None:
        self.rules = tuple(rules)
        # Folding is done by us so span offsets always index the original text.
        self._processor = KeywordProcessor(case_sensitive=True)
        for rule in self.rules:
            for phrase in rule.phrases:
                key = fold_case(phrase.strip())
                if not key:
                    continue
                if key in self._processor:
                    owner = self._processor.get_keyword(key)
                    if owner != rule.id:
                        LOGGER.debug("Phrase %r already maps to %r, ignoring %r", phrase, owner, rule.id)
                    continue
                self._processor.add_keyword(key, rule.id)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "PhraseRegistry":
        """Build from a ``{phrase: id}`` map, grouping phrases by id."""
        grouped: Dict[str, List[str]] = {}
        for phrase, rule_id in mapping.items():
            grouped.setdefault(rule_id, []).append(phrase)
        return cls(PhraseRule(id=rule_id, phrases=tuple(phrases)) for rule_id, phrases in grouped.items())

    @classmethod
    def from_config(cls, rows: Iterable[Mapping[str, Any]]) -> "PhraseRegistry":
        """Build from ``[{id, phrases}]`` rows; rows without an id are skipped."""
        return cls(parse_phrase_rules(rows))

    def __len__(self) -> int:
        return len(self._processor)

    def candidates(self, text: str) -> List[PhraseSpan]:
        """Scan ``text`` once, left to right, returning the spans flashtext keeps.

        flashtext takes the longest phrase at a word start and resumes after
        it, so these spans are already non-overlapping and ordered. Shorter
        phrases nested inside an accepted span are never reported.
        """
        if not text or not len(self):
            return []
        hits = self._processor.extract_keywords(fold_case(text), span_info=True)
        return [
            PhraseSpan(phrase=text[start:end], tooltip_id=rule_id, start_index=start, end_index=end)
            for rule_id, start, end in hits
        ]


def parse_phrase_rules(rows: Iterable[Mapping[str, Any]]) -> List[PhraseRule]:
    rules: List[PhraseRule] = []
    for row in rows:
        if not isinstance(row, Mapping) or not row.get("id"):
            continue
        phrases = row.get("phrases") or ()
        if isinstance(phrases, str):
            phrases = (phrases,)
        rules.append(
            PhraseRule(id=str(row["id"]), phrases=tuple(str(phrase) for phrase in phrases))
        )
    return rules


def select_spans(candidates: Sequence[PhraseSpan]) -> List[PhraseSpan]:
    """Keep non-overlapping spans, preferring earlier then longer ones."""
    ordered = sorted(candidates, key=lambda span: (span.start_index, -span.end_index))
    accepted: List[PhraseSpan] = []
    for candidate in ordered:
        if not any(candidate.overlaps(kept) for kept in accepted):
            accepted.append(candidate)
    return accepted


def annotate(
    text: str, registry: Union[PhraseRegistry, Iterable[PhraseRule]]
) -> List[PhraseSpan]:
    """Return ordered, non-overlapping phrase spans found in ``text``."""
    if not isinstance(registry, PhraseRegistry):
        registry = PhraseRegistry(registry)
    return select_spans(registry.candidates(text))


def splice(text: str, spans: Sequence[PhraseSpan]) -> List[TextSegment]:
    """Split ``text`` into plain and annotated segments.

    Joining the segment texts reproduces ``text`` exactly.
    """
    segments: List[TextSegment] = []
    last_index = 0
    for span in spans:
        if span.start_index > last_index:
            segments.append(TextSegment(text[last_index : span.start_index]))
        segments.append(TextSegment(text[span.start_index : span.end_index], span.tooltip_id))
        last_index = span.end_index
    if last_index < len(text):
        segments.append(TextSegment(text[last_index:]))
    return segments
