"""Resolve tooltip text for annotated phrases from the rule tree."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from rulefinder.index.flattener import iter_nodes
from rulefinder.models import RuleNode
from rulefinder.utils.text import truncate

TOOLTIP_MAX_CHARS = 200


def build_node_map(sections: Sequence[RuleNode]) -> Dict[str, RuleNode]:
    """Map node ids to nodes; the first node in depth-first order wins."""
    nodes: Dict[str, RuleNode] = {}
    for node in iter_nodes(sections):
        nodes.setdefault(node.id, node)
    return nodes


class TooltipResolver:
    """Looks up explanatory text by tooltip id.

    Priority: the node summary, then the first body paragraph (truncated for
    display), then the node title. Unknown ids resolve to ``None``.
    """

    def __init__(self, sections: Sequence[RuleNode], *, max_chars: int = TOOLTIP_MAX_CHARS) -> None:
        self.max_chars = max_chars
        self._nodes = build_node_map(sections)

    def __contains__(self, tooltip_id: str) -> bool:
        return tooltip_id in self._nodes

    def resolve(self, tooltip_id: str) -> Optional[str]:
        node = self._nodes.get(tooltip_id)
        if node is None:
            return None
        if node.summary:
            return node.summary
        paragraphs = node.paragraphs
        if paragraphs and paragraphs[0]:
            return truncate(paragraphs[0], self.max_chars)
        return node.title or None


def resolve(tooltip_id: str, sections: Sequence[RuleNode]) -> Optional[str]:
    """One-shot lookup; keep a :class:`TooltipResolver` around for repeated calls."""
    return TooltipResolver(sections).resolve(tooltip_id)
