from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .catalog import KNOWLEDGE_BASE
from .text import normalize_text
from .types import CATEGORIES, KnowledgeEntry


@dataclass(frozen=True)
class ScoreWeights:
    tag: float = 2.0
    title: float = 1.5
    category: float = 1.0

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "ScoreWeights":
        cfg = config or {}
        return cls(
            tag=float(cfg.get("tag", cls.tag)),
            title=float(cfg.get("title", cls.title)),
            category=float(cfg.get("category", cls.category)),
        )


DEFAULT_WEIGHTS = ScoreWeights()


def score_entry(entry: KnowledgeEntry, normalized_query: str, weights: ScoreWeights = DEFAULT_WEIGHTS) -> float:
    # Plain substring containment, so "aid" also hits "afraid".
    score = 0.0
    for tag in entry.tags:
        if tag in normalized_query:
            score += weights.tag
    if entry.title.lower() in normalized_query:
        score += weights.title
    if entry.category in normalized_query:
        score += weights.category
    return score


class KnowledgeBase:
    """Read-only catalog ranked by keyword overlap with a query."""

    def __init__(self, entries: Optional[Sequence[KnowledgeEntry]] = None, weights: Optional[ScoreWeights] = None) -> None:
        self.entries = tuple(KNOWLEDGE_BASE if entries is None else entries)
        self.weights = weights or DEFAULT_WEIGHTS

    def __len__(self) -> int:
        return len(self.entries)

    def search(self, query: Any, limit: int = 2) -> List[KnowledgeEntry]:
        normalized = normalize_text(query)
        if not normalized or limit <= 0:
            return []

        scored = []
        for entry in self.entries:
            score = score_entry(entry, normalized, self.weights)
            if score > 0:
                scored.append((score, entry))

        # sorted() is stable: equal scores keep catalog order.
        scored = sorted(scored, key=lambda pair: pair[0], reverse=True)
        return [entry for _, entry in scored[:limit]]

    def fallback_pool(self) -> List[KnowledgeEntry]:
        return list(self.entries)


def search_knowledge_base(
    query: Any,
    limit: int = 2,
    entries: Optional[Sequence[KnowledgeEntry]] = None,
    weights: Optional[ScoreWeights] = None,
) -> List[KnowledgeEntry]:
    return KnowledgeBase(entries, weights).search(query, limit)


def fallback_knowledge(entries: Optional[Sequence[KnowledgeEntry]] = None) -> List[KnowledgeEntry]:
    return KnowledgeBase(entries).fallback_pool()


def validate_catalog(entries: Iterable[KnowledgeEntry]) -> None:
    seen = set()
    count = 0
    for entry in entries:
        count += 1
        if not entry.id:
            raise ValueError("Knowledge entry is missing an id")
        if entry.id in seen:
            raise ValueError(f"Duplicate knowledge entry id: {entry.id}")
        seen.add(entry.id)
        if entry.category not in CATEGORIES:
            raise ValueError(f"Unknown category {entry.category!r} for entry {entry.id}")
        if not entry.tags:
            raise ValueError(f"Knowledge entry {entry.id} has no tags")
        for tag in entry.tags:
            if not tag or tag != tag.lower():
                raise ValueError(f"Tag {tag!r} of entry {entry.id} must be non-empty lower case")
    if not count:
        raise ValueError("Knowledge catalog is empty")
