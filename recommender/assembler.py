"""
recommender/assembler.py
------------------------
Turns scored stores into the bounded, grouped result set.
"""

from __future__ import annotations

from dataclasses import dataclass

from recommender.recommend import ScoredStore

RELEVANCE_THRESHOLD = 0.5  # empirically tuned; strict ">" cutoff
MAX_RESULTS = 5


@dataclass(frozen=True)
class AssembledResult:
    stores: list[ScoredStore]
    truncated: bool


def assemble(
    scored: list[ScoredStore],
    threshold: float = RELEVANCE_THRESHOLD,
    max_results: int = MAX_RESULTS,
) -> AssembledResult:
    """Filter by threshold, rank by score (stable), keep the top `max_results`."""
    survivors = [s for s in scored if s.score > threshold]
    # sorted() is stable: equal scores keep catalog order
    ranked = sorted(survivors, key=lambda s: s.score, reverse=True)
    return AssembledResult(stores=ranked[:max_results], truncated=len(ranked) > max_results)


def group_by_category(ranked: list[ScoredStore]) -> list[tuple[str, list[ScoredStore]]]:
    """Group in ranked order; groups appear in the order their category is first seen."""
    groups: dict[str, list[ScoredStore]] = {}
    for item in ranked:
        groups.setdefault(item.store.category, []).append(item)
    return list(groups.items())
