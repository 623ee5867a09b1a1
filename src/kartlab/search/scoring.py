"""Tiered relevance scoring for character and vehicle names.

The heuristic is intentionally simple: exact, prefix and substring matches
get fixed scores and anything else falls back to an index-aligned character
overlap ratio.  ``"bca"`` against ``"abc"`` therefore scores zero even though
both strings share every character.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from ..core.models import Entity
from ..settings import SearchSettings

__all__ = [
    "EXACT_SCORE",
    "PREFIX_SCORE",
    "SIMILARITY_WEIGHT",
    "SUBSTRING_SCORE",
    "SearchResult",
    "score_entity",
    "score_name",
    "score_text",
    "search_entities",
    "similarity",
]

EXACT_SCORE = 100.0
PREFIX_SCORE = 80.0
SUBSTRING_SCORE = 60.0
SIMILARITY_WEIGHT = 40.0


@dataclass(frozen=True, slots=True)
class SearchResult:
    kind: str
    entity: Entity
    score: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "local_name": self.entity.local_name,
            "reference_name": self.entity.reference_name,
            "score": self.score,
        }


def similarity(left: str, right: str) -> float:
    """Share of index-aligned equal characters over the longer length."""

    longest = max(len(left), len(right))
    if longest == 0:
        return 1.0
    matches = sum(1 for a, b in zip(left, right) if a == b)
    return matches / longest


def score_name(query: str, name: str) -> float:
    """Score a single name against ``query`` (case-insensitive)."""

    lowered_query = query.lower()
    lowered_name = name.lower()
    if lowered_name == lowered_query:
        return EXACT_SCORE
    if lowered_name.startswith(lowered_query):
        return PREFIX_SCORE
    if lowered_query in lowered_name:
        return SUBSTRING_SCORE
    return similarity(lowered_query, lowered_name) * SIMILARITY_WEIGHT


def score_text(query: str, local_name: str, reference_name: str) -> float:
    """Best score of ``query`` against either name."""

    return max(score_name(query, local_name), score_name(query, reference_name))


def score_entity(query: str, entity: Entity) -> float:
    return score_text(query, entity.local_name, entity.reference_name)


def _candidates(
    query: str, entities: Iterable[Entity], kind: str, min_score: float
) -> list[SearchResult]:
    results: list[SearchResult] = []
    for entity in entities:
        score = score_entity(query, entity)
        if score > min_score:
            results.append(SearchResult(kind=kind, entity=entity, score=score))
    return results


def search_entities(
    query: str,
    characters: Sequence[Entity],
    vehicles: Sequence[Entity],
    settings: SearchSettings | None = None,
) -> list[SearchResult]:
    """Rank characters and vehicles matching ``query``.

    Only scores strictly above ``settings.min_score`` are kept. Characters
    come before vehicles on equal scores and the list is capped at
    ``settings.max_results``. A blank query matches nothing.
    """

    settings = settings or SearchSettings()
    if not query.strip():
        return []
    merged = _candidates(query, characters, "character", settings.min_score)
    merged.extend(_candidates(query, vehicles, "vehicle", settings.min_score))
    merged.sort(key=lambda result: -result.score)
    return merged[: settings.max_results]
