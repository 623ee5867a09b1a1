"""Ranked character/vehicle recommendations per terrain.

Every pair of the character × vehicle cross product is scored for each
terrain with a weighted sum of its combined speed, handling, acceleration and
weight.  The top of the ranking is then picked greedily under a diversity cap
that limits how often a single vehicle may appear, backfilling from the full
ranking when the cap leaves free slots.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np

from ..core.cache import LRUCache
from ..core.models import TERRAINS, Entity
from ..core.stats import MAX_FLOOR, ActiveMaxStats
from ..settings import RecommendationSettings

__all__ = [
    "RecommendationEngine",
    "RecommendationEntry",
    "RecommendationSet",
    "compute_recommendations",
    "score_pairs",
    "select_diverse",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecommendationEntry:
    """A ranked character/vehicle pairing for a terrain."""

    character: Entity
    vehicle: Entity
    terrain: str
    score: float
    total_speed: int
    total_handling: int
    total_acceleration: int
    total_weight: int
    rank: int
    id: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "rank": self.rank,
            "terrain": self.terrain,
            "character": self.character.local_name,
            "vehicle": self.vehicle.local_name,
            "score": self.score,
            "total_speed": self.total_speed,
            "total_handling": self.total_handling,
            "total_acceleration": self.total_acceleration,
            "total_weight": self.total_weight,
        }


@dataclass(frozen=True, slots=True)
class RecommendationSet:
    """Top recommendations for every terrain plus cross-product maxima."""

    road: tuple[RecommendationEntry, ...] = ()
    terrain: tuple[RecommendationEntry, ...] = ()
    water: tuple[RecommendationEntry, ...] = ()
    max_combined_stats: ActiveMaxStats = field(default_factory=ActiveMaxStats)

    def for_terrain(self, terrain: str) -> tuple[RecommendationEntry, ...]:
        if terrain not in TERRAINS:
            raise ValueError(f"Unknown terrain: {terrain!r}")
        return getattr(self, terrain)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            name: [entry.as_dict() for entry in self.for_terrain(name)] for name in TERRAINS
        }
        payload["max_combined_stats"] = self.max_combined_stats.as_dict()
        return payload


@dataclass(frozen=True, slots=True)
class _PairTotals:
    speed: np.ndarray
    handling: np.ndarray
    acceleration: np.ndarray
    weight: np.ndarray
    score: np.ndarray


def _column(entities: Sequence[Entity], axis: str) -> np.ndarray:
    return np.fromiter(
        (entity.stats.value(axis) for entity in entities), dtype=np.int64, count=len(entities)
    )


def _pair_sum(left: np.ndarray, right: np.ndarray) -> np.ndarray:
    # Row-major flattening keeps the cross-product generation order:
    # characters in the outer loop, vehicles in the inner one.
    return (left[:, None] + right[None, :]).ravel()


def score_pairs(
    characters: Sequence[Entity],
    vehicles: Sequence[Entity],
    terrain: str,
    weights: Mapping[str, float],
) -> _PairTotals:
    """Compute totals and scores for every pair on ``terrain``."""

    speed = _pair_sum(_column(characters, f"speed.{terrain}"), _column(vehicles, f"speed.{terrain}"))
    handling = _pair_sum(
        _column(characters, f"handling.{terrain}"), _column(vehicles, f"handling.{terrain}")
    )
    acceleration = _pair_sum(_column(characters, "acceleration"), _column(vehicles, "acceleration"))
    weight = _pair_sum(_column(characters, "weight"), _column(vehicles, "weight"))
    score = (
        speed * weights["speed"]
        + handling * weights["handling"]
        + acceleration * weights["acceleration"]
        + weight * weights["weight"]
    )
    return _PairTotals(
        speed=speed,
        handling=handling,
        acceleration=acceleration,
        weight=weight,
        score=score,
    )


def select_diverse(
    order: Sequence[int],
    vehicle_of: Sequence[int] | np.ndarray,
    *,
    top_k: int,
    max_same_vehicle: int,
) -> list[int]:
    """Pick up to ``top_k`` pair indices from the ranked ``order``.

    Pass one accepts a pair only while its vehicle has fewer than
    ``max_same_vehicle`` accepted pairs. If that leaves free slots, pass two
    walks the ranking again and backfills pairs not yet chosen. The result is
    returned in ranking order.
    """

    selected: list[int] = []
    per_vehicle: Counter[int] = Counter()
    for index in order:
        vehicle = int(vehicle_of[index])
        if per_vehicle[vehicle] < max_same_vehicle:
            selected.append(int(index))
            per_vehicle[vehicle] += 1
        if len(selected) >= top_k:
            break

    if len(selected) < top_k:
        chosen = set(selected)
        for index in order:
            if int(index) in chosen:
                continue
            selected.append(int(index))
            chosen.add(int(index))
            if len(selected) >= top_k:
                break

    position = {int(index): rank for rank, index in enumerate(order)}
    selected.sort(key=position.__getitem__)
    return selected


def _rank_terrain(
    characters: Sequence[Entity],
    vehicles: Sequence[Entity],
    terrain: str,
    settings: RecommendationSettings,
) -> tuple[tuple[RecommendationEntry, ...], _PairTotals]:
    totals = score_pairs(characters, vehicles, terrain, settings.weights)
    # Stable sort on the negated score: ties keep generation order.
    order = np.argsort(-totals.score, kind="stable")
    vehicle_count = len(vehicles)
    vehicle_of = np.arange(totals.score.size) % vehicle_count
    selected = select_diverse(
        order.tolist(),
        vehicle_of,
        top_k=settings.top_k,
        max_same_vehicle=settings.max_same_vehicle,
    )
    entries: list[RecommendationEntry] = []
    for rank, index in enumerate(selected, start=1):
        character = characters[index // vehicle_count]
        vehicle = vehicles[index % vehicle_count]
        entries.append(
            RecommendationEntry(
                character=character,
                vehicle=vehicle,
                terrain=terrain,
                score=float(totals.score[index]),
                total_speed=int(totals.speed[index]),
                total_handling=int(totals.handling[index]),
                total_acceleration=int(totals.acceleration[index]),
                total_weight=int(totals.weight[index]),
                rank=rank,
                id=f"{terrain}-{character.local_name}-{vehicle.local_name}",
            )
        )
    return tuple(entries), totals


def compute_recommendations(
    characters: Sequence[Entity],
    vehicles: Sequence[Entity],
    settings: RecommendationSettings | None = None,
) -> RecommendationSet:
    """Rank the character × vehicle cross product for every terrain.

    An empty character or vehicle list yields empty rankings and maxima of
    one.
    """

    settings = settings or RecommendationSettings()
    characters = list(characters)
    vehicles = list(vehicles)
    if not characters or not vehicles:
        return RecommendationSet()

    ranked: dict[str, tuple[RecommendationEntry, ...]] = {}
    best = {"speed": MAX_FLOOR, "handling": MAX_FLOOR, "acceleration": MAX_FLOOR, "weight": MAX_FLOOR}
    for terrain in TERRAINS:
        entries, totals = _rank_terrain(characters, vehicles, terrain, settings)
        ranked[terrain] = entries
        best["speed"] = max(best["speed"], int(totals.speed.max()))
        best["handling"] = max(best["handling"], int(totals.handling.max()))
        best["acceleration"] = max(best["acceleration"], int(totals.acceleration.max()))
        best["weight"] = max(best["weight"], int(totals.weight.max()))

    logger.debug(
        "Recommendations computed.",
        extra={
            "event": "recommender.computed",
            "characters": len(characters),
            "vehicles": len(vehicles),
            "pairs": len(characters) * len(vehicles),
        },
    )
    return RecommendationSet(
        road=ranked["road"],
        terrain=ranked["terrain"],
        water=ranked["water"],
        max_combined_stats=ActiveMaxStats(**best),
    )


class RecommendationEngine:
    """Memoise :func:`compute_recommendations` per dataset snapshot."""

    def __init__(self, settings: RecommendationSettings | None = None) -> None:
        self.settings = settings or RecommendationSettings()
        self._cache: LRUCache[Any, RecommendationSet] = LRUCache(
            maxsize=self.settings.cache_size
        )

    def recommend(
        self, characters: Sequence[Entity], vehicles: Sequence[Entity]
    ) -> RecommendationSet:
        # Entities are frozen, so the rosters themselves fingerprint the dataset.
        key = (tuple(characters), tuple(vehicles))
        return self._cache.get_or_create(
            key, lambda: compute_recommendations(characters, vehicles, self.settings)
        )

    def clear(self) -> None:
        self._cache.clear()
