"""Aggregate statistics used to normalise stat bars.

Maxima are taken over characters and vehicles together and floored at one so
percentage maths stays defined even before any data is loaded.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from .models import AXES, AxisFilter, Entity, StatVector

__all__ = [
    "MIN_PROGRESS_WIDTH",
    "MAX_FLOOR",
    "ActiveMaxStats",
    "MaxStats",
    "compute_active_max_stats",
    "compute_max_stats",
    "stat_band",
    "stat_percentage",
]

MAX_FLOOR = 1
MIN_PROGRESS_WIDTH = 5

_BANDS: tuple[tuple[float, str], ...] = (
    (0.8, "high"),
    (0.6, "good"),
    (0.4, "fair"),
)


@dataclass(frozen=True, slots=True)
class ActiveMaxStats:
    """Maxima for the four displayed metrics under the current filters."""

    speed: int = MAX_FLOOR
    acceleration: int = MAX_FLOOR
    weight: int = MAX_FLOOR
    handling: int = MAX_FLOOR

    def as_dict(self) -> dict[str, int]:
        return {
            "speed": self.speed,
            "acceleration": self.acceleration,
            "weight": self.weight,
            "handling": self.handling,
        }

    def for_metric(self, metric: str) -> int:
        return self.as_dict()[metric]


@dataclass(frozen=True, slots=True)
class MaxStats:
    """Per-axis maxima across the whole dataset, each at least one."""

    axes: StatVector = StatVector(*(MAX_FLOOR,) * len(AXES))

    def __getitem__(self, axis: str) -> int:
        return self.axes.value(axis)

    def as_dict(self) -> dict[str, int]:
        return self.axes.as_dict()

    def summary(self) -> ActiveMaxStats:
        """Collapse speed and handling to the best value across all sub-axes."""

        return ActiveMaxStats(
            speed=max(self.axes.speed(sub) for sub in ("display", "road", "terrain", "water")),
            acceleration=self.axes.acceleration,
            weight=self.axes.weight,
            handling=max(
                self.axes.handling(sub) for sub in ("display", "road", "terrain", "water")
            ),
        )


def compute_max_stats(entities: Iterable[Entity]) -> MaxStats:
    """Return the maximum of every axis over ``entities``.

    ``entities`` is usually the characters followed by the vehicles. The result
    never contains a value below :data:`MAX_FLOOR`.
    """

    rows = [entity.stats.as_tuple() for entity in entities]
    if not rows:
        return MaxStats()
    matrix = np.asarray(rows, dtype=np.int64)
    maxima = np.maximum(matrix.max(axis=0), MAX_FLOOR)
    return MaxStats(axes=StatVector.from_sequence([int(value) for value in maxima]))


def compute_active_max_stats(
    entities: Iterable[Entity] | MaxStats, filters: AxisFilter | None = None
) -> ActiveMaxStats:
    """Resolve the maxima shown for the active speed and handling sub-axes.

    Accepts either the entity list or an already computed :class:`MaxStats`.
    """

    filters = filters or AxisFilter()
    max_stats = entities if isinstance(entities, MaxStats) else compute_max_stats(entities)
    axes = max_stats.axes
    return ActiveMaxStats(
        speed=axes.speed(filters.speed_sub_axis),
        acceleration=axes.acceleration,
        weight=axes.weight,
        handling=axes.handling(filters.handling_sub_axis),
    )


def stat_percentage(value: float, maximum: float, minimum: int = MIN_PROGRESS_WIDTH) -> int:
    """Return ``value`` as a rounded percentage of ``maximum``.

    The result never drops below ``minimum`` so that empty bars stay visible.
    """

    if maximum <= 0:
        maximum = MAX_FLOOR
    percentage = math.floor(value / maximum * 100 + 0.5)
    return max(int(percentage), minimum)


def stat_band(value: float, maximum: float) -> str:
    if maximum <= 0:
        maximum = MAX_FLOOR
    ratio = value / maximum
    for threshold, label in _BANDS:
        if ratio >= threshold:
            return label
    return "low"
