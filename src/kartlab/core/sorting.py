"""Ordered views of characters and vehicles."""

from __future__ import annotations

from typing import Iterable

from .models import AxisFilter, Entity

__all__ = ["resolve_metric_value", "sort_entities"]


def resolve_metric_value(entity: Entity, metric: str, filters: AxisFilter | None = None) -> int:
    """Return the value of ``metric`` for ``entity`` under the active sub-axes."""

    filters = filters or AxisFilter()
    stats = entity.stats
    if metric == "speed":
        return stats.speed(filters.speed_sub_axis)
    if metric == "handling":
        return stats.handling(filters.handling_sub_axis)
    if metric == "acceleration":
        return stats.acceleration
    if metric == "weight":
        return stats.weight
    raise ValueError(f"Unknown sort metric: {metric!r}")


def sort_entities(
    entities: Iterable[Entity],
    metric: str | None = None,
    filters: AxisFilter | None = None,
) -> list[Entity]:
    """Return a new list ordered by the resolved metric, highest first.

    Equal values are ordered by ``local_name`` ascending. ``metric`` defaults
    to ``filters.sort_metric``.
    """

    filters = filters or AxisFilter()
    selected = metric or filters.sort_metric
    return sorted(
        entities,
        key=lambda entity: (-resolve_metric_value(entity, selected, filters), entity.local_name),
    )
