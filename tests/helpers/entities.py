"""Builders for characters, vehicles and on-disk dataset fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Sequence

from kartlab.core.models import Entity, StatVector


def build_stats(
    *,
    speed: Sequence[int] = (0, 0, 0, 0),
    acceleration: int = 0,
    weight: int = 0,
    handling: Sequence[int] = (0, 0, 0, 0),
) -> StatVector:
    """Build a vector from ``(display, road, terrain, water)`` tuples."""

    return StatVector.from_sequence([*speed, acceleration, weight, *handling])


def build_character(local_name: str, reference_name: str | None = None, **stats: Any) -> Entity:
    return Entity(
        local_name=local_name,
        reference_name=reference_name or local_name,
        stats=build_stats(**stats),
        kind="character",
    )


def build_vehicle(local_name: str, reference_name: str | None = None, **stats: Any) -> Entity:
    return Entity(
        local_name=local_name,
        reference_name=reference_name or local_name,
        stats=build_stats(**stats),
        kind="vehicle",
    )


def _record(entity: Entity) -> dict[str, Any]:
    stats = entity.stats
    return {
        "name": entity.local_name,
        "englishName": entity.reference_name,
        "displaySpeed": stats.speed_display,
        "roadSpeed": stats.speed_road,
        "terrainSpeed": stats.speed_terrain,
        "waterSpeed": stats.speed_water,
        "acceleration": stats.acceleration,
        "weight": stats.weight,
        "displayHandling": stats.handling_display,
        "roadHandling": stats.handling_road,
        "terrainHandling": stats.handling_terrain,
        "waterHandling": stats.handling_water,
    }


def dataset_document(
    characters: Iterable[Entity], vehicles: Iterable[Entity], *, version: str = "2025-01-01"
) -> dict[str, Any]:
    """Return a structured dataset document in the published layout."""

    return {
        "version": version,
        "lastUpdate": version,
        "data": {
            "characters": [_record(entity) for entity in characters],
            "vehicles": [_record(entity) for entity in vehicles],
        },
    }


def _stat_cells(entity: Entity) -> list[str]:
    values = entity.stats.as_tuple()
    # name, reference, 4 speed cells, one unused column, acceleration, weight, 4 handling cells
    return [
        entity.local_name,
        entity.reference_name,
        *(str(value) for value in values[:4]),
        "",
        *(str(value) for value in values[4:]),
    ]


def write_dataset_csv(
    path: Path,
    characters: Sequence[Entity],
    vehicles: Sequence[Entity],
    *,
    extra_rows: Sequence[Sequence[str]] = (),
) -> Path:
    """Write a CSV export with two header rows and side-by-side tables."""

    width = 30
    header = ["" for _ in range(width)]
    header[1] = "角色"
    header[17] = "載具"
    lines = [",".join(header), ",".join(header)]
    for index in range(max(len(characters), len(vehicles))):
        row = ["" for _ in range(width)]
        if index < len(characters):
            row[1:14] = _stat_cells(characters[index])
        if index < len(vehicles):
            row[17:30] = _stat_cells(vehicles[index])
        lines.append(",".join(row))
    for extra in extra_rows:
        lines.append(",".join(extra))
    path.write_text("\n".join(lines) + "\n", encoding="utf8")
    return path
