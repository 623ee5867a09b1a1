"""Immutable record shapes for characters, vehicles and their combinations."""

from __future__ import annotations

from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass, field, fields
from typing import Any, Iterable, Literal, Mapping, Sequence

import numpy as np

__all__ = [
    "AXES",
    "ENTITY_KINDS",
    "SORT_METRICS",
    "SUB_AXES",
    "TERRAINS",
    "AxisFilter",
    "Combination",
    "Dataset",
    "Entity",
    "EntityKind",
    "SearchHistoryItem",
    "SortMetric",
    "StatVector",
    "SubAxis",
    "Terrain",
]


SortMetric = Literal["speed", "acceleration", "weight", "handling"]
SubAxis = Literal["display", "road", "terrain", "water"]
Terrain = Literal["road", "terrain", "water"]
EntityKind = Literal["character", "vehicle"]

SORT_METRICS: tuple[str, ...] = ("speed", "acceleration", "weight", "handling")
SUB_AXES: tuple[str, ...] = ("display", "road", "terrain", "water")
TERRAINS: tuple[str, ...] = ("road", "terrain", "water")
ENTITY_KINDS: tuple[str, ...] = ("character", "vehicle")

#: Canonical axis order shared by every numeric view of a stat vector.
AXES: tuple[str, ...] = (
    "speed.display",
    "speed.road",
    "speed.terrain",
    "speed.water",
    "acceleration",
    "weight",
    "handling.display",
    "handling.road",
    "handling.terrain",
    "handling.water",
)

_AXIS_TO_FIELD: Mapping[str, str] = {axis: axis.replace(".", "_") for axis in AXES}

# camelCase keys used by the published JSON/CSV exports.
_LEGACY_KEYS: Mapping[str, str] = {
    "displaySpeed": "speed_display",
    "roadSpeed": "speed_road",
    "terrainSpeed": "speed_terrain",
    "waterSpeed": "speed_water",
    "acceleration": "acceleration",
    "weight": "weight",
    "displayHandling": "handling_display",
    "roadHandling": "handling_road",
    "terrainHandling": "handling_terrain",
    "waterHandling": "handling_water",
}


def _coerce_stat(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise TypeError(f"Stat '{key}' must be numeric, got a boolean")
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        if not float(value).is_integer():
            raise ValueError(f"Stat '{key}' must be an integer, got {value!r}")
        return int(value)
    if isinstance(value, str) and value.strip():
        return int(value.strip())
    raise TypeError(f"Stat '{key}' must be numeric, got {value!r}")


@dataclass(frozen=True, slots=True)
class StatVector:
    """Ten-axis stat vector of a character, vehicle or combination."""

    speed_display: int = 0
    speed_road: int = 0
    speed_terrain: int = 0
    speed_water: int = 0
    acceleration: int = 0
    weight: int = 0
    handling_display: int = 0
    handling_road: int = 0
    handling_terrain: int = 0
    handling_water: int = 0

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "StatVector":
        """Build a vector from dotted, flat or legacy camelCase keys.

        Nested ``{"speed": {"road": 4}}`` payloads are accepted as well. Missing
        axes default to zero.
        """

        values: dict[str, int] = {}
        for key, raw in payload.items():
            key_str = str(key)
            if key_str in ("speed", "handling") and isinstance(raw, ABCMapping):
                for sub_axis, nested in raw.items():
                    name = f"{key_str}_{sub_axis}"
                    if name in _FIELD_NAMES:
                        values[name] = _coerce_stat(nested, f"{key_str}.{sub_axis}")
                continue
            name = _AXIS_TO_FIELD.get(key_str) or _LEGACY_KEYS.get(key_str) or key_str
            if name in _FIELD_NAMES:
                values[name] = _coerce_stat(raw, key_str)
        return cls(**values)

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> "StatVector":
        """Build a vector from values listed in :data:`AXES` order."""

        if len(values) != len(AXES):
            raise ValueError(f"Expected {len(AXES)} stat values, got {len(values)}")
        return cls(*(int(value) for value in values))

    def value(self, axis: str) -> int:
        """Return the value stored for the dotted ``axis`` name."""

        try:
            return getattr(self, _AXIS_TO_FIELD[axis])
        except KeyError:
            raise KeyError(f"Unknown stat axis: {axis!r}") from None

    def speed(self, sub_axis: str = "display") -> int:
        return self.value(f"speed.{sub_axis}")

    def handling(self, sub_axis: str = "display") -> int:
        return self.value(f"handling.{sub_axis}")

    def as_tuple(self) -> tuple[int, ...]:
        return tuple(getattr(self, name) for name in _FIELD_NAMES)

    def as_array(self) -> np.ndarray:
        return np.asarray(self.as_tuple(), dtype=np.int64)

    def as_dict(self) -> dict[str, int]:
        """Return the vector keyed by dotted axis names."""

        return {axis: self.value(axis) for axis in AXES}

    def combine(self, other: "StatVector", bonus: int = 0) -> "StatVector":
        """Return the axis-wise sum of both vectors plus ``bonus`` on every axis."""

        return StatVector(
            *(left + right + bonus for left, right in zip(self.as_tuple(), other.as_tuple()))
        )


_FIELD_NAMES: tuple[str, ...] = tuple(item.name for item in fields(StatVector))


@dataclass(frozen=True, slots=True)
class Entity:
    """A character or vehicle with its stat vector."""

    local_name: str
    reference_name: str
    stats: StatVector
    kind: EntityKind = "character"

    def __post_init__(self) -> None:
        if self.kind not in ENTITY_KINDS:
            raise ValueError(f"Unknown entity kind: {self.kind!r}")
        if not self.reference_name:
            object.__setattr__(self, "reference_name", self.local_name)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any], kind: EntityKind) -> "Entity":
        """Build an entity from a raw record.

        ``localName``/``local_name``/``name`` hold the local name and
        ``referenceName``/``reference_name``/``englishName`` the reference one.
        Stats may be nested under ``stats`` or listed inline.
        """

        local_name = _first_text(payload, ("local_name", "localName", "name"))
        if not local_name:
            raise ValueError("Entity record is missing its local name")
        reference_name = _first_text(
            payload, ("reference_name", "referenceName", "englishName", "english_name")
        )
        stats_payload = payload.get("stats")
        if isinstance(stats_payload, ABCMapping):
            stats = StatVector.from_mapping(stats_payload)
        else:
            stats = StatVector.from_mapping(payload)
        return cls(
            local_name=local_name,
            reference_name=reference_name or local_name,
            stats=stats,
            kind=kind,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "local_name": self.local_name,
            "reference_name": self.reference_name,
            "stats": self.stats.as_dict(),
        }


def _first_text(payload: Mapping[str, Any], keys: Iterable[str]) -> str:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


@dataclass(frozen=True, slots=True)
class AxisFilter:
    """Session-scoped selection of the sort metric and sub-axes."""

    sort_metric: SortMetric = "speed"
    speed_sub_axis: SubAxis = "display"
    handling_sub_axis: SubAxis = "display"

    def __post_init__(self) -> None:
        if self.sort_metric not in SORT_METRICS:
            raise ValueError(f"Unknown sort metric: {self.sort_metric!r}")
        if self.speed_sub_axis not in SUB_AXES:
            raise ValueError(f"Unknown speed sub-axis: {self.speed_sub_axis!r}")
        if self.handling_sub_axis not in SUB_AXES:
            raise ValueError(f"Unknown handling sub-axis: {self.handling_sub_axis!r}")


@dataclass(frozen=True, slots=True)
class Combination:
    """A user-created character/vehicle pairing with bonus-adjusted stats."""

    id: str
    character: Entity
    vehicle: Entity
    combined_stats: StatVector
    created_at: int = 0


@dataclass(frozen=True, slots=True)
class SearchHistoryItem:
    """A past query that produced results. ``timestamp`` is in milliseconds."""

    query: str
    timestamp: int
    result_count: int


@dataclass(frozen=True, slots=True)
class Dataset:
    """The full entity snapshot handed over by the ingestion layer."""

    characters: tuple[Entity, ...] = ()
    vehicles: tuple[Entity, ...] = ()
    version: str | None = None
    source: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def entities(self) -> tuple[Entity, ...]:
        return self.characters + self.vehicles

    @property
    def is_empty(self) -> bool:
        return not self.characters and not self.vehicles

    def fingerprint(self) -> tuple[tuple[str, str, tuple[int, ...]], ...]:
        """Hashable snapshot of every entity's identity and stats."""

        return tuple(
            (entity.kind, entity.local_name, entity.stats.as_tuple())
            for entity in self.entities
        )
