"""User-built character/vehicle combinations and their persisted collection."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, List, Sequence

from ..errors import PersistenceError
from ..io.codecs import combination_from_dict, combination_to_dict
from ..io.stores import CollectionStore
from ..settings import COMBINATION_BONUS
from .clock import now_ms
from .models import Combination, Entity

__all__ = [
    "CombinationCollection",
    "combination_id",
    "create_combination",
]

logger = logging.getLogger(__name__)


def combination_id(character: Entity, vehicle: Entity, created_at: int) -> str:
    return f"{character.local_name}-{vehicle.local_name}-{created_at}"


def create_combination(
    character: Entity,
    vehicle: Entity,
    *,
    bonus: int = COMBINATION_BONUS,
    created_at: int | None = None,
    identifier: str | None = None,
) -> Combination:
    """Pair ``character`` with ``vehicle`` adding ``bonus`` to every axis."""

    if character.kind != "character":
        raise ValueError(f"'{character.local_name}' is not a character")
    if vehicle.kind != "vehicle":
        raise ValueError(f"'{vehicle.local_name}' is not a vehicle")
    timestamp = now_ms() if created_at is None else int(created_at)
    return Combination(
        id=identifier or combination_id(character, vehicle, timestamp),
        character=character,
        vehicle=vehicle,
        combined_stats=character.stats.combine(vehicle.stats, bonus),
        created_at=timestamp,
    )


class CombinationCollection:
    """Append-ordered combinations persisted through a :class:`CollectionStore`.

    Identifiers are never reused: every id handed out or loaded during the
    lifetime of the collection is remembered, and a clash (two additions in
    the same millisecond, or re-adding a removed pair) gets a numeric suffix.
    When the store fails the collection keeps working in memory and flags
    itself as ``session_only``.
    """

    def __init__(
        self,
        store: CollectionStore | None = None,
        *,
        bonus: int = COMBINATION_BONUS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._bonus = bonus
        self._clock = clock
        self._items: List[Combination] = []
        self._issued: set[str] = set()
        self.session_only = store is None

    def __iter__(self) -> Iterator[Combination]:
        return iter(tuple(self._items))

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> tuple[Combination, ...]:
        return tuple(self._items)

    def get(self, identifier: str) -> Combination | None:
        for combination in self._items:
            if combination.id == identifier:
                return combination
        return None

    def load(self) -> tuple[Combination, ...]:
        """Replace the in-memory list with the persisted one."""

        if self._store is None:
            return self.items
        try:
            raw_items = self._store.load()
        except PersistenceError as exc:
            self._degrade("load", exc)
            return self.items
        loaded: List[Combination] = []
        for payload in raw_items:
            try:
                loaded.append(combination_from_dict(payload))
            except (TypeError, ValueError) as exc:
                logger.warning(
                    "Skipping malformed stored combination.",
                    extra={"event": "combinations.skipped", "error": str(exc)},
                )
        self._items = loaded
        self._issued.update(item.id for item in loaded)
        return self.items

    def replace(self, combinations: Sequence[Combination]) -> None:
        """Install ``combinations`` without persisting (hydration path)."""

        self._items = list(combinations)
        self._issued.update(item.id for item in self._items)

    def add(self, character: Entity, vehicle: Entity) -> Combination:
        created_at = int(self._clock())
        identifier = self._unique_id(combination_id(character, vehicle, created_at))
        combination = create_combination(
            character,
            vehicle,
            bonus=self._bonus,
            created_at=created_at,
            identifier=identifier,
        )
        self._issued.add(identifier)
        self._items = [*self._items, combination]
        self._persist()
        return combination

    def remove(self, identifier: str) -> bool:
        remaining = [item for item in self._items if item.id != identifier]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        self._persist()
        return True

    def clear(self) -> None:
        self._items = []
        self._persist()

    def _unique_id(self, candidate: str) -> str:
        if candidate not in self._issued:
            return candidate
        suffix = 2
        while f"{candidate}-{suffix}" in self._issued:
            suffix += 1
        return f"{candidate}-{suffix}"

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            self._store.save([combination_to_dict(item) for item in self._items])
        except PersistenceError as exc:
            self._degrade("save", exc)

    def _degrade(self, operation: str, exc: PersistenceError) -> None:
        self.session_only = True
        logger.warning(
            "Combination store unavailable; keeping combinations for this session only.",
            extra={
                "event": "combinations.persistence_failed",
                "operation": operation,
                "error": str(exc),
                "context": dict(exc.context),
            },
        )
