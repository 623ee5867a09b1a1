"""Application state container with pull-based derivations.

:class:`KartStore` owns the current dataset, the active axis filter and the
user's combinations.  Derived values (maxima, sorted views, recommendations)
are computed on demand from the current snapshot and memoised until the
inputs they depend on change.  Initialisation happens in two phases: the
store starts from :meth:`KartStore.default_state` and is later
:meth:`~KartStore.hydrate`-d with the loaded state, so nothing reads
persisted data before it is available.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List

from .core.clock import now_ms
from .core.combinations import CombinationCollection
from .core.models import AxisFilter, Combination, Dataset, Entity, EntityKind
from .core.sorting import sort_entities
from .core.stats import ActiveMaxStats, MaxStats, compute_active_max_stats, compute_max_stats
from .io.stores import CollectionStore
from .recommender import RecommendationEngine, RecommendationSet
from .search import SearchHistory, SearchService
from .settings import KartlabSettings

__all__ = ["KartState", "KartStore"]

logger = logging.getLogger(__name__)

Listener = Callable[["KartState"], None]


@dataclass(frozen=True, slots=True)
class KartState:
    """Immutable snapshot of everything the store owns."""

    dataset: Dataset = field(default_factory=Dataset)
    filters: AxisFilter = field(default_factory=AxisFilter)
    combinations: tuple[Combination, ...] = ()
    hydrated: bool = False

    @property
    def characters(self) -> tuple[Entity, ...]:
        return self.dataset.characters

    @property
    def vehicles(self) -> tuple[Entity, ...]:
        return self.dataset.vehicles


class KartStore:
    """Explicit store exposing ``subscribe``/``get_snapshot``.

    Every mutation produces a new :class:`KartState` and notifies listeners
    with it.  Listeners are called synchronously in registration order.
    """

    def __init__(
        self,
        settings: KartlabSettings | None = None,
        *,
        combination_store: CollectionStore | None = None,
        history_store: CollectionStore | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.settings = settings or KartlabSettings()
        self._combinations = CombinationCollection(
            combination_store, bonus=self.settings.combination_bonus, clock=clock
        )
        self.history = SearchHistory(
            history_store, limit=self.settings.search.history_limit, clock=clock
        )
        self.search = SearchService(history=self.history, settings=self.settings.search)
        self._recommender = RecommendationEngine(self.settings.recommender)
        self._state = self.default_state()
        self._listeners: List[Listener] = []
        self._max_stats: MaxStats | None = None

    @staticmethod
    def default_state() -> KartState:
        """State used before any data has been loaded."""

        return KartState()

    @property
    def session_only(self) -> bool:
        return self._combinations.session_only or self.history.session_only

    def get_snapshot(self) -> KartState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def hydrate(self, loaded: KartState | Dataset) -> KartState:
        """Install the loaded state and restore persisted user collections.

        When ``loaded`` carries combinations they replace the stored ones;
        otherwise the combinations and the search history are read from their
        stores.
        """

        if isinstance(loaded, Dataset):
            loaded = KartState(dataset=loaded)
        if loaded.combinations:
            self._combinations.replace(loaded.combinations)
        else:
            self._combinations.load()
        self.history.load()
        self._install_dataset(loaded.dataset)
        return self._commit(
            replace(
                loaded,
                combinations=self._combinations.items,
                hydrated=True,
            )
        )

    def reload(self, dataset: Dataset) -> KartState:
        """Replace the whole entity list atomically."""

        self._install_dataset(dataset)
        return self._commit(replace(self._state, dataset=dataset))

    def _install_dataset(self, dataset: Dataset) -> None:
        self._max_stats = None
        self.search.set_entities(dataset.characters, dataset.vehicles)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    def set_filters(self, **changes: Any) -> KartState:
        """Update ``sort_metric``, ``speed_sub_axis`` or ``handling_sub_axis``."""

        filters = replace(self._state.filters, **changes)
        return self._commit(replace(self._state, filters=filters))

    # ------------------------------------------------------------------
    # Combinations
    # ------------------------------------------------------------------
    def find_entity(self, kind: EntityKind, name: str) -> Entity:
        """Look up an entity by local or reference name (case-insensitive)."""

        pool = self._state.characters if kind == "character" else self._state.vehicles
        needle = name.strip().lower()
        for entity in pool:
            if entity.local_name.lower() == needle or entity.reference_name.lower() == needle:
                return entity
        raise KeyError(f"Unknown {kind}: {name!r}")

    def add_combination(self, character: Entity | str, vehicle: Entity | str) -> Combination:
        if isinstance(character, str):
            character = self.find_entity("character", character)
        if isinstance(vehicle, str):
            vehicle = self.find_entity("vehicle", vehicle)
        combination = self._combinations.add(character, vehicle)
        self._commit(replace(self._state, combinations=self._combinations.items))
        return combination

    def remove_combination(self, identifier: str) -> bool:
        removed = self._combinations.remove(identifier)
        if removed:
            self._commit(replace(self._state, combinations=self._combinations.items))
        return removed

    def clear_combinations(self) -> None:
        self._combinations.clear()
        self._commit(replace(self._state, combinations=()))

    # ------------------------------------------------------------------
    # Derivations
    # ------------------------------------------------------------------
    def max_stats(self) -> MaxStats:
        if self._max_stats is None:
            self._max_stats = compute_max_stats(self._state.dataset.entities)
        return self._max_stats

    def active_max_stats(self) -> ActiveMaxStats:
        return compute_active_max_stats(self.max_stats(), self._state.filters)

    def sorted_characters(self) -> list[Entity]:
        return sort_entities(self._state.characters, filters=self._state.filters)

    def sorted_vehicles(self) -> list[Entity]:
        return sort_entities(self._state.vehicles, filters=self._state.filters)

    def recommendations(self) -> RecommendationSet:
        return self._recommender.recommend(self._state.characters, self._state.vehicles)

    def _commit(self, state: KartState) -> KartState:
        self._state = state
        logger.debug(
            "Store state updated.",
            extra={
                "event": "store.updated",
                "characters": len(state.characters),
                "vehicles": len(state.vehicles),
                "combinations": len(state.combinations),
            },
        )
        for listener in list(self._listeners):
            listener(state)
        return state
