"""Debounced search front-end publishing outcomes to listeners."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence

from ..core.models import Entity
from ..settings import SearchSettings
from .debounce import Debouncer
from .history import SearchHistory
from .scoring import SearchResult, search_entities

__all__ = ["SearchOutcome", "SearchService"]

logger = logging.getLogger(__name__)

Listener = Callable[["SearchOutcome"], None]


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    """What the caller should display after a query settles.

    ``show_history`` is set for blank queries: the results are cleared and
    the search history should be shown instead.
    """

    query: str
    results: tuple[SearchResult, ...]
    show_history: bool
    generation: int


class SearchService:
    """Evaluate queries against the current entities with trailing debounce.

    Only the last query issued within ``settings.debounce_ms`` is evaluated.
    A blank query bypasses the timer, cancels pending work and immediately
    publishes an empty outcome asking for the history to be shown.
    """

    def __init__(
        self,
        characters: Sequence[Entity] = (),
        vehicles: Sequence[Entity] = (),
        *,
        history: SearchHistory | None = None,
        settings: SearchSettings | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.settings = settings or SearchSettings()
        self.history = (
            history if history is not None else SearchHistory(limit=self.settings.history_limit)
        )
        self._characters: tuple[Entity, ...] = tuple(characters)
        self._vehicles: tuple[Entity, ...] = tuple(vehicles)
        self._debouncer = Debouncer(self.settings.debounce_seconds, loop=loop)
        self._listeners: List[Listener] = []
        self.last_outcome = SearchOutcome(query="", results=(), show_history=True, generation=0)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def set_entities(self, characters: Sequence[Entity], vehicles: Sequence[Entity]) -> None:
        self._characters = tuple(characters)
        self._vehicles = tuple(vehicles)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def search(self, query: str) -> SearchOutcome | None:
        """Debounced entry point.

        Returns the outcome right away for blank queries, ``None`` when the
        evaluation was scheduled.
        """

        if not query.strip():
            return self._show_history(query)
        self._debouncer.schedule(lambda generation: self._settle(query, generation))
        return None

    def evaluate_now(self, query: str) -> SearchOutcome:
        """Evaluate ``query`` synchronously, superseding any pending query."""

        if not query.strip():
            return self._show_history(query)
        return self._evaluate(query, self._debouncer.invalidate())

    def cancel(self) -> None:
        self._debouncer.cancel()

    def _show_history(self, query: str) -> SearchOutcome:
        generation = self._debouncer.invalidate()
        outcome = SearchOutcome(query=query, results=(), show_history=True, generation=generation)
        self._publish(outcome)
        return outcome

    def _settle(self, query: str, generation: int) -> None:
        results = search_entities(query, self._characters, self._vehicles, self.settings)
        if not self._debouncer.is_current(generation):
            logger.debug(
                "Discarding stale search results.",
                extra={"event": "search.stale", "query": query, "generation": generation},
            )
            return
        self._finish(query, results, generation)

    def _evaluate(self, query: str, generation: int) -> SearchOutcome:
        results = search_entities(query, self._characters, self._vehicles, self.settings)
        return self._finish(query, results, generation)

    def _finish(
        self, query: str, results: Sequence[SearchResult], generation: int
    ) -> SearchOutcome:
        if results:
            self.history.record(query, len(results))
        outcome = SearchOutcome(
            query=query, results=tuple(results), show_history=False, generation=generation
        )
        self._publish(outcome)
        return outcome

    def _publish(self, outcome: SearchOutcome) -> None:
        self.last_outcome = outcome
        for listener in list(self._listeners):
            listener(outcome)
