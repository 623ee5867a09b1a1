"""Bounded, de-duplicated search history."""

from __future__ import annotations

import logging
from typing import Callable, List

from ..core.clock import now_ms
from ..core.models import SearchHistoryItem
from ..errors import PersistenceError
from ..io.codecs import history_item_from_dict, history_item_to_dict
from ..io.stores import CollectionStore
from ..settings import DEFAULT_HISTORY_LIMIT

__all__ = ["SearchHistory"]

logger = logging.getLogger(__name__)


class SearchHistory:
    """Most-recent-first list of successful queries, unique by query text.

    The list is read from and written back to ``store`` on every change.
    Store failures are logged and the history carries on in memory only.
    """

    def __init__(
        self,
        store: CollectionStore | None = None,
        *,
        limit: int = DEFAULT_HISTORY_LIMIT,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        self._store = store
        self._limit = int(limit)
        self._clock = clock
        self._items: List[SearchHistoryItem] = []
        self.session_only = store is None

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def items(self) -> tuple[SearchHistoryItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def load(self) -> tuple[SearchHistoryItem, ...]:
        if self._store is None:
            return self.items
        try:
            raw_items = self._store.load()
        except PersistenceError as exc:
            self._degrade("load", exc)
            return self.items
        loaded: List[SearchHistoryItem] = []
        seen: set[str] = set()
        for payload in raw_items:
            try:
                item = history_item_from_dict(payload)
            except (TypeError, ValueError) as exc:
                logger.warning(
                    "Skipping malformed stored search history entry.",
                    extra={"event": "search.history_skipped", "error": str(exc)},
                )
                continue
            # Stored order is most-recent-first; the first occurrence wins.
            if item.query in seen:
                continue
            seen.add(item.query)
            loaded.append(item)
        self._items = loaded[: self._limit]
        return self.items

    def record(self, query: str, result_count: int) -> bool:
        """Store ``query`` at the top of the history.

        Blank queries and queries without results are ignored. Returns
        ``True`` when the history changed.
        """

        if not query.strip() or result_count <= 0:
            return False
        entry = SearchHistoryItem(
            query=query, timestamp=int(self._clock()), result_count=int(result_count)
        )
        remaining = [item for item in self._items if item.query != query]
        self._items = [entry, *remaining][: self._limit]
        self._persist()
        return True

    def remove(self, query: str) -> bool:
        remaining = [item for item in self._items if item.query != query]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        self._persist()
        return True

    def clear(self) -> None:
        self._items = []
        self._persist()

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            self._store.save([history_item_to_dict(item) for item in self._items])
        except PersistenceError as exc:
            self._degrade("save", exc)

    def _degrade(self, operation: str, exc: PersistenceError) -> None:
        self.session_only = True
        logger.warning(
            "Search history store unavailable; keeping history for this session only.",
            extra={
                "event": "search.history_persistence_failed",
                "operation": operation,
                "error": str(exc),
            },
        )
