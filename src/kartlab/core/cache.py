"""Small LRU cache used to memoise derived views per dataset snapshot."""

from __future__ import annotations

from collections import OrderedDict
import threading
from typing import Callable, Generic, Hashable, TypeVar

__all__ = ["LRUCache"]

_K = TypeVar("_K", bound=Hashable)
_V = TypeVar("_V")


class LRUCache(Generic[_K, _V]):
    """Thread-safe least-recently-used cache.

    A ``maxsize`` of zero disables caching: every lookup calls the factory.
    """

    __slots__ = ("_maxsize", "_entries", "_lock")

    def __init__(self, *, maxsize: int) -> None:
        size = int(maxsize)
        if size < 0:
            raise ValueError("maxsize must be >= 0")
        self._maxsize = size
        self._entries: "OrderedDict[_K, _V]" = OrderedDict()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def get_or_create(self, key: _K, factory: Callable[[], _V]) -> _V:
        """Return the cached value for ``key``, building it on a miss."""

        if self._maxsize == 0:
            return factory()
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                return self._entries[key]
            value = factory()
            self._entries[key] = value
            while len(self._entries) > self._maxsize:
                self._entries.popitem(last=False)
            return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
