"""Key-value collection stores backing combinations and search history.

Every store implements the same two-call contract: ``load()`` returns the
persisted list of plain mappings and ``save(items)`` replaces it wholesale.
Writes are last-write-wins; there is a single active session by assumption.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, List, Mapping, Protocol, Sequence, runtime_checkable

from ..errors import PersistenceError

__all__ = ["CollectionStore", "JsonFileStore", "MemoryStore"]

logger = logging.getLogger(__name__)


@runtime_checkable
class CollectionStore(Protocol):
    """Read/write contract for a persisted, ordered collection."""

    def load(self) -> List[Mapping[str, Any]]:
        ...

    def save(self, items: Sequence[Mapping[str, Any]]) -> None:
        ...


class MemoryStore:
    """Process-local store, mostly useful for tests and session-only mode."""

    def __init__(self, items: Sequence[Mapping[str, Any]] | None = None) -> None:
        self._items: List[Mapping[str, Any]] = copy.deepcopy(list(items or []))

    def load(self) -> List[Mapping[str, Any]]:
        return copy.deepcopy(self._items)

    def save(self, items: Sequence[Mapping[str, Any]]) -> None:
        self._items = copy.deepcopy(list(items))


class JsonFileStore:
    """Persist a collection as a JSON document under ``path``.

    The document layout is ``{"key": <name>, "items": [...]}`` so several
    collections can live next to each other in one state directory.  A
    missing file loads as an empty collection.
    """

    def __init__(self, path: str | Path, *, key: str | None = None) -> None:
        self.path = Path(path).expanduser()
        self.key = key or self.path.stem

    def load(self) -> List[Mapping[str, Any]]:
        if not self.path.exists():
            return []
        try:
            payload = json.loads(self.path.read_text(encoding="utf8"))
        except (OSError, ValueError) as exc:
            raise PersistenceError(
                f"Unable to read collection '{self.key}'.",
                context={"path": self.path, "error": exc},
            ) from exc
        if isinstance(payload, Mapping):
            items = payload.get("items", [])
        else:
            items = payload
        if not isinstance(items, list):
            raise PersistenceError(
                f"Collection '{self.key}' must contain a list of items.",
                context={"path": self.path},
            )
        return [item for item in items if isinstance(item, Mapping)]

    def save(self, items: Sequence[Mapping[str, Any]]) -> None:
        document = {"key": self.key, "items": list(items)}
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(document, ensure_ascii=False, indent=2) + "\n", encoding="utf8"
            )
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(
                f"Unable to write collection '{self.key}'.",
                context={"path": self.path, "error": exc},
            ) from exc
        logger.debug(
            "Collection persisted.",
            extra={"event": "store.saved", "key": self.key, "count": len(document["items"])},
        )
