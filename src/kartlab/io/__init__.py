"""Persistence adapters for user-owned collections."""

from __future__ import annotations

from .codecs import (
    combination_from_dict,
    combination_to_dict,
    history_item_from_dict,
    history_item_to_dict,
)
from .stores import CollectionStore, JsonFileStore, MemoryStore

__all__ = [
    "CollectionStore",
    "JsonFileStore",
    "MemoryStore",
    "combination_from_dict",
    "combination_to_dict",
    "history_item_from_dict",
    "history_item_to_dict",
]
