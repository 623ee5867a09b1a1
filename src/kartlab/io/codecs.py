"""Plain-mapping codecs for the persisted combination and history collections."""

from __future__ import annotations

from typing import Any, Mapping

from ..core.models import Combination, Entity, SearchHistoryItem, StatVector

__all__ = [
    "combination_from_dict",
    "combination_to_dict",
    "history_item_from_dict",
    "history_item_to_dict",
]


def _entity_to_dict(entity: Entity) -> dict[str, Any]:
    return {
        "localName": entity.local_name,
        "referenceName": entity.reference_name,
        "stats": entity.stats.as_dict(),
    }


def combination_to_dict(combination: Combination) -> dict[str, Any]:
    return {
        "id": combination.id,
        "createdAt": combination.created_at,
        "character": _entity_to_dict(combination.character),
        "vehicle": _entity_to_dict(combination.vehicle),
        "combinedStats": combination.combined_stats.as_dict(),
    }


def combination_from_dict(payload: Mapping[str, Any]) -> Combination:
    """Rebuild a :class:`Combination` from its stored mapping.

    ``combinedStats`` is read back as stored; it is never recomputed so a
    persisted combination stays exactly as the user created it.
    """

    identifier = payload.get("id")
    if not isinstance(identifier, str) or not identifier:
        raise ValueError("Stored combination is missing its id")
    character = payload.get("character")
    vehicle = payload.get("vehicle")
    combined = payload.get("combinedStats")
    if not isinstance(character, Mapping) or not isinstance(vehicle, Mapping):
        raise ValueError(f"Stored combination {identifier!r} is missing its entities")
    if not isinstance(combined, Mapping):
        raise ValueError(f"Stored combination {identifier!r} is missing combinedStats")
    return Combination(
        id=identifier,
        character=Entity.from_mapping(character, "character"),
        vehicle=Entity.from_mapping(vehicle, "vehicle"),
        combined_stats=StatVector.from_mapping(combined),
        created_at=int(payload.get("createdAt") or 0),
    )


def history_item_to_dict(item: SearchHistoryItem) -> dict[str, Any]:
    return {
        "query": item.query,
        "timestamp": item.timestamp,
        "resultCount": item.result_count,
    }


def history_item_from_dict(payload: Mapping[str, Any]) -> SearchHistoryItem:
    query = payload.get("query")
    if not isinstance(query, str):
        raise ValueError("Stored history item is missing its query")
    return SearchHistoryItem(
        query=query,
        timestamp=int(payload.get("timestamp") or 0),
        result_count=int(payload.get("resultCount") or 0),
    )
