"""Structured (JSON or YAML) dataset documents."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..core.models import Dataset, Entity, EntityKind
from ..errors import LoadError

__all__ = ["parse_structured_document", "read_structured"]


def _entity_list(payload: Any, kind: EntityKind, source: str) -> tuple[Entity, ...]:
    if payload is None:
        return ()
    if not isinstance(payload, list):
        raise LoadError(
            f"'{kind}s' must be a list in {source}",
            context={"path": source, "kind": kind},
        )
    entities: list[Entity] = []
    for index, record in enumerate(payload):
        if not isinstance(record, MappingABC):
            raise LoadError(
                f"{kind} record #{index} is not a mapping in {source}",
                context={"path": source, "kind": kind, "index": index},
            )
        try:
            entities.append(Entity.from_mapping(record, kind))
        except (TypeError, ValueError) as exc:
            raise LoadError(
                f"Invalid {kind} record #{index} in {source}: {exc}",
                context={"path": source, "kind": kind, "index": index},
            ) from exc
    return tuple(entities)


def parse_structured_document(document: Any, *, source: str = "<memory>") -> Dataset:
    """Convert a parsed ``{"version", "lastUpdate", "data": {...}}`` document.

    The ``data`` wrapper is optional; ``characters`` and ``vehicles`` may also
    sit at the top level.
    """

    if not isinstance(document, MappingABC):
        raise LoadError(f"Dataset document {source} must be a mapping", context={"path": source})
    body: Mapping[str, Any] = document
    data = document.get("data")
    if isinstance(data, MappingABC):
        body = data
    characters = _entity_list(body.get("characters"), "character", source)
    vehicles = _entity_list(body.get("vehicles"), "vehicle", source)
    version = document.get("version")
    metadata: dict[str, Any] = {}
    extra = document.get("metadata")
    if isinstance(extra, MappingABC):
        metadata.update({str(key): value for key, value in extra.items()})
    last_update = document.get("lastUpdate", document.get("last_update"))
    if last_update is not None:
        metadata["last_update"] = str(last_update)
    return Dataset(
        characters=characters,
        vehicles=vehicles,
        version=None if version is None else str(version),
        source=source,
        metadata=metadata,
    )


def read_structured(path: Path) -> Dataset:
    """Read a JSON or YAML dataset document from ``path``."""

    path = Path(path)
    source = str(path)
    try:
        with path.open("r", encoding="utf8") as handle:
            document = yaml.safe_load(handle)
    except OSError as exc:
        raise LoadError(f"Unable to read {source}: {exc}", context={"path": source}) from exc
    except (UnicodeDecodeError, yaml.YAMLError) as exc:
        raise LoadError(f"Malformed dataset document {source}: {exc}", context={"path": source}) from exc
    return parse_structured_document(document, source=source)
