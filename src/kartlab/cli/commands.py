"""Sub-command handlers for the KartLab CLI.

Each handler receives the parsed namespace and the loaded configuration and
returns the text to print.
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Iterable, List, Mapping, Sequence

from ..core.models import TERRAINS, AxisFilter, Combination, Entity
from ..core.sorting import resolve_metric_value
from ..core.stats import stat_band, stat_percentage
from ..recommender import RecommendationEntry
from ..store import KartStore
from .errors import CliError
from .io import build_store


def _render_json(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _entity_label(entity: Entity) -> str:
    if entity.reference_name and entity.reference_name != entity.local_name:
        return f"{entity.local_name} ({entity.reference_name})"
    return entity.local_name


def _table(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    materialised = [[str(cell) for cell in row] for row in rows]
    widths = [len(header) for header in headers]
    for row in materialised:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))
    lines = ["  ".join(header.ljust(widths[i]) for i, header in enumerate(headers)).rstrip()]
    lines.append("  ".join("-" * width for width in widths))
    for row in materialised:
        lines.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
    return "\n".join(lines)


def _filters_from(namespace: argparse.Namespace) -> AxisFilter:
    return AxisFilter(
        sort_metric=getattr(namespace, "metric", "speed"),
        speed_sub_axis=getattr(namespace, "speed_sub_axis", "display"),
        handling_sub_axis=getattr(namespace, "handling_sub_axis", "display"),
    )


def _open_store(namespace: argparse.Namespace, config: Mapping[str, Any]) -> KartStore:
    store = build_store(namespace, config)
    filters = _filters_from(namespace)
    store.set_filters(
        sort_metric=filters.sort_metric,
        speed_sub_axis=filters.speed_sub_axis,
        handling_sub_axis=filters.handling_sub_axis,
    )
    return store


def _handle_stats(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    store = _open_store(namespace, config)
    max_stats = store.max_stats()
    active = store.active_max_stats()
    snapshot = store.get_snapshot()
    payload = {
        "characters": len(snapshot.characters),
        "vehicles": len(snapshot.vehicles),
        "version": snapshot.dataset.version,
        "max_stats": max_stats.as_dict(),
        "summary": max_stats.summary().as_dict(),
        "active_max_stats": active.as_dict(),
        "filters": {
            "speed_sub_axis": snapshot.filters.speed_sub_axis,
            "handling_sub_axis": snapshot.filters.handling_sub_axis,
        },
    }
    if namespace.output_format == "json":
        return _render_json(payload)
    lines = [
        f"Characters: {payload['characters']}  Vehicles: {payload['vehicles']}",
        "",
        _table(("axis", "max"), max_stats.as_dict().items()),
        "",
        (
            f"Active maxima (speed.{snapshot.filters.speed_sub_axis}, "
            f"handling.{snapshot.filters.handling_sub_axis}):"
        ),
        _table(("metric", "max"), active.as_dict().items()),
    ]
    return "\n".join(lines)


def _handle_sort(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    store = _open_store(namespace, config)
    if namespace.kind == "vehicles":
        ordered = store.sorted_vehicles()
    else:
        ordered = store.sorted_characters()
    if namespace.limit is not None:
        if namespace.limit < 0:
            raise CliError(
                "--limit must not be negative.",
                category="usage",
                context={"limit": namespace.limit},
            )
        ordered = ordered[: namespace.limit]
    filters = store.get_snapshot().filters
    maximum = store.active_max_stats().for_metric(filters.sort_metric)
    rows: List[dict[str, Any]] = []
    for position, entity in enumerate(ordered, start=1):
        value = resolve_metric_value(entity, filters.sort_metric, filters)
        rows.append(
            {
                "position": position,
                "local_name": entity.local_name,
                "reference_name": entity.reference_name,
                "value": value,
                "percentage": stat_percentage(value, maximum),
                "band": stat_band(value, maximum),
            }
        )
    if namespace.output_format == "json":
        return _render_json({"kind": namespace.kind, "metric": filters.sort_metric, "entries": rows})
    return _table(
        ("#", "name", filters.sort_metric, "bar", "band"),
        (
            (
                row["position"],
                _entity_label(ordered[row["position"] - 1]),
                row["value"],
                f"{row['percentage']}%",
                row["band"],
            )
            for row in rows
        ),
    )


def _recommendation_rows(entries: Sequence[RecommendationEntry]) -> str:
    return _table(
        ("rank", "character", "vehicle", "score", "spd", "hdl", "acc", "wgt"),
        (
            (
                entry.rank,
                entry.character.local_name,
                entry.vehicle.local_name,
                f"{entry.score:.1f}",
                entry.total_speed,
                entry.total_handling,
                entry.total_acceleration,
                entry.total_weight,
            )
            for entry in entries
        ),
    )


def _handle_recommend(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    store = _open_store(namespace, config)
    recommendations = store.recommendations()
    terrains = (namespace.terrain,) if namespace.terrain else TERRAINS
    if namespace.output_format == "json":
        payload = recommendations.as_dict()
        for terrain in TERRAINS:
            if terrain not in terrains:
                payload.pop(terrain, None)
        return _render_json(payload)
    blocks = []
    for terrain in terrains:
        blocks.append(f"[{terrain}]")
        blocks.append(_recommendation_rows(recommendations.for_terrain(terrain)))
        blocks.append("")
    return "\n".join(blocks).rstrip()


def _handle_search(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    store = _open_store(namespace, config)
    outcome = store.search.evaluate_now(namespace.query)
    if outcome.show_history:
        return _render_history(store, namespace.output_format)
    if namespace.output_format == "json":
        return _render_json(
            {"query": outcome.query, "results": [result.as_dict() for result in outcome.results]}
        )
    if not outcome.results:
        return f"No matches for {outcome.query!r}."
    return _table(
        ("kind", "name", "score"),
        (
            (result.kind, _entity_label(result.entity), f"{result.score:.1f}")
            for result in outcome.results
        ),
    )


def _combination_payload(combination: Combination) -> dict[str, Any]:
    return {
        "id": combination.id,
        "character": combination.character.local_name,
        "vehicle": combination.vehicle.local_name,
        "created_at": combination.created_at,
        "combined_stats": combination.combined_stats.as_dict(),
    }


def _render_combinations(combinations: Sequence[Combination], output_format: str) -> str:
    if output_format == "json":
        return _render_json([_combination_payload(item) for item in combinations])
    if not combinations:
        return "No saved combinations."
    return _table(
        ("id", "character", "vehicle", "spd", "acc", "wgt", "hdl"),
        (
            (
                item.id,
                item.character.local_name,
                item.vehicle.local_name,
                item.combined_stats.speed_display,
                item.combined_stats.acceleration,
                item.combined_stats.weight,
                item.combined_stats.handling_display,
            )
            for item in combinations
        ),
    )


def _handle_combo(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    store = _open_store(namespace, config)
    action = namespace.combo_action
    if action == "add":
        try:
            combination = store.add_combination(namespace.character, namespace.vehicle)
        except KeyError as exc:
            raise CliError(
                str(exc.args[0]) if exc.args else "Unknown entity.",
                category="not_found",
                context={"character": namespace.character, "vehicle": namespace.vehicle},
            ) from exc
        return _render_combinations([combination], namespace.output_format)
    if action == "remove":
        if not store.remove_combination(namespace.identifier):
            raise CliError(
                f"No combination with id {namespace.identifier!r}.",
                category="not_found",
                context={"id": namespace.identifier},
            )
        return f"Removed {namespace.identifier}."
    if action == "clear":
        store.clear_combinations()
        return "Cleared all combinations."
    return _render_combinations(store.get_snapshot().combinations, namespace.output_format)


def _render_history(store: KartStore, output_format: str) -> str:
    items = store.history.items
    if output_format == "json":
        return _render_json(
            [
                {"query": item.query, "timestamp": item.timestamp, "result_count": item.result_count}
                for item in items
            ]
        )
    if not items:
        return "No search history."
    return _table(
        ("query", "results"),
        ((item.query, item.result_count) for item in items),
    )


def _handle_history(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    store = _open_store(namespace, config)
    action = namespace.history_action
    if action == "remove":
        if not store.history.remove(namespace.query):
            raise CliError(
                f"{namespace.query!r} is not in the search history.",
                category="not_found",
                context={"query": namespace.query},
            )
        return f"Forgot {namespace.query!r}."
    if action == "clear":
        store.history.clear()
        return "Cleared search history."
    return _render_history(store, namespace.output_format)
