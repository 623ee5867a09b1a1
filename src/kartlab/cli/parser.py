"""Argument parsing helpers for the KartLab CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from ..core.models import SORT_METRICS, SUB_AXES, TERRAINS
from .commands import (
    _handle_combo,
    _handle_history,
    _handle_recommend,
    _handle_search,
    _handle_sort,
    _handle_stats,
)

OUTPUT_FORMATS = ("text", "json")


def _add_axis_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--speed-axis",
        dest="speed_sub_axis",
        choices=SUB_AXES,
        default="display",
        help="Speed sub-axis used for speed values (default: display).",
    )
    parser.add_argument(
        "--handling-axis",
        dest="handling_sub_axis",
        choices=SUB_AXES,
        default="display",
        help="Handling sub-axis used for handling values (default: display).",
    )


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg = dict(config.get("logging", {}))

    output_parent = argparse.ArgumentParser(add_help=False)
    output_parent.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (text or json).",
    )

    parser = argparse.ArgumentParser(
        prog="kartlab",
        description="KartLab – character and vehicle stat reference",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml holding a [tool.kartlab] table.",
    )
    parser.add_argument(
        "--data",
        dest="data",
        type=Path,
        default=None,
        help="Structured dataset document (JSON or YAML). Overrides paths.data.",
    )
    parser.add_argument(
        "--csv",
        dest="csv",
        type=Path,
        default=None,
        help="Tabular CSV dataset used when the structured document is unusable.",
    )
    parser.add_argument(
        "--state-dir",
        dest="state_dir",
        type=Path,
        default=None,
        help="Directory holding saved combinations and search history.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level", "info"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output", "stderr"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=logging_cfg.get("format", "text"),
        help="Logging formatter (json or text).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    stats_parser = subparsers.add_parser(
        "stats",
        parents=[output_parent],
        help="Show per-axis maxima across characters and vehicles.",
    )
    _add_axis_arguments(stats_parser)
    stats_parser.set_defaults(handler=_handle_stats)

    sort_parser = subparsers.add_parser(
        "sort",
        parents=[output_parent],
        help="List characters or vehicles ordered by a metric.",
    )
    sort_parser.add_argument(
        "kind",
        nargs="?",
        choices=("characters", "vehicles"),
        default="characters",
        help="Which list to sort (default: characters).",
    )
    sort_parser.add_argument(
        "--metric",
        choices=SORT_METRICS,
        default="speed",
        help="Metric to sort by (default: speed).",
    )
    sort_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Only show the first N entries.",
    )
    _add_axis_arguments(sort_parser)
    sort_parser.set_defaults(handler=_handle_sort)

    recommend_parser = subparsers.add_parser(
        "recommend",
        parents=[output_parent],
        help="Show the best character/vehicle pairings per terrain.",
    )
    recommend_parser.add_argument(
        "--terrain",
        choices=TERRAINS,
        default=None,
        help="Only show one terrain (default: all).",
    )
    recommend_parser.set_defaults(handler=_handle_recommend)

    search_parser = subparsers.add_parser(
        "search",
        parents=[output_parent],
        help="Search characters and vehicles by name.",
    )
    search_parser.add_argument("query", nargs="?", default="", help="Text to search for.")
    search_parser.set_defaults(handler=_handle_search)

    # Nested actions accept --format too but must not reset a value given
    # before the action name.
    action_parent = argparse.ArgumentParser(add_help=False)
    action_parent.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default=argparse.SUPPRESS,
        help="Output format (text or json).",
    )

    combo_parser = subparsers.add_parser(
        "combo",
        parents=[output_parent],
        help="Manage saved character/vehicle combinations.",
    )
    combo_subparsers = combo_parser.add_subparsers(dest="combo_action", required=True)
    combo_add = combo_subparsers.add_parser(
        "add", parents=[action_parent], help="Save a new combination."
    )
    combo_add.add_argument("character", help="Character local or reference name.")
    combo_add.add_argument("vehicle", help="Vehicle local or reference name.")
    combo_remove = combo_subparsers.add_parser(
        "remove", parents=[action_parent], help="Delete a combination by id."
    )
    combo_remove.add_argument("identifier", help="Combination id.")
    combo_subparsers.add_parser("list", parents=[action_parent], help="List saved combinations.")
    combo_subparsers.add_parser(
        "clear", parents=[action_parent], help="Delete every saved combination."
    )
    combo_parser.set_defaults(handler=_handle_combo)

    history_parser = subparsers.add_parser(
        "history",
        parents=[output_parent],
        help="Inspect or edit the search history.",
    )
    history_subparsers = history_parser.add_subparsers(dest="history_action")
    history_subparsers.add_parser(
        "list", parents=[action_parent], help="List past searches (default)."
    )
    history_remove = history_subparsers.add_parser(
        "remove", parents=[action_parent], help="Forget one query."
    )
    history_remove.add_argument("query", help="Query to forget.")
    history_subparsers.add_parser("clear", parents=[action_parent], help="Forget every query.")
    history_parser.set_defaults(handler=_handle_history, history_action="list")

    return parser
