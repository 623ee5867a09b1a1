"""Tabular CSV exports of the character and vehicle sheets.

The sheet carries two header rows followed by one row per line where the
character table occupies columns 1-13 and the vehicle table columns 17-29::

    col  1      2          3-6                   7  8     9       10-13
         name   reference  speed display/road/   -  acc.  weight  handling ...
                           terrain/water

Column 7 (and 23 for vehicles) is unused. Explanatory note rows are skipped.
"""

from __future__ import annotations

import io
import re
from pathlib import Path
from typing import Any, Sequence

from ..core.models import Dataset, Entity, EntityKind, StatVector
from ..errors import LoadError

__all__ = ["parse_tabular_rows", "read_tabular"]

HEADER_ROWS = 2
CHARACTER_OFFSET = 1
VEHICLE_OFFSET = 17
_MIN_COLUMNS = VEHICLE_OFFSET + 13

# Offsets of the ten stat columns relative to the name column.
_STAT_OFFSETS: tuple[int, ...] = (2, 3, 4, 5, 7, 8, 9, 10, 11, 12)

_VEHICLE_SECTION_MARKER = "車輛"
_NOTE_MARKERS: tuple[str, ...] = ("能力值解析", "重要說明", "能力值顯示不一致")
_FOOTNOTE = re.compile(r"[¹²³]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_PANDAS_DEPENDENCY_MESSAGE = "Reading CSV datasets requires the 'pandas' package."


def _parse_int(value: Any) -> int:
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _cell(row: Sequence[Any], index: int) -> str:
    if index >= len(row):
        return ""
    value = row[index]
    return "" if value is None else str(value).strip()


def _is_note(text: str) -> bool:
    return any(marker in text for marker in _NOTE_MARKERS) or bool(_FOOTNOTE.search(text))


def _entity_at(row: Sequence[Any], offset: int, kind: EntityKind) -> Entity | None:
    local_name = _cell(row, offset)
    reference_name = _cell(row, offset + 1)
    if not local_name or not reference_name:
        return None
    stats = StatVector.from_sequence([_parse_int(_cell(row, offset + delta)) for delta in _STAT_OFFSETS])
    return Entity(local_name=local_name, reference_name=reference_name, stats=stats, kind=kind)


def parse_tabular_rows(rows: Sequence[Sequence[Any]], *, source: str = "<memory>") -> Dataset:
    """Extract characters and vehicles from data rows (headers already removed)."""

    characters: list[Entity] = []
    vehicles: list[Entity] = []
    for row in rows:
        first = _cell(row, CHARACTER_OFFSET)
        if not first or _is_note(first):
            continue
        if first != _VEHICLE_SECTION_MARKER:
            character = _entity_at(row, CHARACTER_OFFSET, "character")
            if character is not None:
                characters.append(character)
        vehicle = _entity_at(row, VEHICLE_OFFSET, "vehicle")
        if vehicle is not None:
            vehicles.append(vehicle)
    return Dataset(characters=tuple(characters), vehicles=tuple(vehicles), source=source)


def read_tabular(path: Path) -> Dataset:
    """Read the CSV export at ``path`` with pandas."""

    path = Path(path)
    source = str(path)
    try:
        import pandas as pd  # type: ignore
    except ModuleNotFoundError as exc:
        raise LoadError(_PANDAS_DEPENDENCY_MESSAGE, context={"path": source}) from exc

    try:
        text = path.read_text(encoding="utf8")
    except OSError as exc:
        raise LoadError(f"Unable to read {source}: {exc}", context={"path": source}) from exc
    except UnicodeDecodeError as exc:
        raise LoadError(f"CSV dataset {source} is not valid UTF-8: {exc}", context={"path": source}) from exc

    # Rows are ragged; size the frame to the widest line so pandas never
    # rejects a row for carrying more fields than the first one.
    width = max([_MIN_COLUMNS, *(line.count(",") + 1 for line in text.splitlines())])
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            header=None,
            names=list(range(width)),
            skiprows=HEADER_ROWS,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (ValueError, pd.errors.ParserError) as exc:
        raise LoadError(f"Malformed CSV dataset {source}: {exc}", context={"path": source}) from exc
    frame = frame.fillna("")
    return parse_tabular_rows(frame.values.tolist(), source=source)
