from __future__ import annotations

import pytest

from kartlab.core.models import AxisFilter
from kartlab.core.stats import (
    ActiveMaxStats,
    MaxStats,
    compute_active_max_stats,
    compute_max_stats,
    stat_band,
    stat_percentage,
)

from tests.helpers import build_character, build_vehicle


def test_max_speed_spans_characters_and_vehicles() -> None:
    entities = [
        build_character("A", speed=(5, 0, 0, 0)),
        build_vehicle("B", speed=(3, 0, 0, 0)),
        build_vehicle("C", speed=(9, 0, 0, 0)),
    ]

    max_stats = compute_max_stats(entities)

    assert max_stats["speed.display"] == 9
    assert compute_active_max_stats(entities).speed == 9


def test_maxima_are_floored_at_one() -> None:
    assert compute_max_stats([]) == MaxStats()
    assert set(compute_max_stats([]).as_dict().values()) == {1}
    assert compute_active_max_stats([]) == ActiveMaxStats(1, 1, 1, 1)

    zeros = compute_max_stats([build_character("Zero")])
    assert set(zeros.as_dict().values()) == {1}


def test_active_maxima_follow_selected_sub_axes(characters, vehicles) -> None:
    entities = [*characters, *vehicles]
    filters = AxisFilter(speed_sub_axis="water", handling_sub_axis="terrain")

    active = compute_active_max_stats(entities, filters)

    assert active.speed == 5
    assert active.handling == 4
    assert active.acceleration == 5
    assert active.weight == 6
    assert compute_active_max_stats(compute_max_stats(entities), filters) == active


def test_summary_collapses_sub_axes() -> None:
    entities = [build_character("Yoshi", speed=(3, 3, 3, 8), handling=(2, 2, 6, 2))]

    summary = compute_max_stats(entities).summary()

    assert summary.speed == 8
    assert summary.handling == 6


@pytest.mark.parametrize(
    ("value", "maximum", "expected"),
    [
        pytest.param(0, 10, 5, id="minimum-width"),
        pytest.param(1, 3, 33, id="rounds-down"),
        pytest.param(1, 8, 13, id="rounds-half-up"),
        pytest.param(9, 9, 100, id="full"),
        pytest.param(3, 0, 300, id="zero-maximum-uses-floor"),
    ],
)
def test_stat_percentage(value: int, maximum: int, expected: int) -> None:
    assert stat_percentage(value, maximum) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(10, "high"), (8, "high"), (7, "good"), (6, "good"), (4, "fair"), (3, "low")],
)
def test_stat_band_thresholds(value: int, expected: str) -> None:
    assert stat_band(value, 10) == expected
