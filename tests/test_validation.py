from __future__ import annotations

import logging

import pytest

from kartlab.core.models import Dataset
from kartlab.core.validation import (
    log_validation_warnings,
    validate_dataset,
    validate_entity,
)

from tests.helpers import build_character, build_vehicle


def test_consistent_entity_has_no_findings() -> None:
    entity = build_character("Mario", speed=(4, 4, 3, 3), handling=(4, 4, 3, 3))

    errors, warnings = validate_entity(entity)

    assert errors == []
    assert warnings == []


def test_display_mismatch_beyond_tolerance_is_a_warning() -> None:
    within = build_character("Luigi", speed=(5, 4, 3, 3), handling=(4, 4, 3, 3))
    beyond = build_character("Wario", speed=(7, 4, 3, 3), handling=(1, 4, 3, 3))

    assert validate_entity(within)[1] == []
    errors, warnings = validate_entity(beyond)
    assert errors == []
    assert {warning.axis for warning in warnings} == {"speed.display", "handling.display"}


def test_negative_stat_is_an_error() -> None:
    entity = build_character("Ghost", speed=(0, -1, 0, 0))

    errors, _ = validate_entity(entity)

    assert errors and "speed.road" in errors[0]


def test_heavy_vehicle_and_out_of_range_values_warn() -> None:
    vehicle = build_vehicle("Tank", speed=(120, 120, 0, 0), weight=12)

    _, warnings = validate_entity(vehicle)

    axes = [warning.axis for warning in warnings]
    assert "weight" in axes
    assert axes.count("speed.road") == 1


def test_duplicate_names_are_errors_per_kind() -> None:
    mario = build_character("Mario")
    kart = build_vehicle("Mario")
    dataset = Dataset(characters=(mario, build_character("Mario")), vehicles=(kart,))

    report = validate_dataset(dataset)

    assert not report.is_valid
    assert report.errors == ("Duplicated character name: Mario",)


def test_log_validation_warnings_emits_structured_records(caplog: pytest.LogCaptureFixture) -> None:
    entity = build_character("Wario", speed=(7, 4, 3, 3))
    _, warnings = validate_entity(entity)

    with caplog.at_level(logging.WARNING, logger="kartlab"):
        count = log_validation_warnings(warnings, source="karts.json")

    assert count == 1
    record = caplog.records[0]
    assert record.event == "dataset.validation_warning"
    assert record.entity == "Wario"
    assert record.axis == "speed.display"
    assert record.source == "karts.json"
