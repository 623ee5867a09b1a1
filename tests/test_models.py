from __future__ import annotations

import pytest

from kartlab.core.models import AXES, AxisFilter, Dataset, Entity, StatVector

from tests.helpers import build_character, build_stats


def test_stat_vector_accepts_dotted_flat_and_legacy_keys() -> None:
    dotted = StatVector.from_mapping({"speed.road": 4, "handling.water": 2, "weight": 3})
    flat = StatVector.from_mapping({"speed_road": 4, "handling_water": 2, "weight": 3})
    legacy = StatVector.from_mapping({"roadSpeed": 4, "waterHandling": 2, "weight": 3})
    nested = StatVector.from_mapping({"speed": {"road": 4}, "handling": {"water": 2}, "weight": 3})

    assert dotted == flat == legacy == nested
    assert dotted.speed("road") == 4
    assert dotted.handling("water") == 2
    assert dotted.speed("terrain") == 0


def test_stat_vector_rejects_non_numeric_values() -> None:
    with pytest.raises(ValueError):
        StatVector.from_mapping({"roadSpeed": "fast"})
    with pytest.raises(TypeError):
        StatVector.from_mapping({"roadSpeed": True})
    with pytest.raises(ValueError):
        StatVector.from_mapping({"roadSpeed": 2.5})


def test_stat_vector_views_follow_canonical_axis_order() -> None:
    stats = StatVector.from_sequence(range(10))

    assert list(stats.as_dict()) == list(AXES)
    assert stats.as_array().tolist() == list(range(10))
    assert stats.value("handling.display") == 6

    with pytest.raises(KeyError):
        stats.value("boost")
    with pytest.raises(ValueError):
        StatVector.from_sequence([1, 2, 3])


def test_combine_adds_bonus_to_every_axis() -> None:
    left = build_stats(speed=(1, 2, 3, 4), acceleration=5, weight=6, handling=(7, 8, 9, 10))
    right = build_stats(speed=(1, 1, 1, 1), acceleration=1, weight=1, handling=(1, 1, 1, 1))

    combined = left.combine(right, bonus=3)

    assert combined.as_tuple() == tuple(value + 4 for value in left.as_tuple())


def test_entity_from_mapping_defaults_reference_name() -> None:
    entity = Entity.from_mapping({"name": "瑪利歐", "roadSpeed": 4}, "character")

    assert entity.local_name == "瑪利歐"
    assert entity.reference_name == "瑪利歐"
    assert entity.stats.speed_road == 4

    named = Entity.from_mapping(
        {"localName": "路易吉", "referenceName": "Luigi", "stats": {"speed.road": 3}}, "vehicle"
    )
    assert named.reference_name == "Luigi"
    assert named.kind == "vehicle"


def test_entity_requires_local_name_and_known_kind() -> None:
    with pytest.raises(ValueError):
        Entity.from_mapping({"englishName": "Nobody"}, "character")
    with pytest.raises(ValueError):
        Entity(local_name="Mario", reference_name="Mario", stats=StatVector(), kind="boat")


def test_axis_filter_validates_values() -> None:
    assert AxisFilter() == AxisFilter("speed", "display", "display")
    with pytest.raises(ValueError):
        AxisFilter(sort_metric="boost")
    with pytest.raises(ValueError):
        AxisFilter(speed_sub_axis="air")


def test_dataset_fingerprint_tracks_stats() -> None:
    mario = build_character("Mario", speed=(4, 4, 3, 3))
    faster = build_character("Mario", speed=(5, 5, 3, 3))

    assert Dataset(characters=(mario,)).fingerprint() != Dataset(characters=(faster,)).fingerprint()
    assert Dataset().is_empty
    assert Dataset(characters=(mario,)).entities == (mario,)
