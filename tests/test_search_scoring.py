from __future__ import annotations

import pytest

from kartlab.search import score_text, search_entities, similarity
from kartlab.settings import SearchSettings

from tests.helpers import build_character, build_vehicle


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        pytest.param("Mario", 100.0, id="exact"),
        pytest.param("mario", 100.0, id="exact-case-insensitive"),
        pytest.param("Mario Kart", 80.0, id="prefix"),
        pytest.param("Luimario", 60.0, id="substring"),
    ],
)
def test_tiers(name: str, expected: float) -> None:
    assert score_text("Mario", name, name) == expected


def test_best_of_local_and_reference_names() -> None:
    assert score_text("mario", "瑪利歐", "Mario") == 100.0
    assert score_text("luig", "Luigi", "路易吉") == 80.0


def test_similarity_is_index_aligned() -> None:
    assert similarity("", "") == 1.0
    assert similarity("bca", "abc") == 0.0
    assert similarity("abc", "abd") == pytest.approx(2 / 3)
    assert score_text("Mario", "Mariko", "Mariko") == pytest.approx(4 / 6 * 40)


def test_results_exclude_low_scores_and_put_characters_first() -> None:
    characters = [build_character("Peach"), build_character("Mario")]
    vehicles = [build_vehicle("Mario Machine"), build_vehicle("Mario")]

    results = search_entities("mario", characters, vehicles)

    assert [(result.kind, result.entity.local_name, result.score) for result in results] == [
        ("character", "Mario", 100.0),
        ("vehicle", "Mario", 100.0),
        ("vehicle", "Mario Machine", 80.0),
    ]


def test_threshold_is_strict() -> None:
    # "ab" vs "ax": one aligned match out of two characters scores exactly 20.
    characters = [build_character("ax")]

    assert search_entities("ab", characters, []) == []
    assert search_entities("ab", characters, [], SearchSettings(min_score=19.0))


def test_blank_query_and_result_cap() -> None:
    characters = [build_character(f"Koopa {index}") for index in range(30)]

    assert search_entities("   ", characters, []) == []
    assert len(search_entities("koopa", characters, [])) == 20
    assert len(search_entities("koopa", characters, [], SearchSettings(max_results=5))) == 5
