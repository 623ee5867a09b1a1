from __future__ import annotations

from pathlib import Path

import pytest

from kartlab.configuration import load_project_config, resolve_pyproject_path
from kartlab.resources import (
    STATE_DIR_ENV_VAR,
    default_dataset_path,
    default_state_dir,
    set_data_root_override,
)
from kartlab.settings import (
    COMBINATION_BONUS,
    DEFAULT_RECOMMENDATION_WEIGHTS,
    KartlabSettings,
)

from tests.conftest import write_pyproject


def test_load_project_config_reads_tool_section(tmp_path: Path) -> None:
    write_pyproject(
        tmp_path,
        """
        [project]
        name = "demo"

        [tool.kartlab.recommender]
        top_k = 5
        weights = { speed = 1.0 }

        [tool.kartlab.search]
        min_score = 35.5
        """,
    )

    loaded = load_project_config(tmp_path)

    assert loaded is not None
    payload, path = loaded
    assert path == (tmp_path / "pyproject.toml").resolve()
    assert payload["recommender"]["top_k"] == 5
    assert isinstance(payload["recommender"]["weights"], dict)


@pytest.mark.parametrize(
    "contents",
    [
        pytest.param("[project]\nname = 'demo'\n", id="no-tool-table"),
        pytest.param("[tool.other]\nvalue = 1\n", id="other-tool"),
        pytest.param("[tool]\nkartlab = 3\n", id="not-a-table"),
    ],
)
def test_load_project_config_without_section(tmp_path: Path, contents: str) -> None:
    write_pyproject(tmp_path, contents)

    assert load_project_config(tmp_path) is None


def test_resolve_pyproject_path(tmp_path: Path) -> None:
    assert resolve_pyproject_path(tmp_path) == tmp_path / "pyproject.toml"
    assert resolve_pyproject_path(tmp_path / "pyproject.toml") == tmp_path / "pyproject.toml"
    assert resolve_pyproject_path(tmp_path / "settings.yaml") is None
    assert load_project_config(tmp_path / "absent") is None


def test_settings_from_config_coerces_values() -> None:
    settings = KartlabSettings.from_config(
        {
            "rules": {"combination_bonus": "2"},
            "recommender": {
                "top_k": "4",
                "max_same_vehicle": 0,
                "weights": {"speed": 1, "weight": "heavy"},
            },
            "search": {"min_score": "30", "history_limit": -5, "debounce_ms": None},
        }
    )

    assert settings.combination_bonus == 2
    assert settings.recommender.top_k == 4
    assert settings.recommender.max_same_vehicle == 1
    assert settings.recommender.weights["speed"] == 1.0
    assert settings.recommender.weights["weight"] == DEFAULT_RECOMMENDATION_WEIGHTS["weight"]
    assert settings.search.min_score == 30.0
    assert settings.search.history_limit == 1
    assert settings.search.debounce_seconds == 0.3


@pytest.mark.parametrize("config", [None, {}, {"rules": "bonus", "search": [1, 2]}])
def test_settings_fall_back_to_defaults(config) -> None:
    settings = KartlabSettings.from_config(config)

    assert settings == KartlabSettings()
    assert settings.combination_bonus == COMBINATION_BONUS


def test_state_dir_honours_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(STATE_DIR_ENV_VAR, str(tmp_path / "state"))

    assert default_state_dir() == tmp_path / "state"

    monkeypatch.delenv(STATE_DIR_ENV_VAR)
    assert default_state_dir().name == ".kartlab"


def test_data_root_override(tmp_path: Path) -> None:
    assert default_dataset_path().is_file()

    set_data_root_override(tmp_path)
    try:
        assert default_dataset_path() == tmp_path / "karts.json"
    finally:
        set_data_root_override(None)
