from __future__ import annotations

import logging
import sys
from pathlib import Path
from textwrap import dedent

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
for _path in (SRC_ROOT, ROOT):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from tests.helpers import build_character, build_vehicle  # noqa: E402


def write_pyproject(directory: Path, contents: str) -> Path:
    """Persist a ``pyproject.toml`` under ``directory`` and return its path."""

    payload = dedent(contents).lstrip()
    target = directory / "pyproject.toml"
    target.write_text(payload, encoding="utf8")
    return target


@pytest.fixture
def characters():
    """Three characters with distinct strengths on each terrain."""

    return (
        build_character(
            "Mario",
            "Mario",
            speed=(4, 4, 3, 3),
            acceleration=3,
            weight=4,
            handling=(4, 4, 3, 3),
        ),
        build_character(
            "Peach",
            "Peach",
            speed=(3, 3, 3, 3),
            acceleration=4,
            weight=3,
            handling=(5, 5, 4, 4),
        ),
        build_character(
            "Bowser",
            "Bowser",
            speed=(6, 6, 5, 5),
            acceleration=1,
            weight=6,
            handling=(2, 2, 2, 1),
        ),
    )


@pytest.fixture
def vehicles():
    return (
        build_vehicle(
            "Standard Kart",
            "Standard Kart",
            speed=(3, 3, 3, 3),
            acceleration=3,
            weight=3,
            handling=(3, 3, 3, 3),
        ),
        build_vehicle(
            "Pipe Frame",
            "Pipe Frame",
            speed=(2, 2, 2, 2),
            acceleration=5,
            weight=2,
            handling=(4, 4, 3, 3),
        ),
    )


@pytest.fixture
def dataset(characters, vehicles):
    from kartlab.core.models import Dataset

    return Dataset(characters=characters, vehicles=vehicles, source="fixture")


@pytest.fixture
def fixed_clock():
    """Clock returning a constant millisecond timestamp."""

    return lambda: 1_700_000_000_000


@pytest.fixture(autouse=True)
def _reset_kartlab_logger():
    logger = logging.getLogger("kartlab")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)

