"""Helpers to locate bundled KartLab resources and the user state directory."""

from __future__ import annotations

import os
from importlib import resources
from pathlib import Path

__all__ = [
    "DEFAULT_DATASET_NAME",
    "STATE_DIR_ENV_VAR",
    "data_root",
    "default_dataset_path",
    "default_state_dir",
    "set_data_root_override",
]

DEFAULT_DATASET_NAME = "karts.json"
STATE_DIR_ENV_VAR = "KARTLAB_STATE_DIR"

_FALLBACK_DATA_ROOT = Path(__file__).resolve().parent / "data"
_DATA_ROOT_OVERRIDE: Path | None = None


def set_data_root_override(path: Path | None) -> None:
    """Force :func:`data_root` to return ``path`` (used in tests)."""

    global _DATA_ROOT_OVERRIDE
    _DATA_ROOT_OVERRIDE = Path(path) if path is not None else None


def data_root() -> Path:
    """Return the directory containing the bundled datasets."""

    if _DATA_ROOT_OVERRIDE is not None:
        return _DATA_ROOT_OVERRIDE
    try:
        candidate = Path(resources.files("kartlab.resources")) / "data"
    except ModuleNotFoundError:
        return _FALLBACK_DATA_ROOT
    return candidate if candidate.exists() else _FALLBACK_DATA_ROOT


def default_dataset_path() -> Path:
    return data_root() / DEFAULT_DATASET_NAME


def default_state_dir() -> Path:
    """Directory holding persisted combinations and search history.

    ``KARTLAB_STATE_DIR`` overrides the default ``~/.kartlab``.
    """

    override = os.environ.get(STATE_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".kartlab"
