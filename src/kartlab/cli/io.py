"""Configuration, dataset and state-directory helpers for the KartLab CLI."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..configuration import load_project_config, resolve_pyproject_path
from ..core.models import Dataset
from ..errors import LoadError
from ..ingestion import load_entities_sync
from ..io.stores import JsonFileStore
from ..resources import default_dataset_path, default_state_dir
from ..settings import KartlabSettings
from ..store import KartStore
from .errors import CliError

CONFIG_ENV_VAR = "KARTLAB_CONFIG"
COMBINATIONS_FILENAME = "combinations.json"
HISTORY_FILENAME = "search-history.json"


def _iter_unique_paths(candidates: List[Path]) -> List[Path]:
    seen: Dict[Path, None] = {}
    ordered: List[Path] = []
    for candidate in candidates:
        resolved = candidate.expanduser().resolve(strict=False)
        if resolved in seen:
            continue
        seen[resolved] = None
        ordered.append(resolved)
    return ordered


def _candidates(base: Path) -> List[Path]:
    resolved = resolve_pyproject_path(base)
    return [] if resolved is None else [resolved]


def load_cli_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load CLI defaults from ``pyproject.toml`` files.

    ``path`` wins over ``KARTLAB_CONFIG`` which wins over the working
    directory.  ``_config_path`` records the file actually used.
    """

    env_config = os.environ.get(CONFIG_ENV_VAR)
    bases: List[Path] = []
    if path is not None:
        bases.append(path)
    if env_config:
        bases.append(Path(env_config))
    bases.append(Path.cwd())

    candidates: List[Path] = []
    for base in bases:
        candidates.extend(_candidates(base))
    for candidate in _iter_unique_paths(candidates):
        loaded = load_project_config(candidate)
        if not loaded:
            continue
        payload, resolved = loaded
        payload["_config_path"] = str(resolved)
        return payload

    return {"_config_path": None}


def _path_setting(
    namespace: argparse.Namespace, attribute: str, config: Mapping[str, Any], key: str
) -> Optional[Path]:
    value = getattr(namespace, attribute, None)
    if value is not None:
        return Path(value)
    paths_cfg = config.get("paths", {})
    if isinstance(paths_cfg, Mapping) and paths_cfg.get(key):
        raw = Path(str(paths_cfg[key])).expanduser()
        config_path = config.get("_config_path")
        if not raw.is_absolute() and config_path:
            raw = Path(config_path).parent / raw
        return raw
    return None


def resolve_sources(
    namespace: argparse.Namespace, config: Mapping[str, Any]
) -> tuple[Optional[Path], Optional[Path]]:
    """Return the structured and tabular dataset paths for this invocation.

    Without any configured source the bundled sample dataset is used.
    """

    structured = _path_setting(namespace, "data", config, "data")
    tabular = _path_setting(namespace, "csv", config, "csv")
    if structured is None and tabular is None:
        structured = default_dataset_path()
    return structured, tabular


def resolve_state_dir(namespace: argparse.Namespace, config: Mapping[str, Any]) -> Path:
    return _path_setting(namespace, "state_dir", config, "state_dir") or default_state_dir()


def load_dataset(namespace: argparse.Namespace, config: Mapping[str, Any]) -> Dataset:
    structured, tabular = resolve_sources(namespace, config)
    try:
        return load_entities_sync(structured, tabular)
    except LoadError as exc:
        raise CliError.from_kartlab_error(exc) from exc


def build_store(namespace: argparse.Namespace, config: Mapping[str, Any]) -> KartStore:
    """Create and hydrate a :class:`KartStore` backed by the state directory."""

    settings = KartlabSettings.from_config(config)
    state_dir = resolve_state_dir(namespace, config)
    store = KartStore(
        settings,
        combination_store=JsonFileStore(state_dir / COMBINATIONS_FILENAME, key="combinations"),
        history_store=JsonFileStore(state_dir / HISTORY_FILENAME, key="search_history"),
    )
    store.hydrate(load_dataset(namespace, config))
    return store
