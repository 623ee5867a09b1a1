"""Bundled KartLab resources."""

from .paths import (
    DEFAULT_DATASET_NAME,
    STATE_DIR_ENV_VAR,
    data_root,
    default_dataset_path,
    default_state_dir,
    set_data_root_override,
)

__all__ = [
    "DEFAULT_DATASET_NAME",
    "STATE_DIR_ENV_VAR",
    "data_root",
    "default_dataset_path",
    "default_state_dir",
    "set_data_root_override",
]
