"""Convenience re-exports for test helpers."""

from __future__ import annotations

from tests.helpers.entities import (
    build_character,
    build_stats,
    build_vehicle,
    dataset_document,
    write_dataset_csv,
)

__all__ = [
    "build_character",
    "build_stats",
    "build_vehicle",
    "dataset_document",
    "write_dataset_csv",
]
