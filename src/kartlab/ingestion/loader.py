"""Two-source dataset loading with validation."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable

from ..core.models import Dataset
from ..core.validation import log_validation_warnings, validate_dataset
from ..errors import LoadError
from .structured import read_structured
from .tabular import read_tabular

__all__ = ["load_entities", "load_entities_sync"]

logger = logging.getLogger(__name__)


async def _read(reader: Callable[[Path], Dataset], path: Path, label: str) -> Dataset | None:
    try:
        dataset = await asyncio.to_thread(reader, path)
    except LoadError as exc:
        logger.warning(
            "Dataset source unusable.",
            extra={"event": "dataset.source_failed", "source": label, "path": str(path), "error": str(exc)},
        )
        return None
    if not dataset.characters or not dataset.vehicles:
        logger.warning(
            "Dataset source is missing characters or vehicles.",
            extra={
                "event": "dataset.source_incomplete",
                "source": label,
                "path": str(path),
                "characters": len(dataset.characters),
                "vehicles": len(dataset.vehicles),
            },
        )
        return None
    return dataset


async def load_entities(
    structured_source: Path | str | None,
    tabular_source: Path | str | None = None,
) -> Dataset:
    """Load the dataset from the structured document, falling back to CSV.

    Raises :class:`LoadError` when neither source yields characters and
    vehicles, or when the loaded dataset has hard validation errors.
    Validation warnings are logged and do not block loading.
    """

    attempts: list[str] = []
    dataset: Dataset | None = None
    if structured_source is not None:
        path = Path(structured_source)
        attempts.append(str(path))
        dataset = await _read(read_structured, path, "structured")
    if dataset is None and tabular_source is not None:
        path = Path(tabular_source)
        attempts.append(str(path))
        dataset = await _read(read_tabular, path, "tabular")
        if dataset is not None and structured_source is not None:
            logger.info(
                "Loaded dataset from the tabular fallback.",
                extra={"event": "dataset.fallback", "path": str(path)},
            )
    if dataset is None:
        raise LoadError(
            "Unable to load characters and vehicles from any source",
            context={"sources": ", ".join(attempts) or "none"},
        )

    report = validate_dataset(dataset)
    log_validation_warnings(report.warnings, source=dataset.source)
    if not report.is_valid:
        raise LoadError(
            f"Dataset {dataset.source} is invalid: " + "; ".join(report.errors),
            context={"path": dataset.source, "errors": len(report.errors)},
        )
    logger.info(
        "Dataset loaded.",
        extra={
            "event": "dataset.loaded",
            "path": dataset.source,
            "characters": len(dataset.characters),
            "vehicles": len(dataset.vehicles),
            "warnings": len(report.warnings),
        },
    )
    return dataset


def load_entities_sync(
    structured_source: Path | str | None,
    tabular_source: Path | str | None = None,
) -> Dataset:
    """Blocking wrapper around :func:`load_entities` for synchronous callers."""

    return asyncio.run(load_entities(structured_source, tabular_source))
