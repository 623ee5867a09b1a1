"""Data-quality checks for loaded character and vehicle records.

Hard errors (duplicate names, negative stats) make a dataset unusable and are
turned into :class:`~kartlab.errors.LoadError` by the ingestion layer.  Soft
invariant mismatches, such as a display speed that does not track the best of
its terrain sub-axes, only produce :class:`ValidationWarning` records which are
logged and never block loading.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from .models import AXES, Dataset, Entity

__all__ = [
    "DISPLAY_TOLERANCE",
    "ValidationReport",
    "ValidationWarning",
    "log_validation_warnings",
    "validate_dataset",
    "validate_entity",
]

logger = logging.getLogger(__name__)

DISPLAY_TOLERANCE = 1
_SUSPICIOUS_VALUE = 100
_VEHICLE_WEIGHT_LIMIT = 10


@dataclass(frozen=True, slots=True)
class ValidationWarning:
    """Soft-invariant mismatch detected on a single entity."""

    kind: str
    name: str
    axis: str
    message: str


@dataclass(frozen=True, slots=True)
class ValidationReport:
    errors: tuple[str, ...] = ()
    warnings: tuple[ValidationWarning, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _display_warning(entity: Entity, family: str) -> ValidationWarning | None:
    stats = entity.stats
    getter = stats.speed if family == "speed" else stats.handling
    display = getter("display")
    best = max(getter("road"), getter("terrain"), getter("water"))
    if abs(display - best) <= DISPLAY_TOLERANCE:
        return None
    return ValidationWarning(
        kind=entity.kind,
        name=entity.local_name,
        axis=f"{family}.display",
        message=(
            f"{family}.display={display} does not match the best terrain value {best}"
        ),
    )


def validate_entity(entity: Entity) -> tuple[list[str], list[ValidationWarning]]:
    """Return the hard errors and soft warnings raised by ``entity``."""

    errors: list[str] = []
    warnings: list[ValidationWarning] = []
    for axis in AXES:
        value = entity.stats.value(axis)
        if value < 0:
            errors.append(f"{entity.kind} '{entity.local_name}': {axis} must not be negative")
        elif value > _SUSPICIOUS_VALUE:
            warnings.append(
                ValidationWarning(
                    kind=entity.kind,
                    name=entity.local_name,
                    axis=axis,
                    message=f"{axis}={value} exceeds {_SUSPICIOUS_VALUE}",
                )
            )
    for family in ("speed", "handling"):
        warning = _display_warning(entity, family)
        if warning is not None:
            warnings.append(warning)
    if entity.kind == "vehicle" and entity.stats.weight > _VEHICLE_WEIGHT_LIMIT:
        warnings.append(
            ValidationWarning(
                kind=entity.kind,
                name=entity.local_name,
                axis="weight",
                message=f"vehicle weight {entity.stats.weight} exceeds {_VEHICLE_WEIGHT_LIMIT}",
            )
        )
    return errors, warnings


def _duplicate_errors(entities: Sequence[Entity], label: str) -> list[str]:
    errors: list[str] = []
    seen: set[str] = set()
    for entity in entities:
        if entity.local_name in seen:
            errors.append(f"Duplicated {label} name: {entity.local_name}")
        seen.add(entity.local_name)
    return errors


def validate_dataset(dataset: Dataset) -> ValidationReport:
    """Validate every entity and the per-kind uniqueness of local names."""

    errors: list[str] = []
    warnings: list[ValidationWarning] = []
    errors.extend(_duplicate_errors(dataset.characters, "character"))
    errors.extend(_duplicate_errors(dataset.vehicles, "vehicle"))
    for entity in dataset.entities:
        entity_errors, entity_warnings = validate_entity(entity)
        errors.extend(entity_errors)
        warnings.extend(entity_warnings)
    return ValidationReport(errors=tuple(errors), warnings=tuple(warnings))


def log_validation_warnings(
    warnings: Iterable[ValidationWarning], *, source: str | None = None
) -> int:
    """Log each warning and return how many were emitted."""

    count = 0
    for warning in warnings:
        logger.warning(
            "Dataset validation warning.",
            extra={
                "event": "dataset.validation_warning",
                "kind": warning.kind,
                "entity": warning.name,
                "axis": warning.axis,
                "detail": warning.message,
                "source": source,
            },
        )
        count += 1
    return count
