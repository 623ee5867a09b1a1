"""Pure computations over characters, vehicles and their stat vectors."""

from __future__ import annotations

from kartlab.core.models import (
    AXES,
    SORT_METRICS,
    SUB_AXES,
    TERRAINS,
    AxisFilter,
    Combination,
    Dataset,
    Entity,
    SearchHistoryItem,
    StatVector,
)
from kartlab.core.sorting import resolve_metric_value, sort_entities
from kartlab.core.stats import (
    ActiveMaxStats,
    MaxStats,
    compute_active_max_stats,
    compute_max_stats,
    stat_band,
    stat_percentage,
)
from kartlab.core.validation import (
    ValidationReport,
    ValidationWarning,
    log_validation_warnings,
    validate_dataset,
)

__all__ = [
    "AXES",
    "SORT_METRICS",
    "SUB_AXES",
    "TERRAINS",
    "ActiveMaxStats",
    "AxisFilter",
    "Combination",
    "Dataset",
    "Entity",
    "MaxStats",
    "SearchHistoryItem",
    "StatVector",
    "ValidationReport",
    "ValidationWarning",
    "compute_active_max_stats",
    "compute_max_stats",
    "log_validation_warnings",
    "resolve_metric_value",
    "sort_entities",
    "stat_band",
    "stat_percentage",
    "validate_dataset",
]
