"""Runtime settings for the statistics, recommendation and search layers."""

from __future__ import annotations

from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

__all__ = [
    "COMBINATION_BONUS",
    "DEFAULT_DEBOUNCE_MS",
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_MAX_RESULTS",
    "DEFAULT_MAX_SAME_VEHICLE",
    "DEFAULT_MIN_SCORE",
    "DEFAULT_RECOMMENDATION_WEIGHTS",
    "DEFAULT_RECOMMENDER_CACHE_SIZE",
    "DEFAULT_TOP_K",
    "KartlabSettings",
    "RecommendationSettings",
    "SearchSettings",
]


#: Fixed game-rule bonus applied to every axis of a combination.
COMBINATION_BONUS = 3

DEFAULT_TOP_K = 10
DEFAULT_MAX_SAME_VEHICLE = 3
DEFAULT_RECOMMENDER_CACHE_SIZE = 8
DEFAULT_RECOMMENDATION_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {"speed": 0.4, "handling": 0.3, "acceleration": 0.2, "weight": -0.1}
)

DEFAULT_MIN_SCORE = 20.0
DEFAULT_MAX_RESULTS = 20
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_DEBOUNCE_MS = 300


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, ABCMapping):
        return value
    return {}


def _coerce_int(value: Any, fallback: int, *, minimum: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        numeric = int(value)
    except (TypeError, ValueError):
        return fallback
    return max(minimum, numeric)


def _coerce_float(value: Any, fallback: float) -> float:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


@dataclass(frozen=True, slots=True)
class RecommendationSettings:
    """Scoring weights and selection limits for the recommendation engine."""

    top_k: int = DEFAULT_TOP_K
    max_same_vehicle: int = DEFAULT_MAX_SAME_VEHICLE
    cache_size: int = DEFAULT_RECOMMENDER_CACHE_SIZE
    weights: Mapping[str, float] = field(
        default_factory=lambda: DEFAULT_RECOMMENDATION_WEIGHTS
    )

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> "RecommendationSettings":
        payload = _as_mapping(config)
        raw_weights = _as_mapping(payload.get("weights"))
        weights = {
            name: _coerce_float(raw_weights.get(name), default)
            for name, default in DEFAULT_RECOMMENDATION_WEIGHTS.items()
        }
        return cls(
            top_k=_coerce_int(payload.get("top_k"), DEFAULT_TOP_K, minimum=1),
            max_same_vehicle=_coerce_int(
                payload.get("max_same_vehicle"), DEFAULT_MAX_SAME_VEHICLE, minimum=1
            ),
            cache_size=_coerce_int(payload.get("cache_size"), DEFAULT_RECOMMENDER_CACHE_SIZE),
            weights=MappingProxyType(weights),
        )


@dataclass(frozen=True, slots=True)
class SearchSettings:
    """Thresholds and limits used by the search engine."""

    min_score: float = DEFAULT_MIN_SCORE
    max_results: int = DEFAULT_MAX_RESULTS
    history_limit: int = DEFAULT_HISTORY_LIMIT
    debounce_ms: int = DEFAULT_DEBOUNCE_MS

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> "SearchSettings":
        payload = _as_mapping(config)
        return cls(
            min_score=_coerce_float(payload.get("min_score"), DEFAULT_MIN_SCORE),
            max_results=_coerce_int(payload.get("max_results"), DEFAULT_MAX_RESULTS, minimum=1),
            history_limit=_coerce_int(
                payload.get("history_limit"), DEFAULT_HISTORY_LIMIT, minimum=1
            ),
            debounce_ms=_coerce_int(payload.get("debounce_ms"), DEFAULT_DEBOUNCE_MS),
        )


@dataclass(frozen=True, slots=True)
class KartlabSettings:
    """Immutable settings parsed from the ``[tool.kartlab]`` table."""

    combination_bonus: int = COMBINATION_BONUS
    recommender: RecommendationSettings = field(default_factory=RecommendationSettings)
    search: SearchSettings = field(default_factory=SearchSettings)

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> "KartlabSettings":
        """Coerce a raw configuration mapping into typed settings.

        Unknown keys are ignored and malformed values fall back to the
        defaults, so a partially written ``pyproject.toml`` never prevents the
        tool from starting.
        """

        payload = _as_mapping(config)
        rules = _as_mapping(payload.get("rules"))
        return cls(
            combination_bonus=_coerce_int(
                rules.get("combination_bonus"), COMBINATION_BONUS
            ),
            recommender=RecommendationSettings.from_config(payload.get("recommender")),
            search=SearchSettings.from_config(payload.get("search")),
        )
