"""Recommendation engine for character/vehicle pairings."""

from kartlab.recommender.engine import (
    RecommendationEngine,
    RecommendationEntry,
    RecommendationSet,
    compute_recommendations,
    score_pairs,
    select_diverse,
)

__all__ = [
    "RecommendationEngine",
    "RecommendationEntry",
    "RecommendationSet",
    "compute_recommendations",
    "score_pairs",
    "select_diverse",
]
