"""Top-level package for KartLab.

KartLab loads a fixed roster of racing characters and vehicles, each rated on
ten stat axes, and derives the views a reference tool needs: per-axis maxima
for stat bars, sorted lists, ranked character/vehicle recommendations per
terrain, saved combinations and a name search with history.
"""

from ._version import __version__
from .core.combinations import CombinationCollection, create_combination
from .core.models import AxisFilter, Combination, Dataset, Entity, StatVector
from .core.sorting import sort_entities
from .core.stats import compute_active_max_stats, compute_max_stats
from .errors import KartlabError, LoadError, PersistenceError
from .ingestion import load_entities
from .recommender import RecommendationEngine, compute_recommendations
from .search import SearchHistory, SearchService, search_entities
from .settings import KartlabSettings
from .store import KartState, KartStore

__all__ = [
    "AxisFilter",
    "Combination",
    "CombinationCollection",
    "Dataset",
    "Entity",
    "KartState",
    "KartStore",
    "KartlabError",
    "KartlabSettings",
    "LoadError",
    "PersistenceError",
    "RecommendationEngine",
    "SearchHistory",
    "SearchService",
    "StatVector",
    "__version__",
    "compute_active_max_stats",
    "compute_max_stats",
    "compute_recommendations",
    "create_combination",
    "load_entities",
    "search_entities",
    "sort_entities",
]
