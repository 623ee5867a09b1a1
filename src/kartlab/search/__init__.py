"""Search engine: tiered scoring, debounced evaluation and history."""

from kartlab.search.debounce import Debouncer
from kartlab.search.history import SearchHistory
from kartlab.search.scoring import (
    SearchResult,
    score_entity,
    score_name,
    score_text,
    search_entities,
    similarity,
)
from kartlab.search.service import SearchOutcome, SearchService

__all__ = [
    "Debouncer",
    "SearchHistory",
    "SearchOutcome",
    "SearchResult",
    "SearchService",
    "score_entity",
    "score_name",
    "score_text",
    "search_entities",
    "similarity",
]
