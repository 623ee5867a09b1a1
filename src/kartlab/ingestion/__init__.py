"""Dataset ingestion from structured documents and CSV exports."""

from kartlab.ingestion.loader import load_entities, load_entities_sync
from kartlab.ingestion.structured import parse_structured_document, read_structured
from kartlab.ingestion.tabular import parse_tabular_rows, read_tabular

__all__ = [
    "load_entities",
    "load_entities_sync",
    "parse_structured_document",
    "parse_tabular_rows",
    "read_structured",
    "read_tabular",
]
