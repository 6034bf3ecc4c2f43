"""Services — ContentCache, DocumentFetcher, enrichment and query helpers."""

from fedramp_docs.services.cache_service import (
    ContentCache,
    FileContentCache,
    MemoryContentCache,
    build_cache,
)
from fedramp_docs.services.fetch_service import DocumentFetcher, FetchOutcome, FetchResult
from fedramp_docs.services.enrichment_service import (
    count_entities,
    enrich_entry,
    parse_document_info,
)

__all__ = [
    "ContentCache",
    "FileContentCache",
    "MemoryContentCache",
    "build_cache",
    "DocumentFetcher",
    "FetchOutcome",
    "FetchResult",
    "count_entities",
    "enrich_entry",
    "parse_document_info",
]
