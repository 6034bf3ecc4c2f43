"""
Ingestion pipeline — one full fetch → normalize → enrich pass.

Flow:
    DocumentFetcher          (cache-or-network, concurrent, per-document isolation)
      → normalizer_for(code) (FRD / KSI / FRR shapes)
      → enrich_entry         (info envelope → catalog entry)
      → count_entities       (requirement_count per entry)
      → IngestionResult

A document that fails to fetch or to normalize is recorded and skipped;
its siblings are unaffected.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from fedramp_docs.config import Settings, get_settings
from fedramp_docs.models.catalog import DOCUMENT_CATALOG, DocumentDescriptor, ordered_descriptors
from fedramp_docs.models.enums import DocumentFamily
from fedramp_docs.models.schemas import CatalogEntry
from fedramp_docs.models.state import IngestionResult
from fedramp_docs.normalizers import normalizer_for
from fedramp_docs.services.enrichment_service import (
    count_entities,
    enrich_entry,
    parse_document_info,
)
from fedramp_docs.services.fetch_service import DocumentFetcher, FetchOutcome
from fedramp_docs.utils.errors import NormalizationError

logger = logging.getLogger(__name__)


def run_ingestion(
    settings: Settings | None = None,
    refresh: Optional[bool] = None,
    fetcher: Optional[DocumentFetcher] = None,
    catalog: dict[str, DocumentDescriptor] | None = None,
) -> IngestionResult:
    """Fetch every catalog document and normalize it into one IngestionResult."""
    settings = settings or get_settings()
    catalog = DOCUMENT_CATALOG if catalog is None else catalog
    fetcher = fetcher or DocumentFetcher.from_settings(settings, refresh=refresh)

    t0 = time.perf_counter()
    logger.info("=" * 60)
    logger.info(f"  {settings.app_name.upper()} — INGESTION PASS")
    logger.info("=" * 60)

    outcome = fetcher.fetch_all(ordered_descriptors(catalog))
    result = build_result(outcome, catalog)

    elapsed = time.perf_counter() - t0
    logger.info(
        f"Ingestion complete in {elapsed:.2f}s: {len(result.requirements)} requirements, "
        f"{len(result.definitions)} definitions, {len(result.indicators)} indicators"
    )
    if result.document_errors:
        logger.warning(f"Documents skipped during normalization: {sorted(result.document_errors)}")
    return result


def build_result(
    outcome: FetchOutcome,
    catalog: dict[str, DocumentDescriptor] | None = None,
) -> IngestionResult:
    """Normalize a fetch outcome; the pure half of run_ingestion."""
    catalog = DOCUMENT_CATALOG if catalog is None else catalog
    result = IngestionResult(
        fetch_error=str(outcome.error) if outcome.error else None,
        failed_fetches=outcome.failed_codes,
        documents_fetched=len(outcome.documents),
        cached_documents=sorted(outcome.from_cache),
    )

    # ── 1. Normalize each fetched document ──────────────
    for code in _codes_in_order(outcome.documents, catalog):
        normalizer = normalizer_for(code)
        try:
            items = normalizer.normalize(outcome.documents[code], code)
        except NormalizationError as exc:
            result.document_errors[code] = str(exc)
            continue

        if normalizer.family is DocumentFamily.DEFINITIONS:
            result.definitions = items
        elif normalizer.family is DocumentFamily.INDICATORS:
            result.indicators = items
        else:
            result.requirements.extend(items)

    # ── 2. Catalog entries, enriched from each envelope ─
    for descriptor in ordered_descriptors(catalog):
        entry = CatalogEntry.from_descriptor(descriptor)
        data = outcome.documents.get(descriptor.code)
        if data is not None:
            try:
                enrich_entry(entry, parse_document_info(data))
            except NormalizationError as exc:
                logger.warning(f"[{descriptor.code}] metadata not available: {exc}")
        result.entries.append(entry)

    # ── 3. Counts ───────────────────────────────────────
    count_entities(result.entries, result.requirements, result.definitions, result.indicators)
    return result


def _codes_in_order(
    documents: dict[str, bytes], catalog: dict[str, DocumentDescriptor]
) -> list[str]:
    ordered = [d.code for d in ordered_descriptors(catalog) if d.code in documents]
    ordered.extend(code for code in documents if code not in ordered)
    return ordered
