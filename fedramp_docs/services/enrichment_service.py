"""
Enrichment Service — catalog entries + the documents' own `info` envelope.

Only the shared envelope is decoded here: purpose, expected outcomes,
authorities, releases and the effective-status-by-version map. A document
with a thin or missing envelope just leaves those fields empty.
"""

from __future__ import annotations

import logging

from fedramp_docs.models.catalog import DEFINITIONS_CODE, INDICATORS_CODE
from fedramp_docs.models.schemas import (
    Authority,
    CatalogEntry,
    Definition,
    EffectiveStatus,
    Indicator,
    Release,
    Requirement,
)
from fedramp_docs.models.source import DocumentInfo
from fedramp_docs.normalizers.base import load_document, validate_section

logger = logging.getLogger(__name__)

INFO_KEY = "info"


def parse_document_info(data: bytes | str) -> DocumentInfo:
    """
    Decode the `info` envelope of one document.

    Raises NormalizationError when the payload is not a JSON object or the
    envelope has the wrong shape. An absent envelope is an empty DocumentInfo.
    """
    document = load_document(data)
    raw_info = document.get(INFO_KEY)
    if raw_info is None:
        return DocumentInfo()
    return validate_section(DocumentInfo, raw_info, f"{INFO_KEY} envelope")


def enrich_entry(entry: CatalogEntry, info: DocumentInfo | None) -> CatalogEntry:
    """Copy envelope fields onto a catalog entry (in place) and return it."""
    if info is None:
        return entry

    front_matter = info.front_matter
    entry.purpose = front_matter.purpose
    entry.expected_outcomes = list(front_matter.expected_outcomes)
    entry.authorities = [
        Authority(
            reference=a.reference,
            reference_url=a.reference_url,
            description=a.description,
        )
        for a in front_matter.authority
    ]
    entry.releases = [
        Release(id=r.id, published_date=r.published_date, description=r.description)
        for r in info.releases
    ]
    entry.effective_status_by_version = {
        version: EffectiveStatus(
            applicability=eff.applicability,
            current_status=eff.current_status,
            start_date=eff.start_date,
            end_date=eff.end_date,
            signup_url=eff.signup_url,
            comments=list(eff.comments),
        )
        for version, eff in info.effective.items()
    }
    return entry


def count_entities(
    entries: list[CatalogEntry],
    requirements: list[Requirement],
    definitions: list[Definition],
    indicators: list[Indicator],
) -> None:
    """
    Fill requirement_count on every entry.

    FRD counts its definitions and KSI its indicators; every other document
    counts the requirements stamped with its code.
    """
    per_document: dict[str, int] = {}
    for requirement in requirements:
        per_document[requirement.document_code] = per_document.get(requirement.document_code, 0) + 1

    for entry in entries:
        if entry.code == DEFINITIONS_CODE:
            entry.requirement_count = len(definitions)
        elif entry.code == INDICATORS_CODE:
            entry.requirement_count = len(indicators)
        else:
            entry.requirement_count = per_document.get(entry.code, 0)
