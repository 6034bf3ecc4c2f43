"""
Query Service — read-only filters over an IngestionResult.

Pure functions; every filter is optional and they combine with AND.
Text search is a case-insensitive substring match over each entity's
search_text().
"""

from __future__ import annotations

from typing import Optional, Union

from fedramp_docs.models.enums import AffectedParty
from fedramp_docs.models.schemas import CatalogEntry, Definition, Indicator, Requirement
from fedramp_docs.models.state import IngestionResult

AFFECTS_OPTIONS: tuple[str, ...] = tuple(p.value for p in AffectedParty)

Entity = Union[Requirement, Definition, Indicator, CatalogEntry]


def _matches(search_text: str, term: Optional[str]) -> bool:
    if not term:
        return True
    return term.lower() in search_text.lower()


def filter_requirements(
    requirements: list[Requirement],
    document: Optional[str] = None,
    keyword: Optional[str] = None,
    affects: Optional[str] = None,
    search: Optional[str] = None,
) -> list[Requirement]:
    results = []
    for requirement in requirements:
        if document and requirement.document_code != document:
            continue
        if keyword and requirement.primary_keyword != keyword:
            continue
        if affects and not requirement.applies_to(affects):
            continue
        if not _matches(requirement.search_text(), search):
            continue
        results.append(requirement)
    return results


def filter_definitions(
    definitions: list[Definition], search: Optional[str] = None
) -> list[Definition]:
    return [d for d in definitions if _matches(d.search_text(), search)]


def filter_indicators(
    indicators: list[Indicator],
    theme: Optional[str] = None,
    search: Optional[str] = None,
    include_retired: bool = True,
) -> list[Indicator]:
    results = []
    for indicator in indicators:
        if theme and indicator.theme_code != theme:
            continue
        if not include_retired and indicator.retired:
            continue
        if not _matches(indicator.search_text(), search):
            continue
        results.append(indicator)
    return results


def find_by_id(result: IngestionResult, item_id: str) -> Optional[Entity]:
    """Look up a requirement, definition or indicator by id, or an entry by code."""
    for collection in (result.requirements, result.definitions, result.indicators):
        for item in collection:
            if item.id == item_id:
                return item
    return result.entry(item_id)
