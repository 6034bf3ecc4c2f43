"""Domain models — catalog, source shapes, normalized entities, pass result."""

from .catalog import DocumentDescriptor, DOCUMENT_CATALOG, DOCUMENT_ORDER
from .schemas import (
    Impact,
    Control,
    Definition,
    Indicator,
    Requirement,
    Authority,
    Release,
    EffectiveStatus,
    CatalogEntry,
)
from .state import IngestionResult

__all__ = [
    "DocumentDescriptor",
    "DOCUMENT_CATALOG",
    "DOCUMENT_ORDER",
    "Impact",
    "Control",
    "Definition",
    "Indicator",
    "Requirement",
    "Authority",
    "Release",
    "EffectiveStatus",
    "CatalogEntry",
    "IngestionResult",
]
