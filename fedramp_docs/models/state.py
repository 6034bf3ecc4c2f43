"""
Ingestion result — the single object one pass hands to its consumers.

Design rules:
  1. Everything is rebuilt from scratch on each pass; nothing is patched.
  2. Partial data is normal: failures are recorded next to what parsed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from .schemas import CatalogEntry, Definition, Indicator, Requirement


class IngestionResult(BaseModel):
    """Normalized output of one fetch-and-normalize pass."""

    # ── Catalog (display order) ──────────────────────────
    entries: list[CatalogEntry] = Field(default_factory=list)

    # ── Normalized collections ───────────────────────────
    requirements: list[Requirement] = Field(default_factory=list)
    definitions: list[Definition] = Field(default_factory=list)
    indicators: list[Indicator] = Field(default_factory=list)

    # ── Failures ─────────────────────────────────────────
    fetch_error: Optional[str] = None  # combined transport failure message
    failed_fetches: list[str] = Field(default_factory=list)  # codes
    document_errors: dict[str, str] = Field(default_factory=dict)  # code → message

    # ── Bookkeeping ──────────────────────────────────────
    documents_fetched: int = 0
    cached_documents: list[str] = Field(default_factory=list)
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # ── Helpers ──────────────────────────────────────────

    @property
    def usable(self) -> bool:
        """True when at least one document was fetched."""
        return self.documents_fetched > 0

    def entry(self, code: str) -> Optional[CatalogEntry]:
        for entry in self.entries:
            if entry.code == code:
                return entry
        return None

    def requirements_for(self, code: str) -> list[Requirement]:
        return [r for r in self.requirements if r.document_code == code]
