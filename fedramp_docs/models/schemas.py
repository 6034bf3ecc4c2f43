"""
Normalized domain entities produced by the ingestion pipeline.

These are the uniform shapes handed to the presentation layer. They know
nothing about the source JSON layout; see models/source.py for that.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .catalog import DocumentDescriptor
from .enums import ImpactLevel, PrimaryKeyword


# ── Shared value types ───────────────────────────────────


class Impact(BaseModel):
    """Impact levels a requirement or indicator applies at (not exclusive)."""
    low: bool = False
    moderate: bool = False
    high: bool = False

    def levels(self) -> list[str]:
        flags = (
            (self.low, ImpactLevel.LOW),
            (self.moderate, ImpactLevel.MODERATE),
            (self.high, ImpactLevel.HIGH),
        )
        return [level.value for is_set, level in flags if is_set]

    def __str__(self) -> str:
        return ", ".join(self.levels()) or "N/A"


class Control(BaseModel):
    """Reference to an SP 800-53 control; passed through unvalidated."""
    control_id: str = ""
    title: str = ""


# ── FRD Definitions ──────────────────────────────────────


class Definition(BaseModel):
    id: str = ""
    term: str = ""
    alternate_terms: list[str] = []
    text: str = ""
    note: str = ""
    reference: str = ""
    reference_url: str = ""

    def has_alternatives(self) -> bool:
        return len(self.alternate_terms) > 0

    def has_reference(self) -> bool:
        return bool(self.reference or self.reference_url)

    def search_text(self) -> str:
        return " ".join([self.term, self.text, *self.alternate_terms])


# ── KSI Indicators ───────────────────────────────────────


class Indicator(BaseModel):
    """A Key Security Indicator with its theme denormalized onto it."""
    id: str = ""
    theme_code: str = ""
    theme_name: str = ""
    theme_description: str = ""
    name: str = ""
    statement: str = ""
    impact: Impact = Field(default_factory=Impact)
    controls: list[Control] = []
    reference: str = ""
    reference_url: str = ""
    note: str = ""
    retired: bool = False

    def has_controls(self) -> bool:
        return len(self.controls) > 0

    def search_text(self) -> str:
        return " ".join([self.id, self.name, self.statement, self.theme_name])


# ── FRR Requirements ─────────────────────────────────────


class Requirement(BaseModel):
    """A single requirement, flattened out of its document's source tree."""
    id: str = ""
    document_code: str = ""
    name: str = ""
    statement: str = ""
    impact: Impact = Field(default_factory=Impact)
    affects: list[str] = []
    primary_keyword: str = ""
    note: str = ""

    def is_must(self) -> bool:
        return self.primary_keyword == PrimaryKeyword.MUST.value

    def is_should(self) -> bool:
        return self.primary_keyword == PrimaryKeyword.SHOULD.value

    def applies_to(self, party: str) -> bool:
        return party in self.affects

    def search_text(self) -> str:
        return " ".join([self.id, self.name, self.statement, self.document_code])


# ── Catalog enrichment ───────────────────────────────────


class Authority(BaseModel):
    reference: str = ""
    reference_url: str = ""
    description: str = ""


class Release(BaseModel):
    id: str = ""
    published_date: str = ""
    description: str = ""


class EffectiveStatus(BaseModel):
    """Applicability of a document for one program version (e.g. "20x")."""
    applicability: str = ""
    current_status: str = ""
    start_date: str = ""
    end_date: str = ""
    signup_url: str = ""
    comments: list[str] = []


class CatalogEntry(BaseModel):
    """A catalog descriptor enriched with the document's own envelope."""
    code: str
    name: str
    description: str
    filename: str = ""
    requirement_count: int = 0

    # Rich metadata from the document's info section
    purpose: str = ""
    expected_outcomes: list[str] = []
    authorities: list[Authority] = []
    releases: list[Release] = []
    effective_status_by_version: dict[str, EffectiveStatus] = {}

    @classmethod
    def from_descriptor(cls, descriptor: DocumentDescriptor) -> "CatalogEntry":
        return cls(
            code=descriptor.code,
            name=descriptor.name,
            description=descriptor.description,
            filename=descriptor.filename,
        )

    def search_text(self) -> str:
        return " ".join([self.code, self.name, self.description])
