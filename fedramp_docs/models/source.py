"""
Source shapes — typed views of the sections found inside FRMR documents.

The twelve documents share nothing beyond a loose `info` envelope, so there
is no model for a whole document. Normalizers decode a payload to plain
JSON first, pick the section they need by key, and validate only that
section against one of these models.

Conventions:
  • Unknown keys are ignored.
  • JSON null behaves like an absent key (falls back to the default);
    inside a list of strings it decodes to "".
  • Type mismatches on known fields are validation errors.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, model_validator


def _blank_nulls(value: Any) -> Any:
    if isinstance(value, list):
        return ["" if item is None else item for item in value]
    return value


StrList = Annotated[list[str], BeforeValidator(_blank_nulls)]


class SourceRecord(BaseModel):
    """Base for all source shapes."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ImpactRecord(SourceRecord):
    low: bool = False
    moderate: bool = False
    high: bool = False


# ── FRD ──────────────────────────────────────────────────


class DefinitionRecord(SourceRecord):
    id: str = ""
    term: str = ""
    alts: StrList = []
    definition: str = ""
    note: str = ""
    notes: StrList = []
    reference: str = ""
    reference_url: str = ""


class DefinitionsSection(SourceRecord):
    """The `FRD` section: one flat list under `ALL`."""
    all: list[DefinitionRecord] = Field(default_factory=list, alias="ALL")


# ── KSI ──────────────────────────────────────────────────


class ControlRecord(SourceRecord):
    control_id: str = ""
    title: str = ""


class IndicatorRecord(SourceRecord):
    id: str = ""
    name: str = ""
    statement: str = ""
    impact: ImpactRecord = Field(default_factory=ImpactRecord)
    controls: list[ControlRecord] = []
    reference: str = ""
    reference_url: str = ""
    note: str = ""
    retired: bool = False


class ThemeRecord(SourceRecord):
    id: str = ""
    name: str = ""
    theme: str = ""  # long-form theme description
    indicators: list[IndicatorRecord] = []


# ── FRR ──────────────────────────────────────────────────


class RequirementRecord(SourceRecord):
    id: str = ""
    statement: str = ""
    name: str = ""
    impact: ImpactRecord = Field(default_factory=ImpactRecord)
    affects: StrList = []
    primary_key_word: str = ""
    note: str = ""
    # Either a list of nested requirement records or free text; kept as raw
    # JSON and resolved one level at a time while flattening.
    following_information: Any = None


class RequirementCategory(SourceRecord):
    id: str = ""
    application: str = ""
    name: str = ""
    requirements: list[RequirementRecord] = []


# ── Shared info envelope ─────────────────────────────────


class EffectiveInfo(SourceRecord):
    applicability: str = Field("", alias="is")
    signup_url: str = ""
    current_status: str = ""
    start_date: str = ""
    end_date: str = ""
    comments: StrList = []
    warnings: StrList = []


class RelatedRFC(SourceRecord):
    id: str = ""
    url: str = ""
    discussion_url: str = ""
    short_name: str = ""
    full_name: str = ""
    start_date: str = ""
    end_date: str = ""


class ReleaseRecord(SourceRecord):
    id: str = ""
    published_date: str = ""
    description: str = ""
    public_comment: bool = False
    related_rfcs: list[RelatedRFC] = []


class AuthorityRecord(SourceRecord):
    reference: str = ""
    reference_url: str = ""
    description: str = ""
    delegation: str = ""
    delegation_url: str = ""


class FrontMatter(SourceRecord):
    authority: list[AuthorityRecord] = []
    purpose: str = ""
    expected_outcomes: StrList = []


class DocumentInfo(SourceRecord):
    name: str = ""
    short_name: str = ""
    effective: dict[str, EffectiveInfo] = {}
    releases: list[ReleaseRecord] = []
    front_matter: FrontMatter = Field(default_factory=FrontMatter)


# ── Section adapters (map-shaped sections have no wrapper model) ──

THEME_MAP = TypeAdapter(dict[str, ThemeRecord])
CATEGORY_MAP = TypeAdapter(dict[str, RequirementCategory])
REQUIREMENT_LIST = TypeAdapter(list[RequirementRecord])
