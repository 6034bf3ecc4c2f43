"""
Indicators normalizer — the KSI document's theme → indicators tree.

The KSI key is not the first field of the envelope, so the payload is
decoded generically and the section located by key. A document without
a KSI section is an error, unlike the requirement documents.

Each theme's code, name and description are copied onto every indicator
of that theme; no theme entity survives normalization. Indicators keep
their order within a theme. Order across themes is not guaranteed.
"""

from __future__ import annotations

import logging

from fedramp_docs.models.enums import DocumentFamily
from fedramp_docs.models.schemas import Control, Impact, Indicator
from fedramp_docs.models.source import THEME_MAP, IndicatorRecord, ThemeRecord
from fedramp_docs.normalizers.base import BaseNormalizer, load_document, validate_section
from fedramp_docs.utils.errors import NormalizationError

logger = logging.getLogger(__name__)

SECTION_KEY = "KSI"


def to_indicator(theme_code: str, theme: ThemeRecord, record: IndicatorRecord) -> Indicator:
    return Indicator(
        id=record.id,
        theme_code=theme_code,
        theme_name=theme.name,
        theme_description=theme.theme,
        name=record.name,
        statement=record.statement,
        impact=Impact(**record.impact.model_dump()),
        controls=[
            Control(control_id=c.control_id, title=c.title) for c in record.controls
        ],
        reference=record.reference,
        reference_url=record.reference_url,
        note=record.note,
        retired=record.retired,
    )


class IndicatorsNormalizer(BaseNormalizer):
    name = "indicators"
    family = DocumentFamily.INDICATORS

    def _normalize(self, data: bytes | str, document_code: str) -> list[Indicator]:
        document = load_document(data)
        if SECTION_KEY not in document:
            raise NormalizationError(f"{SECTION_KEY} section not found in document")

        raw_themes = document[SECTION_KEY]
        if raw_themes is None:
            return []
        themes = validate_section(THEME_MAP, raw_themes, f"{SECTION_KEY} themes")

        indicators: list[Indicator] = []
        for theme_code, theme in themes.items():
            indicators.extend(
                to_indicator(theme_code, theme, record) for record in theme.indicators
            )
        logger.debug(f"[{SECTION_KEY}] {len(themes)} themes → {len(indicators)} indicators")
        return indicators
