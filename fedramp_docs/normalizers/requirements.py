"""
Requirements normalizer — FRR trees of every other catalog document.

Lookup is FRR → <document code>. Either key may be absent; that simply
means the document has no requirements. The value found is usually a map
of category name → category, and occasionally one category object on its
own, so both shapes are tried in that order.

Requirements nest through `following_information`, which is sometimes a
list of further requirement records and sometimes free text. It stays raw
JSON in the source model; flattening walks the tree with an explicit stack
in pre-order (parent before children, siblings in source order), decodes
each record's children only when that record is reached, and stamps the
document code on every record. Tree depth is bounded only by the JSON
parser.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from fedramp_docs.models.enums import DocumentFamily
from fedramp_docs.models.schemas import Impact, Requirement
from fedramp_docs.models.source import (
    CATEGORY_MAP,
    REQUIREMENT_LIST,
    RequirementCategory,
    RequirementRecord,
)
from fedramp_docs.normalizers.base import BaseNormalizer, load_document
from fedramp_docs.utils.errors import NormalizationError

logger = logging.getLogger(__name__)

SECTION_KEY = "FRR"


def to_requirement(record: RequirementRecord, document_code: str) -> Requirement:
    return Requirement(
        id=record.id,
        document_code=document_code,
        name=record.name,
        statement=record.statement,
        impact=Impact(**record.impact.model_dump()),
        affects=list(record.affects),
        primary_keyword=record.primary_key_word,
        note=record.note,
    )


def resolve_children(raw: Any) -> list[RequirementRecord]:
    """Decode one level of `following_information`; anything but a list of records is no children."""
    if not isinstance(raw, list):
        return []
    try:
        return REQUIREMENT_LIST.validate_python(raw)
    except ValidationError:
        return []


def flatten_requirements(
    records: list[RequirementRecord], document_code: str
) -> list[Requirement]:
    """Flatten a requirement forest in pre-order without recursion."""
    flattened: list[Requirement] = []
    stack = list(reversed(records))
    while stack:
        record = stack.pop()
        flattened.append(to_requirement(record, document_code))
        stack.extend(reversed(resolve_children(record.following_information)))
    return flattened


def decode_categories(section: Any) -> list[RequirementCategory]:
    """Categories map first, single category as fallback, else nothing."""
    try:
        return list(CATEGORY_MAP.validate_python(section).values())
    except (ValidationError, RecursionError):
        pass
    try:
        return [RequirementCategory.model_validate(section)]
    except (ValidationError, RecursionError) as exc:
        logger.debug(f"FRR section matches neither category shape: {type(exc).__name__}")
        return []


class RequirementsNormalizer(BaseNormalizer):
    name = "requirements"
    family = DocumentFamily.REQUIREMENTS

    def _normalize(self, data: bytes | str, document_code: str) -> list[Requirement]:
        document = load_document(data)

        frr = document.get(SECTION_KEY)
        if frr is None:
            return []
        if not isinstance(frr, dict):
            raise NormalizationError(
                f"parsing {SECTION_KEY} section: expected a JSON object, got {type(frr).__name__}"
            )

        section = frr.get(document_code)
        if section is None:
            return []

        records = [
            record
            for category in decode_categories(section)
            for record in category.requirements
        ]
        return flatten_requirements(records, document_code)
