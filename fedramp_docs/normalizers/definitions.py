"""
Definitions normalizer — the FRD document's flat term list.

FRD.ALL is a list of definition records; each becomes one Definition in
source order. A record may carry its note as a single string or as a list
of strings; the single string wins when non-empty.
"""

from __future__ import annotations

from fedramp_docs.models.enums import DocumentFamily
from fedramp_docs.models.schemas import Definition
from fedramp_docs.models.source import DefinitionRecord, DefinitionsSection
from fedramp_docs.normalizers.base import BaseNormalizer, load_document, validate_section

SECTION_KEY = "FRD"


def resolve_note(record: DefinitionRecord) -> str:
    if record.note:
        return record.note
    return " ".join(record.notes)


def to_definition(record: DefinitionRecord) -> Definition:
    return Definition(
        id=record.id,
        term=record.term,
        alternate_terms=list(record.alts),
        text=record.definition,
        note=resolve_note(record),
        reference=record.reference,
        reference_url=record.reference_url,
    )


class DefinitionsNormalizer(BaseNormalizer):
    name = "definitions"
    family = DocumentFamily.DEFINITIONS

    def _normalize(self, data: bytes | str, document_code: str) -> list[Definition]:
        document = load_document(data)
        raw_section = document.get(SECTION_KEY)
        if raw_section is None:
            return []
        section = validate_section(DefinitionsSection, raw_section, f"{SECTION_KEY} section")
        return [to_definition(record) for record in section.all]
