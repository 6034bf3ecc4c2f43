"""
Shape normalizers — one per document family, routed by document code.

    FRD             → DefinitionsNormalizer  (flat list)
    KSI             → IndicatorsNormalizer   (theme tree)
    everything else → RequirementsNormalizer (recursive FRR tree)
"""

from fedramp_docs.models.catalog import family_for
from fedramp_docs.models.enums import DocumentFamily
from fedramp_docs.normalizers.base import BaseNormalizer, load_document
from fedramp_docs.normalizers.definitions import DefinitionsNormalizer
from fedramp_docs.normalizers.indicators import IndicatorsNormalizer
from fedramp_docs.normalizers.requirements import RequirementsNormalizer, flatten_requirements

_NORMALIZERS: dict[DocumentFamily, BaseNormalizer] = {
    DocumentFamily.DEFINITIONS: DefinitionsNormalizer(),
    DocumentFamily.INDICATORS: IndicatorsNormalizer(),
    DocumentFamily.REQUIREMENTS: RequirementsNormalizer(),
}


def normalizer_for(code: str) -> BaseNormalizer:
    """Return the normalizer that understands the given document code."""
    return _NORMALIZERS[family_for(code)]


__all__ = [
    "BaseNormalizer",
    "DefinitionsNormalizer",
    "IndicatorsNormalizer",
    "RequirementsNormalizer",
    "flatten_requirements",
    "load_document",
    "normalizer_for",
]
