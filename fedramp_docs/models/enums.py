from enum import Enum


class DocumentFamily(str, Enum):
    """Which normalizer a catalog document is routed to."""
    DEFINITIONS = "definitions"
    INDICATORS = "indicators"
    REQUIREMENTS = "requirements"


class ImpactLevel(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class PrimaryKeyword(str, Enum):
    MUST = "MUST"
    MUST_NOT = "MUST NOT"
    SHOULD = "SHOULD"
    SHOULD_NOT = "SHOULD NOT"
    MAY = "MAY"


class AffectedParty(str, Enum):
    PROVIDERS = "Providers"
    AGENCIES = "Agencies"
    ASSESSORS = "Assessors"
    FEDRAMP = "FedRAMP"
