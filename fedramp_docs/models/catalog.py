"""
Document catalog — the fixed table of FedRAMP Machine-Readable (FRMR)
documents that make up one ingestion pass.

The table is configuration, not logic. Display order is explicit and
independent of the table's insertion order.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .enums import DocumentFamily


class DocumentDescriptor(BaseModel):
    """One catalog entry: where a document lives and how to present it."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    description: str
    filename: str


def _descriptor(code: str, name: str, description: str, slug: str) -> DocumentDescriptor:
    return DocumentDescriptor(
        code=code,
        name=name,
        description=description,
        filename=f"FRMR.{code}.{slug}.json",
    )


DOCUMENT_CATALOG: dict[str, DocumentDescriptor] = {
    d.code: d
    for d in (
        _descriptor("FRD", "FedRAMP Definitions", "Terms and definitions", "fedramp-definitions"),
        _descriptor("KSI", "Key Security Indicators", "Security indicators with control mappings", "key-security-indicators"),
        _descriptor("VDR", "Vulnerability Detection & Response", "Vulnerability management requirements", "vulnerability-detection-and-response"),
        _descriptor("UCM", "Using Cryptographic Modules", "Cryptographic module requirements", "using-cryptographic-modules"),
        _descriptor("RSC", "Recommended Secure Configuration", "Secure configuration requirements", "recommended-secure-configuration"),
        _descriptor("ADS", "Authorization Data Sharing", "Data sharing requirements", "authorization-data-sharing"),
        _descriptor("CCM", "Collaborative Continuous Monitoring", "Continuous monitoring requirements", "collaborative-continuous-monitoring"),
        _descriptor("FSI", "FedRAMP Security Inbox", "Security inbox procedures", "fedramp-security-inbox"),
        _descriptor("ICP", "Incident Communications Procedures", "Incident communication requirements", "incident-communications-procedures"),
        _descriptor("MAS", "Minimum Assessment Scope", "Assessment scope requirements", "minimum-assessment-scope"),
        _descriptor("PVA", "Persistent Validation & Assessment", "Validation and assessment requirements", "persistent-validation-and-assessment"),
        _descriptor("SCN", "Significant Change Notifications", "Change notification requirements", "significant-change-notifications"),
    )
}

DOCUMENT_ORDER: tuple[str, ...] = (
    "FRD", "KSI", "VDR", "UCM", "RSC", "ADS", "CCM", "FSI", "ICP", "MAS", "PVA", "SCN",
)

DEFINITIONS_CODE = "FRD"
INDICATORS_CODE = "KSI"


def family_for(code: str) -> DocumentFamily:
    """Route a document code to the normalizer family that understands it."""
    if code == DEFINITIONS_CODE:
        return DocumentFamily.DEFINITIONS
    if code == INDICATORS_CODE:
        return DocumentFamily.INDICATORS
    return DocumentFamily.REQUIREMENTS


def ordered_descriptors(
    catalog: dict[str, DocumentDescriptor] | None = None,
) -> list[DocumentDescriptor]:
    """Catalog entries in display order; codes missing from the order go last."""
    catalog = DOCUMENT_CATALOG if catalog is None else catalog
    ordered = [catalog[code] for code in DOCUMENT_ORDER if code in catalog]
    ordered.extend(d for code, d in catalog.items() if code not in DOCUMENT_ORDER)
    return ordered


def document_url(base_url: str, descriptor: DocumentDescriptor) -> str:
    """Resolve the full source URL (also the cache key) for a descriptor."""
    return f"{base_url.rstrip('/')}/{descriptor.filename}"
