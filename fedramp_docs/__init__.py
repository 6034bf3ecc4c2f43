"""
FedRAMP Documentation — ingestion and normalization of the FedRAMP
machine-readable (FRMR) document catalog.

Quick Start:
    from fedramp_docs import run_ingestion

    result = run_ingestion()
    for entry in result.entries:
        print(entry.code, entry.requirement_count)
"""

from fedramp_docs.orchestration.pipeline import run_ingestion
from fedramp_docs.models.state import IngestionResult

__all__ = ["run_ingestion", "IngestionResult"]

__version__ = "0.1.0"
