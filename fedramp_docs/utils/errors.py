"""
Exception hierarchy for the ingestion pipeline.

Library errors (json, pydantic, httpx, OSError) are translated into these
at the module boundary where they occur.
"""

from __future__ import annotations


class FedrampDocsError(Exception):
    """Base exception for fedramp-docs errors."""


class TransportError(FedrampDocsError):
    """A single document could not be read from the remote source."""


class NormalizationError(FedrampDocsError, ValueError):
    """A document payload could not be decoded into domain entities."""


class DocumentFetchError(FedrampDocsError):
    """
    Combined failure of one or more documents in a fetch pass.

    `failures` maps each failed document code to its underlying cause.
    """

    def __init__(self, failures: dict[str, Exception]):
        self.failures = dict(failures)
        details = "; ".join(
            f"fetching {code}: {exc}" for code, exc in sorted(self.failures.items())
        )
        super().__init__(f"errors fetching documents: {details}")

    @property
    def failed_codes(self) -> list[str]:
        return sorted(self.failures)
