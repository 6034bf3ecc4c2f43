"""
Base normalizer class that every document-shape normalizer inherits.

Design:
  - `normalize()` is called by the ingestion pipeline.
  - `_normalize()` is the single abstract method — override in each normalizer.
  - Decoding is two-step: `load_document()` parses the payload into plain
    JSON, the subclass picks its section by key, then `validate_section()`
    runs the typed decode on that section alone.
  - The only exception that may leave `normalize()` is NormalizationError,
    whatever bytes come in.
"""

from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from fedramp_docs.models.enums import DocumentFamily
from fedramp_docs.utils.errors import NormalizationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseNormalizer(ABC):
    """Abstract base for all shape normalizers."""

    name: str  # set in each subclass
    family: DocumentFamily

    # ── Public entry point (called by the pipeline) ──────

    def normalize(self, data: bytes | str, document_code: str = "") -> list[Any]:
        label = document_code or self.name
        t0 = time.perf_counter()
        try:
            items = self._normalize(data, document_code)
        except NormalizationError as exc:
            logger.warning(f"✘ [{label}] {self.name} normalization failed: {exc}")
            raise
        elapsed = time.perf_counter() - t0
        logger.debug(
            f"✔ [{label}] {self.name}: {len(items)} items in {elapsed:.3f}s"
        )
        return items

    # ── Subclass hook ────────────────────────────────────

    @abstractmethod
    def _normalize(self, data: bytes | str, document_code: str) -> list[Any]:
        ...


# ── Decoding helpers ─────────────────────────────────────


def load_document(data: bytes | str) -> dict[str, Any]:
    """Parse a payload into an untyped JSON object."""
    try:
        document = json.loads(data)
    except (ValueError, RecursionError) as exc:
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        raise NormalizationError(f"parsing raw document: {exc}") from exc
    if not isinstance(document, dict):
        raise NormalizationError(
            f"parsing raw document: expected a JSON object, got {type(document).__name__}"
        )
    return document


def validate_section(
    validator: type[BaseModel] | TypeAdapter[T], value: Any, section: str
) -> Any:
    """Typed-decode one section of a document."""
    try:
        if isinstance(validator, TypeAdapter):
            return validator.validate_python(value)
        return validator.model_validate(value)
    except (ValidationError, RecursionError) as exc:
        raise NormalizationError(f"parsing {section}: {_summarize(exc)}") from exc


def _summarize(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        return f"{exc.error_count()} validation error(s), first at {location}: {first['msg']}"
    return f"{type(exc).__name__}: {exc}"
