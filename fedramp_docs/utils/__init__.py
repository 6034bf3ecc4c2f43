from .logger import setup_logging
from .errors import (
    FedrampDocsError,
    TransportError,
    NormalizationError,
    DocumentFetchError,
)

__all__ = [
    "setup_logging",
    "FedrampDocsError",
    "TransportError",
    "NormalizationError",
    "DocumentFetchError",
]
