"""
Content Cache — key → bytes store for fetched documents.

Keys are full source URLs. The contract is deliberately small:
  • get(key) returns the cached bytes, or None on a miss or any error.
  • put(key, data) returns False on failure instead of raising.

FileContentCache persists one file per key and writes through a temp file
plus atomic rename, so concurrent writers to different keys never see a
torn file. MemoryContentCache is the in-process variant.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Optional, Protocol

from fedramp_docs.config import Settings, get_settings

logger = logging.getLogger(__name__)

_ENTRY_SUFFIX = ".cache"


class ContentCache(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def put(self, key: str, data: bytes) -> bool: ...


class FileContentCache:
    """One file per key under `directory`, named by the key's SHA-256."""

    def __init__(self, directory: Path | str, ttl_hours: float = 0.0):
        self.directory = Path(directory)
        self.ttl_seconds = max(ttl_hours, 0.0) * 3600

    def _path_for(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}{_ENTRY_SUFFIX}"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            if self.ttl_seconds:
                age = time.time() - path.stat().st_mtime
                if age > self.ttl_seconds:
                    logger.debug(f"Cache entry expired ({age:.0f}s old): {key}")
                    return None
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.debug(f"Cache read failed for {key}: {exc}")
            return None

    def put(self, key: str, data: bytes) -> bool:
        path = self._path_for(key)
        tmp_name = ""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.directory, prefix=".tmp-", suffix=_ENTRY_SUFFIX
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
            return True
        except OSError as exc:
            logger.warning(f"Cache write failed for {key}: {exc}")
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            return False


class MemoryContentCache:
    """Thread-safe in-memory cache, lives for the process only."""

    def __init__(self):
        self._store: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._store.get(key)

    def put(self, key: str, data: bytes) -> bool:
        with self._lock:
            self._store[key] = bytes(data)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


def build_cache(settings: Settings | None = None) -> Optional[ContentCache]:
    """Create the configured cache, or None when caching is disabled."""
    settings = settings or get_settings()
    if not settings.cache_enabled:
        logger.info("Content cache disabled")
        return None
    return FileContentCache(settings.cache_dir, ttl_hours=settings.cache_ttl_hours)
