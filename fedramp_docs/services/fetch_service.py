"""
Fetch Service — concurrent cache-or-network retrieval of catalog documents.

One asyncio task per catalog entry, all started together and joined with
asyncio.gather. Each task reports a FetchResult; the collector assembles
the documents map and the failure map only after every task finished, so
no shared structure is written concurrently.

Per document:
  1. cache hit (and not refreshing) → cached bytes
  2. otherwise HTTP GET; status 200 → body, stored in the cache (best-effort)
  3. any other status or transport error → that document fails, siblings continue

A cache that raises is treated as a miss on read and ignored on write.

No retries, no backoff. The only timeout is httpx's per-request timeout.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional

import httpx

from fedramp_docs.config import Settings, get_settings
from fedramp_docs.models.catalog import DocumentDescriptor, document_url, ordered_descriptors
from fedramp_docs.services.cache_service import ContentCache, build_cache
from fedramp_docs.utils.errors import DocumentFetchError, TransportError

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """What one fetch task reports back to the collector."""
    code: str
    data: Optional[bytes] = None
    error: Optional[Exception] = None
    from_cache: bool = False


@dataclass
class FetchOutcome:
    """All successful payloads of a pass, plus the combined failure if any."""
    documents: dict[str, bytes] = field(default_factory=dict)
    from_cache: set[str] = field(default_factory=set)
    error: Optional[DocumentFetchError] = None

    @property
    def failed_codes(self) -> list[str]:
        return self.error.failed_codes if self.error else []

    def raise_for_errors(self) -> None:
        if self.error is not None:
            raise self.error


class DocumentFetcher:
    """Fetches every catalog document concurrently, consulting the cache first."""

    def __init__(
        self,
        base_url: str,
        cache: Optional[ContentCache] = None,
        refresh: bool = False,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.cache = cache
        self.refresh = refresh
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        refresh: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "DocumentFetcher":
        settings = settings or get_settings()
        return cls(
            base_url=settings.base_url,
            cache=build_cache(settings),
            refresh=settings.refresh if refresh is None else refresh,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    # ── Public entry points ──────────────────────────────

    def fetch_all(
        self, catalog: Iterable[DocumentDescriptor] | None = None
    ) -> FetchOutcome:
        """Synchronous wrapper; must not be called from a running event loop."""
        return asyncio.run(self.fetch_all_async(catalog))

    async def fetch_all_async(
        self, catalog: Iterable[DocumentDescriptor] | None = None
    ) -> FetchOutcome:
        descriptors = list(ordered_descriptors() if catalog is None else catalog)
        t0 = time.perf_counter()
        logger.info(
            f"Fetching {len(descriptors)} documents "
            f"(refresh={self.refresh}, cache={'on' if self.cache else 'off'})"
        )

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            results = await asyncio.gather(
                *(self._fetch_one(client, d) for d in descriptors),
                return_exceptions=True,
            )

        outcome = self._collect(descriptors, results)
        elapsed = time.perf_counter() - t0
        logger.info(
            f"Fetched {len(outcome.documents)}/{len(descriptors)} documents "
            f"({len(outcome.from_cache)} from cache) in {elapsed:.2f}s"
        )
        if outcome.error:
            logger.warning(str(outcome.error))
        return outcome

    # ── Per-document unit of work ────────────────────────

    async def _fetch_one(
        self, client: httpx.AsyncClient, descriptor: DocumentDescriptor
    ) -> FetchResult:
        url = document_url(self.base_url, descriptor)

        if self.cache is not None and not self.refresh:
            cached = await self._cache_get(descriptor.code, url)
            if cached is not None:
                logger.debug(f"[{descriptor.code}] cache hit ({len(cached)} bytes)")
                return FetchResult(code=descriptor.code, data=cached, from_cache=True)

        try:
            data = await self._download(client, url)
        except TransportError as exc:
            logger.debug(f"[{descriptor.code}] fetch failed: {exc}")
            return FetchResult(code=descriptor.code, error=exc)

        logger.debug(f"[{descriptor.code}] downloaded {len(data)} bytes from {url}")
        if self.cache is not None:
            await self._cache_put(descriptor.code, url, data)
        return FetchResult(code=descriptor.code, data=data)

    # ── Cache access (never fails a fetch) ───────────────

    async def _cache_get(self, code: str, url: str) -> Optional[bytes]:
        try:
            return await asyncio.to_thread(self.cache.get, url)
        except Exception as exc:
            logger.warning(f"[{code}] cache read failed, fetching from network: {exc}")
            return None

    async def _cache_put(self, code: str, url: str, data: bytes) -> None:
        try:
            stored = await asyncio.to_thread(self.cache.put, url, data)
        except Exception as exc:
            logger.warning(f"[{code}] cache write failed: {exc}")
            return
        if not stored:
            logger.debug(f"[{code}] cache write skipped")

    @staticmethod
    async def _download(client: httpx.AsyncClient, url: str) -> bytes:
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        if response.status_code != 200:
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason_phrase}"
            )
        return response.content

    # ── Collector ────────────────────────────────────────

    @staticmethod
    def _collect(
        descriptors: list[DocumentDescriptor],
        results: list[FetchResult | BaseException],
    ) -> FetchOutcome:
        outcome = FetchOutcome()
        failures: dict[str, Exception] = {}

        for descriptor, result in zip(descriptors, results):
            if isinstance(result, BaseException):
                # A task died outside the transport path; still isolate it
                failures[descriptor.code] = (
                    result if isinstance(result, Exception) else RuntimeError(repr(result))
                )
                continue
            if result.error is not None:
                failures[result.code] = result.error
                continue
            outcome.documents[result.code] = result.data or b""
            if result.from_cache:
                outcome.from_cache.add(result.code)

        if failures:
            outcome.error = DocumentFetchError(failures)
        return outcome
