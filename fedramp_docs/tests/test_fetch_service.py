"""
Tests: Concurrent document fetching with cache.

The network is replaced with httpx.MockTransport; every request is
recorded so tests can assert what actually went over the wire.

Run with:
    pytest fedramp_docs/tests/test_fetch_service.py -v
"""

import asyncio
import json

import httpx
import pytest

from fedramp_docs.config import Settings
from fedramp_docs.models.catalog import DOCUMENT_CATALOG, document_url, ordered_descriptors
from fedramp_docs.services.cache_service import FileContentCache, MemoryContentCache
from fedramp_docs.services.fetch_service import DocumentFetcher, FetchOutcome
from fedramp_docs.utils.errors import DocumentFetchError, TransportError

BASE_URL = "https://docs.example.test/data"


def _body_for(filename: str) -> bytes:
    return json.dumps({"info": {"name": filename}}).encode("utf-8")


class _Server:
    """Mock transport handler that serves every catalog file, with overrides."""

    def __init__(self, status: dict[str, int] | None = None, raise_for: set[str] | None = None):
        self.status = status or {}
        self.raise_for = raise_for or set()
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(str(request.url))
        filename = request.url.path.rsplit("/", 1)[-1]
        code = filename.split(".")[1]
        if code in self.raise_for:
            raise httpx.ConnectError("connection refused", request=request)
        status = self.status.get(code, 200)
        if status != 200:
            return httpx.Response(status, request=request)
        return httpx.Response(200, content=_body_for(filename), request=request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def _fetcher(server: _Server, cache=None, refresh=False) -> DocumentFetcher:
    return DocumentFetcher(BASE_URL, cache=cache, refresh=refresh, transport=server.transport())


class TestFetchAll:
    def test_all_documents_fetched(self):
        server = _Server()
        outcome = _fetcher(server).fetch_all()

        assert set(outcome.documents) == set(DOCUMENT_CATALOG)
        assert outcome.error is None
        assert outcome.failed_codes == []
        assert len(server.requests) == 12
        outcome.raise_for_errors()  # no-op

    def test_requests_use_catalog_filenames(self):
        server = _Server()
        _fetcher(server).fetch_all()
        expected = {document_url(BASE_URL, d) for d in ordered_descriptors()}
        assert set(server.requests) == expected

    def test_one_failure_is_isolated(self):
        server = _Server(status={"SCN": 404})
        outcome = _fetcher(server).fetch_all()

        assert len(outcome.documents) == 11
        assert "SCN" not in outcome.documents
        assert outcome.failed_codes == ["SCN"]
        message = str(outcome.error)
        assert message.startswith("errors fetching documents: ")
        assert "fetching SCN: HTTP 404" in message

    def test_multiple_failures_combined(self):
        server = _Server(status={"VDR": 500}, raise_for={"KSI"})
        outcome = _fetcher(server).fetch_all()

        assert outcome.failed_codes == ["KSI", "VDR"]
        assert isinstance(outcome.error, DocumentFetchError)
        assert isinstance(outcome.error.failures["KSI"], TransportError)
        assert "ConnectError" in str(outcome.error.failures["KSI"])
        assert "HTTP 500" in str(outcome.error.failures["VDR"])
        with pytest.raises(DocumentFetchError):
            outcome.raise_for_errors()

    def test_every_document_failing(self):
        server = _Server(status={code: 503 for code in DOCUMENT_CATALOG})
        outcome = _fetcher(server).fetch_all()
        assert outcome.documents == {}
        assert len(outcome.failed_codes) == 12

    def test_non_200_success_status_is_a_failure(self):
        server = _Server(status={"FRD": 204})
        outcome = _fetcher(server).fetch_all()
        assert outcome.failed_codes == ["FRD"]

    def test_subset_catalog(self):
        server = _Server()
        subset = [DOCUMENT_CATALOG["FRD"], DOCUMENT_CATALOG["VDR"]]
        outcome = _fetcher(server).fetch_all(subset)
        assert set(outcome.documents) == {"FRD", "VDR"}
        assert len(server.requests) == 2

    def test_async_entry_point(self):
        server = _Server()
        outcome = asyncio.run(_fetcher(server).fetch_all_async())
        assert isinstance(outcome, FetchOutcome)
        assert len(outcome.documents) == 12


class TestCaching:
    def test_second_pass_served_from_cache(self, tmp_path):
        cache = FileContentCache(tmp_path, ttl_hours=0)
        first_server = _Server()
        first = _fetcher(first_server, cache=cache).fetch_all()
        assert first.from_cache == set()

        second_server = _Server()
        second = _fetcher(second_server, cache=cache).fetch_all()

        assert second_server.requests == []
        assert second.from_cache == set(DOCUMENT_CATALOG)
        assert second.documents == first.documents

    def test_refresh_bypasses_reads_but_still_writes(self):
        cache = MemoryContentCache()
        stale = b'{"stale": true}'
        for descriptor in ordered_descriptors():
            cache.put(document_url(BASE_URL, descriptor), stale)

        server = _Server()
        outcome = _fetcher(server, cache=cache, refresh=True).fetch_all()

        assert len(server.requests) == 12
        assert outcome.from_cache == set()
        assert stale not in outcome.documents.values()
        frd_url = document_url(BASE_URL, DOCUMENT_CATALOG["FRD"])
        assert cache.get(frd_url) == outcome.documents["FRD"]

    def test_failed_fetch_not_cached(self):
        cache = MemoryContentCache()
        _fetcher(_Server(status={"MAS": 500}), cache=cache).fetch_all()
        assert len(cache) == 11
        assert cache.get(document_url(BASE_URL, DOCUMENT_CATALOG["MAS"])) is None

    def test_cache_hit_skips_network_for_that_document_only(self):
        cache = MemoryContentCache()
        cache.put(document_url(BASE_URL, DOCUMENT_CATALOG["KSI"]), b'{"KSI": {}}')

        server = _Server()
        outcome = _fetcher(server, cache=cache).fetch_all()

        assert outcome.from_cache == {"KSI"}
        assert outcome.documents["KSI"] == b'{"KSI": {}}'
        assert len(server.requests) == 11

    def test_failing_cache_write_does_not_fail_fetch(self, monkeypatch):
        cache = MemoryContentCache()
        monkeypatch.setattr(cache, "put", lambda key, data: False)
        outcome = _fetcher(_Server(), cache=cache).fetch_all()
        assert outcome.error is None
        assert len(outcome.documents) == 12


class _BrokenCache(MemoryContentCache):
    """Cache whose reads and/or writes raise."""

    def __init__(self, fail_get: bool = False, fail_put: bool = False):
        super().__init__()
        self.fail_get = fail_get
        self.fail_put = fail_put

    def get(self, key):
        if self.fail_get:
            raise RuntimeError("cache unreadable")
        return super().get(key)

    def put(self, key, data):
        if self.fail_put:
            raise RuntimeError("disk full")
        return super().put(key, data)


class TestRaisingCache:
    def test_raising_put_keeps_downloads(self):
        outcome = _fetcher(_Server(), cache=_BrokenCache(fail_put=True)).fetch_all()
        assert outcome.error is None
        assert len(outcome.documents) == 12

    def test_raising_get_falls_back_to_network(self):
        cache = _BrokenCache(fail_get=True)
        server = _Server()
        outcome = _fetcher(server, cache=cache).fetch_all()

        assert outcome.error is None
        assert outcome.from_cache == set()
        assert len(server.requests) == 12
        assert len(cache) == 12


class TestFromSettings:
    def test_settings_applied(self, tmp_path):
        settings = Settings(
            base_url=BASE_URL,
            cache_dir=tmp_path,
            cache_ttl_hours=2,
            request_timeout_seconds=5,
        )
        fetcher = DocumentFetcher.from_settings(settings)
        assert fetcher.base_url == BASE_URL
        assert fetcher.timeout == 5
        assert fetcher.refresh is False
        assert isinstance(fetcher.cache, FileContentCache)
        assert fetcher.cache.ttl_seconds == 2 * 3600

    def test_refresh_override(self, tmp_path):
        settings = Settings(cache_dir=tmp_path, refresh=False)
        assert DocumentFetcher.from_settings(settings, refresh=True).refresh is True

    def test_cache_disabled(self):
        settings = Settings(cache_enabled=False)
        assert DocumentFetcher.from_settings(settings).cache is None
