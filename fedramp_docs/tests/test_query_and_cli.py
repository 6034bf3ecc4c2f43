"""
Tests: Query filters and the command-line entry point.

The CLI tests monkeypatch run_ingestion so no network is touched.

Run with:
    pytest fedramp_docs/tests/test_query_and_cli.py -v
"""

import pytest

from fedramp_docs import main as cli
from fedramp_docs.models.catalog import DOCUMENT_CATALOG
from fedramp_docs.models.schemas import CatalogEntry, Definition, Impact, Indicator, Requirement
from fedramp_docs.models.state import IngestionResult
from fedramp_docs.services import query_service


def _result() -> IngestionResult:
    requirements = [
        Requirement(id="VDR-1", document_code="VDR", name="Scan", statement="Providers MUST scan",
                    primary_keyword="MUST", affects=["Providers"], impact=Impact(low=True)),
        Requirement(id="VDR-2", document_code="VDR", name="Report", statement="Agencies SHOULD review",
                    primary_keyword="SHOULD", affects=["Agencies", "Providers"]),
        Requirement(id="SCN-1", document_code="SCN", name="Notify", statement="Notify FedRAMP",
                    primary_keyword="MUST", affects=["FedRAMP"]),
    ]
    definitions = [
        Definition(id="FRD-1", term="Agency", text="A federal department", alternate_terms=["Dept"]),
        Definition(id="FRD-2", term="Offering", text="A cloud product"),
    ]
    indicators = [
        Indicator(id="KSI-AFR-01", theme_code="AFR", theme_name="Authorization", name="Minimum"),
        Indicator(id="KSI-CNA-01", theme_code="CNA", theme_name="Cloud Native", name="Old", retired=True),
    ]
    entries = [CatalogEntry.from_descriptor(d) for d in DOCUMENT_CATALOG.values()]
    return IngestionResult(
        entries=entries,
        requirements=requirements,
        definitions=definitions,
        indicators=indicators,
        documents_fetched=12,
    )


class TestFilters:
    def test_affects_options(self):
        assert query_service.AFFECTS_OPTIONS == ("Providers", "Agencies", "Assessors", "FedRAMP")

    def test_no_filters_returns_everything(self):
        result = _result()
        assert query_service.filter_requirements(result.requirements) == result.requirements

    def test_by_document(self):
        rows = query_service.filter_requirements(_result().requirements, document="VDR")
        assert [r.id for r in rows] == ["VDR-1", "VDR-2"]

    def test_by_keyword_and_affects(self):
        rows = query_service.filter_requirements(
            _result().requirements, keyword="MUST", affects="Providers"
        )
        assert [r.id for r in rows] == ["VDR-1"]

    def test_search_is_case_insensitive(self):
        rows = query_service.filter_requirements(_result().requirements, search="notify")
        assert [r.id for r in rows] == ["SCN-1"]

    def test_definition_search_matches_alternate_terms(self):
        rows = query_service.filter_definitions(_result().definitions, search="dept")
        assert [d.id for d in rows] == ["FRD-1"]

    def test_indicator_theme_and_retired(self):
        indicators = _result().indicators
        assert [i.id for i in query_service.filter_indicators(indicators, theme="CNA")] == ["KSI-CNA-01"]
        assert [i.id for i in query_service.filter_indicators(indicators, include_retired=False)] == [
            "KSI-AFR-01"
        ]

    def test_find_by_id(self):
        result = _result()
        assert query_service.find_by_id(result, "VDR-2").name == "Report"
        assert query_service.find_by_id(result, "FRD-2").term == "Offering"
        assert query_service.find_by_id(result, "KSI-AFR-01").theme_code == "AFR"
        assert isinstance(query_service.find_by_id(result, "SCN"), CatalogEntry)
        assert query_service.find_by_id(result, "NOPE") is None


class TestCli:
    @pytest.fixture(autouse=True)
    def _quiet(self, monkeypatch):
        monkeypatch.setattr(cli, "setup_logging", lambda level="INFO": None)

    def _patch(self, monkeypatch, result: IngestionResult):
        calls = []

        def fake_run(settings=None, refresh=None, **kwargs):
            calls.append(refresh)
            return result

        monkeypatch.setattr(cli, "run_ingestion", fake_run)
        return calls

    def test_summary_is_default(self, monkeypatch, capsys):
        self._patch(monkeypatch, _result())
        assert cli.main([]) == 0
        out = capsys.readouterr().out
        assert "FedRAMP Documents (12)" in out
        assert "[VDR]" in out

    def test_refresh_flag_forwarded(self, monkeypatch):
        calls = self._patch(monkeypatch, _result())
        cli.main(["--refresh", "summary"])
        cli.main(["summary"])
        assert calls == [True, None]

    def test_requirements_filtered(self, monkeypatch, capsys):
        self._patch(monkeypatch, _result())
        assert cli.main(["requirements", "--document", "VDR", "--keyword", "SHOULD"]) == 0
        out = capsys.readouterr().out
        assert "FedRAMP Requirements (1)" in out
        assert "VDR-2" in out
        assert "VDR-1" not in out

    def test_definitions(self, monkeypatch, capsys):
        self._patch(monkeypatch, _result())
        assert cli.main(["definitions", "--search", "cloud"]) == 0
        assert "FedRAMP Definitions (1)" in capsys.readouterr().out

    def test_indicators_exclude_retired(self, monkeypatch, capsys):
        self._patch(monkeypatch, _result())
        assert cli.main(["indicators", "--exclude-retired"]) == 0
        out = capsys.readouterr().out
        assert "Key Security Indicators (1)" in out
        assert "RETIRED" not in out

    def test_show_requirement(self, monkeypatch, capsys):
        self._patch(monkeypatch, _result())
        assert cli.main(["show", "VDR-1"]) == 0
        out = capsys.readouterr().out
        assert "Providers MUST scan" in out
        assert "Impact:     Low" in out

    def test_show_unknown_id(self, monkeypatch, capsys):
        self._patch(monkeypatch, _result())
        assert cli.main(["show", "NOPE-1"]) == 2
        assert "NOPE-1" in capsys.readouterr().err

    def test_nothing_usable_exits_1(self, monkeypatch, capsys):
        self._patch(monkeypatch, IngestionResult(fetch_error="errors fetching documents: fetching FRD: boom"))
        assert cli.main([]) == 1
        assert "errors fetching documents" in capsys.readouterr().err
