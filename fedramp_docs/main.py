"""
FedRAMP Documentation — Main Entry Point

Run an ingestion pass and print the catalog (CLI):
    python -m fedramp_docs
    python -m fedramp_docs --refresh summary

Browse the normalized collections:
    python -m fedramp_docs requirements --document VDR --keyword MUST
    python -m fedramp_docs definitions --search "agency"
    python -m fedramp_docs indicators --theme AFR
    python -m fedramp_docs show VDR-CSO-RES
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from fedramp_docs.config import get_settings
from fedramp_docs.models.schemas import CatalogEntry, Definition, Indicator, Requirement
from fedramp_docs.models.state import IngestionResult
from fedramp_docs.orchestration.pipeline import run_ingestion
from fedramp_docs.services import query_service
from fedramp_docs.utils.logger import setup_logging

_RULE = "-" * 72


# ── Rendering ────────────────────────────────────────────


def _print_summary(result: IngestionResult) -> None:
    print(_RULE)
    print(f"  FedRAMP Documents ({len(result.entries)})")
    print(_RULE)
    for entry in result.entries:
        status = ""
        if entry.code in result.failed_fetches:
            status = "  [fetch failed]"
        elif entry.code in result.document_errors:
            status = "  [parse failed]"
        elif entry.code in result.cached_documents:
            status = "  [cached]"
        print(f"  [{entry.code}] {entry.name:<40} {entry.requirement_count:>4} items{status}")
    print(_RULE)
    if result.fetch_error:
        print(f"  Fetch errors: {result.fetch_error}")


def _print_requirement_row(r: Requirement) -> None:
    keyword = r.primary_keyword or "INFO"
    print(f"  [{r.id}] {r.name}")
    print(f"      {r.document_code} | {keyword} | {r.impact}")


def _print_definition_row(d: Definition) -> None:
    text = d.text if len(d.text) <= 100 else d.text[:97] + "..."
    print(f"  {d.term}")
    print(f"      {text}")


def _print_indicator_row(i: Indicator) -> None:
    prefix = "[RETIRED] " if i.retired else ""
    controls = f" | {len(i.controls)} controls" if i.has_controls() else ""
    print(f"  {prefix}{i.name}")
    print(f"      {i.theme_name} | {i.impact}{controls}")


def _print_detail(item: query_service.Entity) -> None:
    if isinstance(item, Requirement):
        print(f"{item.id}  {item.name}")
        print(f"Document:   {item.document_code}")
        print(f"Keyword:    {item.primary_keyword or 'INFO'}")
        print(f"Impact:     {item.impact}")
        if item.affects:
            print(f"Affects:    {', '.join(item.affects)}")
        print(f"\n{item.statement}")
        if item.note:
            print(f"\nNote: {item.note}")
    elif isinstance(item, Definition):
        print(f"{item.id}  {item.term}")
        if item.has_alternatives():
            print(f"Also:       {', '.join(item.alternate_terms)}")
        print(f"\n{item.text}")
        if item.note:
            print(f"\nNote: {item.note}")
        if item.has_reference():
            print(f"\nReference: {item.reference} {item.reference_url}".rstrip())
    elif isinstance(item, Indicator):
        print(f"{item.id}  {item.name}{'  [RETIRED]' if item.retired else ''}")
        print(f"Theme:      {item.theme_code} ({item.theme_name})")
        print(f"Impact:     {item.impact}")
        print(f"\n{item.statement}")
        for control in item.controls:
            print(f"  • {control.control_id}: {control.title}")
    elif isinstance(item, CatalogEntry):
        print(f"[{item.code}] {item.name}")
        print(f"{item.description} ({item.requirement_count} items)")
        if item.purpose:
            print(f"\nPurpose: {item.purpose}")
        for outcome in item.expected_outcomes:
            print(f"  • {outcome}")
        for authority in item.authorities:
            print(f"Authority: {authority.reference} {authority.reference_url}".rstrip())
        for version, status in sorted(item.effective_status_by_version.items()):
            print(f"Effective ({version}): {status.applicability} {status.current_status}".rstrip())
        for release in item.releases:
            print(f"Release {release.id} ({release.published_date}): {release.description}")


# ── Commands ─────────────────────────────────────────────


def _cmd_summary(result: IngestionResult, args: argparse.Namespace) -> int:
    _print_summary(result)
    return 0


def _cmd_requirements(result: IngestionResult, args: argparse.Namespace) -> int:
    rows = query_service.filter_requirements(
        result.requirements,
        document=args.document,
        keyword=args.keyword,
        affects=args.affects,
        search=args.search,
    )
    print(f"FedRAMP Requirements ({len(rows)})")
    for row in rows:
        _print_requirement_row(row)
    return 0


def _cmd_definitions(result: IngestionResult, args: argparse.Namespace) -> int:
    rows = query_service.filter_definitions(result.definitions, search=args.search)
    print(f"FedRAMP Definitions ({len(rows)})")
    for row in rows:
        _print_definition_row(row)
    return 0


def _cmd_indicators(result: IngestionResult, args: argparse.Namespace) -> int:
    rows = query_service.filter_indicators(
        result.indicators,
        theme=args.theme,
        search=args.search,
        include_retired=args.include_retired,
    )
    print(f"Key Security Indicators ({len(rows)})")
    for row in rows:
        _print_indicator_row(row)
    return 0


def _cmd_show(result: IngestionResult, args: argparse.Namespace) -> int:
    item = query_service.find_by_id(result, args.id)
    if item is None:
        print(f"No requirement, definition, indicator or document with id {args.id!r}", file=sys.stderr)
        return 2
    _print_detail(item)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fedramp-docs",
        description="Fetch and browse FedRAMP machine-readable documentation",
    )
    parser.add_argument("--refresh", action="store_true", help="Force fresh fetch, ignoring cache")
    parser.add_argument("--log-level", default=None, help="Log level (default: from settings)")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("summary", help="List catalog documents with counts (default)")

    req = subparsers.add_parser("requirements", help="List requirements")
    req.add_argument("--document", help="Only this document code (e.g. VDR)")
    req.add_argument("--keyword", help="Only this primary keyword (e.g. MUST, SHOULD)")
    req.add_argument("--affects", choices=query_service.AFFECTS_OPTIONS, help="Only requirements affecting this party")
    req.add_argument("--search", help="Case-insensitive substring filter")

    defs = subparsers.add_parser("definitions", help="List definitions")
    defs.add_argument("--search", help="Case-insensitive substring filter")

    ind = subparsers.add_parser("indicators", help="List key security indicators")
    ind.add_argument("--theme", help="Only this theme code (e.g. AFR)")
    ind.add_argument("--search", help="Case-insensitive substring filter")
    ind.add_argument(
        "--exclude-retired",
        dest="include_retired",
        action="store_false",
        help="Hide retired indicators",
    )

    show = subparsers.add_parser("show", help="Show one item by id (or a document by code)")
    show.add_argument("id")

    return parser


_COMMANDS = {
    None: _cmd_summary,
    "summary": _cmd_summary,
    "requirements": _cmd_requirements,
    "definitions": _cmd_definitions,
    "indicators": _cmd_indicators,
    "show": _cmd_show,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    result = run_ingestion(settings, refresh=True if args.refresh else None)

    if not result.usable:
        print(f"Error: {result.fetch_error or 'no documents could be fetched'}", file=sys.stderr)
        return 1

    return _COMMANDS[args.command](result, args)


if __name__ == "__main__":
    sys.exit(main())
