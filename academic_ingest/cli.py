"""
CLI (Command Line Interface).

This module provides the terminal commands, e.g.:

    academic_ingest ingest [--semester "2025-2026 S1"] [--only FILE]
    academic_ingest parse <file> [--kind calendar]
    academic_ingest fetch <url>
    academic_ingest sources
    academic_ingest remove <source>

Note:
- Defaults come from academic_ingest.config (environment / .env)
- Output is plain text, except `parse` which prints JSON
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from academic_ingest.config import get_config
from academic_ingest.errors import ExtractionError, FetchError, SinkError
from academic_ingest.fetch import fetch_documents
from academic_ingest.ingest import IngestResult, ingest_directory, parse_document, summarize
from academic_ingest.log import setup_logging
from academic_ingest.model import DocumentKind
from academic_ingest.storage import JsonRecordStore


KIND_LABELS = {
    DocumentKind.TIMETABLE: "Timetable",
    DocumentKind.CALENDAR: "Calendar",
    DocumentKind.NOTICES: "Notice",
}


def _print_result(result: IngestResult) -> None:
    print(f"{KIND_LABELS[result.kind]}: {result.source_key} -> +{result.count}")


def _cmd_ingest(args: argparse.Namespace) -> int:
    """
    Ingest all documents of the data directory into the record store.
    """
    data_dir = Path(args.data_dir)
    if not data_dir.is_dir():
        print(f"Data directory not found: {data_dir}")
        return 1

    store = JsonRecordStore(args.store)
    try:
        results = ingest_directory(
            data_dir,
            store,
            term=args.semester,
            only_file=args.only,
            on_result=_print_result,
        )
    except SinkError as e:
        print(f"Storing records failed: {e}")
        return 1

    if args.only and not results:
        print(f"Nothing ingested for: {args.only}")
        return 1

    totals = summarize(results)
    pretty = ", ".join(f"{kind}: {count}" for kind, count in sorted(totals.items())) or "no records"
    print(f"Ingestion complete -> {store.path} ({pretty})")
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    """
    Parse one document and print its records as JSON (nothing is stored).
    """
    path = Path(args.file)
    if not path.is_file():
        print(f"File not found: {path}")
        return 1

    kind = DocumentKind(args.kind) if args.kind else None
    try:
        records = parse_document(path, term=args.semester, kind=kind, department=args.dept)
    except ExtractionError as e:
        print(f"Cannot parse {path.name}: {e}")
        return 1

    payload = [r.to_dict() for r in records]
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def _cmd_fetch(args: argparse.Namespace) -> int:
    """
    Download linked documents from an index page into the data directory.
    """
    url = (args.url or "").strip()
    if not url:
        print("Please provide an index page URL.")
        return 1

    try:
        saved = fetch_documents(url, Path(args.data_dir), refresh=args.refresh, sleep_seconds=args.sleep)
    except FetchError as e:
        print(str(e))
        return 1

    for p in saved:
        print(f"FETCH {p.name}")
    print(f"Downloaded {len(saved)} documents to: {args.data_dir}")
    return 0


def _cmd_sources(args: argparse.Namespace) -> int:
    """
    List stored sources, most recent first.
    """
    sources = JsonRecordStore(args.store).list_sources()
    if not sources:
        print("No sources ingested yet.")
        return 0

    for s in sources:
        term = s["term"] or "-"
        print(f"{s['kind']:<9} | {s['source_key']} | {term} | {s['count']} records | {s['ingested_at']}")
    return 0


def _cmd_remove(args: argparse.Namespace) -> int:
    """
    Remove a source's records from the store (and optionally the file itself).
    """
    source = (args.source or "").strip()
    if not source:
        print("Please provide a source file name.")
        return 1

    try:
        removed = JsonRecordStore(args.store).remove_source(source)
    except SinkError as e:
        print(f"Removing records failed: {e}")
        return 1

    if args.delete_file:
        target = Path(args.data_dir) / source
        if target.is_file():
            target.unlink()
            print(f"Deleted file: {target}")

    print(f"Removed: {source} ({removed} records)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    config = get_config()

    parser = argparse.ArgumentParser(prog="academic_ingest", description="Timetable / calendar document ingestion")
    parser.add_argument("--log-level", default=config.log_level, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--log-json", action="store_true", default=config.log_json, help="Log as JSON lines")
    sub = parser.add_subparsers(dest="command", required=True)

    p_ingest = sub.add_parser("ingest", help="Ingest all documents from the data directory")
    p_ingest.add_argument("--data-dir", type=Path, default=config.data_dir)
    p_ingest.add_argument("--store", type=Path, default=config.store_path)
    p_ingest.add_argument("--semester", type=str, default=config.semester, help="Term tag (e.g. 2025-2026 S1)")
    p_ingest.add_argument("--only", type=str, default=None, help="Ingest just this file name")

    p_parse = sub.add_parser("parse", help="Parse one document and print JSON records")
    p_parse.add_argument("file", type=str, help="Document path (.pdf, .txt, .xlsx, .docx)")
    p_parse.add_argument("--kind", choices=[k.value for k in DocumentKind], default=None)
    p_parse.add_argument("--dept", type=str, default=None, help="Department to put on timetable records")
    p_parse.add_argument("--semester", type=str, default=config.semester)

    p_fetch = sub.add_parser("fetch", help="Download documents linked from a web page")
    p_fetch.add_argument("url", type=str, help="Index page URL")
    p_fetch.add_argument("--data-dir", type=Path, default=config.data_dir)
    p_fetch.add_argument("--refresh", action="store_true", help="Re-download and overwrite existing files")
    p_fetch.add_argument("--sleep", type=float, default=0.2, help="Sleep seconds between downloads")

    p_sources = sub.add_parser("sources", help="List ingested sources")
    p_sources.add_argument("--store", type=Path, default=config.store_path)

    p_remove = sub.add_parser("remove", help="Remove a source's records")
    p_remove.add_argument("source", type=str, help="Source file name (e.g. ICT_timetable.pdf)")
    p_remove.add_argument("--store", type=Path, default=config.store_path)
    p_remove.add_argument("--data-dir", type=Path, default=config.data_dir)
    p_remove.add_argument("--delete-file", action="store_true", help="Also delete the document file")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(json_output=args.log_json, log_level=args.log_level)

    if args.command == "ingest":
        raise SystemExit(_cmd_ingest(args))
    if args.command == "parse":
        raise SystemExit(_cmd_parse(args))
    if args.command == "fetch":
        raise SystemExit(_cmd_fetch(args))
    if args.command == "sources":
        raise SystemExit(_cmd_sources(args))
    if args.command == "remove":
        raise SystemExit(_cmd_remove(args))

    raise SystemExit(2)
