"""
Ingestion (documents in a directory -> stored records).

- Routes each file by name/extension to the timetable, calendar or notice path
- Decodes it, parses it, and hands the ordered records to a sink
- One document failing to decode does not stop the batch

Routing rules:
- .xlsx                        -> timetable (spreadsheet rows)
- .pdf / .txt with "calendar"  -> calendar
- .pdf / .txt otherwise        -> timetable
- .docx                        -> notices
- anything else                -> skipped
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from academic_ingest.decode import (
    extract_docx_text,
    extract_pdf_text,
    read_spreadsheet_rows,
    read_text_file,
)
from academic_ingest.errors import ExtractionError
from academic_ingest.log import get_logger
from academic_ingest.model import DocumentKind
from academic_ingest.parse import parse_calendar_text, parse_timetable_text
from academic_ingest.spreadsheet import build_notice, map_spreadsheet_rows
from academic_ingest.storage import Record, RecordSink


logger = get_logger(__name__)

TEXT_EXTENSIONS = (".pdf", ".txt")
SUPPORTED_EXTENSIONS = (".pdf", ".txt", ".xlsx", ".docx")

# Filename fragments -> department, first hit wins
DEPARTMENT_HINTS = (
    ("cs", "CS"),
    ("ins", "INS"),
    ("ict", "ICT"),
    ("tel", "TEL"),
    ("cps", "CPS"),
)


@dataclass(frozen=True)
class IngestResult:
    source_key: str
    kind: DocumentKind
    count: int


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------


def route_document(filename: str) -> Optional[DocumentKind]:
    """
    Decide which path a file goes through, or None if it is not supported.
    """
    name = Path(filename).name.lower()
    suffix = Path(name).suffix

    if suffix == ".xlsx":
        return DocumentKind.TIMETABLE
    if suffix in TEXT_EXTENSIONS:
        return DocumentKind.CALENDAR if "calendar" in name else DocumentKind.TIMETABLE
    if suffix == ".docx":
        return DocumentKind.NOTICES
    return None


def guess_department(filename: str) -> str:
    name = Path(filename).name.lower()
    for hint, department in DEPARTMENT_HINTS:
        if hint in name:
            return department
    return "UNKNOWN"


def _extract_text(path: Path) -> str:
    if path.suffix.lower() == ".pdf":
        return extract_pdf_text(path)
    return read_text_file(path)


# ---------------------------------------------------------------------------
# Per-document parsing
# ---------------------------------------------------------------------------


def parse_document(
    path: str | Path,
    term: str = "",
    kind: Optional[DocumentKind] = None,
    department: Optional[str] = None,
) -> List[Record]:
    """
    Decode and parse one document without storing anything.

    kind overrides the filename routing, department overrides the department
    guessed from the file name. Raises ExtractionError if the file
    cannot be decoded or is not a supported format.
    """
    p = Path(path)
    source_key = p.name
    kind = kind or route_document(source_key)
    if kind is None:
        raise ExtractionError(source_key, "unsupported file type")

    suffix = p.suffix.lower()
    department = department or guess_department(source_key)

    if kind is DocumentKind.NOTICES:
        text = extract_docx_text(p) if suffix == ".docx" else _extract_text(p)
        return [build_notice(text, source_key, source_key=source_key, term=term)]

    if suffix == ".xlsx":
        if kind is not DocumentKind.TIMETABLE:
            raise ExtractionError(source_key, "spreadsheets can only hold timetables")
        rows = read_spreadsheet_rows(p)
        return map_spreadsheet_rows(rows, department, source_key, term)

    if suffix not in TEXT_EXTENSIONS:
        raise ExtractionError(source_key, f"cannot parse {suffix or 'extensionless'} file as {kind.value}")

    text = _extract_text(p)
    if kind is DocumentKind.CALENDAR:
        return parse_calendar_text(text, source_key=source_key, term=term)
    return parse_timetable_text(text, department, source_key, term)


def ingest_file(path: str | Path, sink: RecordSink, term: str) -> IngestResult:
    """
    Parse one document and replace its records in the sink.

    ExtractionError and SinkError propagate.
    """
    p = Path(path)
    kind = route_document(p.name)
    if kind is None:
        raise ExtractionError(p.name, "unsupported file type")

    records = parse_document(p, term=term, kind=kind)
    sink.persist(records, p.name, term, kind)
    return IngestResult(source_key=p.name, kind=kind, count=len(records))


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


def list_documents(data_dir: str | Path) -> List[Path]:
    root = Path(data_dir)
    if not root.is_dir():
        return []
    return sorted(p for p in root.iterdir() if p.is_file() and not p.name.startswith("."))


def ingest_directory(
    data_dir: str | Path,
    sink: RecordSink,
    term: str,
    only_file: Optional[str] = None,
    on_result: Optional[Callable[[IngestResult], None]] = None,
) -> List[IngestResult]:
    """
    Ingest every supported document in data_dir (or just only_file).

    Documents are handled one after the other, each with its own parse state.
    Undecodable documents are logged and skipped; sink failures propagate.
    """
    results: List[IngestResult] = []
    skipped: Dict[str, str] = {}

    for path in list_documents(data_dir):
        if only_file and path.name != only_file:
            continue

        if route_document(path.name) is None:
            logger.info("document_skipped", source=path.name, reason="unsupported")
            skipped[path.name] = "unsupported"
            continue

        try:
            result = ingest_file(path, sink, term)
        except ExtractionError as e:
            logger.warning("document_failed", source=path.name, error=str(e))
            skipped[path.name] = "extraction failed"
            continue

        logger.info("document_ingested", source=result.source_key, kind=result.kind.value, count=result.count)
        results.append(result)
        if on_result is not None:
            on_result(result)

    logger.info("ingest_finished", ingested=len(results), skipped=len(skipped))
    return results


def summarize(results: Sequence[IngestResult]) -> Dict[str, int]:
    """
    Record counts per kind, e.g. {"timetable": 120, "calendar": 34}.
    """
    totals: Dict[str, int] = {}
    for r in results:
        totals[r.kind.value] = totals.get(r.kind.value, 0) + r.count
    return totals
