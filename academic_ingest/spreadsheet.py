"""
Record mapping for documents that are not free text.

- Spreadsheet timetables: one sheet row -> one ScheduleRecord, columns found by
  a list of accepted header names
- Notices: a whole document -> one NoticeEntry
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from academic_ingest.model import NoticeEntry, ScheduleRecord
from academic_ingest.recognize import is_course_code, normalize_clock, normalize_day


# Accepted header names per field, in lookup order
COLUMN_ALIASES: Dict[str, Sequence[str]] = {
    "course_code": ("course_code", "Course", "Course Code", "course"),
    "course_title": ("course_title", "Title", "Course Title"),
    "day": ("day", "Day"),
    "start_time": ("start_time", "Start"),
    "end_time": ("end_time", "End"),
    "venue": ("venue", "Room", "Hall"),
    "lecturer": ("lecturer", "Instructor", "Teacher"),
}


def _cell(row: Mapping[str, Any], field: str) -> Any:
    """
    Return the first non-empty value among the aliases of a field.
    """
    for name in COLUMN_ALIASES[field]:
        value = row.get(name)
        if value is not None and str(value).strip():
            return value
    return ""


def map_spreadsheet_row(
    row: Mapping[str, Any],
    department: str = "UNKNOWN",
    source_key: str = "",
    term: str = "",
) -> Optional[ScheduleRecord]:
    """
    Map one header-keyed sheet row to a ScheduleRecord.

    Rows without code, day, start and end are skipped (None). The code must be
    exactly one course code, and day and times must be recognizable, otherwise
    the row is skipped as well.
    """
    code = str(_cell(row, "course_code")).strip()
    day_raw = _cell(row, "day")
    start_raw = _cell(row, "start_time")
    end_raw = _cell(row, "end_time")

    if not (code and str(day_raw).strip() and str(start_raw).strip() and str(end_raw).strip()):
        return None

    day3 = normalize_day(day_raw)
    start = normalize_clock(start_raw)
    end = normalize_clock(end_raw)
    if not (is_course_code(code) and day3 and start and end):
        return None

    return ScheduleRecord(
        department=department,
        course_code=code,
        course_title=str(_cell(row, "course_title")).strip(),
        day3=day3,
        start_time=start,
        end_time=end,
        venue=str(_cell(row, "venue")).strip(),
        lecturer=str(_cell(row, "lecturer")).strip(),
        source_key=source_key,
        term=term,
    )


def map_spreadsheet_rows(
    rows: Iterable[Mapping[str, Any]],
    department: str = "UNKNOWN",
    source_key: str = "",
    term: str = "",
) -> List[ScheduleRecord]:
    out: List[ScheduleRecord] = []
    for row in rows:
        record = map_spreadsheet_row(row, department, source_key, term)
        if record is not None:
            out.append(record)
    return out


def build_notice(
    text: str,
    filename: str,
    source_key: str = "",
    term: str = "",
    today: Optional[date] = None,
) -> NoticeEntry:
    """
    Turn a notice document into one entry titled after the file.
    """
    body = "\n".join(line.strip() for line in (text or "").splitlines() if line.strip())
    return NoticeEntry(
        date=(today or date.today()).isoformat(),
        title=Path(filename).stem,
        body=body,
        source_key=source_key,
        term=term,
    )
