"""
Parsing (extracted document text -> records).

Two independent paths share the same line normalizer:

- Timetable path: header lines set the current day/time, data lines are
  re-merged when the PDF extractor wrapped them, split into columns and
  mapped to ScheduleRecord objects.
- Calendar path: lines are grouped into (date, title, description) blocks
  and mapped to CalendarEntry objects.

Important rules:
- Everything here is pure: same text in, same records out
- Content problems never raise; bad lines are skipped, unknown fields stay ""
- Day/time context lives for one parse call only
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from academic_ingest.model import CalendarEntry, DayTimeContext, ScheduleRecord
from academic_ingest.recognize import (
    COMBINED_CODE_RE,
    COURSE_CODE_RE,
    contains_course_code,
    detect_header,
    is_course_code,
    is_date_line,
    is_header_line,
    to_iso_date,
)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# A row is considered complete once this many columns are recoverable
MIN_COLUMNS = 4

COLUMN_GAP_RE = re.compile(r"\s{2,}")
WHITESPACE_RE = re.compile(r"\s+")

# Table column headings ("S/N", "Code", "Title", ...) and bare row numbers
NON_DATA_RE = re.compile(r"^(s/?n|code|title|lecturer|venue)\b", re.IGNORECASE)
BARE_NUMBER_RE = re.compile(r"^\d+\s*$")
SERIAL_PREFIX_RE = re.compile(r"^\d+\s+")


# ---------------------------------------------------------------------------
# Line normalizer
# ---------------------------------------------------------------------------


def split_lines(text: str, keep_blank: bool = False) -> List[str]:
    """
    Split raw text into trimmed lines, in order.

    Blank lines are dropped unless keep_blank is set, in which case they
    are kept as "" (the calendar path uses them as block separators).
    """
    lines = [line.strip() for line in (text or "").splitlines()]
    if keep_blank:
        return lines
    return [line for line in lines if line]


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text or "").strip()


# ---------------------------------------------------------------------------
# Column / code splitting
# ---------------------------------------------------------------------------


def split_columns(text: str) -> List[str]:
    """
    Split a row into fields on runs of two or more whitespace characters.

    More than four fields are compacted to [code, title, lecturer, rest],
    the overflow being venue/remarks text with wide internal spacing.
    """
    fields = [part.strip() for part in COLUMN_GAP_RE.split(text or "")]
    fields = [part for part in fields if part]

    if len(fields) > MIN_COLUMNS:
        code, title, lecturer, *rest = fields
        fields = [code, title, lecturer, " ".join(rest)]

    return fields


def split_by_codes(row: str) -> List[str]:
    """
    Split a logical row into one chunk per course-code occurrence.

    Rows with fewer than two occurrences are returned as a single chunk.
    """
    matches = list(COMBINED_CODE_RE.finditer(row))
    if len(matches) < 2:
        return [row]

    chunks: List[str] = []
    for idx, match in enumerate(matches):
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(row)
        chunks.append(row[match.start():end].strip())
    return chunks


# ---------------------------------------------------------------------------
# Row reconstruction (state machine)
# ---------------------------------------------------------------------------


class RowState(Enum):
    SCANNING = "scanning"
    ACCUMULATING = "accumulating"


def is_non_data_line(line: str) -> bool:
    """
    Column headings and bare row numbers carry no schedule data.
    """
    return NON_DATA_RE.match(line) is not None or BARE_NUMBER_RE.match(line) is not None


def strip_serial(line: str) -> str:
    """
    Remove a leading row number ("12  ICT 202 ..." -> "ICT 202 ...").
    """
    return SERIAL_PREFIX_RE.sub("", line, count=1)


def join_wrapped(row: str, next_line: str) -> str:
    """
    Append a wrapped continuation line with a single space at the seam.

    The seam is the only place whitespace is normalized. Wide gaps inside
    the row are kept, they are the only column delimiter; collapsing them
    would make the four-column stop condition unreachable.
    """
    return f"{row.rstrip()} {next_line.strip()}".strip()


def _row_complete(row: str, next_line: Optional[str]) -> bool:
    # Stop absorbing at 4 columns, at a header, or at the end of the input
    if len(split_columns(row)) >= MIN_COLUMNS:
        return True
    return next_line is None or is_header_line(next_line)


def reconstruct_rows(lines: Sequence[str]) -> Iterator[Tuple[DayTimeContext, str]]:
    """
    Walk normalized lines and yield (context, logical_row) pairs.

    SCANNING: headers update the context, non-data lines are dropped, a line
    with a course code seeds a logical row and switches to ACCUMULATING.
    ACCUMULATING: following lines are absorbed until the row is complete,
    then the row is yielded and scanning resumes on the next line.
    """
    context = DayTimeContext()
    state = RowState.SCANNING
    row = ""
    i = 0

    while i < len(lines):
        line = lines[i]

        if state is RowState.SCANNING:
            header = detect_header(line)
            if header is not None:
                context = context.apply(header)
                i += 1
                continue

            if is_non_data_line(line):
                i += 1
                continue

            line = strip_serial(line)
            if not contains_course_code(line):
                i += 1
                continue

            row = line
            state = RowState.ACCUMULATING
            continue

        # ACCUMULATING: lines[i] is the last line absorbed into the row
        next_line = lines[i + 1] if i + 1 < len(lines) else None
        if _row_complete(row, next_line):
            yield context, row
            row = ""
            state = RowState.SCANNING
            i += 1
            continue

        i += 1
        row = join_wrapped(row, lines[i])


# ---------------------------------------------------------------------------
# Field extraction
# ---------------------------------------------------------------------------


def extract_records(
    chunk: str,
    context: DayTimeContext,
    department: str = "UNKNOWN",
    source_key: str = "",
    term: str = "",
) -> List[ScheduleRecord]:
    """
    Map one code-anchored chunk to ScheduleRecord objects.

    The first column must carry a course code. Slash-joined codes
    ("CPS 416/ CPS 313") are expanded into one record per code; a piece
    that is not exactly one code produces no record.
    """
    fields = split_columns(chunk)
    if not fields or not COURSE_CODE_RE.search(fields[0]):
        return []

    # Pad missing trailing columns
    code, title, lecturer, venue_raw = (fields + ["", "", ""])[:MIN_COLUMNS]
    venue = collapse_whitespace(venue_raw)

    records: List[ScheduleRecord] = []
    for piece in code.split("/"):
        piece = piece.strip()
        # Each piece must be exactly one code ("ICT 2021", "ICT 202 Data" are not)
        if not is_course_code(piece):
            continue
        records.append(
            ScheduleRecord(
                department=department,
                course_code=piece,
                course_title=title,
                day3=context.day3,
                start_time=context.start_time,
                end_time=context.end_time,
                venue=venue,
                lecturer=lecturer,
                source_key=source_key,
                term=term,
            )
        )
    return records


def parse_timetable_lines(
    lines: Sequence[str],
    department: str = "UNKNOWN",
    source_key: str = "",
    term: str = "",
) -> List[ScheduleRecord]:
    out: List[ScheduleRecord] = []
    for context, row in reconstruct_rows(lines):
        for chunk in split_by_codes(row):
            out.extend(extract_records(chunk, context, department, source_key, term))
    return out


def parse_timetable_text(
    text: str,
    department: str = "UNKNOWN",
    source_key: str = "",
    term: str = "",
) -> List[ScheduleRecord]:
    """
    Parse extracted timetable text into ScheduleRecord objects, in document order.
    """
    return parse_timetable_lines(split_lines(text), department, source_key, term)


# ---------------------------------------------------------------------------
# Calendar segmentation
# ---------------------------------------------------------------------------


def _read_title(lines: Sequence[str], j: int) -> Tuple[str, int]:
    # First non-blank line that is not itself a date line
    while j < len(lines):
        line = lines[j]
        if is_date_line(line):
            break
        j += 1
        if line:
            return line, j
    return "", j


def _read_description(lines: Sequence[str], j: int) -> Tuple[str, int]:
    # Everything up to a blank line (consumed) or the next date line (not consumed)
    parts: List[str] = []
    while j < len(lines):
        line = lines[j]
        if not line:
            j += 1
            break
        if is_date_line(line):
            break
        parts.append(line)
        j += 1
    return collapse_whitespace(" ".join(parts)), j


def segment_calendar(
    lines: Sequence[str],
    source_key: str = "",
    term: str = "",
) -> List[CalendarEntry]:
    """
    Group calendar lines into (date, title, description) entries.

    Lines may contain "" for blank lines. Lines outside a dated block are skipped.
    """
    lines = [line.strip() for line in lines]
    entries: List[CalendarEntry] = []
    i = 0

    while i < len(lines):
        line = lines[i]
        if not is_date_line(line):
            i += 1
            continue

        iso = to_iso_date(line) or ""
        title, j = _read_title(lines, i + 1)
        description, j = _read_description(lines, j)

        if iso or title:
            entries.append(
                CalendarEntry(
                    date=iso,
                    title=title,
                    description=description,
                    source_key=source_key,
                    term=term,
                )
            )
        i = j

    return entries


def parse_calendar_text(text: str, source_key: str = "", term: str = "") -> List[CalendarEntry]:
    """
    Parse extracted calendar text into CalendarEntry objects, in document order.
    """
    return segment_calendar(split_lines(text, keep_blank=True), source_key, term)

