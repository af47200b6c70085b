"""
Recognizers for the small vocabulary the parsers understand.

Each recognizer is a pure function over one text fragment:
- course codes like "ICT 202" or "CPS416"
- weekday header lines like "MONDAYS 08:30 - 11:00"
- clock times and time ranges ("8:30 - 11:00" -> ("08:30", "11:00"))
- dates in four notations, resolved to ISO (YYYY-MM-DD)

None of them raise on unexpected input; they report "no match" instead.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Any, Optional, Tuple

from academic_ingest.model import HeaderMatch


# ---------------------------------------------------------------------------
# Pattern constants
# ---------------------------------------------------------------------------

DAY_MAP = {
    "MONDAY": "Mon",
    "MONDAYS": "Mon",
    "TUESDAY": "Tue",
    "TUESDAYS": "Tue",
    "WEDNESDAY": "Wed",
    "WEDNESDAYS": "Wed",
    "THURSDAY": "Thu",
    "THURSDAYS": "Thu",
    "FRIDAY": "Fri",
    "FRIDAYS": "Fri",
    "SATURDAY": "Sat",
    "SATURDAYS": "Sat",
    "SUNDAY": "Sun",
    "SUNDAYS": "Sun",
}

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

# Letters (2-4) followed by 3 digits, whitespace in between kept as found
COURSE_CODE_RE = re.compile(r"[A-Z]{2,4}\s*\d{3}")

# A field that is exactly one course code, nothing before or after
COURSE_CODE_FULL_RE = re.compile(r"^[A-Z]{2,4}\s*\d{3}$")

# One code occurrence, optionally slash-joined with a second one
COMBINED_CODE_RE = re.compile(r"[A-Z]{2,4}\s*\d{3}(?:\s*/\s*[A-Z]{2,4}\s*\d{3})?")

HEADER_RE = re.compile(
    r"^(" + "|".join(sorted(DAY_MAP, key=len, reverse=True)) + r")\b.*?(\d{1,2}:\d{2}.*)$",
    re.IGNORECASE,
)

# Everything except digits, colon, dashes, whitespace and am/pm letters
TIME_NOISE_RE = re.compile(r"[^0-9:\s\-–apm]", re.IGNORECASE)
TIME_RANGE_RE = re.compile(r"(\d{1,2}:\d{2})\s*[–\-]\s*(\d{1,2}:\d{2})")
CLOCK_RE = re.compile(r"^(\d{1,2})[:.](\d{2})(?::\d{2})?$")

ISO_DATE_RE = re.compile(r"^20\d{2}-\d{2}-\d{2}$")
NUMERIC_DATE_RE = re.compile(r"^(\d{1,2})[/\-](\d{1,2})[/\-](20\d{2})$")
NAMED_MONTH_DATE_RE = re.compile(r"^(\d{1,2})\s+([A-Za-z]{3,})\s+(20\d{2})$")
EMBEDDED_ISO_DATE_RE = re.compile(r"(20\d{2}-\d{2}-\d{2})")

# Any of the three notations anywhere inside a line
INLINE_DATE_RE = re.compile(
    r"\b(20\d{2}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/20\d{2}|\d{1,2}\s+[A-Za-z]{3,}\s+20\d{2})\b"
)


# ---------------------------------------------------------------------------
# Course codes and weekdays
# ---------------------------------------------------------------------------


def contains_course_code(text: str) -> bool:
    return COURSE_CODE_RE.search(text) is not None


def is_course_code(text: str) -> bool:
    return COURSE_CODE_FULL_RE.match(text.strip()) is not None


def normalize_day(value: Any) -> str:
    """
    Map a weekday name ("monday", "Tue", "FRIDAYS") to its 3-letter form.

    Returns "" for anything that is not a weekday.
    """
    token = str(value or "").strip().upper()
    if not token:
        return ""
    if token in DAY_MAP:
        return DAY_MAP[token]

    # Abbreviations like "Mon" / "THU." / "Wednes"
    token = token.rstrip(".")
    for name, day3 in DAY_MAP.items():
        if len(token) >= 3 and name.startswith(token):
            return day3
    return ""


# ---------------------------------------------------------------------------
# Times
# ---------------------------------------------------------------------------


def _pad_clock(value: str) -> str:
    hour, minute = [part.strip() for part in value.split(":", 1)]
    return f"{hour.zfill(2)}:{minute}"


def parse_time_range(segment: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Extract an "H:MM - H:MM" range from a text segment.

    Returns both sides zero-padded to HH:MM, or (None, None) if no range is found.
    """
    cleaned = TIME_NOISE_RE.sub("", segment or "")
    match = TIME_RANGE_RE.search(cleaned)
    if not match:
        return None, None
    return _pad_clock(match.group(1)), _pad_clock(match.group(2))


def normalize_clock(value: Any) -> str:
    """
    Normalize a single clock value to HH:MM.

    Accepts "8:30", "08.30", "08:30:00" and datetime.time / datetime values
    (spreadsheet cells). Returns "" when the value is not a valid clock time.
    """
    if isinstance(value, (dt.time, dt.datetime)):
        return value.strftime("%H:%M")

    match = CLOCK_RE.match(str(value or "").strip())
    if not match:
        return ""
    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return ""
    return f"{hour:02d}:{minute:02d}"


# ---------------------------------------------------------------------------
# Header lines
# ---------------------------------------------------------------------------


def is_header_line(line: str) -> bool:
    return HEADER_RE.match(line.strip()) is not None


def detect_header(line: str) -> Optional[HeaderMatch]:
    """
    Recognize a weekday header line such as "MONDAYS 08:30 - 11:00".

    The day is always reported on a match; start/end are None when the line
    has no readable time range.
    """
    match = HEADER_RE.match(line.strip())
    if not match:
        return None

    day3 = DAY_MAP.get(match.group(1).upper(), "")
    start, end = parse_time_range(line)
    return HeaderMatch(day3=day3, start_time=start, end_time=end)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def to_iso_date(raw: str) -> Optional[str]:
    """
    Resolve a text fragment to an ISO date. First match wins:

    1. the whole fragment is YYYY-MM-DD
    2. D/M/YYYY or DD/MM/YYYY (day first, ranges not checked)
    3. "D Mon YYYY" with an English month name
    4. a YYYY-MM-DD substring anywhere in the fragment
    """
    if not raw:
        return None
    s = raw.strip()

    if ISO_DATE_RE.match(s):
        return s

    m = NUMERIC_DATE_RE.match(s)
    if m:
        day, month, year = m.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    m = NAMED_MONTH_DATE_RE.match(s)
    if m:
        day, month_name, year = m.groups()
        month = MONTHS.get(month_name[:3].lower())
        if month:
            return f"{year}-{month:02d}-{day.zfill(2)}"

    m = EMBEDDED_ISO_DATE_RE.search(s)
    if m:
        return m.group(1)

    return None


def is_date_line(line: str) -> bool:
    """
    True if the line resolves to a date or carries one of the date notations inline.
    """
    if not line:
        return False
    return to_iso_date(line) is not None or INLINE_DATE_RE.search(line) is not None
