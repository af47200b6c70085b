"""
Turn academic documents (class timetables, academic calendars, notices) into records.

The parsing core is pure; see academic_ingest.parse for the entry points.
"""

from academic_ingest.model import CalendarEntry, DocumentKind, NoticeEntry, ScheduleRecord
from academic_ingest.parse import parse_calendar_text, parse_timetable_text

__all__ = [
    "CalendarEntry",
    "DocumentKind",
    "NoticeEntry",
    "ScheduleRecord",
    "parse_calendar_text",
    "parse_timetable_text",
]
