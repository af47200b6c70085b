"""
Central data model definitions used across the project.

This module defines the canonical structure of the records produced by the
parsers so that:
- all modules share the same field names
- records stay immutable once a document scan has produced them
- the storage layer can serialize every record the same way
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional


WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class DocumentKind(str, Enum):
    """
    The three kinds of source documents the ingestion knows about.
    """

    TIMETABLE = "timetable"
    CALENDAR = "calendar"
    NOTICES = "notices"


@dataclass(frozen=True)
class ScheduleRecord:
    """
    One timetable slot for one course code.

    Combined-code rows ("CPS 416/ CPS 313") produce one record per code.
    """

    department: str
    course_code: str
    course_title: str
    day3: str
    start_time: str
    end_time: str
    venue: str
    lecturer: str
    source_key: str = ""
    term: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CalendarEntry:
    """
    One dated block of an academic calendar.

    `date` is ISO (YYYY-MM-DD) or empty when the date line was not resolvable.
    """

    date: str
    title: str
    description: str
    source_key: str = ""
    term: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NoticeEntry:
    """
    A whole notice document stored as one entry.
    """

    date: str
    title: str
    body: str
    source_key: str = ""
    term: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HeaderMatch:
    """
    Result of recognizing a weekday header line such as "MONDAYS 08:30 - 11:00".

    Times are None when the header carries no readable time range.
    """

    day3: str
    start_time: Optional[str]
    end_time: Optional[str]


@dataclass(frozen=True)
class DayTimeContext:
    """
    Day/time that applies to every row until the next header line.

    Lives for exactly one document parse.
    """

    day3: str = ""
    start_time: str = ""
    end_time: str = ""

    def apply(self, header: HeaderMatch) -> "DayTimeContext":
        """
        Return a new context updated from a header; missing values keep the old ones.
        """
        return replace(
            self,
            day3=header.day3 or self.day3,
            start_time=header.start_time or self.start_time,
            end_time=header.end_time or self.end_time,
        )
