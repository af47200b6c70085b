"""
Unit tests for the recognizers (course codes, weekdays, times, dates).

Each recognizer is a pure function; no test needs any setup.
"""

import datetime as dt
import unittest

from academic_ingest.model import DayTimeContext, HeaderMatch
from academic_ingest.recognize import (
    contains_course_code,
    detect_header,
    is_course_code,
    is_date_line,
    normalize_clock,
    normalize_day,
    parse_time_range,
    to_iso_date,
)


class TestDates(unittest.TestCase):
    def test_named_month(self) -> None:
        self.assertEqual(to_iso_date("03 Nov 2025"), "2025-11-03")
        self.assertEqual(to_iso_date("5 September 2025"), "2025-09-05")

    def test_day_first_numeric(self) -> None:
        self.assertEqual(to_iso_date("03/11/2025"), "2025-11-03")
        self.assertEqual(to_iso_date("3/4/2025"), "2025-04-03")

    def test_numeric_ranges_are_not_validated(self) -> None:
        self.assertEqual(to_iso_date("32/13/2025"), "2025-13-32")

    def test_iso_and_embedded_iso(self) -> None:
        self.assertEqual(to_iso_date("2025-11-03"), "2025-11-03")
        self.assertEqual(to_iso_date("2025-11-03 Graduation"), "2025-11-03")
        self.assertEqual(to_iso_date("Week 10 (2025-11-03)"), "2025-11-03")

    def test_no_date(self) -> None:
        self.assertIsNone(to_iso_date("Lectures begin"))
        self.assertIsNone(to_iso_date("12 Foo 2025"))
        self.assertIsNone(to_iso_date(""))

    def test_date_line_without_resolvable_date(self) -> None:
        line = "Monday 3 November 2025 - Lectures begin"
        self.assertTrue(is_date_line(line))
        self.assertIsNone(to_iso_date(line))

    def test_plain_line_is_not_a_date_line(self) -> None:
        self.assertFalse(is_date_line("Graduation Ceremony"))
        self.assertFalse(is_date_line(""))


class TestTimes(unittest.TestCase):
    def test_range_is_zero_padded(self) -> None:
        self.assertEqual(parse_time_range("MONDAYS 8:30 - 11:00"), ("08:30", "11:00"))

    def test_en_dash(self) -> None:
        self.assertEqual(parse_time_range("9:00–10:30"), ("09:00", "10:30"))

    def test_no_range(self) -> None:
        self.assertEqual(parse_time_range("from 9:00 onwards"), (None, None))

    def test_normalize_clock(self) -> None:
        self.assertEqual(normalize_clock("8:30"), "08:30")
        self.assertEqual(normalize_clock("08.30"), "08:30")
        self.assertEqual(normalize_clock("08:30:00"), "08:30")
        self.assertEqual(normalize_clock(dt.time(14, 5)), "14:05")
        self.assertEqual(normalize_clock("25:00"), "")
        self.assertEqual(normalize_clock("noon"), "")


class TestHeaders(unittest.TestCase):
    def test_plural_weekday_header(self) -> None:
        self.assertEqual(
            detect_header("MONDAYS 08:30 - 11:00"),
            HeaderMatch(day3="Mon", start_time="08:30", end_time="11:00"),
        )

    def test_case_insensitive(self) -> None:
        header = detect_header("thursday   1:00 - 3:00 pm")
        assert header is not None
        self.assertEqual(header.day3, "Thu")
        self.assertEqual((header.start_time, header.end_time), ("01:00", "03:00"))

    def test_header_without_range_keeps_day(self) -> None:
        self.assertEqual(
            detect_header("TUESDAYS 9:00 onwards"),
            HeaderMatch(day3="Tue", start_time=None, end_time=None),
        )

    def test_not_a_header(self) -> None:
        self.assertIsNone(detect_header("ICT 202   Data Structures"))
        self.assertIsNone(detect_header("MONDAY"))

    def test_context_keeps_missing_values(self) -> None:
        ctx = DayTimeContext("Mon", "08:30", "11:00")
        updated = ctx.apply(HeaderMatch("Tue", None, None))
        self.assertEqual(updated, DayTimeContext("Tue", "08:30", "11:00"))
        # the old context is untouched
        self.assertEqual(ctx.day3, "Mon")


class TestCodesAndDays(unittest.TestCase):
    def test_course_code(self) -> None:
        self.assertTrue(contains_course_code("ICT 202"))
        self.assertTrue(contains_course_code("12  CPS416 Intelligent Systems"))
        self.assertFalse(contains_course_code("ict 202"))
        self.assertFalse(contains_course_code("Room 202"))

    def test_is_course_code_needs_the_whole_field(self) -> None:
        self.assertTrue(is_course_code("ICT 202"))
        self.assertTrue(is_course_code("CPS416"))
        self.assertTrue(is_course_code(" ICT 202 "))
        self.assertFalse(is_course_code("ICT 202 Data Structures"))
        self.assertFalse(is_course_code("ICT 2021"))
        self.assertFalse(is_course_code("ict 202"))
        self.assertFalse(is_course_code("Lab"))

    def test_normalize_day(self) -> None:
        self.assertEqual(normalize_day("wednesday"), "Wed")
        self.assertEqual(normalize_day("THU."), "Thu")
        self.assertEqual(normalize_day("Fridays"), "Fri")
        self.assertEqual(normalize_day("Funday"), "")
        self.assertEqual(normalize_day(""), "")


if __name__ == "__main__":
    unittest.main()
