"""
Tests for routing and batch ingestion.

Documents are written into a temporary directory; PDF decoding is patched
so that the tests do not need real PDF files.
"""

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from docx import Document

from academic_ingest.errors import ExtractionError, SinkError
from academic_ingest.ingest import (
    guess_department,
    ingest_directory,
    ingest_file,
    parse_document,
    route_document,
    summarize,
)
from academic_ingest.model import DocumentKind, ScheduleRecord
from academic_ingest.storage import JsonRecordStore


TIMETABLE_TEXT = "\n".join(
    [
        "MONDAYS 08:30 - 11:00",
        "ICT 202   Data Structures   J. Doe   Hall A",
        "ICT 204   Networks   A. Smith   Lab 2",
    ]
)

CALENDAR_TEXT = "2025-11-03\nGraduation Ceremony\n\n10 Nov 2025\nExams begin\n"


class FailingSink:
    def persist(self, records, source_key, term, kind) -> None:
        raise SinkError("disk full")


class TestRouting(unittest.TestCase):
    def test_route_by_name_and_extension(self) -> None:
        self.assertEqual(route_document("ICT_Timetable.pdf"), DocumentKind.TIMETABLE)
        self.assertEqual(route_document("Academic_Calendar_2025.PDF"), DocumentKind.CALENDAR)
        self.assertEqual(route_document("calendar.txt"), DocumentKind.CALENDAR)
        self.assertEqual(route_document("cs.xlsx"), DocumentKind.TIMETABLE)
        self.assertEqual(route_document("notice.docx"), DocumentKind.NOTICES)
        self.assertIsNone(route_document("photo.png"))
        self.assertIsNone(route_document("old.xls"))

    def test_guess_department(self) -> None:
        self.assertEqual(guess_department("ICT_Timetable.pdf"), "ICT")
        self.assertEqual(guess_department("cps-level-400.pdf"), "CPS")
        self.assertEqual(guess_department("TEL_Lectures.pdf"), "TEL")
        self.assertEqual(guess_department("general.pdf"), "UNKNOWN")


class TestParseDocument(unittest.TestCase):
    def test_text_timetable(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "ICT_timetable.txt"
            p.write_text(TIMETABLE_TEXT, encoding="utf-8")
            records = parse_document(p, term="S1")
            self.assertEqual([r.course_code for r in records], ["ICT 202", "ICT 204"])
            self.assertTrue(all(isinstance(r, ScheduleRecord) for r in records))
            self.assertEqual(records[0].department, "ICT")
            self.assertEqual(records[0].source_key, "ICT_timetable.txt")

    def test_department_override(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "ICT_timetable.txt"
            p.write_text(TIMETABLE_TEXT, encoding="utf-8")
            records = parse_document(p, department="CPS")
            self.assertEqual({r.department for r in records}, {"CPS"})

    def test_pdf_goes_through_pdf_text(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "Academic_Calendar.pdf"
            p.write_bytes(b"%PDF-1.4")
            with mock.patch("academic_ingest.ingest.extract_pdf_text", return_value=CALENDAR_TEXT) as m:
                entries = parse_document(p, term="S1")
            m.assert_called_once_with(p)
            self.assertEqual([(e.date, e.title) for e in entries], [("2025-11-03", "Graduation Ceremony"), ("2025-11-10", "Exams begin")])

    def test_kind_override(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "dates.txt"
            p.write_text(CALENDAR_TEXT, encoding="utf-8")
            self.assertEqual(parse_document(p), [])
            self.assertEqual(len(parse_document(p, kind=DocumentKind.CALENDAR)), 2)

    def test_unsupported_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "photo.png"
            p.write_bytes(b"\x89PNG")
            with self.assertRaises(ExtractionError):
                parse_document(p)

    def test_docx_notice(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "Exam_Notice.docx"
            doc = Document()
            doc.add_paragraph("Mid-semester exams")
            doc.add_paragraph("")
            doc.add_paragraph("start next week")
            doc.save(str(p))

            notices = parse_document(p, term="S1")
            self.assertEqual(len(notices), 1)
            self.assertEqual(notices[0].title, "Exam_Notice")
            self.assertEqual(notices[0].body, "Mid-semester exams\nstart next week")


class TestIngestDirectory(unittest.TestCase):
    def test_batch_skips_bad_documents_and_stores_the_rest(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            data = Path(d) / "raw"
            data.mkdir()
            (data / "ICT_timetable.txt").write_text(TIMETABLE_TEXT, encoding="utf-8")
            (data / "academic_calendar.txt").write_text(CALENDAR_TEXT, encoding="utf-8")
            (data / "readme.md").write_text("not a document", encoding="utf-8")
            (data / "broken.xlsx").write_bytes(b"this is not a workbook")

            store = JsonRecordStore(Path(d) / "records.json")
            seen = []
            results = ingest_directory(data, store, term="S1", on_result=seen.append)

            self.assertEqual([r.source_key for r in results], ["ICT_timetable.txt", "academic_calendar.txt"])
            self.assertEqual(seen, results)
            self.assertEqual(summarize(results), {"timetable": 2, "calendar": 2})
            self.assertEqual(len(store.load_records(DocumentKind.TIMETABLE)), 2)
            self.assertEqual(len(store.load_records(DocumentKind.CALENDAR)), 2)
            self.assertEqual({s["term"] for s in store.list_sources()}, {"S1"})

    def test_reingest_replaces_records(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            data = Path(d)
            doc = data / "ICT_timetable.txt"
            doc.write_text(TIMETABLE_TEXT, encoding="utf-8")
            store = JsonRecordStore(data / "out" / "records.json")

            ingest_file(doc, store, "S1")
            doc.write_text("MONDAYS 08:30 - 11:00\nICT 301   Operating Systems   J. Doe   Hall C\n", encoding="utf-8")
            result = ingest_file(doc, store, "S2")

            self.assertEqual(result.count, 1)
            records = store.load_records()
            self.assertEqual([(r["course_code"], r["term"]) for r in records], [("ICT 301", "S2")])

    def test_only_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            data = Path(d) / "raw"
            data.mkdir()
            (data / "ICT_timetable.txt").write_text(TIMETABLE_TEXT, encoding="utf-8")
            (data / "academic_calendar.txt").write_text(CALENDAR_TEXT, encoding="utf-8")

            store = JsonRecordStore(Path(d) / "records.json")
            results = ingest_directory(data, store, term="S1", only_file="academic_calendar.txt")
            self.assertEqual([r.source_key for r in results], ["academic_calendar.txt"])

    def test_sink_failure_propagates(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            (Path(d) / "ICT_timetable.txt").write_text(TIMETABLE_TEXT, encoding="utf-8")
            with self.assertRaises(SinkError):
                ingest_directory(d, FailingSink(), term="S1")

    def test_missing_directory_is_empty_batch(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = JsonRecordStore(Path(d) / "records.json")
            self.assertEqual(ingest_directory(Path(d) / "nope", store, term="S1"), [])


if __name__ == "__main__":
    unittest.main()
