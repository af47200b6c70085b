"""
Document decoding (binary file -> text or rows).

The parsers only ever see plain text (or header-keyed rows for spreadsheets).
This module is the only place that knows about file formats:

- .pdf  -> text via pdfplumber, keeping the horizontal spacing of the page
- .docx -> text via python-docx, one line per paragraph
- .xlsx -> list of dicts via openpyxl, keyed by the first row
- .txt  -> already-extracted UTF-8 text

Every failure is re-raised as ExtractionError so the batch can skip the document.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import openpyxl
import pdfplumber
from docx import Document

from academic_ingest.errors import ExtractionError


def extract_pdf_text(path: str | Path) -> str:
    """
    Extract the text of all pages, one page after the other.

    layout=True keeps runs of spaces between table cells; the column
    splitter relies on them.
    """
    p = Path(path)
    try:
        with pdfplumber.open(p) as pdf:
            pages = [page.extract_text(layout=True) or "" for page in pdf.pages]
    except Exception as e:
        raise ExtractionError(p.name, f"cannot read PDF ({e})") from e
    return "\n".join(pages)


def extract_docx_text(path: str | Path) -> str:
    """
    Extract paragraph text from a Word document, one paragraph per line.
    """
    p = Path(path)
    try:
        document = Document(str(p))
    except Exception as e:
        raise ExtractionError(p.name, f"cannot read DOCX ({e})") from e
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def read_spreadsheet_rows(path: str | Path) -> List[Dict[str, Any]]:
    """
    Read the first sheet of a workbook as a list of dicts.

    The first row is the header; empty cells become "".
    """
    p = Path(path)
    try:
        wb = openpyxl.load_workbook(p, read_only=True, data_only=True)
    except Exception as e:
        raise ExtractionError(p.name, f"cannot read workbook ({e})") from e

    try:
        ws = wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            return []

        headers = [
            str(value).strip() if value is not None else f"col{i}"
            for i, value in enumerate(header_row, start=1)
        ]

        out: List[Dict[str, Any]] = []
        for values in rows:
            row = {headers[i]: ("" if value is None else value) for i, value in enumerate(values) if i < len(headers)}
            # Skip fully empty rows
            if any(str(v).strip() for v in row.values()):
                out.append(row)
        return out
    finally:
        wb.close()


def read_text_file(path: str | Path) -> str:
    p = Path(path)
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ExtractionError(p.name, f"cannot read text ({e})") from e
