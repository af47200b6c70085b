"""
Persistent storage for ingested records.

This module manages the file:

    data/processed/records.json

Layout:

    {
      "sources": {
        "<source_key>": {
          "kind": "timetable" | "calendar" | "notices",
          "term": "...",
          "ingested_at": "2025-11-03T10:15:00+00:00",
          "records": [ {...}, ... ]
        }
      }
    }

Re-ingesting a source replaces its whole record set; other sources are untouched.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from academic_ingest.errors import SinkError
from academic_ingest.log import get_logger
from academic_ingest.model import CalendarEntry, DocumentKind, NoticeEntry, ScheduleRecord


Record = Union[ScheduleRecord, CalendarEntry, NoticeEntry]

logger = get_logger(__name__)


class RecordSink(Protocol):
    """
    Anything that can take the ordered records of one source.
    """

    def persist(
        self,
        records: Sequence[Record],
        source_key: str,
        term: str,
        kind: DocumentKind,
    ) -> None: ...


def _default_store_path() -> Path:
    """
    Return the default path of records.json inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can pass their own path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "processed" / "records.json"


class JsonRecordStore:
    """
    JSON-file record store, one entry per source key.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else _default_store_path()

    # -- reading -----------------------------------------------------------

    def _load(self) -> Dict[str, Dict[str, Any]]:
        """
        Load all sources. Missing or corrupted files read as an empty store.
        """
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            sources = data.get("sources", {})
            if not isinstance(sources, dict):
                return {}
            return {k: v for k, v in sources.items() if isinstance(v, dict)}
        except (OSError, json.JSONDecodeError, UnicodeDecodeError, AttributeError):
            logger.warning("store_unreadable", path=str(self.path))
            return {}

    def load_records(self, kind: Optional[DocumentKind] = None) -> List[Dict[str, Any]]:
        """
        Return stored records as dicts, optionally only those of one kind.

        Sources come in key order, records in document order.
        """
        out: List[Dict[str, Any]] = []
        sources = self._load()
        for source_key in sorted(sources):
            entry = sources[source_key]
            if kind is not None and entry.get("kind") != DocumentKind(kind).value:
                continue
            records = entry.get("records", [])
            if isinstance(records, list):
                out.extend(r for r in records if isinstance(r, dict))
        return out

    def list_sources(self) -> List[Dict[str, Any]]:
        """
        Summaries of all stored sources, most recently ingested first.
        """
        summaries: List[Dict[str, Any]] = []
        for source_key, entry in self._load().items():
            records = entry.get("records", [])
            summaries.append(
                {
                    "source_key": source_key,
                    "kind": entry.get("kind", ""),
                    "term": entry.get("term", ""),
                    "ingested_at": entry.get("ingested_at", ""),
                    "count": len(records) if isinstance(records, list) else 0,
                }
            )
        summaries.sort(key=lambda s: str(s["ingested_at"]), reverse=True)
        return summaries

    # -- writing -----------------------------------------------------------

    def _write(self, sources: Dict[str, Dict[str, Any]]) -> None:
        """
        Write the whole store atomically (temp file + rename).
        """
        payload = json.dumps({"sources": sources}, indent=2, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".records-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, self.path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise SinkError(f"cannot write {self.path}: {e}") from e

    def persist(
        self,
        records: Sequence[Record],
        source_key: str,
        term: str,
        kind: DocumentKind,
    ) -> None:
        """
        Replace every stored record of source_key with the given records.
        """
        sources = self._load()
        sources[source_key] = {
            "kind": DocumentKind(kind).value,
            "term": term,
            "ingested_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "records": [r.to_dict() for r in records],
        }
        self._write(sources)
        logger.info("source_persisted", source=source_key, kind=DocumentKind(kind).value, count=len(records))

    def remove_source(self, source_key: str) -> int:
        """
        Drop a source and its records. Returns the number of removed records.
        """
        sources = self._load()
        entry = sources.pop(source_key, None)
        if entry is None:
            return 0
        self._write(sources)
        records = entry.get("records", [])
        return len(records) if isinstance(records, list) else 0
