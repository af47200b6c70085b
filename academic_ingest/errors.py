"""
Error hierarchy for document ingestion.

Only failures at the document boundaries raise. Content problems inside a
document (a line without a course code, an unreadable date) never do; the
parsers skip them or leave fields empty.

- ExtractionError: a document could not be decoded; fatal for that document only
- SinkError: records could not be stored; propagates to the caller
- FetchError: the document index page could not be read
"""


class IngestError(Exception):
    """Base exception for all ingestion errors."""

    pass


class ExtractionError(IngestError):
    """A document could not be turned into text or rows.

    Examples: corrupted PDF, password-protected file, not really a .docx.
    The batch logs it and continues with the next document.
    """

    def __init__(self, source_key: str, message: str) -> None:
        super().__init__(f"{source_key}: {message}")
        self.source_key = source_key


class SinkError(IngestError):
    """Records for a source could not be persisted.

    The document counts as not ingested. The prior record set stays in place.
    """

    pass


class FetchError(IngestError):
    """The page listing the documents could not be downloaded."""

    pass
