"""Structured logging utilities."""

from .diagnostics import (
    ARCHIVE_UNREADABLE,
    DIRECTORY_UNREADABLE,
    SOURCE_PARSE_FAILED,
    SOURCE_UNREADABLE,
    DiagnosticLog,
    JsonlDiagnosticWriter,
    ScanDiagnostic,
    error_message,
    record_diagnostic,
    utc_timestamp,
)

__all__ = [
    "ARCHIVE_UNREADABLE",
    "DIRECTORY_UNREADABLE",
    "DiagnosticLog",
    "JsonlDiagnosticWriter",
    "SOURCE_PARSE_FAILED",
    "SOURCE_UNREADABLE",
    "ScanDiagnostic",
    "error_message",
    "record_diagnostic",
    "utc_timestamp",
]
