"""Structured JSONL diagnostics for scan failures."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path

SOURCE_PARSE_FAILED = "source_parse_failed"
SOURCE_UNREADABLE = "source_unreadable"
ARCHIVE_UNREADABLE = "archive_unreadable"
DIRECTORY_UNREADABLE = "directory_unreadable"

DIAGNOSTIC_KINDS = (
    SOURCE_PARSE_FAILED,
    SOURCE_UNREADABLE,
    ARCHIVE_UNREADABLE,
    DIRECTORY_UNREADABLE,
)


@dataclass(slots=True, frozen=True)
class ScanDiagnostic:
    """One input that contributed nothing to the index, and why."""

    timestamp: str
    kind: str
    source: str
    message: str


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonlDiagnosticWriter:
    """Append-only JSONL diagnostics file and bounded reader."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def append(self, event: ScanDiagnostic) -> None:
        """Append one event as a single JSON object line."""
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def read(self, kind: str | None = None, limit: int = 50) -> list[dict[str, object]]:
        """Read recent events, optionally filtered by kind."""
        if limit < 1:
            return []
        entries: list[dict[str, object]] = []
        if not self._path.exists():
            return entries
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    record = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if not isinstance(record, dict):
                    continue
                if kind is not None and record.get("kind") != kind:
                    continue
                entries.append(record)
        if len(entries) <= limit:
            return entries
        return entries[-limit:]


@dataclass(slots=True)
class DiagnosticLog:
    """In-memory diagnostics for one scan, optionally mirrored to JSONL."""

    writer: JsonlDiagnosticWriter | None = None
    writer_error: str | None = None
    _events: list[ScanDiagnostic] = field(default_factory=list)

    def record(self, kind: str, source: str, message: str) -> ScanDiagnostic:
        """Record one diagnostic event."""
        if kind not in DIAGNOSTIC_KINDS:
            raise ValueError(f"Unknown diagnostic kind: {kind}")
        event = ScanDiagnostic(
            timestamp=utc_timestamp(),
            kind=kind,
            source=source,
            message=" ".join(message.split()),
        )
        self._events.append(event)
        if self.writer is not None:
            try:
                self.writer.append(event)
            except OSError as error:
                # Events stay in memory; the file is not retried for this scan.
                self.writer_error = f"{self.writer.path}: {error_message(error)}"
                self.writer = None
        return event

    @property
    def events(self) -> tuple[ScanDiagnostic, ...]:
        """Return recorded events in insertion order."""
        return tuple(self._events)

    def count(self, kind: str | None = None) -> int:
        """Count recorded events, optionally for one kind."""
        if kind is None:
            return len(self._events)
        return sum(1 for event in self._events if event.kind == kind)


def record_diagnostic(
    diagnostics: DiagnosticLog | None, kind: str, source: str, message: str
) -> None:
    """Record onto an optional log; events are dropped when no log is attached."""
    if diagnostics is None:
        return
    diagnostics.record(kind, source, message)


def error_message(error: BaseException) -> str:
    """Return the exception text, or its type name when the text is empty."""
    return str(error) or type(error).__name__
