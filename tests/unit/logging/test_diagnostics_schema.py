from __future__ import annotations

import json
from pathlib import Path

import pytest

from classpath_index.logging import (
    ARCHIVE_UNREADABLE,
    SOURCE_PARSE_FAILED,
    DiagnosticLog,
    JsonlDiagnosticWriter,
    record_diagnostic,
)


def test_diagnostic_log_mirrors_events_to_jsonl(tmp_path: Path) -> None:
    writer = JsonlDiagnosticWriter(tmp_path / "nested" / "diag.jsonl")
    log = DiagnosticLog(writer=writer)

    log.record(SOURCE_PARSE_FAILED, "src/a.clj", "EOF while reading\n(line 3)")

    lines = writer.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert set(event.keys()) == {"kind", "message", "source", "timestamp"}
    assert event["kind"] == SOURCE_PARSE_FAILED
    assert event["source"] == "src/a.clj"
    assert event["message"] == "EOF while reading (line 3)"
    assert event["timestamp"].endswith("Z")


def test_diagnostic_log_counts_by_kind() -> None:
    log = DiagnosticLog()
    log.record(SOURCE_PARSE_FAILED, "a.clj", "bad")
    log.record(ARCHIVE_UNREADABLE, "b.jar", "bad zip")
    log.record(SOURCE_PARSE_FAILED, "c.clj", "bad")

    assert log.count() == 3
    assert log.count(SOURCE_PARSE_FAILED) == 2
    assert [event.source for event in log.events] == ["a.clj", "b.jar", "c.clj"]


def test_unknown_kind_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown diagnostic kind"):
        DiagnosticLog().record("mystery", "x", "y")


def test_record_diagnostic_without_log_is_a_no_op() -> None:
    record_diagnostic(None, ARCHIVE_UNREADABLE, "x.jar", "ignored")


def test_reader_skips_malformed_lines_and_honors_limit(tmp_path: Path) -> None:
    writer = JsonlDiagnosticWriter(tmp_path / "diag.jsonl")
    log = DiagnosticLog(writer=writer)
    for index in range(3):
        log.record(ARCHIVE_UNREADABLE, f"{index}.jar", "bad zip")
    with writer.path.open("a", encoding="utf-8") as handle:
        handle.write("not json\n\n")
    log.record(SOURCE_PARSE_FAILED, "z.clj", "bad")

    recent = writer.read(limit=2)
    archives = writer.read(kind=ARCHIVE_UNREADABLE)

    assert [entry["source"] for entry in recent] == ["2.jar", "z.clj"]
    assert [entry["source"] for entry in archives] == ["0.jar", "1.jar", "2.jar"]
    assert writer.read(limit=0) == []


def test_unwritable_diagnostics_file_keeps_events_in_memory(tmp_path: Path) -> None:
    target = tmp_path / "is-a-directory"
    target.mkdir()
    log = DiagnosticLog(writer=JsonlDiagnosticWriter(target))

    log.record(ARCHIVE_UNREADABLE, "a.jar", "bad zip")
    log.record(ARCHIVE_UNREADABLE, "b.jar", "bad zip")

    assert [event.source for event in log.events] == ["a.jar", "b.jar"]
    assert log.writer is None
    assert log.writer_error is not None
    assert str(target) in log.writer_error
