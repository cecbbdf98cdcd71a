"""Namespace discovery from Clojure source files."""

from __future__ import annotations

import io
import os
import zipfile
import zlib
from collections.abc import Iterator

from classpath_index.config import DEFAULT_RULES, ScanRules
from classpath_index.logging import (
    ARCHIVE_UNREADABLE,
    DIRECTORY_UNREADABLE,
    SOURCE_UNREADABLE,
    DiagnosticLog,
    error_message,
    record_diagnostic,
)
from classpath_index.reader import find_namespace_declaration
from classpath_index.scan.classes import ARCHIVE_ERRORS

# zipfile raises NotImplementedError for unknown compression methods and
# RuntimeError for encrypted members.
_MEMBER_ERRORS: tuple[type[Exception], ...] = (
    *ARCHIVE_ERRORS,
    zlib.error,
    NotImplementedError,
    RuntimeError,
)


def namespaces_in_dir(
    directory: str,
    rules: ScanRules = DEFAULT_RULES,
    diagnostics: DiagnosticLog | None = None,
) -> list[str]:
    """Return the sorted namespaces declared by source files below a directory."""
    names: list[str] = []
    for path in iter_source_files(directory, rules, diagnostics):
        name = namespace_in_file(path, rules, diagnostics)
        if name is not None:
            names.append(name)
    return sorted(names)


def iter_source_files(
    directory: str,
    rules: ScanRules = DEFAULT_RULES,
    diagnostics: DiagnosticLog | None = None,
) -> Iterator[str]:
    """Yield source file paths below a directory, any depth."""
    visited: set[str] = set()
    stack: list[str] = [directory]
    while stack:
        current = stack.pop()
        real_path = os.path.realpath(current)
        if real_path in visited:
            continue
        visited.add(real_path)
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as error:
            record_diagnostic(diagnostics, DIRECTORY_UNREADABLE, current, str(error))
            continue
        for entry in reversed(ordered_entries):
            try:
                if entry.is_dir():
                    stack.append(entry.path)
                    continue
                is_file = entry.is_file()
            except OSError:
                continue
            if is_file and rules.is_source_name(entry.name):
                yield entry.path


def namespace_in_file(
    path: str,
    rules: ScanRules = DEFAULT_RULES,
    diagnostics: DiagnosticLog | None = None,
) -> str | None:
    """Return the namespace a source file declares, if any."""
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            return find_namespace_declaration(
                handle,
                path,
                keyword=rules.namespace_keyword,
                diagnostics=diagnostics,
            )
    except OSError as error:
        record_diagnostic(diagnostics, SOURCE_UNREADABLE, path, str(error))
        return None


def namespaces_in_archive(
    archive_path: str,
    rules: ScanRules = DEFAULT_RULES,
    diagnostics: DiagnosticLog | None = None,
) -> list[str]:
    """Return namespaces declared by source entries of an archive, in entry order."""
    names: list[str] = []
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for info in archive.infolist():
                if info.is_dir() or not rules.is_source_name(info.filename):
                    continue
                name = _namespace_in_member(archive, info, archive_path, rules, diagnostics)
                if name is not None:
                    names.append(name)
    except ARCHIVE_ERRORS as error:
        record_diagnostic(diagnostics, ARCHIVE_UNREADABLE, archive_path, error_message(error))
    return names


def _namespace_in_member(
    archive: zipfile.ZipFile,
    info: zipfile.ZipInfo,
    archive_path: str,
    rules: ScanRules,
    diagnostics: DiagnosticLog | None,
) -> str | None:
    source = f"{archive_path}!/{info.filename}"
    try:
        with (
            archive.open(info) as raw,
            io.TextIOWrapper(raw, encoding="utf-8", errors="replace") as handle,
        ):
            return find_namespace_declaration(
                handle,
                source,
                keyword=rules.namespace_keyword,
                diagnostics=diagnostics,
            )
    except _MEMBER_ERRORS as error:
        record_diagnostic(diagnostics, SOURCE_UNREADABLE, source, error_message(error))
        return None
