"""Class file discovery across directory and archive classpath entries."""

from __future__ import annotations

import os
import zipfile
from collections.abc import Callable

from classpath_index.config import DEFAULT_RULES, ScanRules
from classpath_index.logging import (
    ARCHIVE_UNREADABLE,
    DIRECTORY_UNREADABLE,
    DiagnosticLog,
    error_message,
    record_diagnostic,
)
from classpath_index.scan.models import ClassDescriptor, EntryKind
from classpath_index.scan.naming import qualified_name
from classpath_index.scan.paths import (
    expand_wildcard,
    normalize_location,
    relative_to_location,
    split_classpath,
)

# Failures raised by zipfile for missing, truncated or non-zip archives.
ARCHIVE_ERRORS: tuple[type[Exception], ...] = (OSError, EOFError, ValueError, zipfile.BadZipFile)

_Handler = Callable[[str, str, ScanRules, DiagnosticLog | None], list[ClassDescriptor]]


def classify_entry(path: str, rules: ScanRules = DEFAULT_RULES) -> EntryKind:
    """Classify a filesystem entry; checks run directory, archive, class file."""
    if os.path.isdir(path):
        return EntryKind.DIRECTORY
    name = os.path.basename(path)
    if rules.is_archive_name(name):
        return EntryKind.ARCHIVE
    if rules.is_class_name(name):
        return EntryKind.COMPILED_MODULE
    return EntryKind.OTHER


def class_file_descriptor(
    path: str,
    location: str,
    rules: ScanRules = DEFAULT_RULES,
    diagnostics: DiagnosticLog | None = None,
) -> list[ClassDescriptor]:
    """Describe one class file relative to its classpath location.

    A class file cannot sit on the classpath directly, so a path that does
    not descend from ``location`` yields nothing.
    """
    _ = diagnostics
    relative = relative_to_location(path, location)
    if relative is None:
        return []
    return [
        ClassDescriptor(
            location=normalize_location(location),
            relative_path=relative,
            qualified_name=qualified_name(relative, rules),
        )
    ]


def scan_archive(
    path: str,
    location: str,
    rules: ScanRules = DEFAULT_RULES,
    diagnostics: DiagnosticLog | None = None,
) -> list[ClassDescriptor]:
    """Describe every class file entry inside an archive.

    Unreadable archives contribute nothing; one bad jar must not stop the scan.
    """
    try:
        with zipfile.ZipFile(path) as archive:
            entry_names = [
                info.filename
                for info in archive.infolist()
                if not info.is_dir() and rules.is_class_name(info.filename)
            ]
    except ARCHIVE_ERRORS as error:
        record_diagnostic(diagnostics, ARCHIVE_UNREADABLE, path, error_message(error))
        return []
    archive_location = normalize_location(location)
    return [
        ClassDescriptor(
            location=archive_location,
            relative_path=entry_name,
            qualified_name=qualified_name(entry_name, rules),
        )
        for entry_name in entry_names
    ]


def walk_directory(
    directory: str,
    location: str,
    rules: ScanRules = DEFAULT_RULES,
    diagnostics: DiagnosticLog | None = None,
) -> list[ClassDescriptor]:
    """Collect class files below a directory, depth-first, skipping archives.

    Uses an explicit stack so nesting depth is not bounded by recursion limits.
    Directories already visited through a symlink are not walked twice.
    """
    descriptors: list[ClassDescriptor] = []
    visited: set[str] = set()
    pending = _list_non_archive_entries(directory, rules, diagnostics, visited)
    pending.reverse()
    while pending:
        path = pending.pop()
        kind = classify_entry(path, rules)
        if kind is EntryKind.DIRECTORY:
            children = _list_non_archive_entries(path, rules, diagnostics, visited)
            pending.extend(reversed(children))
            continue
        if kind is EntryKind.COMPILED_MODULE:
            descriptors.extend(class_file_descriptor(path, location, rules))
    return descriptors


def _list_non_archive_entries(
    directory: str,
    rules: ScanRules,
    diagnostics: DiagnosticLog | None,
    visited: set[str],
) -> list[str]:
    real_path = os.path.realpath(directory)
    if real_path in visited:
        return []
    visited.add(real_path)
    try:
        with os.scandir(directory) as entries:
            names = sorted(
                entry.name for entry in entries if not rules.is_archive_name(entry.name)
            )
    except OSError as error:
        record_diagnostic(diagnostics, DIRECTORY_UNREADABLE, directory, str(error))
        return []
    return [os.path.join(directory, name) for name in names]


def _no_classes(
    path: str,
    location: str,
    rules: ScanRules,
    diagnostics: DiagnosticLog | None,
) -> list[ClassDescriptor]:
    _ = (path, location, rules, diagnostics)
    return []


_HANDLERS: dict[EntryKind, _Handler] = {
    EntryKind.DIRECTORY: walk_directory,
    EntryKind.ARCHIVE: scan_archive,
    EntryKind.COMPILED_MODULE: class_file_descriptor,
    EntryKind.OTHER: _no_classes,
}


def path_class_files(
    path: str,
    location: str,
    rules: ScanRules = DEFAULT_RULES,
    diagnostics: DiagnosticLog | None = None,
) -> list[ClassDescriptor]:
    """Return class descriptors for a classpath entry of any kind."""
    handler = _HANDLERS[classify_entry(path, rules)]
    return handler(path, location, rules, diagnostics)


def scan_location(
    location: str,
    rules: ScanRules = DEFAULT_RULES,
    diagnostics: DiagnosticLog | None = None,
) -> list[ClassDescriptor]:
    """Scan one classpath location, using it as its own root."""
    return path_class_files(location, location, rules, diagnostics)


def classpath_locations(
    classpath: str | None,
    separator: str = os.pathsep,
    rules: ScanRules = DEFAULT_RULES,
) -> list[str]:
    """Split a classpath string and expand wildcard entries."""
    locations: list[str] = []
    for entry in split_classpath(classpath, separator):
        locations.extend(expand_wildcard(entry, rules))
    return locations


def scan_paths(
    *classpaths: str | None,
    separator: str = os.pathsep,
    rules: ScanRules = DEFAULT_RULES,
    diagnostics: DiagnosticLog | None = None,
) -> list[ClassDescriptor]:
    """Scan every location of one or more classpath strings.

    Results are concatenated in classpath order; ordering within a directory
    location is not part of the contract. ``None`` classpaths contribute
    nothing.
    """
    descriptors: list[ClassDescriptor] = []
    for classpath in classpaths:
        for location in classpath_locations(classpath, separator, rules):
            descriptors.extend(scan_location(location, rules, diagnostics))
    return descriptors
