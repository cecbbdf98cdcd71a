"""Classpath string splitting, wildcard expansion and root-relative paths."""

from __future__ import annotations

import os

from classpath_index.config import DEFAULT_RULES, ScanRules


def split_classpath(classpath: str | None, separator: str = os.pathsep) -> list[str]:
    """Split a classpath string into non-empty entries."""
    if not classpath:
        return []
    return [entry for entry in classpath.split(separator) if entry]


def expand_wildcard(path: str, rules: ScanRules = DEFAULT_RULES) -> list[str]:
    """Expand ``dir/*`` to the archives directly inside ``dir``.

    Paths without a trailing wildcard segment are returned unchanged as a
    single-element list. A parent directory that cannot be listed expands
    to nothing.
    """
    # A trailing separator does not change the final segment: "lib/*/" is "lib/*".
    parent, name = os.path.split(path.rstrip("/" + os.sep) or path)
    if name != rules.wildcard:
        return [path]
    directory = parent or os.curdir
    try:
        with os.scandir(directory) as entries:
            names = sorted(entry.name for entry in entries if rules.is_archive_name(entry.name))
    except OSError:
        return []
    return [os.path.join(parent, entry_name) for entry_name in names]


def normalize_location(path: str) -> str:
    """Drop trailing separators so ``lib/`` and ``lib`` name the same location."""
    stripped = path.rstrip("/" + os.sep)
    return stripped or path


def relative_to_location(path: str, location: str) -> str | None:
    """Return ``path`` relative to ``location`` when it is a strict descendant."""
    prefix = normalize_location(location)
    if not prefix.endswith(os.sep):
        prefix += os.sep
    if not path.startswith(prefix):
        return None
    relative = path[len(prefix) :]
    return relative or None
