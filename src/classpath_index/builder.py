"""Build the process-lifetime classpath index."""

from __future__ import annotations

import os
import time
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from pathlib import Path

from classpath_index.config import ConfigOverrides, IndexConfig, load_effective_config
from classpath_index.logging import DiagnosticLog, JsonlDiagnosticWriter, error_message
from classpath_index.scan import (
    ClassDescriptor,
    classpath_locations,
    is_synthetic_class_file,
    namespaces_in_dir,
    scan_location,
    split_classpath,
)


@dataclass(slots=True, frozen=True)
class ClasspathIndex:
    """Classes and namespaces available on the classpath.

    ``available_namespaces`` is sorted within each source directory and
    concatenated in classpath order. ``available_classes`` has no ordering
    guarantee consumers may rely on.
    """

    available_namespaces: tuple[str, ...]
    available_classes: tuple[ClassDescriptor, ...]


@dataclass(slots=True, frozen=True)
class BuildProfile:
    """Deterministic diagnostics for one index build."""

    locations_scanned: int
    raw_class_count: int
    synthetic_excluded: int
    namespace_roots: int
    namespace_count: int
    diagnostic_count: int
    total_seconds: float


def build_classpath_index(
    config: IndexConfig,
    diagnostics: DiagnosticLog | None = None,
    profile: dict[str, object] | None = None,
) -> ClasspathIndex:
    """Scan every configured classpath once and return an immutable index."""
    started = time.perf_counter()
    log = diagnostics if diagnostics is not None else _diagnostic_log(config)
    rules = config.rules
    separator = config.path_separator

    locations_scanned = 0
    raw_classes: list[ClassDescriptor] = []
    for classpath in config.sources.as_tuple():
        for location in classpath_locations(classpath, separator, rules):
            locations_scanned += 1
            raw_classes.extend(scan_location(location, rules, log))
    available_classes = tuple(
        descriptor
        for descriptor in raw_classes
        if not is_synthetic_class_file(descriptor.relative_path)
    )

    namespace_roots = [
        entry
        for entry in split_classpath(config.sources.class_path, separator)
        if os.path.isdir(entry)
    ]
    namespaces: list[str] = []
    for root in namespace_roots:
        namespaces.extend(namespaces_in_dir(root, rules, log))

    if profile is not None:
        payload = BuildProfile(
            locations_scanned=locations_scanned,
            raw_class_count=len(raw_classes),
            synthetic_excluded=len(raw_classes) - len(available_classes),
            namespace_roots=len(namespace_roots),
            namespace_count=len(namespaces),
            diagnostic_count=log.count(),
            total_seconds=time.perf_counter() - started,
        )
        profile.update(asdict(payload))
    return ClasspathIndex(
        available_namespaces=tuple(namespaces),
        available_classes=available_classes,
    )


def _diagnostic_log(config: IndexConfig) -> DiagnosticLog:
    if config.diagnostics_path is None:
        return DiagnosticLog()
    try:
        writer = JsonlDiagnosticWriter(config.diagnostics_path)
    except OSError as error:
        return DiagnosticLog(writer_error=f"{config.diagnostics_path}: {error_message(error)}")
    return DiagnosticLog(writer=writer)


def load_classpath_index(
    config_dir: Path,
    environ: Mapping[str, str] | None = None,
    overrides: ConfigOverrides | None = None,
) -> ClasspathIndex:
    """Load effective config and build the index; call once at startup."""
    config = load_effective_config(config_dir, environ=environ, overrides=overrides)
    return build_classpath_index(config)
