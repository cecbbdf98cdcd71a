"""Typed models for classpath scanning."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EntryKind(Enum):
    """Kinds of filesystem entries a classpath location can hold."""

    DIRECTORY = "directory"
    ARCHIVE = "archive"
    COMPILED_MODULE = "compiled_module"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class ClassDescriptor:
    """A compiled module file found on the classpath.

    ``location`` is the directory or archive classpath entry, ``relative_path``
    the file's path below it, and ``qualified_name`` the Java class or Clojure
    namespace name derived from ``relative_path``.
    """

    location: str
    relative_path: str
    qualified_name: str
