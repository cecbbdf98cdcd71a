"""Classpath scanning for class files and source namespaces."""

from .classes import (
    classify_entry,
    classpath_locations,
    path_class_files,
    scan_archive,
    scan_location,
    scan_paths,
    walk_directory,
)
from .models import ClassDescriptor, EntryKind
from .namespaces import namespace_in_file, namespaces_in_archive, namespaces_in_dir
from .naming import is_namespace_init_file, is_synthetic_class_file, qualified_name
from .paths import expand_wildcard, relative_to_location, split_classpath

__all__ = [
    "ClassDescriptor",
    "EntryKind",
    "classify_entry",
    "classpath_locations",
    "expand_wildcard",
    "is_namespace_init_file",
    "is_synthetic_class_file",
    "namespace_in_file",
    "namespaces_in_archive",
    "namespaces_in_dir",
    "path_class_files",
    "qualified_name",
    "relative_to_location",
    "scan_archive",
    "scan_location",
    "scan_paths",
    "split_classpath",
    "walk_directory",
]
