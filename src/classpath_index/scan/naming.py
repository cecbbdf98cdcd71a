"""Binary-name decoding for compiled module paths."""

from __future__ import annotations

import os
import re

from classpath_index.config import DEFAULT_RULES, ScanRules

_SYNTHETIC_FN_RE = re.compile(r"\$.*__\d+\.class")


def is_namespace_init_file(relative_path: str, rules: ScanRules = DEFAULT_RULES) -> bool:
    """Return True when the file is a compiled namespace initializer."""
    return relative_path.endswith(rules.init_class_suffix)


def is_synthetic_class_file(relative_path: str) -> bool:
    """Return True for compiler-generated function classes such as ``a$b__123.class``."""
    return _SYNTHETIC_FN_RE.search(relative_path) is not None


def qualified_name(relative_path: str, rules: ScanRules = DEFAULT_RULES) -> str:
    """Return the class or namespace name for a class file relative path.

    ``clojure/core.class`` -> ``clojure.core``;
    ``slam/hound/some_ns__init.class`` -> ``slam.hound.some-ns``.
    """
    if is_namespace_init_file(relative_path, rules):
        stem = relative_path[: -len(rules.init_class_suffix)].replace("_", "-")
    elif relative_path.endswith(rules.class_extension):
        stem = relative_path[: -len(rules.class_extension)]
    else:
        stem = relative_path
    # Archive entry names always use "/"; directory paths use the platform separator.
    dotted = stem.replace("/", ".")
    if os.sep != "/":
        dotted = dotted.replace(os.sep, ".")
    return dotted
