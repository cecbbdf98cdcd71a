"""Index of classes and Clojure namespaces available on a classpath."""

from .builder import BuildProfile, ClasspathIndex, build_classpath_index, load_classpath_index
from .config import (
    ClasspathSources,
    ConfigError,
    ConfigOverrides,
    IndexConfig,
    ScanRules,
    load_effective_config,
)
from .scan import ClassDescriptor

__all__ = [
    "BuildProfile",
    "ClassDescriptor",
    "ClasspathIndex",
    "ClasspathSources",
    "ConfigError",
    "ConfigOverrides",
    "IndexConfig",
    "ScanRules",
    "build_classpath_index",
    "load_classpath_index",
    "load_effective_config",
]
