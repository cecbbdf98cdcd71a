"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

CONFIG_FILE_NAME = "classpath_index.toml"

BOOT_CLASS_PATH_ENV = "JAVA_BOOT_CLASS_PATH"
EXTENSION_DIRS_ENV = "JAVA_EXT_DIRS"
CLASS_PATH_ENV = "CLASSPATH"

DEFAULT_ARCHIVE_EXTENSIONS = (".jar",)
DEFAULT_SOURCE_EXTENSIONS = (".clj",)

_SCAN_FIELDS = frozenset(
    {
        "archive_extensions",
        "class_extension",
        "init_suffix",
        "source_extensions",
        "wildcard",
        "namespace_keyword",
    }
)


class ConfigError(ValueError):
    """Raised when configuration input has the wrong shape."""


@dataclass(slots=True, frozen=True)
class ScanRules:
    """File-kind markers shared by every scanner."""

    archive_extensions: tuple[str, ...] = DEFAULT_ARCHIVE_EXTENSIONS
    class_extension: str = ".class"
    init_suffix: str = "__init"
    source_extensions: tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS
    wildcard: str = "*"
    namespace_keyword: str = "ns"

    @property
    def init_class_suffix(self) -> str:
        """Suffix marking a compiled namespace initializer, e.g. ``__init.class``."""
        return f"{self.init_suffix}{self.class_extension}"

    def is_archive_name(self, name: str) -> bool:
        return name.endswith(self.archive_extensions)

    def is_class_name(self, name: str) -> bool:
        return name.endswith(self.class_extension)

    def is_source_name(self, name: str) -> bool:
        return name.endswith(self.source_extensions)


DEFAULT_RULES = ScanRules()


@dataclass(slots=True, frozen=True)
class ClasspathSources:
    """The three classpath strings an index is built from."""

    boot_class_path: str | None = None
    extension_dirs: str | None = None
    class_path: str | None = None

    def as_tuple(self) -> tuple[str | None, str | None, str | None]:
        """Return the strings in scan order."""
        return (self.boot_class_path, self.extension_dirs, self.class_path)


@dataclass(slots=True, frozen=True)
class IndexConfig:
    """Fully merged indexing configuration."""

    sources: ClasspathSources
    rules: ScanRules
    path_separator: str
    diagnostics_path: Path | None

    def to_public_dict(self) -> dict[str, object]:
        """Return a serializable config snapshot."""
        return {
            "sources": {
                "boot_class_path": self.sources.boot_class_path,
                "extension_dirs": self.sources.extension_dirs,
                "class_path": self.sources.class_path,
            },
            "scan": {
                "archive_extensions": list(self.rules.archive_extensions),
                "class_extension": self.rules.class_extension,
                "init_suffix": self.rules.init_suffix,
                "source_extensions": list(self.rules.source_extensions),
                "wildcard": self.rules.wildcard,
                "namespace_keyword": self.rules.namespace_keyword,
            },
            "path_separator": self.path_separator,
            "diagnostics_path": (
                str(self.diagnostics_path) if self.diagnostics_path is not None else None
            ),
        }


@dataclass(slots=True, frozen=True)
class ConfigOverrides:
    """Optional startup overrides applied at highest precedence."""

    boot_class_path: str | None = None
    extension_dirs: str | None = None
    class_path: str | None = None
    diagnostics_path: Path | None = None


def default_config() -> IndexConfig:
    """Build default config with no classpath entries."""
    return IndexConfig(
        sources=ClasspathSources(),
        rules=DEFAULT_RULES,
        path_separator=os.pathsep,
        diagnostics_path=None,
    )


def load_config_file(config_dir: Path) -> dict[str, object]:
    """Load optional classpath_index.toml from a directory."""
    config_path = config_dir / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        try:
            payload = tomllib.load(handle)
        except tomllib.TOMLDecodeError as error:
            raise ConfigError(f"{CONFIG_FILE_NAME} is not valid TOML: {error}") from error
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_extensions(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not value:
        raise ConfigError(f"Config field '{name}' must be a non-empty list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item:
            raise ConfigError(f"Config field '{name}' must contain only non-empty strings.")
        output.append(item)
    return tuple(output)


def _non_empty_string(value: object, name: str) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Config field '{name}' must be a non-empty string.")
    return value


def _optional_string(value: object, name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"Config field '{name}' must be a string.")
    return value


def merge_config(
    base: IndexConfig,
    file_payload: dict[str, object],
    environ: Mapping[str, str],
    overrides: ConfigOverrides,
) -> IndexConfig:
    """Merge defaults, config file, environment, then overrides."""
    scan_payload = _get_table(file_payload, "scan")
    classpath_payload = _get_table(file_payload, "classpath")
    diagnostics_payload = _get_table(file_payload, "diagnostics")

    unknown = sorted(set(scan_payload) - _SCAN_FIELDS)
    if unknown:
        raise ConfigError(f"Config section 'scan' has unsupported fields: {', '.join(unknown)}.")

    rules = base.rules
    if "archive_extensions" in scan_payload:
        rules = replace(
            rules,
            archive_extensions=_tuple_of_extensions(
                scan_payload["archive_extensions"], "scan.archive_extensions"
            ),
        )
    if "source_extensions" in scan_payload:
        rules = replace(
            rules,
            source_extensions=_tuple_of_extensions(
                scan_payload["source_extensions"], "scan.source_extensions"
            ),
        )
    for field_name in ("class_extension", "init_suffix", "wildcard", "namespace_keyword"):
        if field_name in scan_payload:
            value = _non_empty_string(scan_payload[field_name], f"scan.{field_name}")
            rules = replace(rules, **{field_name: value})

    path_separator = base.path_separator
    if "path_separator" in classpath_payload:
        path_separator = _non_empty_string(
            classpath_payload["path_separator"], "classpath.path_separator"
        )

    sources = ClasspathSources(
        boot_class_path=_optional_string(
            classpath_payload.get("boot_class_path", base.sources.boot_class_path),
            "classpath.boot_class_path",
        ),
        extension_dirs=_optional_string(
            classpath_payload.get("extension_dirs", base.sources.extension_dirs),
            "classpath.extension_dirs",
        ),
        class_path=_optional_string(
            classpath_payload.get("class_path", base.sources.class_path),
            "classpath.class_path",
        ),
    )
    sources = ClasspathSources(
        boot_class_path=environ.get(BOOT_CLASS_PATH_ENV, sources.boot_class_path),
        extension_dirs=environ.get(EXTENSION_DIRS_ENV, sources.extension_dirs),
        class_path=environ.get(CLASS_PATH_ENV, sources.class_path),
    )

    diagnostics_path = base.diagnostics_path
    if "path" in diagnostics_payload:
        raw_path = _non_empty_string(diagnostics_payload["path"], "diagnostics.path")
        diagnostics_path = Path(raw_path)

    merged = IndexConfig(
        sources=sources,
        rules=rules,
        path_separator=path_separator,
        diagnostics_path=diagnostics_path,
    )
    return apply_overrides(merged, overrides)


def apply_overrides(config: IndexConfig, overrides: ConfigOverrides) -> IndexConfig:
    """Apply startup overrides at highest precedence."""
    sources = ClasspathSources(
        boot_class_path=(
            overrides.boot_class_path
            if overrides.boot_class_path is not None
            else config.sources.boot_class_path
        ),
        extension_dirs=(
            overrides.extension_dirs
            if overrides.extension_dirs is not None
            else config.sources.extension_dirs
        ),
        class_path=(
            overrides.class_path if overrides.class_path is not None else config.sources.class_path
        ),
    )
    diagnostics_path = overrides.diagnostics_path or config.diagnostics_path
    return IndexConfig(
        sources=sources,
        rules=config.rules,
        path_separator=config.path_separator,
        diagnostics_path=diagnostics_path.resolve() if diagnostics_path is not None else None,
    )


def load_effective_config(
    config_dir: Path,
    environ: Mapping[str, str] | None = None,
    overrides: ConfigOverrides | None = None,
) -> IndexConfig:
    """Load effective config using merge order defaults -> file -> environment -> overrides."""
    resolved_dir = config_dir.resolve()
    payload = load_config_file(resolved_dir)
    return merge_config(
        default_config(),
        payload,
        os.environ if environ is None else environ,
        overrides or ConfigOverrides(),
    )
