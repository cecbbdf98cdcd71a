from __future__ import annotations

from pathlib import Path

import pytest

from classpath_index.config import ConfigError, load_effective_config


def _write(tmp_path: Path, lines: list[str]) -> None:
    (tmp_path / "classpath_index.toml").write_text("\n".join(lines), encoding="utf-8")


def test_invalid_section_type_raises_config_error(tmp_path: Path) -> None:
    _write(tmp_path, ['scan = "not-a-table"'])

    with pytest.raises(ConfigError, match="section 'scan'"):
        load_effective_config(tmp_path, environ={})


def test_empty_extension_list_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, ["[scan]", "archive_extensions = []"])

    with pytest.raises(ConfigError, match="scan.archive_extensions"):
        load_effective_config(tmp_path, environ={})


def test_non_string_class_extension_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, ["[scan]", "class_extension = 3"])

    with pytest.raises(ConfigError, match="scan.class_extension"):
        load_effective_config(tmp_path, environ={})


def test_unknown_scan_field_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, ["[scan]", 'follow_symlinks = "yes"'])

    with pytest.raises(ConfigError, match="follow_symlinks"):
        load_effective_config(tmp_path, environ={})


def test_malformed_toml_is_reported_as_config_error(tmp_path: Path) -> None:
    _write(tmp_path, ["[classpath", "class_path = 1"])

    with pytest.raises(ConfigError, match="not valid TOML"):
        load_effective_config(tmp_path, environ={})


def test_config_error_is_a_value_error(tmp_path: Path) -> None:
    _write(tmp_path, ["[classpath]", "class_path = 7"])

    with pytest.raises(ValueError, match="classpath.class_path"):
        load_effective_config(tmp_path, environ={})
