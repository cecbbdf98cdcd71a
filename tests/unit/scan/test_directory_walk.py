from __future__ import annotations

import os
from pathlib import Path

import pytest

from classpath_index.logging import DIRECTORY_UNREADABLE, DiagnosticLog
from classpath_index.scan import ClassDescriptor, scan_location, walk_directory


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\xca\xfe\xba\xbe")


def test_walk_collects_class_files_relative_to_location(tmp_path: Path) -> None:
    root = tmp_path / "classes"
    _touch(root / "a" / "A.class")
    _touch(root / "a" / "b" / "core__init.class")
    _touch(root / "Top.class")
    _touch(root / "a" / "notes.txt")

    descriptors = scan_location(str(root))

    assert sorted(descriptors, key=lambda item: item.relative_path) == [
        ClassDescriptor(
            location=str(root),
            relative_path=os.path.join("Top.class"),
            qualified_name="Top",
        ),
        ClassDescriptor(
            location=str(root),
            relative_path=os.path.join("a", "A.class"),
            qualified_name="a.A",
        ),
        ClassDescriptor(
            location=str(root),
            relative_path=os.path.join("a", "b", "core__init.class"),
            qualified_name="a.b.core",
        ),
    ]


def test_walk_is_depth_first(tmp_path: Path) -> None:
    root = tmp_path / "classes"
    _touch(root / "a" / "x" / "One.class")
    _touch(root / "a" / "Two.class")
    _touch(root / "b" / "Three.class")

    names = [item.qualified_name for item in walk_directory(str(root), str(root))]

    assert names.index("a.x.One") < names.index("b.Three")
    assert names.index("a.Two") < names.index("b.Three")


def test_walk_skips_archives_inside_directories(tmp_path: Path) -> None:
    root = tmp_path / "classes"
    _touch(root / "lib" / "dep.jar")
    _touch(root / "lib" / "Kept.class")
    _touch(root / "packed.jar" / "Hidden.class")

    names = [item.qualified_name for item in scan_location(str(root))]

    assert names == ["lib.Kept"]


def test_trailing_separator_location_is_normalized(tmp_path: Path) -> None:
    root = tmp_path / "classes"
    _touch(root / "p" / "Q.class")

    descriptors = scan_location(str(root) + os.sep)

    assert [item.location for item in descriptors] == [str(root)]
    assert [item.qualified_name for item in descriptors] == ["p.Q"]


def test_very_deep_nesting_does_not_hit_recursion_limit(tmp_path: Path) -> None:
    root = tmp_path / "classes"
    current = root
    for _ in range(60):
        current = current / "d"
    _touch(current / "Deep.class")

    descriptors = scan_location(str(root))

    assert len(descriptors) == 1
    assert descriptors[0].qualified_name == ".".join(["d"] * 60 + ["Deep"])


@pytest.mark.skipif(
    os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="permission bits are not enforced",
)
def test_unreadable_subdirectory_is_skipped(tmp_path: Path) -> None:
    root = tmp_path / "classes"
    _touch(root / "ok" / "Fine.class")
    locked = root / "locked"
    _touch(locked / "Secret.class")
    locked.chmod(0o000)
    log = DiagnosticLog()
    try:
        descriptors = scan_location(str(root), diagnostics=log)
    finally:
        locked.chmod(0o755)

    assert [item.qualified_name for item in descriptors] == ["ok.Fine"]
    assert log.count(DIRECTORY_UNREADABLE) == 1


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlink_cycle_is_walked_once(tmp_path: Path) -> None:
    root = tmp_path / "classes"
    _touch(root / "pkg" / "Only.class")
    try:
        (root / "pkg" / "loop").symlink_to(root, target_is_directory=True)
    except OSError:
        pytest.skip("symlink creation not permitted")

    names = [item.qualified_name for item in scan_location(str(root))]

    assert names == ["pkg.Only"]
