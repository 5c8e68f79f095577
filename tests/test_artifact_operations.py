"""Tests for local artifact naming and storage."""

from __future__ import annotations

from pathlib import Path

import pytest

from wp_mirror_tool.mirror.core.artifact_operations import (
    artifact_exists,
    artifact_name,
    artifact_path,
    write_artifact,
)
from wp_mirror_tool.mirror.models import Category


@pytest.mark.parametrize(
    ("category", "identifier", "expected"),
    [
        (Category.CORE, "wordpress", "wordpress"),
        (Category.PLUGIN, "akismet/akismet.php", "akismet"),
        (Category.PLUGIN, "hello.php", "hello"),
        (Category.THEME, "twentytwentythree", "twentytwentythree"),
    ],
)
def test_artifact_name(category: Category, identifier: str, expected: str) -> None:
    assert artifact_name(category, identifier) == expected


def test_artifact_path_layout(tmp_path: Path) -> None:
    path = artifact_path(tmp_path, Category.PLUGIN, "akismet/akismet.php", "5.1")

    assert path == tmp_path / "plugin" / "akismet-5.1.zip"


@pytest.mark.parametrize(
    ("category", "identifier", "version"),
    [
        (Category.THEME, "..", "1.0"),
        (Category.THEME, "a/b", "1.0"),
        (Category.PLUGIN, "../evil.php", "1.0"),
        (Category.CORE, "wordpress", "../../etc"),
        (Category.THEME, "ok", ""),
    ],
)
def test_artifact_path_rejects_traversal(
    tmp_path: Path, category: Category, identifier: str, version: str
) -> None:
    with pytest.raises(ValueError):
        artifact_path(tmp_path, category, identifier, version)


def test_exists_only_after_write(tmp_path: Path) -> None:
    assert not artifact_exists(tmp_path, Category.CORE, "wordpress", "6.2.1")

    path = artifact_path(tmp_path, Category.CORE, "wordpress", "6.2.1")
    written = write_artifact(path, [b"PK", b"", b"\x03\x04"])

    assert written == 4
    assert path.read_bytes() == b"PK\x03\x04"
    assert artifact_exists(tmp_path, Category.CORE, "wordpress", "6.2.1")


def test_write_replaces_existing_file(tmp_path: Path) -> None:
    path = artifact_path(tmp_path, Category.THEME, "twentytwentytwo", "1.4")
    write_artifact(path, [b"old contents that are longer"])

    write_artifact(path, [b"new"])

    assert path.read_bytes() == b"new"
    assert list(path.parent.iterdir()) == [path]


def test_failed_write_leaves_no_partial_file(tmp_path: Path) -> None:
    path = artifact_path(tmp_path, Category.THEME, "twentytwentytwo", "1.4")

    def chunks():
        yield b"partial"
        raise OSError("disk full")

    with pytest.raises(OSError):
        write_artifact(path, chunks())

    assert not path.exists()
    assert list(path.parent.iterdir()) == []


def test_overlapping_writes_never_mix(tmp_path: Path) -> None:
    path = artifact_path(tmp_path, Category.PLUGIN, "akismet/akismet.php", "5.1")

    def first_download():
        yield b"A" * 10
        # A second delivery of the same item finishes while this one is mid-stream.
        assert write_artifact(path, [b"B" * 30]) == 30
        assert path.read_bytes() == b"B" * 30
        yield b"A" * 10

    assert write_artifact(path, first_download()) == 20

    assert path.read_bytes() == b"A" * 20
    assert list(path.parent.iterdir()) == [path]
