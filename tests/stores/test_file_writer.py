"""Tests for the filesystem content writer."""

from __future__ import annotations

from pathlib import Path

import pytest

from declorder.stores import FileContentWriter, PersistenceError


def test_writer_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "noop" / "nested" / "noop_shop_interfaces.go"
    writer = FileContentWriter()

    writer.write("package main\n", str(target))

    assert target.read_text(encoding="utf-8") == "package main\n"
    assert writer.written == [target]


def test_writer_overwrites_existing_content(tmp_path: Path) -> None:
    target = tmp_path / "out.go"
    target.write_text("stale", encoding="utf-8")

    FileContentWriter().write("fresh", str(target))

    assert target.read_text(encoding="utf-8") == "fresh"


def test_writer_wraps_os_errors_with_target(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    target = blocker / "out.go"

    with pytest.raises(PersistenceError) as excinfo:
        FileContentWriter().write("content", str(target))

    assert excinfo.value.target == str(target)
    assert isinstance(excinfo.value.cause, OSError)
    assert str(target) in str(excinfo.value)


def test_writer_without_parent_creation_fails_for_missing_directory(tmp_path: Path) -> None:
    target = tmp_path / "missing" / "out.go"

    with pytest.raises(PersistenceError):
        FileContentWriter(create_parents=False).write("content", str(target))
