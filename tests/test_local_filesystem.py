"""Round-trip tests against the real disk backend."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

from deskclean.config import DeskCleanConfig
from deskclean.filesystem import LocalFileSystem
from deskclean.organization import OrganizerEngine


def test_clean_and_undo_on_disk(tmp_path: Path) -> None:
    home = tmp_path / "home"
    desktop = home / "Desktop"
    desktop.mkdir(parents=True)
    (home / "Documents").mkdir()
    (home / "Documents" / "report.pdf").write_text("existing", encoding="utf-8")
    (desktop / "report.pdf").write_text("new", encoding="utf-8")
    (desktop / "main.py").write_text("print('hi')", encoding="utf-8")
    (desktop / ".DS_Store").write_bytes(b"")
    (desktop / "Projects").mkdir()

    engine = OrganizerEngine(LocalFileSystem(), home=home)
    config = DeskCleanConfig.model_validate({"organization": {"tag_files": False}})
    manifest = engine.organize(desktop, config, datetime(2024, 6, 1, tzinfo=timezone.utc))

    assert (home / "Documents" / "report 1.pdf").read_text(encoding="utf-8") == "new"
    assert (home / "Developer" / "main.py").exists()
    assert manifest.created_directories == [home / "Developer"]
    assert sorted(path.name for path in desktop.iterdir()) == [".DS_Store", "Projects"]

    report = engine.undo(manifest)

    assert len(report.restored) == 2
    assert (desktop / "report.pdf").read_text(encoding="utf-8") == "new"
    assert (home / "Documents" / "report.pdf").read_text(encoding="utf-8") == "existing"
    assert not (home / "Developer").exists()


def test_move_refuses_to_overwrite(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    source = tmp_path / "a.txt"
    target = tmp_path / "b.txt"
    source.write_text("a", encoding="utf-8")
    target.write_text("b", encoding="utf-8")

    with pytest.raises(FileExistsError):
        fs.move(source, target)

    assert target.read_text(encoding="utf-8") == "b"


def test_make_dirs_reports_created_directories(tmp_path: Path) -> None:
    fs = LocalFileSystem()

    created = fs.make_dirs(tmp_path / "one" / "two")

    assert created == [tmp_path / "one", tmp_path / "one" / "two"]
    assert fs.make_dirs(tmp_path / "one" / "two") == []


def test_walk_dirs_yields_deepest_first(tmp_path: Path) -> None:
    (tmp_path / "a" / "b" / "c").mkdir(parents=True)

    walked = list(LocalFileSystem().walk_dirs(tmp_path))

    assert walked == [tmp_path / "a" / "b" / "c", tmp_path / "a" / "b", tmp_path / "a"]


def test_created_at_is_timezone_aware(tmp_path: Path) -> None:
    path = tmp_path / "shot.png"
    path.write_bytes(b"")
    os.utime(path, (1_600_000_000, 1_600_000_000))

    stamp = LocalFileSystem().created_at(path)

    assert stamp.tzinfo is not None


def test_symlinked_folder_stays_on_desktop(tmp_path: Path) -> None:
    home = tmp_path / "home"
    desktop = home / "Desktop"
    desktop.mkdir(parents=True)
    projects = tmp_path / "elsewhere" / "Projects"
    projects.mkdir(parents=True)
    (projects / "notes.txt").write_text("keep", encoding="utf-8")
    (desktop / "Projects").symlink_to(projects, target_is_directory=True)
    (desktop / "notes.md").write_text("move", encoding="utf-8")

    engine = OrganizerEngine(LocalFileSystem(), home=home)
    config = DeskCleanConfig.model_validate({"organization": {"tag_files": False}})
    manifest = engine.organize(desktop, config, datetime(2024, 6, 1, tzinfo=timezone.utc))

    assert [record.original_path.name for record in manifest.moved_files] == ["notes.md"]
    assert (desktop / "Projects").is_symlink()
    assert (projects / "notes.txt").exists()
    assert not (home / "Documents" / "Projects").exists()


def test_walk_dirs_skips_symlinked_directories(tmp_path: Path) -> None:
    target = tmp_path / "target"
    (target / "inner").mkdir(parents=True)
    root = tmp_path / "root"
    (root / "real").mkdir(parents=True)
    (root / "link").symlink_to(target, target_is_directory=True)

    walked = list(LocalFileSystem().walk_dirs(root))

    assert walked == [root / "real"]
    assert LocalFileSystem().is_dir(root / "link")
