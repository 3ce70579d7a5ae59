"""Organizer engine tests against the in-memory filesystem."""

from __future__ import annotations

import errno
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from deskclean.config import DeskCleanConfig
from deskclean.errors import ScanError
from deskclean.filesystem import MemoryFileSystem
from deskclean.organization import OrganizerEngine, resolve_collision
from deskclean.organization import planner as planner_module
from deskclean.state import CleanManifest, MoveRecord

HOME = Path("/home/user")
DESKTOP = HOME / "Desktop"
NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class FlakyFileSystem(MemoryFileSystem):
    """Memory filesystem that refuses to move selected file names."""

    def __init__(self, *failing: str) -> None:
        super().__init__()
        self.failing = set(failing)

    def move(self, source: Path, destination: Path) -> None:
        if source.name in self.failing:
            raise PermissionError(errno.EACCES, "Permission denied", str(source))
        super().move(source, destination)


def _home(fs: MemoryFileSystem) -> MemoryFileSystem:
    for folder in ("Desktop", "Documents", "Pictures", "Music", "Movies"):
        fs.add_dir(HOME / folder)
    return fs


def _config(**preferences: object) -> DeskCleanConfig:
    return DeskCleanConfig.model_validate({"preferences": preferences})


def test_organize_moves_eligible_files_only() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "report.pdf", b"pdf")
    fs.add_file(DESKTOP / "photo.JPG", b"jpg")
    fs.add_file(DESKTOP / ".DS_Store")
    fs.add_dir(DESKTOP / "Old")
    engine = OrganizerEngine(fs, home=HOME)

    report = engine.run(DESKTOP, _config(), now=NOW)

    manifest = report.manifest
    assert manifest.count == 2
    assert {(record.original_path, record.new_path) for record in manifest.moved_files} == {
        (DESKTOP / "report.pdf", HOME / "Documents" / "report.pdf"),
        (DESKTOP / "photo.JPG", HOME / "Pictures" / "photo.JPG"),
    }
    assert manifest.date == NOW
    assert fs.files[HOME / "Documents" / "report.pdf"].content == b"pdf"
    assert fs.is_file(DESKTOP / ".DS_Store")
    assert fs.is_dir(DESKTOP / "Old")
    assert set(report.skipped) == {".DS_Store", "Old"}
    assert report.errors == []


def test_collision_appends_counter_before_extension() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(HOME / "Documents" / "report.pdf", b"old")
    fs.add_file(HOME / "Documents" / "report 1.pdf", b"older")
    fs.add_file(DESKTOP / "report.pdf", b"new")

    manifest = OrganizerEngine(fs, home=HOME).organize(DESKTOP, _config(), NOW)

    assert manifest.moved_files[0].new_path == HOME / "Documents" / "report 2.pdf"
    assert fs.files[HOME / "Documents" / "report.pdf"].content == b"old"
    assert fs.files[HOME / "Documents" / "report 2.pdf"].content == b"new"


def test_resolve_collision_respects_claimed_names() -> None:
    fs = MemoryFileSystem()
    candidate = HOME / "Documents" / "notes.txt"

    resolved = resolve_collision(fs, candidate, {candidate})

    assert resolved == HOME / "Documents" / "notes 1.txt"


def test_missing_destination_directories_are_created_and_recorded() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "app.swift")
    fs.add_file(DESKTOP / "bundle.zip")

    manifest = OrganizerEngine(fs, home=HOME).organize(DESKTOP, _config(), NOW)

    assert fs.is_file(HOME / "Developer" / "app.swift")
    assert fs.is_file(HOME / "Downloads" / "Archive" / "bundle.zip")
    assert manifest.created_directories == [
        HOME / "Developer",
        HOME / "Downloads",
        HOME / "Downloads" / "Archive",
    ]


def test_moved_files_are_tagged() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "main.py")
    fs.add_file(DESKTOP / "movie.mp4")

    OrganizerEngine(fs, home=HOME).organize(DESKTOP, _config(), NOW)

    assert fs.files[HOME / "Developer" / "main.py"].tags == ["Code"]
    assert fs.files[HOME / "Movies" / "movie.mp4"].tags == ["Organized"]


def test_tagging_can_be_disabled() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "main.py")
    config = DeskCleanConfig.model_validate({"organization": {"tag_files": False}})

    OrganizerEngine(fs, home=HOME).organize(DESKTOP, config, NOW)

    assert fs.files[HOME / "Developer" / "main.py"].tags == []


def test_partial_failure_records_only_successes() -> None:
    fs = _home(FlakyFileSystem("locked.pdf"))
    fs.add_file(DESKTOP / "a.txt")
    fs.add_file(DESKTOP / "locked.pdf")
    fs.add_file(DESKTOP / "z.png")

    report = OrganizerEngine(fs, home=HOME).run(DESKTOP, _config(), now=NOW)

    assert [record.original_path.name for record in report.manifest.moved_files] == [
        "a.txt",
        "z.png",
    ]
    assert len(report.errors) == 1
    assert "locked.pdf" in report.errors[0]
    assert fs.is_file(DESKTOP / "locked.pdf")


def test_empty_source_produces_empty_manifest() -> None:
    fs = _home(MemoryFileSystem())

    manifest = OrganizerEngine(fs, home=HOME).organize(DESKTOP, _config(), NOW)

    assert manifest.count == 0
    assert manifest.moved_files == []


def test_unreadable_source_raises_scan_error() -> None:
    fs = MemoryFileSystem()

    with pytest.raises(ScanError):
        OrganizerEngine(fs, home=HOME).organize(DESKTOP, _config(), NOW)


def test_screenshots_go_to_monthly_folder() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "Screenshot 2024-01-15 at 09.00.00.png")

    manifest = OrganizerEngine(fs, home=HOME).organize(
        DESKTOP, _config(create_screenshots_folder=True), NOW
    )

    expected = HOME / "Documents" / "Screenshots" / "2024-01 January"
    assert manifest.moved_files[0].new_path.parent == expected
    assert HOME / "Documents" / "Screenshots" in manifest.created_directories


def test_old_screenshots_expire_after_retention() -> None:
    fs = _home(MemoryFileSystem())
    folder = HOME / "Documents" / "Screenshots" / "2023-10 October"
    fs.add_file(folder / "old.png", created_at=NOW - timedelta(days=45))
    fs.add_file(folder / "recent.png", created_at=NOW - timedelta(days=3))

    report = OrganizerEngine(fs, home=HOME).run(
        DESKTOP, _config(delete_old_screenshots=True), now=NOW
    )

    assert report.expired == [folder / "old.png"]
    assert not fs.exists(folder / "old.png")
    assert fs.is_file(folder / "recent.png")
    assert report.manifest.count == 0


def test_expiry_is_skipped_when_disabled() -> None:
    fs = _home(MemoryFileSystem())
    old = fs.add_file(
        HOME / "Documents" / "Screenshots" / "old.png", created_at=NOW - timedelta(days=90)
    )

    report = OrganizerEngine(fs, home=HOME).run(DESKTOP, _config(), now=NOW)

    assert report.expired == []
    assert fs.is_file(old)


def test_cancelled_pass_stops_before_next_move() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "a.txt")
    fs.add_file(DESKTOP / "b.txt")
    cancel = threading.Event()
    cancel.set()

    report = OrganizerEngine(fs, home=HOME).run(
        DESKTOP, _config(delete_old_screenshots=True), now=NOW, cancel_event=cancel
    )

    assert report.cancelled is True
    assert report.manifest.count == 0
    assert fs.is_file(DESKTOP / "a.txt")


def test_plan_does_not_touch_filesystem() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "report.pdf")
    fs.add_file(HOME / "Documents" / "report.pdf")

    plan = OrganizerEngine(fs, home=HOME).plan(DESKTOP, _config(), NOW)

    assert [move.destination for move in plan.moves] == [HOME / "Documents" / "report 1.pdf"]
    assert plan.moves[0].conflict_applied is True
    assert fs.is_file(DESKTOP / "report.pdf")


def test_undo_round_trip_restores_files_and_removes_created_dirs() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "report.pdf")
    fs.add_file(DESKTOP / "tool.py")
    fs.add_dir(HOME / "Documents" / "Empty")
    engine = OrganizerEngine(fs, home=HOME)
    manifest = engine.organize(DESKTOP, _config(), NOW)

    report = engine.undo(manifest)

    assert len(report.restored) == 2
    assert fs.is_file(DESKTOP / "report.pdf")
    assert fs.is_file(DESKTOP / "tool.py")
    assert not fs.exists(HOME / "Developer")
    assert report.removed_directories == [HOME / "Developer"]
    assert fs.is_dir(HOME / "Documents")
    assert fs.is_dir(HOME / "Documents" / "Empty")


def test_undo_skips_files_that_disappeared() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "a.txt")
    fs.add_file(DESKTOP / "b.txt")
    engine = OrganizerEngine(fs, home=HOME)
    manifest = engine.organize(DESKTOP, _config(), NOW)
    fs.remove_file(HOME / "Documents" / "a.txt")

    report = engine.undo(manifest)

    assert [record.original_path.name for record in report.missing] == ["a.txt"]
    assert [record.original_path.name for record in report.restored] == ["b.txt"]
    assert report.errors == []


def test_undo_leaves_file_when_original_location_is_occupied() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "a.txt", b"first")
    engine = OrganizerEngine(fs, home=HOME)
    manifest = engine.organize(DESKTOP, _config(), NOW)
    fs.add_file(DESKTOP / "a.txt", b"replacement")

    report = engine.undo(manifest)

    assert report.restored == []
    assert len(report.errors) == 1
    assert fs.files[DESKTOP / "a.txt"].content == b"replacement"
    assert fs.files[HOME / "Documents" / "a.txt"].content == b"first"


def test_undo_recreates_missing_source_directory() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(HOME / "Documents" / "a.txt")
    manifest = CleanManifest(
        moved_files=[
            MoveRecord(
                original_path=HOME / "Gone" / "a.txt",
                new_path=HOME / "Documents" / "a.txt",
            )
        ]
    )

    report = OrganizerEngine(fs, home=HOME).undo(manifest)

    assert len(report.restored) == 1
    assert fs.is_file(HOME / "Gone" / "a.txt")


def test_undo_prunes_legacy_organized_folder() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_dir(DESKTOP / "Organized" / "Images" / "2019")
    fs.add_file(DESKTOP / "Organized" / "Docs" / "keep.txt")

    report = OrganizerEngine(fs, home=HOME).undo(CleanManifest(), legacy_root=DESKTOP)

    assert not fs.exists(DESKTOP / "Organized" / "Images")
    assert fs.is_file(DESKTOP / "Organized" / "Docs" / "keep.txt")
    assert report.removed_directories == [
        DESKTOP / "Organized" / "Images" / "2019",
        DESKTOP / "Organized" / "Images",
    ]


def test_tags_follow_extension_not_destination() -> None:
    fs = _home(MemoryFileSystem())
    fs.add_file(DESKTOP / "IMG_0001.heic")
    fs.add_file(DESKTOP / "deck.key")
    fs.add_file(DESKTOP / "photo.png")

    OrganizerEngine(fs, home=HOME).organize(DESKTOP, _config(), NOW)

    assert fs.files[HOME / "Pictures" / "IMG_0001.heic"].tags == ["Organized"]
    assert fs.files[HOME / "Documents" / "deck.key"].tags == ["Organized"]
    assert fs.files[HOME / "Pictures" / "photo.png"].tags == ["Images"]


def test_extension_table_is_built_once_per_plan(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[object] = []
    original = planner_module.build_extension_table

    def _counting(overrides=None):
        calls.append(overrides)
        return original(overrides)

    monkeypatch.setattr(planner_module, "build_extension_table", _counting)
    fs = _home(MemoryFileSystem())
    for name in ("a.py", "b.png", "c.pdf", "d.zip"):
        fs.add_file(DESKTOP / name)

    plan = OrganizerEngine(fs, home=HOME).plan(DESKTOP, _config(), NOW)

    assert len(plan.moves) == 4
    assert len(calls) == 1
