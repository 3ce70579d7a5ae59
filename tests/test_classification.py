"""Tests for extension-based classification."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from deskclean.classification import (
    Category,
    Classifier,
    build_extension_table,
    looks_like_screenshot,
    screenshot_month_label,
    tag_for,
)
from deskclean.config import DeskCleanConfig
from deskclean.errors import ClassificationError
from deskclean.ingestion import FileEntry

HOME = Path("/home/user")


def _entry(name: str) -> FileEntry:
    return FileEntry.from_path(HOME / "Desktop" / name)


@pytest.mark.parametrize(
    ("name", "category", "relative"),
    [
        ("photo.JPG", Category.PICTURES, "Pictures"),
        ("scan.heic", Category.PICTURES, "Pictures"),
        ("report.pdf", Category.DOCUMENTS, "Documents"),
        ("song.FLAC", Category.MUSIC, "Music"),
        ("clip.mkv", Category.MOVIES, "Movies"),
        ("script.py", Category.DEVELOPER, "Developer"),
        ("backup.tar", Category.ARCHIVE, "Downloads/Archive"),
    ],
)
def test_destination_follows_extension_table(
    name: str, category: Category, relative: str
) -> None:
    classifier = Classifier(HOME)

    destination = classifier.destination_for(_entry(name), DeskCleanConfig())

    assert destination.category is category
    assert destination.directory == HOME / relative


@pytest.mark.parametrize("name", ["notes.xyz", "Makefile", "archive.7z"])
def test_unknown_extensions_default_to_documents(name: str) -> None:
    destination = Classifier(HOME).destination_for(_entry(name), DeskCleanConfig())

    assert destination.category is Category.DOCUMENTS
    assert destination.directory == HOME / "Documents"


def test_prebuilt_extension_table_is_used_as_given() -> None:
    classifier = Classifier(HOME)
    config = DeskCleanConfig.model_validate(
        {"organization": {"extension_overrides": {"raw": "Pictures"}}}
    )
    extensions = build_extension_table(config.organization.extension_overrides)

    assert classifier.category_for(_entry("IMG_1.RAW"), config, extensions) is Category.PICTURES
    destination = classifier.destination_for(_entry("a.swift"), config, extensions=extensions)
    assert destination.directory == HOME / "Developer"
    assert classifier.category_for(_entry("a.swift"), config, {}) is Category.DOCUMENTS


def test_screenshot_routing_uses_current_month() -> None:
    config = DeskCleanConfig.model_validate({"preferences": {"create_screenshots_folder": True}})
    now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    destination = Classifier(HOME).destination_for(
        _entry("Screenshot 2023-11-02 at 10.00.00.png"), config, now
    )

    assert destination.category is Category.SCREENSHOTS
    assert destination.directory == HOME / "Documents" / "Screenshots" / "2024-01 January"


def test_screenshots_stay_in_pictures_when_folder_disabled() -> None:
    destination = Classifier(HOME).destination_for(
        _entry("Screenshot 2024-01-15.png"), DeskCleanConfig()
    )

    assert destination.category is Category.PICTURES


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Screenshot 2024.png", True),
        ("my-SCREENSHOT.jpg", True),
        ("Screen Shot 2019-01-01.png", True),
        ("Capture-01.png", True),
        ("snip_2.png", True),
        ("holiday.png", False),
        ("recapture.png", False),
    ],
)
def test_looks_like_screenshot(name: str, expected: bool) -> None:
    assert looks_like_screenshot(name) is expected


def test_extension_overrides_replace_table_entries() -> None:
    config = DeskCleanConfig.model_validate(
        {"organization": {"extension_overrides": {"json": "Documents", "raw": "Pictures"}}}
    )
    classifier = Classifier(HOME)

    assert classifier.category_for(_entry("data.json"), config) is Category.DOCUMENTS
    assert classifier.category_for(_entry("IMG_1.RAW"), config) is Category.PICTURES


def test_screenshot_month_label() -> None:
    assert screenshot_month_label(datetime(2024, 11, 3)) == "2024-11 November"


@pytest.mark.parametrize(
    ("name", "tag"),
    [
        ("main.py", "Code"),
        ("song.FLAC", "Music"),
        ("photo.png", "Images"),
        ("notes.md", "Documents"),
        ("IMG_0001.heic", "Organized"),
        ("deck.key", "Organized"),
        ("budget.numbers", "Organized"),
        ("movie.mp4", "Organized"),
        ("notes.xyz", "Organized"),
        ("Makefile", "Organized"),
    ],
)
def test_tags_follow_file_extension(name: str, tag: str) -> None:
    assert tag_for(name) == tag


def test_missing_home_raises_classification_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def _no_home() -> Path:
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr(Path, "home", staticmethod(_no_home))

    with pytest.raises(ClassificationError):
        Classifier().destination_for(_entry("report.pdf"), DeskCleanConfig())
