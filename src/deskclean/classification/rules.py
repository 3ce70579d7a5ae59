"""Static extension rules and naming heuristics."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Mapping

from .models import Category

CATEGORY_EXTENSIONS: Mapping[Category, tuple[str, ...]] = {
    Category.PICTURES: ("jpg", "jpeg", "png", "gif", "bmp", "tiff", "svg", "webp", "heic"),
    Category.DOCUMENTS: ("pdf", "doc", "docx", "txt", "rtf", "pages", "md", "key", "numbers"),
    Category.MUSIC: ("mp3", "m4a", "wav", "aiff", "flac", "aac"),
    Category.MOVIES: ("mp4", "mov", "avi", "mkv", "m4v"),
    Category.DEVELOPER: ("swift", "py", "js", "html", "css", "json", "xml"),
    Category.ARCHIVE: ("zip", "dmg", "pkg", "tar", "gz"),
}

DEFAULT_CATEGORY = Category.DOCUMENTS

CATEGORY_DIRECTORIES: Mapping[Category, PurePosixPath] = {
    Category.PICTURES: PurePosixPath("Pictures"),
    Category.DOCUMENTS: PurePosixPath("Documents"),
    Category.MUSIC: PurePosixPath("Music"),
    Category.MOVIES: PurePosixPath("Movies"),
    Category.DEVELOPER: PurePosixPath("Developer"),
    Category.ARCHIVE: PurePosixPath("Downloads/Archive"),
    Category.SCREENSHOTS: PurePosixPath("Documents/Screenshots"),
}

# Tags follow the file extension rather than the destination category.
TAG_EXTENSIONS: Mapping[str, tuple[str, ...]] = {
    "Code": ("swift", "py", "js", "html", "css", "json", "xml"),
    "Music": ("mp3", "m4a", "wav", "aiff", "flac", "aac"),
    "Images": ("jpg", "jpeg", "png", "gif", "bmp", "tiff", "svg", "webp"),
    "Documents": ("pdf", "doc", "docx", "txt", "rtf", "pages", "md"),
}
_TAG_BY_EXTENSION = {
    extension: tag for tag, extensions in TAG_EXTENSIONS.items() for extension in extensions
}
FALLBACK_TAG = "Organized"

SCREENSHOT_SUBSTRINGS = ("screenshot",)
SCREENSHOT_PREFIXES = ("screen shot", "capture", "snip")


def build_extension_table(overrides: Mapping[str, str] | None = None) -> dict[str, Category]:
    """Return the extension lookup table with configured overrides applied.

    Overrides replace the built-in entry for the same extension, so each
    extension still resolves to exactly one category.
    """
    table = {
        extension: category
        for category, extensions in CATEGORY_EXTENSIONS.items()
        for extension in extensions
    }
    for extension, category_name in (overrides or {}).items():
        table[extension.lstrip(".").lower()] = Category(category_name)
    return table


def looks_like_screenshot(name: str) -> bool:
    lowered = name.lower()
    return any(token in lowered for token in SCREENSHOT_SUBSTRINGS) or lowered.startswith(
        SCREENSHOT_PREFIXES
    )


def tag_for(name: str) -> str:
    """Return the Finder tag for a file called ``name``, keyed on its last suffix."""
    extension = PurePosixPath(name).suffix.lstrip(".").lower()
    return _TAG_BY_EXTENSION.get(extension, FALLBACK_TAG)
