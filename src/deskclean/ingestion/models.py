"""Models produced by scanning the source directory."""

from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field

SYSTEM_FILES = frozenset({".DS_Store", ".localized", "desktop.ini"})
HIDDEN_PREFIXES = (".", "~")


class FileEntry(BaseModel):
    """A single file found directly inside the source directory.

    Attributes:
        path: Absolute path of the file.
        name: File name including the extension.
        stem: File name without its final extension.
        extension: Lower-cased final extension without the leading dot.
        is_hidden: Whether the name marks a hidden, temporary, or system file.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    name: str
    stem: str
    extension: str
    is_hidden: bool = False

    @classmethod
    def from_path(cls, path: Path) -> "FileEntry":
        name = path.name
        return cls(
            path=path,
            name=name,
            stem=path.stem,
            extension=path.suffix[1:].lower(),
            is_hidden=name in SYSTEM_FILES or name.startswith(HIDDEN_PREFIXES),
        )


class ScanResult(BaseModel):
    """Entries eligible for organizing plus the names that were passed over."""

    entries: List[FileEntry] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
