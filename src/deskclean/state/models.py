"""Persisted records describing a completed organize pass."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class MoveRecord(BaseModel):
    """One successful move performed during a pass."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    original_path: Path = Field(alias="originalPath")
    new_path: Path = Field(alias="newPath")


class CleanManifest(BaseModel):
    """The single undo point: when a pass ran and which files it moved.

    Attributes:
        date: Completion time of the pass (UTC).
        moved_files: Successful moves in the order they happened.
        created_directories: Directories the pass created, outermost first.
    """

    model_config = ConfigDict(populate_by_name=True)

    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    moved_files: List[MoveRecord] = Field(default_factory=list, alias="movedFiles")
    created_directories: List[Path] = Field(default_factory=list, alias="createdDirectories")

    @property
    def count(self) -> int:
        return len(self.moved_files)


__all__ = ["MoveRecord", "CleanManifest"]
