"""Filesystem access contract used by the organizing core."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterator, Protocol, Sequence


class FileSystem(Protocol):
    """Operations the scanner, executor, and expiry pass perform on disk.

    Implementations raise ``OSError`` subclasses for failures so callers can
    handle real and in-memory backends identically.
    """

    def list_dir(self, path: Path) -> list[Path]:
        """Return the immediate children of ``path``."""
        ...

    def exists(self, path: Path) -> bool:
        ...

    def is_dir(self, path: Path) -> bool:
        ...

    def is_file(self, path: Path) -> bool:
        ...

    def make_dirs(self, path: Path) -> list[Path]:
        """Create ``path`` with its parents and return the directories created, outermost first."""
        ...

    def move(self, source: Path, destination: Path) -> None:
        """Move a file; ``destination`` must not exist."""
        ...

    def remove_file(self, path: Path) -> None:
        ...

    def remove_dir(self, path: Path) -> None:
        """Remove an empty directory."""
        ...

    def walk_files(self, root: Path) -> Iterator[Path]:
        """Yield every file below ``root`` recursively."""
        ...

    def walk_dirs(self, root: Path) -> Iterator[Path]:
        """Yield every real directory below ``root``, deepest first, skipping symlinks."""
        ...

    def created_at(self, path: Path) -> datetime:
        """Return the creation time of ``path`` as an aware UTC datetime."""
        ...

    def set_tags(self, path: Path, tags: Sequence[str]) -> None:
        """Attach user-visible tags to ``path``."""
        ...


__all__ = ["FileSystem"]
