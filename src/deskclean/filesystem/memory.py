"""In-memory filesystem backend for deterministic tests and previews."""

from __future__ import annotations

import errno
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Sequence


@dataclass(slots=True)
class MemoryFile:
    """A file stored by :class:`MemoryFileSystem`."""

    content: bytes = b""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tags: list[str] = field(default_factory=list)


class MemoryFileSystem:
    """Dictionary-backed implementation of :class:`deskclean.filesystem.FileSystem`.

    Paths are stored as given; callers are expected to use absolute paths.
    The root directory ``/`` always exists.
    """

    def __init__(self) -> None:
        self.files: dict[Path, MemoryFile] = {}
        self.dirs: set[Path] = {Path("/")}

    # Fixture helpers ---------------------------------------------------

    def add_file(
        self,
        path: Path | str,
        content: bytes = b"",
        *,
        created_at: datetime | None = None,
    ) -> Path:
        """Create a file and any missing parent directories."""
        target = Path(path)
        self.make_dirs(target.parent)
        entry = MemoryFile(content=content)
        if created_at is not None:
            entry.created_at = created_at
        self.files[target] = entry
        return target

    def add_dir(self, path: Path | str) -> Path:
        target = Path(path)
        self.make_dirs(target)
        return target

    # FileSystem protocol -----------------------------------------------

    def list_dir(self, path: Path) -> list[Path]:
        if path in self.files:
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(path))
        if path not in self.dirs:
            raise FileNotFoundError(errno.ENOENT, "No such directory", str(path))
        children = [item for item in (*self.files, *self.dirs) if item.parent == path and item != path]
        return sorted(children)

    def exists(self, path: Path) -> bool:
        return path in self.files or path in self.dirs

    def is_dir(self, path: Path) -> bool:
        return path in self.dirs

    def is_file(self, path: Path) -> bool:
        return path in self.files

    def make_dirs(self, path: Path) -> list[Path]:
        created: list[Path] = []
        for candidate in reversed([path, *path.parents]):
            if candidate in self.files:
                raise FileExistsError(errno.EEXIST, "File exists", str(candidate))
            if candidate not in self.dirs:
                self.dirs.add(candidate)
                created.append(candidate)
        return created

    def move(self, source: Path, destination: Path) -> None:
        if source not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file", str(source))
        if self.exists(destination):
            raise FileExistsError(errno.EEXIST, "File exists", str(destination))
        if destination.parent not in self.dirs:
            raise FileNotFoundError(errno.ENOENT, "No such directory", str(destination.parent))
        self.files[destination] = self.files.pop(source)

    def remove_file(self, path: Path) -> None:
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file", str(path))
        del self.files[path]

    def remove_dir(self, path: Path) -> None:
        if path not in self.dirs:
            raise FileNotFoundError(errno.ENOENT, "No such directory", str(path))
        if self.list_dir(path):
            raise OSError(errno.ENOTEMPTY, "Directory not empty", str(path))
        self.dirs.discard(path)

    def walk_files(self, root: Path) -> Iterator[Path]:
        for path in sorted(self.files):
            if root in path.parents:
                yield path

    def walk_dirs(self, root: Path) -> Iterator[Path]:
        below = [path for path in self.dirs if root in path.parents]
        yield from sorted(below, key=lambda item: (-len(item.parts), str(item)))

    def created_at(self, path: Path) -> datetime:
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file", str(path))
        return self.files[path].created_at

    def set_tags(self, path: Path, tags: Sequence[str]) -> None:
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file", str(path))
        self.files[path].tags = list(tags)


__all__ = ["MemoryFile", "MemoryFileSystem"]
