"""Filesystem backend operating on the real disk."""

from __future__ import annotations

import os
import plistlib
import shutil
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Sequence

_FINDER_TAGS_ATTR = "com.apple.metadata:_kMDItemUserTags"
_XDG_TAGS_ATTR = "user.xdg.tags"


class LocalFileSystem:
    """Disk-backed implementation of :class:`deskclean.filesystem.FileSystem`."""

    def list_dir(self, path: Path) -> list[Path]:
        return sorted(path.iterdir())

    def exists(self, path: Path) -> bool:
        return path.exists() or path.is_symlink()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file() or path.is_symlink()

    def make_dirs(self, path: Path) -> list[Path]:
        missing = [candidate for candidate in [path, *path.parents] if not candidate.exists()]
        path.mkdir(parents=True, exist_ok=True)
        return list(reversed(missing))

    def move(self, source: Path, destination: Path) -> None:
        if self.exists(destination):
            raise FileExistsError(f"Destination already exists: {destination}")
        shutil.move(str(source), str(destination))

    def remove_file(self, path: Path) -> None:
        path.unlink()

    def remove_dir(self, path: Path) -> None:
        path.rmdir()

    def walk_files(self, root: Path) -> Iterator[Path]:
        for directory, _, files in os.walk(root):
            for name in sorted(files):
                yield Path(directory) / name

    def walk_dirs(self, root: Path) -> Iterator[Path]:
        for directory, subdirs, _ in os.walk(root, topdown=False):
            for name in sorted(subdirs):
                candidate = Path(directory) / name
                # os.walk lists links to directories here without descending into them.
                if not candidate.is_symlink():
                    yield candidate

    def created_at(self, path: Path) -> datetime:
        stat = path.stat()
        timestamp = getattr(stat, "st_birthtime", None) or stat.st_mtime
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)

    def set_tags(self, path: Path, tags: Sequence[str]) -> None:
        """Write Finder tags on macOS or ``user.xdg.tags`` where xattrs are supported.

        Raises:
            OSError: If the platform offers no tagging mechanism or the write fails.
        """
        if sys.platform == "darwin":
            payload = plistlib.dumps(list(tags), fmt=plistlib.FMT_BINARY).hex()
            try:
                subprocess.run(
                    ["xattr", "-wx", _FINDER_TAGS_ATTR, payload, str(path)],
                    check=True,
                    capture_output=True,
                )
            except subprocess.CalledProcessError as exc:
                raise OSError(f"xattr exited with status {exc.returncode}") from exc
            return
        if hasattr(os, "setxattr"):
            os.setxattr(path, _XDG_TAGS_ATTR, ",".join(tags).encode("utf-8"))
            return
        raise OSError(f"File tagging is not supported on {sys.platform}")


__all__ = ["LocalFileSystem"]
