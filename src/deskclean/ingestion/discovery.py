"""Source directory discovery."""

from __future__ import annotations

import logging
from pathlib import Path

from deskclean.errors import ScanError
from deskclean.filesystem import FileSystem

from .models import FileEntry, ScanResult

LOGGER = logging.getLogger(__name__)

LEGACY_ORGANIZED_DIRNAME = "Organized"


class DirectoryScanner:
    """List the immediate files of a directory that are eligible for organizing."""

    def __init__(self, filesystem: FileSystem, *, skip_legacy_folder: bool = False) -> None:
        self.filesystem = filesystem
        self.skip_legacy_folder = skip_legacy_folder

    def scan(self, root: Path) -> ScanResult:
        """Return eligible entries found directly under ``root``.

        Raises:
            ScanError: If ``root`` cannot be listed.
        """
        try:
            children = self.filesystem.list_dir(root)
        except OSError as exc:
            raise ScanError(f"Unable to list {root}: {exc}") from exc

        result = ScanResult()
        for path in children:
            reason = self._skip_reason(path)
            if reason is not None:
                LOGGER.debug("Skipping %s (%s)", path, reason)
                result.skipped.append(path.name)
                continue
            result.entries.append(FileEntry.from_path(path))
        return result

    def _skip_reason(self, path: Path) -> str | None:
        if self.skip_legacy_folder and path.name == LEGACY_ORGANIZED_DIRNAME:
            return "legacy folder"
        if self.filesystem.is_dir(path):
            return "directory"
        if FileEntry.from_path(path).is_hidden:
            return "hidden or system file"
        return None
