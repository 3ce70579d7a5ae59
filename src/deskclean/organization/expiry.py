"""Deletion of stale files from the screenshots folder."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from pathlib import Path

from deskclean.filesystem import FileSystem

LOGGER = logging.getLogger(__name__)


def expire_old_files(
    filesystem: FileSystem,
    root: Path,
    now: datetime,
    max_age_days: int = 30,
) -> list[Path]:
    """Delete files below ``root`` created more than ``max_age_days`` before ``now``.

    Deleted files are gone for good; they are never part of an undo manifest.
    Files that cannot be inspected or removed are left in place.

    Returns:
        list[Path]: Files that were deleted.
    """
    if not filesystem.is_dir(root):
        return []

    cutoff = now - timedelta(days=max_age_days)
    deleted: list[Path] = []
    for path in list(filesystem.walk_files(root)):
        try:
            if filesystem.created_at(path) >= cutoff:
                continue
            filesystem.remove_file(path)
        except OSError as exc:
            LOGGER.warning("Could not expire %s: %s", path, exc)
            continue
        LOGGER.info("Expired old screenshot %s", path)
        deleted.append(path)
    return deleted


__all__ = ["expire_old_files"]
