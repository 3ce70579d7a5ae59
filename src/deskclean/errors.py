"""Exceptions raised by the organizing core."""

from __future__ import annotations

from pathlib import Path


class DeskCleanError(Exception):
    """Base exception for deskclean operations."""


class ClassificationError(DeskCleanError):
    """Raised when no destination can be resolved for an entry."""


class ScanError(DeskCleanError):
    """Raised when the source directory cannot be listed."""


class MoveError(DeskCleanError):
    """Raised when a single entry cannot be moved to its destination."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class UndoError(DeskCleanError):
    """Raised when a recorded move cannot be reversed."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class PersistenceError(DeskCleanError):
    """Raised when the undo manifest cannot be written."""


class CleanerBusyError(DeskCleanError):
    """Raised when a pass is requested while another one is running."""


__all__ = [
    "DeskCleanError",
    "ClassificationError",
    "ScanError",
    "MoveError",
    "UndoError",
    "PersistenceError",
    "CleanerBusyError",
]
