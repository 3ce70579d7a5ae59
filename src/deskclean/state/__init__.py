"""Single-slot persistence for the most recent organize pass."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from deskclean.errors import PersistenceError
from deskclean.paths import default_manifest_path

from .models import CleanManifest, MoveRecord

LOGGER = logging.getLogger(__name__)


class UndoStore:
    """Persist the latest manifest so the pass can be reversed later.

    Only one manifest is retained; saving replaces whatever was stored.
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize the store.

        Args:
            path: Manifest file location; defaults to ``last_clean.json`` in the
                application support directory.
        """
        self._path = path or default_manifest_path()

    @property
    def path(self) -> Path:
        """Return the manifest file location."""
        return self._path

    def save(self, manifest: CleanManifest) -> None:
        """Persist ``manifest``, replacing any previously saved one.

        Raises:
            PersistenceError: If the manifest cannot be written.
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                manifest.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
            )
        except OSError as exc:
            raise PersistenceError(f"Unable to write {self._path}: {exc}") from exc

    def load(self) -> CleanManifest | None:
        """Return the saved manifest, or ``None`` when absent or unreadable.

        Corrupt or incompatible data is treated the same as no manifest.
        """
        if not self._path.exists():
            return None
        try:
            raw = self._path.read_bytes()
        except OSError as exc:
            LOGGER.warning("Unable to read undo manifest %s: %s", self._path, exc)
            return None
        try:
            return CleanManifest.model_validate_json(raw)
        except (ValidationError, UnicodeDecodeError) as exc:
            LOGGER.warning("Ignoring unreadable undo manifest %s: %s", self._path, exc)
            return None

    def clear(self) -> None:
        """Delete the saved manifest if present.

        Raises:
            PersistenceError: If the file exists but cannot be removed.
        """
        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to remove {self._path}: {exc}") from exc

    def can_undo(self) -> bool:
        return self.load() is not None


__all__ = ["UndoStore", "CleanManifest", "MoveRecord"]
