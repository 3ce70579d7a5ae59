"""Entry point used by the CLI and the scheduler to organize and undo."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from deskclean.config.models import DeskCleanConfig
from deskclean.errors import CleanerBusyError, PersistenceError
from deskclean.organization import OrganizerEngine, OrganizeReport, UndoReport
from deskclean.paths import default_manifest_path, desktop_dir
from deskclean.state import CleanManifest, UndoStore

LOGGER = logging.getLogger(__name__)


class DesktopCleaner:
    """Run organize and undo passes against the persisted undo point.

    A fresh configuration snapshot is loaded for every pass. Only one pass may
    run at a time; overlapping requests raise :class:`CleanerBusyError`.
    """

    def __init__(
        self,
        config_loader: Callable[[], DeskCleanConfig],
        *,
        engine: Optional[OrganizerEngine] = None,
        store: Optional[UndoStore] = None,
        home: Optional[Path] = None,
        source_dir: Optional[Path] = None,
    ) -> None:
        self._config_loader = config_loader
        self._home = home
        self._source_override = source_dir
        self.engine = engine or OrganizerEngine(home=home)
        self.store = store or UndoStore(default_manifest_path(home))
        self._busy = threading.Lock()
        self._worker: ThreadPoolExecutor | None = None

    @property
    def is_busy(self) -> bool:
        return self._busy.locked()

    def source_dir(self, config: DeskCleanConfig) -> Path:
        """Return the directory to organize for ``config``."""
        if self._source_override is not None:
            return self._source_override
        if config.organization.source_dir:
            return Path(config.organization.source_dir).expanduser()
        return desktop_dir(self._home)

    def clean(
        self,
        *,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> OrganizeReport:
        """Organize the source directory and save the result as the undo point.

        The saved manifest replaces any earlier one. A failure to save is
        logged and leaves no undo point; the moves themselves stand.

        Raises:
            CleanerBusyError: If another pass is running.
            ScanError: If the source directory cannot be listed.
        """
        self._acquire()
        try:
            config = self._config_loader()
            report = self.engine.run(
                self.source_dir(config), config, now=now, cancel_event=cancel_event
            )
            try:
                self.store.save(report.manifest)
            except PersistenceError as exc:
                LOGGER.error("Undo information was not saved: %s", exc)
            return report
        finally:
            self._busy.release()

    def organize(self, *, now: Optional[datetime] = None) -> CleanManifest:
        """Organize the source directory and return the saved manifest."""
        return self.clean(now=now).manifest

    def undo(self) -> UndoReport | None:
        """Reverse the most recent pass; a no-op when there is nothing to undo.

        Raises:
            CleanerBusyError: If another pass is running.
        """
        self._acquire()
        try:
            manifest = self.store.load()
            if manifest is None:
                LOGGER.info("Nothing to undo.")
                return None
            config = self._config_loader()
            legacy_root = (
                self.source_dir(config) if config.organization.legacy_organized_folder else None
            )
            report = self.engine.undo(manifest, legacy_root=legacy_root)
            try:
                self.store.clear()
            except PersistenceError as exc:
                LOGGER.error("Undo point could not be cleared: %s", exc)
            return report
        finally:
            self._busy.release()

    def can_undo(self) -> bool:
        return self.store.can_undo()

    def last_manifest(self) -> CleanManifest | None:
        return self.store.load()

    def submit_clean(self, **kwargs) -> "Future[OrganizeReport]":
        """Run :meth:`clean` on a background worker and return its future."""
        if self._worker is None:
            self._worker = ThreadPoolExecutor(max_workers=1, thread_name_prefix="deskclean")
        return self._worker.submit(self.clean, **kwargs)

    def shutdown(self, wait: bool = True) -> None:
        if self._worker is not None:
            self._worker.shutdown(wait=wait)
            self._worker = None

    def _acquire(self) -> None:
        if not self._busy.acquire(blocking=False):
            raise CleanerBusyError("A clean or undo is already in progress.")


__all__ = ["DesktopCleaner"]
