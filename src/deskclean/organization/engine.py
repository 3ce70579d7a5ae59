"""Organizer engine tying scanning, planning, execution, and expiry together."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from deskclean.classification import Category, Classifier
from deskclean.classification.rules import CATEGORY_DIRECTORIES
from deskclean.config.models import DeskCleanConfig
from deskclean.filesystem import FileSystem, LocalFileSystem
from deskclean.ingestion import LEGACY_ORGANIZED_DIRNAME, DirectoryScanner
from deskclean.state.models import CleanManifest

from .executor import OperationExecutor
from .expiry import expire_old_files
from .models import OperationPlan, OrganizeReport, UndoReport
from .planner import OrganizerPlanner

LOGGER = logging.getLogger(__name__)


def _aware(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.astimezone()
    return now


class OrganizerEngine:
    """Organize a source directory into category folders and reverse it later."""

    def __init__(
        self,
        filesystem: Optional[FileSystem] = None,
        classifier: Optional[Classifier] = None,
        *,
        home: Optional[Path] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            filesystem: Filesystem backend; defaults to the real disk.
            classifier: Classifier to use; defaults to one rooted at ``home``.
            home: Home directory for destinations when no classifier is given.
        """
        self.filesystem = filesystem or LocalFileSystem()
        self.classifier = classifier or Classifier(home)
        self.planner = OrganizerPlanner(self.classifier, self.filesystem)

    @property
    def screenshots_root(self) -> Path:
        return self.classifier.home / CATEGORY_DIRECTORIES[Category.SCREENSHOTS]

    def plan(
        self,
        source_dir: Path,
        config: DeskCleanConfig,
        now: Optional[datetime] = None,
    ) -> OperationPlan:
        """Return the moves a pass would perform without touching the disk.

        Raises:
            ScanError: If ``source_dir`` cannot be listed.
            ClassificationError: If destinations cannot be resolved.
        """
        scanner = DirectoryScanner(
            self.filesystem,
            skip_legacy_folder=config.organization.legacy_organized_folder,
        )
        scan = scanner.scan(source_dir)
        return self.planner.build_plan(
            scan.entries, config, now=_aware(now), skipped=scan.skipped
        )

    def run(
        self,
        source_dir: Path,
        config: DeskCleanConfig,
        *,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> OrganizeReport:
        """Organize ``source_dir`` and return the full outcome.

        Individual move failures are recorded in the report and do not stop
        the pass. The screenshot expiry step runs afterwards when enabled.

        Args:
            source_dir: Directory whose immediate files are organized.
            config: Configuration snapshot for this pass.
            now: Reference time for screenshot months, expiry, and the manifest date.
            cancel_event: When set, remaining moves are abandoned.

        Returns:
            OrganizeReport: Manifest plus errors, skipped names, and expired files.

        Raises:
            ScanError: If ``source_dir`` cannot be listed; nothing is moved.
            ClassificationError: If destinations cannot be resolved.
        """
        current = _aware(now)
        plan = self.plan(source_dir, config, current)
        executor = OperationExecutor(self.filesystem, tag_files=config.organization.tag_files)
        result = executor.apply(plan, cancel_event=cancel_event)

        expired: list[Path] = []
        if config.preferences.delete_old_screenshots and not result.cancelled:
            expired = expire_old_files(
                self.filesystem,
                self.screenshots_root,
                current,
                config.organization.screenshot_retention_days,
            )

        manifest = CleanManifest(
            date=current,
            moved_files=result.records,
            created_directories=result.created_directories,
        )
        LOGGER.info(
            "Organized %s: %d moved, %d failed, %d expired",
            source_dir,
            manifest.count,
            len(result.errors),
            len(expired),
        )
        return OrganizeReport(
            source=source_dir,
            manifest=manifest,
            errors=result.errors,
            skipped=plan.skipped,
            expired=expired,
            cancelled=result.cancelled,
        )

    def organize(
        self,
        source_dir: Path,
        config: DeskCleanConfig,
        now: Optional[datetime] = None,
    ) -> CleanManifest:
        """Organize ``source_dir`` and return the manifest of successful moves."""
        return self.run(source_dir, config, now=now).manifest

    def undo(
        self,
        manifest: CleanManifest,
        *,
        legacy_root: Optional[Path] = None,
    ) -> UndoReport:
        """Move the files in ``manifest`` back to where they came from.

        Args:
            manifest: Manifest of the pass to reverse.
            legacy_root: Source directory whose ``Organized`` folder should have
                its empty subdirectories pruned.

        Returns:
            UndoReport: Restored, missing, and failed records.
        """
        executor = OperationExecutor(self.filesystem)
        prune_roots = [legacy_root / LEGACY_ORGANIZED_DIRNAME] if legacy_root else []
        report = executor.rollback(manifest, prune_roots=prune_roots)
        LOGGER.info(
            "Undo restored %d of %d file(s); %d missing, %d failed",
            len(report.restored),
            manifest.count,
            len(report.missing),
            len(report.errors),
        )
        return report


__all__ = ["OrganizerEngine"]
