"""Executor for organization plans."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable, Optional

from deskclean.errors import MoveError, UndoError
from deskclean.filesystem import FileSystem
from deskclean.state.models import CleanManifest, MoveRecord

from .models import ExecutionResult, OperationPlan, UndoReport
from .planner import resolve_collision

LOGGER = logging.getLogger(__name__)


class OperationExecutor:
    """Apply move plans and reverse them from a manifest."""

    def __init__(self, filesystem: FileSystem, *, tag_files: bool = True) -> None:
        self.filesystem = filesystem
        self.tag_files = tag_files

    def apply(
        self,
        plan: OperationPlan,
        cancel_event: Optional[threading.Event] = None,
    ) -> ExecutionResult:
        """Execute every planned move, continuing past individual failures.

        Names are re-checked right before each move, so files that appeared
        at the destination after planning are not overwritten.

        Args:
            plan: Operation plan computed by the planner.
            cancel_event: When set, stop before the next move.

        Returns:
            ExecutionResult: Successful moves, created directories, and errors.
        """
        result = ExecutionResult()
        claimed: set[Path] = set()

        for move_op in plan.moves:
            if cancel_event is not None and cancel_event.is_set():
                LOGGER.info("Organize pass cancelled after %d move(s).", len(result.records))
                result.cancelled = True
                break

            try:
                result.created_directories.extend(self.filesystem.make_dirs(move_op.target_dir))
                destination = resolve_collision(
                    self.filesystem, move_op.target_dir / move_op.source.name, claimed
                )
                self.filesystem.move(move_op.source, destination)
            except OSError as exc:
                error = MoveError(move_op.source, str(exc))
                LOGGER.warning("Move failed: %s", error)
                result.errors.append(str(error))
                continue

            claimed.add(destination)
            result.records.append(MoveRecord(original_path=move_op.source, new_path=destination))
            LOGGER.info("Moved %s -> %s", move_op.source, destination)

            if self.tag_files:
                try:
                    self.filesystem.set_tags(destination, [move_op.tag])
                except OSError as exc:
                    LOGGER.debug("Could not tag %s: %s", destination, exc)

        return result

    def rollback(
        self,
        manifest: CleanManifest,
        prune_roots: Iterable[Path] = (),
    ) -> UndoReport:
        """Move every recorded file back and remove directories left empty.

        Records whose file has disappeared are skipped. A record whose
        original location is occupied again is reported and left alone.

        Args:
            manifest: Manifest produced by a previous pass.
            prune_roots: Extra roots whose empty subdirectories are removed.

        Returns:
            UndoReport: Restored, missing, and failed records.
        """
        report = UndoReport()

        for record in manifest.moved_files:
            if not self.filesystem.is_file(record.new_path):
                LOGGER.info(
                    "Skipping %s; it is no longer at %s", record.original_path.name, record.new_path
                )
                report.missing.append(record)
                continue
            try:
                self._restore(record)
            except UndoError as exc:
                LOGGER.warning("Undo failed: %s", exc)
                report.errors.append(str(exc))
                continue
            report.restored.append(record)

        report.removed_directories.extend(
            self._remove_if_empty(reversed(manifest.created_directories))
        )
        for root in prune_roots:
            if self.filesystem.is_dir(root):
                report.removed_directories.extend(
                    self._remove_if_empty(self.filesystem.walk_dirs(root))
                )
        return report

    def _restore(self, record: MoveRecord) -> None:
        if self.filesystem.exists(record.original_path):
            raise UndoError(record.original_path, "original location is occupied")
        try:
            self.filesystem.make_dirs(record.original_path.parent)
            self.filesystem.move(record.new_path, record.original_path)
        except OSError as exc:
            raise UndoError(record.new_path, str(exc)) from exc

    def _remove_if_empty(self, directories: Iterable[Path]) -> list[Path]:
        removed: list[Path] = []
        for directory in list(directories):
            if not self.filesystem.is_dir(directory):
                continue
            try:
                if self.filesystem.list_dir(directory):
                    continue
                self.filesystem.remove_dir(directory)
            except OSError as exc:
                LOGGER.debug("Could not remove %s: %s", directory, exc)
                continue
            removed.append(directory)
        return removed


__all__ = ["OperationExecutor"]
