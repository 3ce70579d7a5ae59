"""Planner for organization operations."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from deskclean.classification import Classifier, build_extension_table, tag_for
from deskclean.config.models import DeskCleanConfig
from deskclean.filesystem import FileSystem
from deskclean.ingestion.models import FileEntry

from .models import MoveOperation, OperationPlan


def resolve_collision(filesystem: FileSystem, candidate: Path, claimed: set[Path]) -> Path:
    """Return ``candidate`` or the first free ``"<stem> N<suffix>"`` sibling.

    A name is taken when it exists on disk or was already claimed earlier in
    the same pass.
    """
    counter = 1
    final = candidate
    while filesystem.exists(final) or final in claimed:
        final = candidate.with_name(f"{candidate.stem} {counter}{candidate.suffix}")
        counter += 1
    return final


class OrganizerPlanner:
    """Derive move plans from scanned entries and the classifier."""

    def __init__(self, classifier: Classifier, filesystem: FileSystem) -> None:
        self.classifier = classifier
        self.filesystem = filesystem

    def build_plan(
        self,
        entries: Iterable[FileEntry],
        config: DeskCleanConfig,
        *,
        now: Optional[datetime] = None,
        skipped: Iterable[str] = (),
    ) -> OperationPlan:
        """Produce a move for every entry.

        Args:
            entries: Eligible files from the scanner.
            config: Configuration snapshot for the pass.
            now: Reference time passed to the classifier.
            skipped: Names the scanner left in place.

        Returns:
            OperationPlan: Planned moves with provisional collision-free names.

        Raises:
            ClassificationError: If destinations cannot be resolved.
        """
        plan = OperationPlan(skipped=list(skipped))
        claimed: set[Path] = set()
        extensions = build_extension_table(config.organization.extension_overrides)

        for entry in entries:
            destination = self.classifier.destination_for(
                entry, config, now, extensions=extensions
            )
            candidate = destination.directory / entry.name
            resolved = resolve_collision(self.filesystem, candidate, claimed)
            claimed.add(resolved)
            plan.moves.append(
                MoveOperation(
                    source=entry.path,
                    target_dir=destination.directory,
                    destination=resolved,
                    category=destination.category,
                    tag=tag_for(entry.name),
                    conflict_applied=resolved != candidate,
                )
            )
        return plan


__all__ = ["OrganizerPlanner", "resolve_collision"]
