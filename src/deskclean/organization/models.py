"""Organization plan and outcome models."""

from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic import BaseModel, Field

from deskclean.classification.models import Category
from deskclean.state.models import CleanManifest, MoveRecord


class MoveOperation(BaseModel):
    """Represents moving one file into its category folder.

    Attributes:
        source: Current file path in the source directory.
        target_dir: Directory the file belongs in.
        destination: Planned final path after collision resolution.
        category: Category selected by the classifier.
        tag: Tag applied to the file after the move.
        conflict_applied: Whether the planned name differs from the original.
    """

    source: Path
    target_dir: Path
    destination: Path
    category: Category
    tag: str
    conflict_applied: bool = False


class OperationPlan(BaseModel):
    """Aggregated organization plan."""

    moves: List[MoveOperation] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)


class ExecutionResult(BaseModel):
    """What the executor managed to do with a plan."""

    records: List[MoveRecord] = Field(default_factory=list)
    created_directories: List[Path] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    cancelled: bool = False


class OrganizeReport(BaseModel):
    """Full outcome of an organize pass.

    Attributes:
        source: Directory that was organized.
        manifest: Undo point describing successful moves.
        errors: Per-entry failures; the pass continued past each one.
        skipped: Names left in place by the scanner.
        expired: Screenshots deleted by the expiry pass (not undoable).
        cancelled: Whether the pass stopped early on request.
    """

    source: Path
    manifest: CleanManifest
    errors: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    expired: List[Path] = Field(default_factory=list)
    cancelled: bool = False


class UndoReport(BaseModel):
    """Outcome of reversing a manifest.

    Attributes:
        restored: Records moved back to their original location.
        missing: Records whose file no longer exists where it was moved.
        errors: Records that could not be restored.
        removed_directories: Empty directories removed after restoring.
    """

    restored: List[MoveRecord] = Field(default_factory=list)
    missing: List[MoveRecord] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    removed_directories: List[Path] = Field(default_factory=list)


__all__ = [
    "MoveOperation",
    "OperationPlan",
    "ExecutionResult",
    "OrganizeReport",
    "UndoReport",
]
