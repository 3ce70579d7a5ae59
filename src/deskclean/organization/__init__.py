"""Planning, executing, and reversing organize passes."""

from .engine import OrganizerEngine
from .executor import OperationExecutor
from .expiry import expire_old_files
from .models import ExecutionResult, MoveOperation, OperationPlan, OrganizeReport, UndoReport
from .planner import OrganizerPlanner, resolve_collision

__all__ = [
    "OrganizerEngine",
    "OperationExecutor",
    "OrganizerPlanner",
    "resolve_collision",
    "expire_old_files",
    "ExecutionResult",
    "MoveOperation",
    "OperationPlan",
    "OrganizeReport",
    "UndoReport",
]
