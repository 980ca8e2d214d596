from __future__ import annotations

from .backfill import fill_missing, grader_pool
from .manager import AssignmentSetManager, targets_from_team_set
from .model import (
    AssignmentEntry,
    AssignmentInput,
    AssignmentSet,
    PopulatedAssignment,
    PopulatedAssignmentSet,
)
from .wire import from_wire, to_wire

__all__ = [
    "AssignmentEntry",
    "AssignmentInput",
    "AssignmentSet",
    "AssignmentSetManager",
    "PopulatedAssignment",
    "PopulatedAssignmentSet",
    "fill_missing",
    "from_wire",
    "grader_pool",
    "targets_from_team_set",
    "to_wire",
]
