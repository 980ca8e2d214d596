from __future__ import annotations

from loguru import logger

from .assignment import AssignmentInput, AssignmentSet, PopulatedAssignmentSet
from .config import Settings
from .exceptions import AllocationError, BadRequestError, ConsistencyError, NotFoundError
from .result import MarkEntry, Result
from .service import GradingService
from .source import Snapshot
from .store import Stores, build_stores
from .target import StudentTarget, Target, TeamTarget

logger.disable("grading_allocation")

__all__ = [
    "AllocationError",
    "AssignmentInput",
    "AssignmentSet",
    "BadRequestError",
    "ConsistencyError",
    "GradingService",
    "MarkEntry",
    "NotFoundError",
    "PopulatedAssignmentSet",
    "Result",
    "Settings",
    "Snapshot",
    "Stores",
    "StudentTarget",
    "Target",
    "TeamTarget",
    "build_stores",
]
