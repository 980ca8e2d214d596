from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from functools import wraps

from attrs import define, field
from loguru import logger

from grading_allocation.assignment import (
    AssignmentInput,
    AssignmentSet,
    AssignmentSetManager,
    PopulatedAssignmentSet,
)
from grading_allocation.config import Settings
from grading_allocation.exceptions import AllocationError
from grading_allocation.marking import GraderProgress, UnmarkedQuery
from grading_allocation.result import Result, ResultReconciler, ScoreAggregator
from grading_allocation.source import Directory
from grading_allocation.store import Stores
from grading_allocation.target import Target


def _logged[**P, R](func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """Log unexpected failures; allocation errors are the caller's to map."""

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func(*args, **kwargs)
        except AllocationError:
            raise
        except Exception:
            logger.exception("Unexpected failure in {}", func.__name__)
            raise

    return wrapper


@define
class GradingService:
    """
    Grader allocation and result bookkeeping for assessments.

    Composes the assignment manager, result reconciler, score aggregator and
    unmarked query over one directory of collaborators and one store backend.
    """

    directory: Directory
    stores: Stores
    settings: Settings = field(factory=Settings)

    manager: AssignmentSetManager = field(init=False)
    reconciler: ResultReconciler = field(init=False)
    aggregator: ScoreAggregator = field(init=False)
    query: UnmarkedQuery = field(init=False)

    def __attrs_post_init__(self) -> None:
        self.manager = AssignmentSetManager(
            store=self.stores.assignment_sets,
            assessments=self.directory,
            team_sets=self.directory,
            users=self.directory,
        )
        self.reconciler = ResultReconciler(
            assignment_sets=self.stores.assignment_sets,
            results=self.stores.results,
            assessments=self.directory,
        )
        self.aggregator = ScoreAggregator(results=self.stores.results)
        self.query = UnmarkedQuery(
            assignment_sets=self.stores.assignment_sets,
            submissions=self.directory,
            concurrency=self.settings.submission_concurrency,
        )

    @_logged
    async def create(self, assessment_id: str, team_set_id: str | None = None) -> AssignmentSet:
        return await self.manager.create(assessment_id, team_set_id)

    @_logged
    async def get(self, assessment_id: str) -> PopulatedAssignmentSet:
        return await self.manager.get(assessment_id)

    @_logged
    async def update(
        self, actor_id: str, assessment_id: str, assignments: Sequence[AssignmentInput]
    ) -> AssignmentSet:
        return await self.manager.update(actor_id, assessment_id, assignments)

    @_logged
    async def assignments_for_grader(self, ta_id: str, assessment_id: str) -> list[Target]:
        return await self.query.assignments_for_grader(ta_id, assessment_id)

    @_logged
    async def unmarked_for_grader(self, ta_id: str, assessment_id: str) -> list[Target]:
        return await self.query.unmarked_for_grader(ta_id, assessment_id)

    @_logged
    async def marking_progress(self, assessment_id: str) -> list[GraderProgress]:
        return await self.query.marking_progress(assessment_id)

    @_logged
    async def get_or_create_results(self, assessment_id: str) -> list[Result]:
        return await self.reconciler.get_or_create(assessment_id)

    @_logged
    async def recalculate(self, result_id: str) -> None:
        await self.aggregator.recalculate(result_id)

    @_logged
    async def delete_assessment(self, assessment_id: str) -> None:
        """Drop the assignment set and results of a deleted assessment."""
        await self.reconciler.delete(assessment_id)
        await self.manager.delete(assessment_id)
