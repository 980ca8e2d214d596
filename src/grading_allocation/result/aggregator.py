from __future__ import annotations

from typing import TYPE_CHECKING

from attrs import define
from loguru import logger

from grading_allocation.exceptions import BadRequestError, NotFoundError

from .model import Result

if TYPE_CHECKING:
    from grading_allocation.store import ResultStore


def average_score(result: Result) -> float:
    """Mean of the stored mark scores. An unset score counts as 0."""
    if not result.marks:
        raise BadRequestError(f"Result {result.id} has no marks to recalculate")
    return sum(mark.score or 0.0 for mark in result.marks) / len(result.marks)


@define
class ScoreAggregator:
    results: ResultStore

    async def recalculate(self, result_id: str) -> None:
        """
        Recompute and store the average score of a result.

        Scores are aggregated as they are stored; they are never re-derived
        from submissions. The whole row is written back, so a mark written
        between the read and the write is lost: last writer wins, as with
        `update`.

        Raises:
            NotFoundError: The result does not exist.
            BadRequestError: The result has no marks. It is left unchanged.
        """
        result = await self.results.get(result_id)
        if result is None:
            raise NotFoundError(f"Result {result_id} not found")

        result.average_score = average_score(result)
        await self.results.replace(result)
        logger.bind(assessment_id=result.assessment_id).info(
            "Recalculated result {} for student {}: {}",
            result.id,
            result.student_id,
            result.average_score,
        )
