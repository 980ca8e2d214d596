from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from attrs import define
from loguru import logger
from pydantic import BaseModel

from grading_allocation.assignment.model import AssignmentSet
from grading_allocation.exceptions import NotFoundError
from grading_allocation.source import SubmissionReader, SubmissionRecord
from grading_allocation.target import Target
from grading_allocation.utils.sync import gather_bounded

if TYPE_CHECKING:
    from grading_allocation.store import AssignmentSetStore


def is_marked(target: Target, submissions: Sequence[SubmissionRecord]) -> bool:
    """
    Whether some submission evaluates every member of `target`.

    A submission counts when one of its team member selection answers selects
    a superset of the target's members: the whole team, or the single student.
    """
    members = set(target.member_ids)
    return any(
        members <= selected
        for submission in submissions
        for selected in submission.selections()
    )


def unmarked(targets: Sequence[Target], submissions: Sequence[SubmissionRecord]) -> list[Target]:
    return [target for target in targets if not is_marked(target, submissions)]


class GraderProgress(BaseModel):
    grader_id: str
    assigned: int
    unmarked: list[Target]


@define
class UnmarkedQuery:
    """
    Answers what a grader still has to mark.

    Marked state is never stored. It is inferred from the grader's
    submissions on every call.
    """

    assignment_sets: AssignmentSetStore
    submissions: SubmissionReader
    concurrency: int = 4

    async def assignments_for_grader(self, ta_id: str, assessment_id: str) -> list[Target]:
        """
        Every target `ta_id` grades in the assessment.

        Raises:
            NotFoundError: The assessment has no assignment set.
        """
        assignment_set = await self._require(assessment_id)
        return assignment_set.targets_for(ta_id)

    async def unmarked_for_grader(self, ta_id: str, assessment_id: str) -> list[Target]:
        """
        Targets of `ta_id` with no submission from them covering every member.

        Raises:
            NotFoundError: The assessment has no assignment set.
        """
        assignment_set = await self._require(assessment_id)
        targets = assignment_set.targets_for(ta_id)
        if not targets:
            return []
        submissions = await self.submissions.list_submissions(assessment_id, ta_id)
        return unmarked(targets, submissions)

    async def marking_progress(self, assessment_id: str) -> list[GraderProgress]:
        """
        Unmarked targets of every grader in the assessment.

        Graders appear in order of first assignment. Their submissions are
        fetched concurrently, at most `concurrency` at a time.

        Raises:
            NotFoundError: The assessment has no assignment set.
        """
        assignment_set = await self._require(assessment_id)

        async def progress(grader_id: str) -> GraderProgress:
            targets = assignment_set.targets_for(grader_id)
            submissions = await self.submissions.list_submissions(assessment_id, grader_id)
            return GraderProgress(
                grader_id=grader_id,
                assigned=len(targets),
                unmarked=unmarked(targets, submissions),
            )

        report = await gather_bounded(
            progress, assignment_set.grader_ids(), limit=self.concurrency
        )
        logger.bind(assessment_id=assessment_id).debug(
            "{} of {} grader(s) have unmarked targets",
            sum(1 for item in report if item.unmarked),
            len(report),
        )
        return report

    async def _require(self, assessment_id: str) -> AssignmentSet:
        assignment_set = await self.assignment_sets.find(assessment_id)
        if assignment_set is None:
            raise NotFoundError(f"Assignment set not found for assessment {assessment_id}")
        return assignment_set
