from __future__ import annotations

from typing import TYPE_CHECKING

from attrs import define
from loguru import logger

from grading_allocation.assignment.model import AssignmentSet
from grading_allocation.exceptions import BadRequestError, ConsistencyError, NotFoundError
from grading_allocation.source import AssessmentReader
from grading_allocation.store.exceptions import DuplicateKeyError

from .model import Result

if TYPE_CHECKING:
    from grading_allocation.store import AssignmentSetStore, ResultStore


def expected_graders(assignment_set: AssignmentSet) -> dict[str, list[str]]:
    """
    Map every covered student to the graders responsible for them.

    Team members inherit their team's graders. A student reachable through
    more than one target gets the ordered union of their graders.
    """
    expected: dict[str, dict[str, None]] = {}
    for entry in assignment_set.entries():
        for student_id in entry.target.member_ids:
            expected.setdefault(student_id, {}).update(dict.fromkeys(entry.grader_ids))
    return {student_id: list(graders) for student_id, graders in expected.items()}


@define
class ResultReconciler:
    """Keeps one result row per covered student of an assessment."""

    assignment_sets: AssignmentSetStore
    results: ResultStore
    assessments: AssessmentReader

    async def get_or_create(self, assessment_id: str) -> list[Result]:
        """
        Return the results of every covered student, creating missing rows.

        Missing rows are inserted as stubs with one unset mark per responsible
        grader and an average of 0. Existing rows are never modified, so
        repeated calls return the same rows.

        Raises:
            NotFoundError: The assessment or its assignment set does not exist.
            ConsistencyError: The set is keyed by teams while the assessment is
                individual, or the other way round.
            BadRequestError: The set covers no students.
        """
        log = logger.bind(assessment_id=assessment_id)

        assignment_set = await self.assignment_sets.find(assessment_id)
        if assignment_set is None:
            raise NotFoundError(f"Assignment set not found for assessment {assessment_id}")

        assessment = await self.assessments.get_assessment(assessment_id)
        if assessment is None:
            raise NotFoundError(f"Assessment {assessment_id} not found")

        if not assignment_set.matches(assessment.granularity):
            raise ConsistencyError(
                f"Assessment {assessment_id} has {assessment.granularity} granularity, "
                f"but its assignment set does not"
            )

        expected = expected_graders(assignment_set)
        if not expected:
            raise BadRequestError(f"No students covered by the assignment set of {assessment_id}")

        student_ids = list(expected)
        existing = await self.results.find_for_students(assessment_id, student_ids)
        present = {result.student_id for result in existing}

        stubs = [
            Result.stub(assessment_id, student_id, graders)
            for student_id, graders in expected.items()
            if student_id not in present
        ]
        if stubs:
            created = len(stubs)
            try:
                await self.results.insert_many(stubs)
            except DuplicateKeyError as exc:
                # a concurrent reconciliation created these rows first
                created -= len(exc.keys)
                log.debug("{} result row(s) already existed: {}", len(exc.keys), exc.keys)
            log.info("Created {} result stub(s)", created)
            existing = await self.results.find_for_students(assessment_id, student_ids)

        by_student = {result.student_id: result for result in existing}
        return [by_student[student_id] for student_id in student_ids if student_id in by_student]

    async def delete(self, assessment_id: str) -> int:
        """Remove every result of a deleted assessment."""
        removed = await self.results.delete_for_assessment(assessment_id)
        logger.bind(assessment_id=assessment_id).info("Deleted {} result(s)", removed)
        return removed
