from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from grading_allocation.assignment.model import AssignmentSet
from grading_allocation.result.model import Result


class AssignmentSetStore(ABC):
    """Assignment set documents, unique on `assessment_id`."""

    @abstractmethod
    async def find(self, assessment_id: str) -> AssignmentSet | None:
        """Return the set of an assessment, if any."""

    @abstractmethod
    async def insert(self, assignment_set: AssignmentSet) -> None:
        """
        Insert a new set.

        Raises:
            DuplicateKeyError: A set already exists for the assessment.
        """

    @abstractmethod
    async def replace(self, assignment_set: AssignmentSet) -> None:
        """Overwrite the stored set of the same assessment."""

    @abstractmethod
    async def delete(self, assessment_id: str) -> bool:
        """Delete the set of an assessment. Returns whether one existed."""


class ResultStore(ABC):
    """Result documents, unique on `(assessment_id, student_id)`."""

    @abstractmethod
    async def get(self, result_id: str) -> Result | None:
        """Return a result by id."""

    @abstractmethod
    async def find_for_students(
        self, assessment_id: str, student_ids: Sequence[str]
    ) -> list[Result]:
        """Return the existing results of the given students, in any order."""

    @abstractmethod
    async def insert_many(self, results: Sequence[Result]) -> None:
        """
        Insert results without stopping at the first conflict.

        Every row that does not collide is written.

        Raises:
            DuplicateKeyError: Some rows collided; `keys` lists their
                `(assessment_id, student_id)` pairs.
        """

    @abstractmethod
    async def replace(self, result: Result) -> None:
        """Overwrite a stored result."""

    @abstractmethod
    async def delete_for_assessment(self, assessment_id: str) -> int:
        """Delete every result of an assessment. Returns the number removed."""
