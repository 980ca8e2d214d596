from __future__ import annotations

import uuid
from typing import Self

from pydantic import BaseModel, Field


class MarkEntry(BaseModel):
    """One grader's mark for a student. Unset until the grader submits."""

    grader_id: str
    submission_id: str | None = None
    score: float | None = None


class Result(BaseModel):
    """Per-student aggregation of marks for an assessment."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    assessment_id: str
    student_id: str
    marks: list[MarkEntry] = Field(default_factory=list)
    average_score: float = 0.0

    @property
    def key(self) -> tuple[str, str]:
        return (self.assessment_id, self.student_id)

    @classmethod
    def stub(cls, assessment_id: str, student_id: str, grader_ids: list[str]) -> Self:
        """A fresh row with one unset mark per responsible grader."""
        return cls(
            assessment_id=assessment_id,
            student_id=student_id,
            marks=[MarkEntry(grader_id=grader_id) for grader_id in grader_ids],
        )
