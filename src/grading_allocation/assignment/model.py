from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Self

from pydantic import BaseModel, Field, model_validator

from grading_allocation.source import UserRecord
from grading_allocation.target import Granularity, Target, kind_for


class AssignmentEntry(BaseModel):
    """A target together with the graders responsible for it."""

    target: Target
    grader_ids: list[str] = Field(default_factory=list)


class AssignmentInput(BaseModel):
    """One item of an update payload: the new grader list of a target."""

    target_id: str
    grader_ids: list[str]


class AssignmentSet(BaseModel):
    """
    Allocation of graders to targets for one assessment.

    `assignments` is keyed by target id and always covers `original_targets`
    exactly. All targets share the kind dictated by `granularity`.
    """

    assessment_id: str
    granularity: Granularity
    original_targets: list[Target]
    assignments: dict[str, list[str]]

    @model_validator(mode="after")
    def _check_shape(self) -> Self:
        target_ids = [target.id for target in self.original_targets]
        if len(set(target_ids)) != len(target_ids):
            raise ValueError("original_targets contains duplicate target ids")
        if set(target_ids) != set(self.assignments):
            raise ValueError("assignments must cover original_targets exactly")
        kinds = {target.kind for target in self.original_targets}
        if len(kinds) > 1:
            raise ValueError("original_targets mixes team and student targets")
        return self

    @classmethod
    def from_entries(
        cls,
        assessment_id: str,
        granularity: Granularity,
        entries: Sequence[AssignmentEntry],
    ) -> Self:
        return cls(
            assessment_id=assessment_id,
            granularity=granularity,
            original_targets=[entry.target for entry in entries],
            assignments={entry.target.id: list(entry.grader_ids) for entry in entries},
        )

    @property
    def target_kind(self) -> str | None:
        """Kind of the stored targets, or None when the set is empty."""
        if not self.original_targets:
            return None
        return self.original_targets[0].kind

    def matches(self, granularity: Granularity) -> bool:
        """Whether the stored shape agrees with the given granularity."""
        if self.granularity != granularity:
            return False
        kind = self.target_kind
        return kind is None or kind == kind_for(granularity)

    def entries(self) -> Iterator[AssignmentEntry]:
        for target in self.original_targets:
            yield AssignmentEntry(target=target, grader_ids=self.assignments[target.id])

    def graders_for(self, target_id: str) -> list[str]:
        return list(self.assignments.get(target_id, []))

    def targets_for(self, grader_id: str) -> list[Target]:
        return [
            target
            for target in self.original_targets
            if grader_id in self.assignments[target.id]
        ]

    def grader_ids(self) -> list[str]:
        """Every grader in the set, in order of first appearance."""
        seen: dict[str, None] = {}
        for target in self.original_targets:
            seen.update(dict.fromkeys(self.assignments[target.id]))
        return list(seen)

    def student_ids(self) -> list[str]:
        """Every covered student, flattened from target membership."""
        seen: dict[str, None] = {}
        for target in self.original_targets:
            seen.update(dict.fromkeys(target.member_ids))
        return list(seen)

    def replace(self, updates: Mapping[str, Sequence[str]]) -> Self:
        """Copy of the set with the named targets' grader lists replaced."""
        assignments = {
            target_id: list(updates[target_id]) if target_id in updates else graders
            for target_id, graders in self.assignments.items()
        }
        return self.model_copy(update={"assignments": assignments})


class PopulatedAssignment(BaseModel):
    target: Target
    members: list[UserRecord]
    graders: list[UserRecord]


class PopulatedAssignmentSet(BaseModel):
    """An assignment set with members and graders resolved to user records."""

    assessment_id: str
    granularity: Granularity
    assignments: list[PopulatedAssignment]
