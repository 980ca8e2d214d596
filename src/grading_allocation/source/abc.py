from __future__ import annotations

from typing import Protocol

from .model import (
    AssessmentRecord,
    SubmissionRecord,
    TeamRecord,
    TeamSetRecord,
    UserRecord,
)


class TeamSetReader(Protocol):
    """Resolves team-sets and teams, including each team's current grader."""

    async def get_team_set(self, team_set_id: str) -> TeamSetRecord | None: ...

    async def get_team(self, team_id: str) -> TeamRecord | None: ...


class UserReader(Protocol):
    """Resolves graders, students and acting users."""

    async def get_user(self, user_id: str) -> UserRecord | None: ...


class AssessmentReader(Protocol):
    async def get_assessment(self, assessment_id: str) -> AssessmentRecord | None: ...


class SubmissionReader(Protocol):
    async def list_submissions(
        self, assessment_id: str, user_id: str
    ) -> list[SubmissionRecord]:
        """
        Submissions made by `user_id` on the given assessment.

        This is a plain lookup against the submission collaborator. It is not
        retried; callers bound it with their own request timeout.
        """
        ...


class Directory(TeamSetReader, UserReader, AssessmentReader, SubmissionReader, Protocol):
    """A collaborator implementing every reader at once."""
