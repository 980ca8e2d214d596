from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import anyio
from pydantic import BaseModel, Field

from .model import (
    AssessmentRecord,
    SubmissionRecord,
    TeamRecord,
    TeamSetRecord,
    UserRecord,
)


class Snapshot(BaseModel):
    """
    Collaborator data captured in one document.

    Implements every reader protocol, so a snapshot can stand in for the
    team, user, assessment and submission services. `documents` holds the
    raw store collections for the in-memory backend and is left untouched by
    the readers.
    """

    users: list[UserRecord] = Field(default_factory=list)
    team_sets: list[TeamSetRecord] = Field(default_factory=list)
    assessments: list[AssessmentRecord] = Field(default_factory=list)
    submissions: list[SubmissionRecord] = Field(default_factory=list)
    documents: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)

    @classmethod
    async def load(cls, path: Path) -> Self:
        content = await anyio.Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(content)

    async def save(self, path: Path) -> None:
        await anyio.Path(path).write_text(
            self.model_dump_json(indent=2), encoding="utf-8"
        )

    async def get_team_set(self, team_set_id: str) -> TeamSetRecord | None:
        return next((ts for ts in self.team_sets if ts.id == team_set_id), None)

    async def get_team(self, team_id: str) -> TeamRecord | None:
        for team_set in self.team_sets:
            for team in team_set.teams:
                if team.id == team_id:
                    return team
        return None

    async def get_user(self, user_id: str) -> UserRecord | None:
        return next((user for user in self.users if user.id == user_id), None)

    async def get_assessment(self, assessment_id: str) -> AssessmentRecord | None:
        return next((a for a in self.assessments if a.id == assessment_id), None)

    async def list_submissions(
        self, assessment_id: str, user_id: str
    ) -> list[SubmissionRecord]:
        return [
            sub
            for sub in self.submissions
            if sub.assessment_id == assessment_id and sub.user_id == user_id
        ]
