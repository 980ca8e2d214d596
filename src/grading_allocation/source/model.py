from __future__ import annotations

from typing import Annotated, Final, Literal

from pydantic import BaseModel, ConfigDict, Field

from grading_allocation.target import Granularity

TEAM_MEMBER_SELECTION: Final = "Team Member Selection Answer"


class UserRecord(BaseModel):
    id: str
    name: str = ""
    identifier: str | None = None


class TeamRecord(BaseModel):
    id: str
    number: int | None = None
    member_ids: list[str] = Field(default_factory=list)
    ta_id: str | None = None
    """Grader currently configured on the team, if any."""


class TeamSetRecord(BaseModel):
    id: str
    name: str = ""
    teams: list[TeamRecord] = Field(default_factory=list)


class AssessmentRecord(BaseModel):
    id: str
    name: str = ""
    granularity: Granularity
    is_released: bool = False
    team_set_id: str | None = None


class Answer(BaseModel):
    """An answer of a type this package does not inspect."""

    model_config = ConfigDict(extra="allow")

    type: str
    score: float | None = None


class TeamMemberSelectionAnswer(Answer):
    """Answer naming the students a grader evaluated in a submission."""

    type: Literal["Team Member Selection Answer"] = TEAM_MEMBER_SELECTION
    selected_user_ids: list[str] = Field(default_factory=list)


class SubmissionRecord(BaseModel):
    id: str
    assessment_id: str
    user_id: str
    answers: list[
        Annotated[
            TeamMemberSelectionAnswer | Answer, Field(union_mode="left_to_right")
        ]
    ] = Field(default_factory=list)

    def selections(self) -> list[set[str]]:
        """Selected-member sets of every team member selection answer."""
        return [
            set(answer.selected_user_ids)
            for answer in self.answers
            if isinstance(answer, TeamMemberSelectionAnswer)
        ]
