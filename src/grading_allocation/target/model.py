from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

Granularity = Literal["team", "individual"]


class TeamTarget(BaseModel):
    """A team graded as a whole."""

    kind: Literal["team"] = "team"
    id: str
    member_ids: list[str] = Field(default_factory=list)


class StudentTarget(BaseModel):
    """A single student graded individually."""

    kind: Literal["student"] = "student"
    id: str
    team_id: str | None = None
    """Team the student was flattened from, if known."""

    @property
    def member_ids(self) -> list[str]:
        return [self.id]


Target = Annotated[TeamTarget | StudentTarget, Field(discriminator="kind")]


def kind_for(granularity: Granularity) -> Literal["team", "student"]:
    """Target kind an assessment of the given granularity is graded by."""
    match granularity:
        case "team":
            return "team"
        case "individual":
            return "student"
        case _:
            raise ValueError(f"Unknown granularity: {granularity!r}")
