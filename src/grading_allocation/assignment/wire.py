from __future__ import annotations

from typing import Any

from grading_allocation.target import Granularity, StudentTarget, TeamTarget

from .model import AssignmentSet


def to_wire(assignment_set: AssignmentSet) -> dict[str, Any]:
    """
    Serialize to the historical two-array document.

    Exactly one of `assignedTeams` and `assignedUsers` is a list; the other
    is null. `originalTeams` lists team ids, taken from the targets
    themselves or from the team each student was flattened from.
    """
    assigned = [
        {
            "team" if entry.target.kind == "team" else "user": entry.target.id,
            "tas": list(entry.grader_ids),
        }
        for entry in assignment_set.entries()
    ]
    team_ids: dict[str, None] = {}
    for target in assignment_set.original_targets:
        match target:
            case TeamTarget():
                team_ids[target.id] = None
            case StudentTarget(team_id=str() as team_id):
                team_ids[team_id] = None

    is_team = assignment_set.granularity == "team"
    return {
        "assessment": assignment_set.assessment_id,
        "originalTeams": list(team_ids),
        "assignedTeams": assigned if is_team else None,
        "assignedUsers": None if is_team else assigned,
    }


def from_wire(
    document: dict[str, Any], team_members: dict[str, list[str]] | None = None
) -> AssignmentSet:
    """
    Parse the historical two-array document.

    The wire shape does not carry team membership; pass `team_members` to
    restore it for team targets.
    """
    team_members = team_members or {}
    assigned_teams = document.get("assignedTeams")
    assigned_users = document.get("assignedUsers")

    granularity: Granularity
    if assigned_teams is not None and not assigned_users:
        granularity = "team"
        targets = [
            TeamTarget(id=str(item["team"]), member_ids=team_members.get(str(item["team"]), []))
            for item in assigned_teams
        ]
        items = assigned_teams
    elif assigned_users is not None and not assigned_teams:
        granularity = "individual"
        targets = [StudentTarget(id=str(item["user"])) for item in assigned_users]
        items = assigned_users
    else:
        raise ValueError("Document must carry exactly one of assignedTeams and assignedUsers")

    return AssignmentSet(
        assessment_id=str(document["assessment"]),
        granularity=granularity,
        original_targets=targets,
        assignments={
            target.id: [str(ta) for ta in item.get("tas", [])]
            for target, item in zip(targets, items, strict=True)
        },
    )
