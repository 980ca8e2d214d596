from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from attrs import define
from loguru import logger

from grading_allocation.exceptions import BadRequestError, NotFoundError
from grading_allocation.source import (
    AssessmentReader,
    AssessmentRecord,
    TeamSetReader,
    TeamSetRecord,
    UserReader,
    UserRecord,
)
from grading_allocation.store.exceptions import DuplicateKeyError
from grading_allocation.target import StudentTarget, Target, TeamTarget

from .backfill import fill_missing
from .model import (
    AssignmentEntry,
    AssignmentInput,
    AssignmentSet,
    PopulatedAssignment,
    PopulatedAssignmentSet,
)

if TYPE_CHECKING:
    from grading_allocation.store import AssignmentSetStore


def targets_from_team_set(
    assessment: AssessmentRecord, team_set: TeamSetRecord
) -> list[AssignmentEntry]:
    """
    Seed one entry per team, or per student, with the team's configured grader.

    A student listed in several teams of an individual assessment gets a single
    entry holding the ordered union of those teams' graders; `team_id` records
    the first of them.
    """
    entries: dict[str, AssignmentEntry] = {}
    for team in team_set.teams:
        graders = [team.ta_id] if team.ta_id else []
        match assessment.granularity:
            case "team":
                target = TeamTarget(id=team.id, member_ids=list(team.member_ids))
                entries[team.id] = AssignmentEntry(target=target, grader_ids=graders)
            case "individual":
                for member_id in team.member_ids:
                    entry = entries.setdefault(
                        member_id,
                        AssignmentEntry(target=StudentTarget(id=member_id, team_id=team.id)),
                    )
                    entry.grader_ids = list(dict.fromkeys([*entry.grader_ids, *graders]))
    return list(entries.values())


@define
class AssignmentSetManager:
    """Creates, reads and updates the grader allocation of assessments."""

    store: AssignmentSetStore
    assessments: AssessmentReader
    team_sets: TeamSetReader
    users: UserReader

    async def create(
        self, assessment_id: str, team_set_id: str | None = None
    ) -> AssignmentSet:
        """
        Create the assignment set of an assessment from a team-set.

        Every team (or every member, for individual assessments) starts with
        its team's configured grader; targets left without one are backfilled
        from the graders already present.

        Args:
            assessment_id: The assessment to allocate.
            team_set_id: Team-set to build targets from. Defaults to the
                assessment's configured team-set.

        Raises:
            NotFoundError: The assessment or the team-set does not exist.
            BadRequestError: The assessment already has an assignment set.
        """
        log = logger.bind(assessment_id=assessment_id)
        assessment = await self._require_assessment(assessment_id)

        if await self.store.find(assessment_id) is not None:
            raise BadRequestError(
                f"Assignment set already exists for assessment {assessment_id}"
            )

        team_set_id = team_set_id or assessment.team_set_id
        team_set = await self.team_sets.get_team_set(team_set_id) if team_set_id else None
        if team_set is None:
            raise NotFoundError(f"Team set {team_set_id} not found")

        entries = fill_missing(targets_from_team_set(assessment, team_set))
        assignment_set = AssignmentSet.from_entries(
            assessment_id, assessment.granularity, entries
        )
        await self._insert(assignment_set)

        orphans = sum(1 for entry in entries if not entry.grader_ids)
        log.info(
            "Created assignment set with {} {} target(s) from team set {}",
            len(entries),
            assessment.granularity,
            team_set.id,
        )
        if orphans:
            log.warning("{} target(s) have no grader: team set has no TAs", orphans)
        return assignment_set

    async def get(self, assessment_id: str) -> PopulatedAssignmentSet:
        """
        Return the assignment set with members and graders resolved.

        Raises:
            NotFoundError: No set exists, or a referenced user is missing.
        """
        assignment_set = await self.require(assessment_id)
        cache: dict[str, UserRecord] = {}

        assignments = [
            PopulatedAssignment(
                target=entry.target,
                members=await self._resolve_users(entry.target.member_ids, cache),
                graders=await self._resolve_users(entry.grader_ids, cache),
            )
            for entry in assignment_set.entries()
        ]
        return PopulatedAssignmentSet(
            assessment_id=assignment_set.assessment_id,
            granularity=assignment_set.granularity,
            assignments=assignments,
        )

    async def require(self, assessment_id: str) -> AssignmentSet:
        """Return the stored set, raising `NotFoundError` when absent."""
        assignment_set = await self.store.find(assessment_id)
        if assignment_set is None:
            raise NotFoundError(f"Assignment set not found for assessment {assessment_id}")
        return assignment_set

    async def update(
        self,
        actor_id: str,
        assessment_id: str,
        assignments: Sequence[AssignmentInput],
    ) -> AssignmentSet:
        """
        Replace the grader lists of the targets named in `assignments`.

        Targets that are not named keep their current graders. When the
        assessment has no set yet, one is created from the payload alone,
        without backfilling. Nothing is written unless every check passes.

        Raises:
            NotFoundError: The actor, the assessment, a target or a grader
                does not exist.
            BadRequestError: The assessment is released, or some target of the
                resulting set, named or not, would be left without graders.
        """
        log = logger.bind(assessment_id=assessment_id)

        if await self.users.get_user(actor_id) is None:
            raise NotFoundError(f"User {actor_id} not found")

        assessment = await self._require_assessment(assessment_id)
        if assessment.is_released:
            raise BadRequestError(
                f"Assessment {assessment_id} is released; assignments are locked"
            )

        updates = {item.target_id: list(dict.fromkeys(item.grader_ids)) for item in assignments}
        existing = await self.store.find(assessment_id)

        if existing is None:
            if not updates:
                raise BadRequestError(
                    f"No assignments supplied to create the set of assessment {assessment_id}"
                )
            targets = [
                await self._resolve_target(assessment, target_id) for target_id in updates
            ]
        else:
            known = {target.id for target in existing.original_targets}
            missing = [target_id for target_id in updates if target_id not in known]
            if missing:
                raise NotFoundError(
                    f"Target(s) {', '.join(missing)} not part of the assignment set"
                )
            targets = []

        await self._require_graders(updates)

        if existing is None:
            assignment_set = AssignmentSet.from_entries(
                assessment_id,
                assessment.granularity,
                [
                    AssignmentEntry(target=target, grader_ids=updates[target.id])
                    for target in targets
                ],
            )
        else:
            assignment_set = existing.replace(updates)

        # covers unnamed targets left empty at creation
        empty = [
            target_id for target_id, graders in assignment_set.assignments.items() if not graders
        ]
        if empty:
            raise BadRequestError(
                f"Each target must have at least one grader assigned: {', '.join(empty)}"
            )

        if existing is None:
            await self._insert(assignment_set)
            log.info(
                "Created assignment set from update by {} with {} target(s)",
                actor_id,
                len(targets),
            )
            return assignment_set

        await self.store.replace(assignment_set)
        log.info("Updated graders of {} target(s) by {}", len(updates), actor_id)
        return assignment_set

    async def delete(self, assessment_id: str) -> bool:
        """Remove the set of a deleted assessment."""
        removed = await self.store.delete(assessment_id)
        if removed:
            logger.bind(assessment_id=assessment_id).info("Deleted assignment set")
        return removed

    async def _insert(self, assignment_set: AssignmentSet) -> None:
        try:
            await self.store.insert(assignment_set)
        except DuplicateKeyError as exc:
            raise BadRequestError(
                f"Assignment set already exists for assessment {assignment_set.assessment_id}"
            ) from exc

    async def _require_assessment(self, assessment_id: str) -> AssessmentRecord:
        assessment = await self.assessments.get_assessment(assessment_id)
        if assessment is None:
            raise NotFoundError(f"Assessment {assessment_id} not found")
        return assessment

    async def _resolve_target(self, assessment: AssessmentRecord, target_id: str) -> Target:
        match assessment.granularity:
            case "team":
                team = await self.team_sets.get_team(target_id)
                if team is None:
                    raise NotFoundError(f"Team {target_id} not found")
                return TeamTarget(id=team.id, member_ids=list(team.member_ids))
            case "individual":
                if await self.users.get_user(target_id) is None:
                    raise NotFoundError(f"User {target_id} not found")
                return StudentTarget(id=target_id)

    async def _require_graders(self, updates: dict[str, list[str]]) -> None:
        checked: set[str] = set()
        for graders in updates.values():
            for grader_id in graders:
                if grader_id in checked:
                    continue
                if await self.users.get_user(grader_id) is None:
                    raise NotFoundError(f"TA {grader_id} not found")
                checked.add(grader_id)

    async def _resolve_users(
        self, user_ids: Sequence[str], cache: dict[str, UserRecord]
    ) -> list[UserRecord]:
        users: list[UserRecord] = []
        for user_id in user_ids:
            if user_id not in cache:
                user = await self.users.get_user(user_id)
                if user is None:
                    raise NotFoundError(f"User {user_id} not found")
                cache[user_id] = user
            users.append(cache[user_id])
        return users
