from __future__ import annotations

import anyio
import pytest

from grading_allocation import GradingService
from grading_allocation.assignment import AssignmentInput
from grading_allocation.exceptions import BadRequestError, NotFoundError
from grading_allocation.store import Stores
from grading_allocation.target import StudentTarget, TeamTarget

pytestmark = pytest.mark.anyio


class TestCreate:
    async def test_team_assessment(self, service: GradingService):
        assignment_set = await service.create("team-asmt")

        assert assignment_set.granularity == "team"
        assert [t.id for t in assignment_set.original_targets] == ["t1", "t2", "t3"]
        assert all(isinstance(t, TeamTarget) for t in assignment_set.original_targets)
        assert assignment_set.assignments == {"t1": ["ta-a"], "t2": ["ta-a"], "t3": ["ta-a"]}

    async def test_individual_assessment_flattens_members(self, service: GradingService):
        assignment_set = await service.create("indiv-asmt")

        targets = assignment_set.original_targets
        assert [t.id for t in targets] == ["s1", "s2", "s3", "s4", "s5", "s6"]
        assert all(isinstance(t, StudentTarget) for t in targets)
        assert targets[2].team_id == "t2"
        assert set(assignment_set.grader_ids()) == {"ta-a"}

    async def test_backfill_uses_first_assigned_grader(self, service: GradingService):
        assignment_set = await service.create("team-asmt", "ts-mixed")

        assert assignment_set.assignments == {"m1": ["ta-b"], "m2": ["ta-a"], "m3": ["ta-b"]}

    async def test_unstaffed_team_set_leaves_gap(self, service: GradingService):
        assignment_set = await service.create("team-asmt", "ts-unstaffed")

        assert assignment_set.assignments == {"u1": [], "u2": []}

    async def test_student_in_several_teams_gets_one_target(self, service: GradingService):
        assignment_set = await service.create("indiv-asmt", "ts-overlap")

        targets = assignment_set.original_targets
        assert [t.id for t in targets] == ["s1", "s2", "s3"]
        assert targets[1] == StudentTarget(id="s2", team_id="o1")
        assert assignment_set.assignments == {
            "s1": ["ta-a"],
            "s2": ["ta-a", "ta-b"],
            "s3": ["ta-b"],
        }

    async def test_is_persisted(self, service: GradingService, stores: Stores):
        created = await service.create("team-asmt")

        assert await stores.assignment_sets.find("team-asmt") == created

    async def test_second_create_fails(self, service: GradingService, stores: Stores):
        first = await service.create("team-asmt")

        with pytest.raises(BadRequestError, match="already exists"):
            await service.create("team-asmt", "ts-mixed")

        assert await stores.assignment_sets.find("team-asmt") == first

    async def test_concurrent_creates(self, service: GradingService, stores: Stores):
        outcomes: list[str] = []

        async def attempt() -> None:
            try:
                await service.create("team-asmt")
            except BadRequestError:
                outcomes.append("rejected")
            else:
                outcomes.append("created")

        async with anyio.create_task_group() as tg:
            for _ in range(4):
                tg.start_soon(attempt)

        assert sorted(outcomes) == ["created", "rejected", "rejected", "rejected"]
        assert await stores.assignment_sets.find("team-asmt") is not None

    async def test_unknown_assessment(self, service: GradingService):
        with pytest.raises(NotFoundError):
            await service.create("nope")

    async def test_unknown_team_set(self, service: GradingService):
        with pytest.raises(NotFoundError):
            await service.create("team-asmt", "ts-missing")

    async def test_assessment_without_team_set(self, service: GradingService):
        with pytest.raises(NotFoundError):
            await service.create("bare-asmt")


class TestGet:
    async def test_resolves_users(self, service: GradingService):
        await service.create("team-asmt")

        populated = await service.get("team-asmt")

        first = populated.assignments[0]
        assert first.target.id == "t1"
        assert [member.name for member in first.members] == ["S1", "S2"]
        assert [grader.id for grader in first.graders] == ["ta-a"]

    async def test_missing_set(self, service: GradingService):
        with pytest.raises(NotFoundError):
            await service.get("team-asmt")


class TestUpdate:
    async def test_replaces_named_targets_only(self, service: GradingService, stores: Stores):
        await service.create("team-asmt")

        updated = await service.update(
            "lecturer",
            "team-asmt",
            [AssignmentInput(target_id="t2", grader_ids=["ta-b", "ta-c", "ta-b"])],
        )

        assert updated.assignments == {"t1": ["ta-a"], "t2": ["ta-b", "ta-c"], "t3": ["ta-a"]}
        assert await stores.assignment_sets.find("team-asmt") == updated

    async def test_creates_set_when_absent(self, service: GradingService):
        created = await service.update(
            "lecturer",
            "team-asmt",
            [AssignmentInput(target_id="t3", grader_ids=["ta-c"])],
        )

        assert created.original_targets == [TeamTarget(id="t3", member_ids=["s5", "s6"])]
        assert created.assignments == {"t3": ["ta-c"]}

    async def test_creates_individual_set_when_absent(self, service: GradingService):
        created = await service.update(
            "lecturer",
            "indiv-asmt",
            [AssignmentInput(target_id="s4", grader_ids=["ta-b"])],
        )

        assert created.original_targets == [StudentTarget(id="s4")]

    async def test_empty_payload_without_set(self, service: GradingService):
        with pytest.raises(BadRequestError):
            await service.update("lecturer", "team-asmt", [])

    async def test_unknown_actor(self, service: GradingService):
        await service.create("team-asmt")

        with pytest.raises(NotFoundError, match="User ghost"):
            await service.update(
                "ghost", "team-asmt", [AssignmentInput(target_id="t1", grader_ids=["ta-b"])]
            )

    async def test_released_assessment_is_locked(self, service: GradingService):
        with pytest.raises(BadRequestError, match="released"):
            await service.update(
                "lecturer",
                "released-asmt",
                [AssignmentInput(target_id="t1", grader_ids=["ta-b"])],
            )

    async def test_released_assessment_rejects_any_payload(
        self, service: GradingService, stores: Stores
    ):
        before = await service.create("released-asmt", "ts-1")

        with pytest.raises(BadRequestError, match="released"):
            await service.update(
                "lecturer",
                "released-asmt",
                [
                    AssignmentInput(target_id="t1", grader_ids=[]),
                    AssignmentInput(target_id="t2", grader_ids=["ta-z"]),
                ],
            )

        assert await stores.assignment_sets.find("released-asmt") == before

    async def test_target_outside_set(self, service: GradingService):
        await service.create("team-asmt", "ts-mixed")

        with pytest.raises(NotFoundError):
            await service.update(
                "lecturer", "team-asmt", [AssignmentInput(target_id="t1", grader_ids=["ta-b"])]
            )

    async def test_unknown_grader(self, service: GradingService, stores: Stores):
        before = await service.create("team-asmt")

        with pytest.raises(NotFoundError, match="TA ta-z"):
            await service.update(
                "lecturer",
                "team-asmt",
                [
                    AssignmentInput(target_id="t1", grader_ids=["ta-b"]),
                    AssignmentInput(target_id="t2", grader_ids=["ta-z"]),
                ],
            )

        assert await stores.assignment_sets.find("team-asmt") == before

    async def test_empty_grader_list(self, service: GradingService, stores: Stores):
        before = await service.create("team-asmt")

        with pytest.raises(BadRequestError, match="at least one grader"):
            await service.update(
                "lecturer",
                "team-asmt",
                [
                    AssignmentInput(target_id="t1", grader_ids=["ta-c"]),
                    AssignmentInput(target_id="t2", grader_ids=[]),
                ],
            )

        assert await stores.assignment_sets.find("team-asmt") == before


    async def test_unnamed_empty_targets_block_update(
        self, service: GradingService, stores: Stores
    ):
        before = await service.create("team-asmt", "ts-unstaffed")

        with pytest.raises(BadRequestError, match="u2"):
            await service.update(
                "lecturer", "team-asmt", [AssignmentInput(target_id="u1", grader_ids=["ta-a"])]
            )

        assert await stores.assignment_sets.find("team-asmt") == before

    async def test_naming_every_empty_target_succeeds(self, service: GradingService):
        await service.create("team-asmt", "ts-unstaffed")

        updated = await service.update(
            "lecturer",
            "team-asmt",
            [
                AssignmentInput(target_id="u1", grader_ids=["ta-a"]),
                AssignmentInput(target_id="u2", grader_ids=["ta-b"]),
            ],
        )

        assert updated.assignments == {"u1": ["ta-a"], "u2": ["ta-b"]}

class TestDelete:
    async def test_removes_set_and_results(self, service: GradingService, stores: Stores):
        await service.create("team-asmt")
        await service.get_or_create_results("team-asmt")

        await service.delete_assessment("team-asmt")

        assert await stores.assignment_sets.find("team-asmt") is None
        assert await stores.results.find_for_students("team-asmt", ["s1", "s2"]) == []
