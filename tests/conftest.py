from __future__ import annotations

import pytest

from grading_allocation import GradingService, Settings, Snapshot
from grading_allocation.source import (
    AssessmentRecord,
    TeamRecord,
    TeamSetRecord,
    UserRecord,
)
from grading_allocation.store import MemoryAssignmentSetStore, MemoryResultStore, Stores


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def make_snapshot() -> Snapshot:
    users = [
        UserRecord(id=user_id, name=user_id.upper())
        for user_id in ("ta-a", "ta-b", "ta-c", "lecturer", "s1", "s2", "s3", "s4", "s5", "s6")
    ]
    return Snapshot(
        users=users,
        team_sets=[
            TeamSetRecord(
                id="ts-1",
                name="Project groups",
                teams=[
                    TeamRecord(id="t1", number=1, member_ids=["s1", "s2"], ta_id="ta-a"),
                    TeamRecord(id="t2", number=2, member_ids=["s3", "s4"]),
                    TeamRecord(id="t3", number=3, member_ids=["s5", "s6"]),
                ],
            ),
            TeamSetRecord(
                id="ts-mixed",
                teams=[
                    TeamRecord(id="m1", member_ids=["s1", "s2"], ta_id="ta-b"),
                    TeamRecord(id="m2", member_ids=["s3"], ta_id="ta-a"),
                    TeamRecord(id="m3", member_ids=["s4"]),
                ],
            ),
            TeamSetRecord(
                id="ts-unstaffed",
                teams=[
                    TeamRecord(id="u1", member_ids=["s5", "s6"]),
                    TeamRecord(id="u2", member_ids=["s3", "s4"]),
                ],
            ),
            TeamSetRecord(
                id="ts-overlap",
                teams=[
                    TeamRecord(id="o1", member_ids=["s1", "s2"], ta_id="ta-a"),
                    TeamRecord(id="o2", member_ids=["s2", "s3"], ta_id="ta-b"),
                ],
            ),
            TeamSetRecord(id="ts-empty"),
        ],
        assessments=[
            AssessmentRecord(id="team-asmt", granularity="team", team_set_id="ts-1"),
            AssessmentRecord(id="indiv-asmt", granularity="individual", team_set_id="ts-1"),
            AssessmentRecord(id="released-asmt", granularity="team", is_released=True),
            AssessmentRecord(id="bare-asmt", granularity="team"),
        ],
    )


@pytest.fixture
def snapshot() -> Snapshot:
    return make_snapshot()


@pytest.fixture
def stores() -> Stores:
    return Stores(assignment_sets=MemoryAssignmentSetStore(), results=MemoryResultStore())


@pytest.fixture
def service(snapshot: Snapshot, stores: Stores) -> GradingService:
    return GradingService(directory=snapshot, stores=stores, settings=Settings())
