from __future__ import annotations

import pytest

from grading_allocation.assignment import AssignmentSet
from grading_allocation.config import Settings
from grading_allocation.result import Result
from grading_allocation.store import (
    DuplicateKeyError,
    MemoryAssignmentSetStore,
    StoreOperationError,
    build_stores,
    dump_documents,
)
from grading_allocation.target import TeamTarget

pytestmark = pytest.mark.anyio


def assignment_set(*graders: str) -> AssignmentSet:
    return AssignmentSet(
        assessment_id="a1",
        granularity="team",
        original_targets=[TeamTarget(id="t1", member_ids=["s1"])],
        assignments={"t1": list(graders)},
    )


async def test_reads_are_copies():
    store = MemoryAssignmentSetStore()
    await store.insert(assignment_set("ta-a"))

    found = await store.find("a1")
    assert found is not None
    found.assignments["t1"].append("ta-b")

    assert await store.find("a1") == assignment_set("ta-a")


async def test_insert_is_unique():
    store = MemoryAssignmentSetStore()
    await store.insert(assignment_set("ta-a"))

    with pytest.raises(DuplicateKeyError):
        await store.insert(assignment_set("ta-b"))


async def test_replace_requires_existing():
    with pytest.raises(StoreOperationError):
        await MemoryAssignmentSetStore().replace(assignment_set("ta-a"))


async def test_documents_survive_dump_and_load():
    stores = build_stores(Settings())
    await stores.assignment_sets.insert(assignment_set("ta-a"))
    row = Result(assessment_id="a1", student_id="s1")
    await stores.results.insert_many([row])

    restored = build_stores(Settings(), dump_documents(stores))

    assert await restored.assignment_sets.find("a1") == assignment_set("ta-a")
    assert await restored.results.get(row.id) == row
