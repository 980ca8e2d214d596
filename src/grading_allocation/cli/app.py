from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated

import anyio
from cyclopts import App, Parameter
from pydantic import TypeAdapter
from pydantic_core import to_json

from grading_allocation.assignment import AssignmentInput
from grading_allocation.config import Settings
from grading_allocation.exceptions import AllocationError
from grading_allocation.logging import setup_logging
from grading_allocation.service import GradingService
from grading_allocation.source import Snapshot
from grading_allocation.store import build_stores, dump_documents

app = App(
    name="grading-allocation",
    help="Allocate graders to assessment targets and reconcile results.",
)

SnapshotPath = Annotated[Path, Parameter(name=["--snapshot", "-s"])]

_payload_adapter = TypeAdapter(list[AssignmentInput])


@asynccontextmanager
async def _session(snapshot: Path, *, write: bool = False) -> AsyncGenerator[GradingService]:
    """
    Open a service over a snapshot file.

    With the in-memory backend, stored documents are read from the snapshot
    and written back to it when `write` is set and the command succeeds.
    """
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    data = await Snapshot.load(snapshot)
    stores = build_stores(settings, data.documents)
    service = GradingService(directory=data, stores=stores, settings=settings)

    try:
        yield service
    except AllocationError as exc:
        raise SystemExit(f"{type(exc).__name__}: {exc}") from exc

    if write and settings.store_backend == "memory":
        data.documents = dump_documents(stores)
        await data.save(snapshot)


def _emit(value: object) -> None:
    print(to_json(value, indent=2).decode())


@app.command
async def create(assessment_id: str, *, snapshot: SnapshotPath, team_set: str | None = None) -> None:
    """Create the assignment set of an assessment from a team-set."""
    async with _session(snapshot, write=True) as service:
        _emit(await service.create(assessment_id, team_set))


@app.command
async def show(assessment_id: str, *, snapshot: SnapshotPath) -> None:
    """Show an assignment set with members and graders resolved."""
    async with _session(snapshot) as service:
        _emit(await service.get(assessment_id))


@app.command
async def update(
    assessment_id: str, payload: Path, *, snapshot: SnapshotPath, actor: str
) -> None:
    """Replace grader lists from a JSON payload of {target_id, grader_ids} items."""
    assignments = _payload_adapter.validate_json(
        await anyio.Path(payload).read_text(encoding="utf-8")
    )
    async with _session(snapshot, write=True) as service:
        _emit(await service.update(actor, assessment_id, assignments))


@app.command
async def results(assessment_id: str, *, snapshot: SnapshotPath) -> None:
    """List the results of an assessment, creating missing rows."""
    async with _session(snapshot, write=True) as service:
        _emit(await service.get_or_create_results(assessment_id))


@app.command
async def recalculate(result_id: str, *, snapshot: SnapshotPath) -> None:
    """Recompute the average score of a result."""
    async with _session(snapshot, write=True) as service:
        await service.recalculate(result_id)


@app.command
async def assigned(assessment_id: str, ta: str, *, snapshot: SnapshotPath) -> None:
    """List the targets a grader is responsible for."""
    async with _session(snapshot) as service:
        _emit(await service.assignments_for_grader(ta, assessment_id))


@app.command
async def unmarked(assessment_id: str, ta: str, *, snapshot: SnapshotPath) -> None:
    """List the targets a grader has not marked yet."""
    async with _session(snapshot) as service:
        _emit(await service.unmarked_for_grader(ta, assessment_id))


@app.command
async def progress(assessment_id: str, *, snapshot: SnapshotPath) -> None:
    """Show the unmarked targets of every grader."""
    async with _session(snapshot) as service:
        _emit(await service.marking_progress(assessment_id))
