from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from attrs import frozen

from grading_allocation.config import Settings

from .abc import AssignmentSetStore, ResultStore
from .memory import MemoryAssignmentSetStore, MemoryResultStore

ASSIGNMENT_SETS = "assignment_sets"
RESULTS = "results"


@frozen
class Stores:
    assignment_sets: AssignmentSetStore
    results: ResultStore


def build_stores(
    settings: Settings, documents: Mapping[str, Sequence[dict[str, Any]]] | None = None
) -> Stores:
    """
    Build the configured store backend.

    `documents` seeds the in-memory backend and is ignored by DynamoDB.
    """
    match settings.store_backend:
        case "memory":
            documents = documents or {}
            return Stores(
                assignment_sets=MemoryAssignmentSetStore.load(
                    documents.get(ASSIGNMENT_SETS, [])
                ),
                results=MemoryResultStore.load(documents.get(RESULTS, [])),
            )
        case "dynamodb":
            from .dynamodb import DynamoAssignmentSetStore, DynamoResultStore
            from .dynamodb.client import dynamodb_resource

            resource = dynamodb_resource(settings)
            return Stores(
                assignment_sets=DynamoAssignmentSetStore(
                    resource.Table(settings.assignment_set_table)
                ),
                results=DynamoResultStore(resource.Table(settings.result_table)),
            )
        case _:
            raise ValueError(f"Unsupported store backend: {settings.store_backend!r}")


def dump_documents(stores: Stores) -> dict[str, list[dict[str, Any]]]:
    """Raw documents of an in-memory backend, keyed by collection."""
    if not isinstance(stores.assignment_sets, MemoryAssignmentSetStore) or not isinstance(
        stores.results, MemoryResultStore
    ):
        raise TypeError("Only the in-memory backend can be dumped")
    return {
        ASSIGNMENT_SETS: stores.assignment_sets.dump(),
        RESULTS: stores.results.dump(),
    }
