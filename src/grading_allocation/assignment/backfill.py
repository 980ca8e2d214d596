from __future__ import annotations

from collections.abc import Sequence

from .model import AssignmentEntry


def grader_pool(entries: Sequence[AssignmentEntry]) -> list[str]:
    """Ordered union of every grader already assigned among `entries`."""
    pool: dict[str, None] = {}
    for entry in entries:
        pool.update(dict.fromkeys(entry.grader_ids))
    return list(pool)


def fill_missing(entries: Sequence[AssignmentEntry]) -> list[AssignmentEntry]:
    """
    Give every entry without a grader the first grader of the pool.

    The pool is built from the graders already present, in target order, so
    the outcome is deterministic and one grader may cover several orphaned
    targets. When nobody is assigned anywhere the entries are returned as they
    are; creation tolerates that gap.

    Args:
        entries: Targets with their seeded grader lists.

    Returns:
        New entries; the input is not modified.
    """
    pool = grader_pool(entries)
    if not pool:
        return [entry.model_copy() for entry in entries]

    return [
        entry.model_copy(update={"grader_ids": list(entry.grader_ids or pool[:1])})
        for entry in entries
    ]
