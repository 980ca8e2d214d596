from __future__ import annotations

from .impl import DynamoAssignmentSetStore, DynamoResultStore

__all__ = ["DynamoAssignmentSetStore", "DynamoResultStore"]
