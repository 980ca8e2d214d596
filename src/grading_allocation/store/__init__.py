from __future__ import annotations

from .abc import AssignmentSetStore, ResultStore
from .exceptions import DuplicateKeyError, StoreError, StoreOperationError
from .factory import Stores, build_stores, dump_documents
from .memory import MemoryAssignmentSetStore, MemoryResultStore

__all__ = [
    "AssignmentSetStore",
    "DuplicateKeyError",
    "MemoryAssignmentSetStore",
    "MemoryResultStore",
    "ResultStore",
    "StoreError",
    "StoreOperationError",
    "Stores",
    "build_stores",
    "dump_documents",
]
