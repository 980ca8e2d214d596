from __future__ import annotations

from .impl import MemoryAssignmentSetStore, MemoryResultStore

__all__ = ["MemoryAssignmentSetStore", "MemoryResultStore"]
