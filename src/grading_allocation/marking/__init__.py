from __future__ import annotations

from .query import GraderProgress, UnmarkedQuery, is_marked, unmarked

__all__ = [
    "GraderProgress",
    "UnmarkedQuery",
    "is_marked",
    "unmarked",
]
