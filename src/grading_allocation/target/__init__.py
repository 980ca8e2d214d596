from __future__ import annotations

from .model import Granularity, StudentTarget, Target, TeamTarget, kind_for

__all__ = [
    "Granularity",
    "StudentTarget",
    "Target",
    "TeamTarget",
    "kind_for",
]
