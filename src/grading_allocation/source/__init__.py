from __future__ import annotations

from .abc import (
    AssessmentReader,
    Directory,
    SubmissionReader,
    TeamSetReader,
    UserReader,
)
from .model import (
    TEAM_MEMBER_SELECTION,
    Answer,
    AssessmentRecord,
    SubmissionRecord,
    TeamMemberSelectionAnswer,
    TeamRecord,
    TeamSetRecord,
    UserRecord,
)
from .snapshot import Snapshot

__all__ = [
    "TEAM_MEMBER_SELECTION",
    "Answer",
    "AssessmentReader",
    "AssessmentRecord",
    "Directory",
    "Snapshot",
    "SubmissionReader",
    "SubmissionRecord",
    "TeamMemberSelectionAnswer",
    "TeamRecord",
    "TeamSetReader",
    "TeamSetRecord",
    "UserReader",
    "UserRecord",
]
