from __future__ import annotations


class AllocationError(Exception):
    """Base exception for grading allocation operations."""


class NotFoundError(AllocationError):
    """Raised when an assessment, assignment set, team, user or result is missing."""


class BadRequestError(AllocationError):
    """Raised when a request violates an allocation invariant."""


class ConsistencyError(AllocationError):
    """Raised when a stored assignment set disagrees with its assessment's granularity."""
