from __future__ import annotations

from collections.abc import Sequence


class StoreError(Exception):
    """Base exception for the store module."""


class DuplicateKeyError(StoreError):
    """Raised when a write violates a unique index."""

    def __init__(self, keys: Sequence[object]) -> None:
        self.keys = list(keys)
        super().__init__(f"Duplicate key(s): {', '.join(map(str, self.keys))}")


class StoreOperationError(StoreError):
    """Raised when the backing store rejects an operation."""
