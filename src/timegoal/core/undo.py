"""Bounded undo history of TimeSpec snapshots."""

from __future__ import annotations

from collections import deque

from timegoal.core.timespec import TimeSpec

DEFAULT_CAPACITY = 3


class EmptyStackError(Exception):
    """Raised when there is no snapshot to restore."""


class UndoStack:
    """Most-recent-first snapshots; pushing past capacity drops the oldest."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._snapshots: deque[TimeSpec] = deque(maxlen=capacity)

    def push(self, spec: TimeSpec) -> None:
        self._snapshots.appendleft(spec)

    def pop(self) -> TimeSpec:
        """Remove and return the most recent snapshot."""
        if not self._snapshots:
            raise EmptyStackError("nothing to undo")
        return self._snapshots.popleft()

    def clear(self) -> None:
        self._snapshots.clear()

    def __len__(self) -> int:
        return len(self._snapshots)
