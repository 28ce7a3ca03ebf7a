"""Clock abstraction so that "now" is always injected."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current local wall-clock time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Reads the real local wall clock (naive, no timezone)."""

    def now(self) -> datetime:
        return datetime.now()
