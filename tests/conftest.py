"""Shared fixtures: a hand-driven clock and a notifier that records notices."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from timegoal.core.notify import Notice


class StepClock:
    """A clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class RecordingNotifier:
    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)


@pytest.fixture()
def now() -> datetime:
    """2024-03-15 10:00:00 — March has 31 days."""
    return datetime(2024, 3, 15, 10, 0, 0)


@pytest.fixture()
def clock(now: datetime) -> StepClock:
    return StepClock(now)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
