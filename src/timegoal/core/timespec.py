"""TimeSpec — the dual duration/deadline value and its conversions.

A ``TimeSpec`` holds three bounded integer fields plus a mode flag.  In
DURATION mode the fields are an offset from "now"; in DEADLINE mode they
are a day/hour/minute inside the current month.  Every function here takes
``now`` explicitly and never reads the clock itself.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum

from timegoal.core.notify import Notice

MAX_HOURS = 23
MAX_MINUTES = 59


class Mode(Enum):
    """How the three fields of a TimeSpec are interpreted."""

    DURATION = "duration"
    DEADLINE = "deadline"


class Field(Enum):
    """The editable fields, slowest-changing first."""

    DAYS = "days"
    HOURS = "hours"
    MINUTES = "minutes"


class InvalidDateError(Exception):
    """Raised when a day/hour/minute triple does not exist in the current month."""


class InvalidInputError(ValueError):
    """Raised when raw field text is not a non-negative whole number."""


@dataclass(frozen=True)
class TimeSpec:
    """Immutable day/hour/minute triple tagged with a :class:`Mode`."""

    mode: Mode = Mode.DURATION
    days: int = 0
    hours: int = 0
    minutes: int = 0

    def __post_init__(self) -> None:
        if self.days < 0:
            raise ValueError(f"days must not be negative, got {self.days}")
        if not (0 <= self.hours <= MAX_HOURS):
            raise ValueError(f"hours must be between 0 and {MAX_HOURS}, got {self.hours}")
        if not (0 <= self.minutes <= MAX_MINUTES):
            raise ValueError(f"minutes must be between 0 and {MAX_MINUTES}, got {self.minutes}")

    def get(self, field: Field) -> int:
        return getattr(self, field.value)

    def is_zero(self) -> bool:
        return self.days == 0 and self.hours == 0 and self.minutes == 0


@dataclass(frozen=True)
class StepResult:
    """A new TimeSpec plus the notices raised while producing it."""

    spec: TimeSpec
    notices: tuple[Notice, ...] = ()


def last_day_of_month(now: datetime) -> int:
    """Return the number of days in *now*'s month."""
    return calendar.monthrange(now.year, now.month)[1]


def parse_field(raw: str | None) -> int:
    """Normalize raw field text: blank means 0, anything else must be a whole number."""
    if raw is None or not raw.strip():
        return 0
    text = raw.strip()
    if not text.isdecimal():
        raise InvalidInputError(f"expected a non-negative whole number, got {raw!r}")
    return int(text)


def to_absolute_end(spec: TimeSpec, now: datetime) -> datetime:
    """Return the absolute instant described by *spec* relative to *now*."""
    if spec.mode is Mode.DURATION:
        return now + timedelta(days=spec.days, hours=spec.hours, minutes=spec.minutes)
    try:
        return now.replace(
            day=spec.days, hour=spec.hours, minute=spec.minutes, second=0, microsecond=0
        )
    except ValueError as exc:
        raise InvalidDateError(
            f"day {spec.days} does not exist in {now.year}-{now.month:02d}"
        ) from exc


def from_absolute_end(end: datetime, now: datetime, mode: Mode) -> TimeSpec:
    """Break *end* back down into the fields of *mode*.

    In DURATION mode the result is ``end - now`` floor-truncated to whole
    minutes, or all zeros when *end* is not after *now*.
    """
    if mode is Mode.DEADLINE:
        return TimeSpec(Mode.DEADLINE, end.day, end.hour, end.minute)
    delta = end - now
    if delta <= timedelta(0):
        return TimeSpec(Mode.DURATION)
    return TimeSpec(
        Mode.DURATION,
        days=delta.days,
        hours=delta.seconds // 3600,
        minutes=delta.seconds % 3600 // 60,
    )


def _now_fields(now: datetime) -> TimeSpec:
    return TimeSpec(Mode.DEADLINE, now.day, now.hour, now.minute)


def validate_deadline(spec: TimeSpec, now: datetime) -> StepResult:
    """Pull a deadline back inside the current month and out of the past.

    Applied in order: clamp the day to the month end (MONTH_OVERFLOW),
    raise it to today, and reset every field to *now* if the assembled
    instant is still before the current minute (DEADLINE_RESET).
    Running it on its own output changes nothing.
    """
    if spec.mode is not Mode.DEADLINE:
        raise ValueError("validate_deadline() requires a deadline TimeSpec")
    notices: list[Notice] = []

    cap = last_day_of_month(now)
    if spec.days > cap:
        spec = replace(spec, days=cap)
        notices.append(Notice.MONTH_OVERFLOW)
    if spec.days < now.day:
        spec = replace(spec, days=now.day)

    if to_absolute_end(spec, now) < now.replace(second=0, microsecond=0):
        spec = _now_fields(now)
        notices.append(Notice.DEADLINE_RESET)
    return StepResult(spec, tuple(notices))


def switch_mode(spec: TimeSpec, now: datetime) -> StepResult:
    """Convert *spec* into the other mode, pivoting on *now*."""
    if spec.mode is Mode.DURATION:
        end = to_absolute_end(spec, now)
        if (end.year, end.month) != (now.year, now.month):
            return StepResult(_now_fields(now), (Notice.DEADLINE_RESET,))
        return validate_deadline(from_absolute_end(end, now, Mode.DEADLINE), now)

    try:
        end = to_absolute_end(spec, now)
    except InvalidDateError:
        return StepResult(TimeSpec(Mode.DURATION))
    return StepResult(from_absolute_end(end, now, Mode.DURATION))
