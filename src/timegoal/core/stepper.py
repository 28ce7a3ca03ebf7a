"""Stepper — bounded field arithmetic over a TimeSpec.

DURATION mode treats hours and minutes as one carry/borrow counter whose
ceiling is "last day of the month, 23:59".  DEADLINE mode keeps hours and
minutes independently cyclic and re-validates the deadline after each step.
Days step on their own in both modes.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

from timegoal.core.notify import Notice
from timegoal.core.timespec import (
    MAX_HOURS,
    MAX_MINUTES,
    Field,
    Mode,
    StepResult,
    TimeSpec,
    from_absolute_end,
    last_day_of_month,
    to_absolute_end,
    validate_deadline,
)

_MINUTES_PER_HOUR = 60
_MINUTES_PER_DAY = 24 * _MINUTES_PER_HOUR

_UNIT_MINUTES = {Field.HOURS: _MINUTES_PER_HOUR, Field.MINUTES: 1}
_WRAP = {Field.HOURS: MAX_HOURS + 1, Field.MINUTES: MAX_MINUTES + 1}


def increment(spec: TimeSpec, field: Field, now: datetime) -> StepResult:
    """Step *field* up by one."""
    return _step(spec, field, 1, now)


def decrement(spec: TimeSpec, field: Field, now: datetime) -> StepResult:
    """Step *field* down by one."""
    return _step(spec, field, -1, now)


def quick_add(spec: TimeSpec, minutes: int, now: datetime) -> StepResult:
    """Add a whole-minute offset to *spec*."""
    if spec.mode is Mode.DURATION:
        return _add_duration_minutes(spec, minutes, now)

    validated = validate_deadline(spec, now)
    notices = validated.notices
    end = to_absolute_end(validated.spec, now) + timedelta(minutes=minutes)
    floor = now.replace(second=0, microsecond=0)
    if end < floor:
        end = floor
        notices += (Notice.DEADLINE_RESET,)
    elif (end.year, end.month) != (now.year, now.month):
        capped = TimeSpec(Mode.DEADLINE, last_day_of_month(now), MAX_HOURS, MAX_MINUTES)
        return StepResult(capped, notices + (Notice.MONTH_OVERFLOW,))
    result = validate_deadline(from_absolute_end(end, now, Mode.DEADLINE), now)
    return StepResult(result.spec, notices + result.notices)


def set_field(spec: TimeSpec, field: Field, value: int, now: datetime) -> StepResult:
    """Replace *field* with *value*, clamped into the field's range."""
    if value < 0:
        raise ValueError(f"{field.value} must not be negative, got {value}")
    notices: tuple[Notice, ...] = ()
    if field is Field.DAYS:
        cap = last_day_of_month(now)
        if value > cap:
            value = cap
            notices = (Notice.MONTH_OVERFLOW,)
    else:
        value = min(value, _WRAP[field] - 1)

    spec = replace(spec, **{field.value: value})
    if spec.mode is Mode.DEADLINE:
        result = validate_deadline(spec, now)
        return StepResult(result.spec, notices + result.notices)
    return StepResult(spec, notices)


# -- private helpers ----------------------------------------------------------


def _step(spec: TimeSpec, field: Field, delta: int, now: datetime) -> StepResult:
    if field is Field.DAYS:
        return _step_days(spec, delta, now)
    if spec.mode is Mode.DURATION:
        return _add_duration_minutes(spec, delta * _UNIT_MINUTES[field], now)

    wrapped = (spec.get(field) + delta) % _WRAP[field]
    return validate_deadline(replace(spec, **{field.value: wrapped}), now)


def _step_days(spec: TimeSpec, delta: int, now: datetime) -> StepResult:
    cap = last_day_of_month(now)
    notices: tuple[Notice, ...] = ()
    if delta > 0:
        if spec.days >= cap:
            spec = replace(spec, days=cap)
            # Duration days cap silently.
            if spec.mode is Mode.DEADLINE:
                notices = (Notice.MONTH_OVERFLOW,)
        else:
            spec = replace(spec, days=spec.days + 1)
    else:
        floor = now.day if spec.mode is Mode.DEADLINE else 0
        spec = replace(spec, days=max(spec.days - 1, floor))

    if spec.mode is Mode.DEADLINE:
        result = validate_deadline(spec, now)
        return StepResult(result.spec, notices + result.notices)
    return StepResult(spec, notices)


def _add_duration_minutes(spec: TimeSpec, minutes: int, now: datetime) -> StepResult:
    """Carry/borrow *minutes* through the duration fields, floored at zero."""
    ceiling = last_day_of_month(now) * _MINUTES_PER_DAY + MAX_HOURS * _MINUTES_PER_HOUR + MAX_MINUTES
    total = spec.days * _MINUTES_PER_DAY + spec.hours * _MINUTES_PER_HOUR + spec.minutes + minutes

    notices: tuple[Notice, ...] = ()
    if total > ceiling:
        total = ceiling
        notices = (Notice.MONTH_OVERFLOW,)
    total = max(total, 0)

    days, rest = divmod(total, _MINUTES_PER_DAY)
    hours, mins = divmod(rest, _MINUTES_PER_HOUR)
    return StepResult(TimeSpec(Mode.DURATION, days, hours, mins), notices)
