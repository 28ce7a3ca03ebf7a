"""Tests for TimeSpec conversions and deadline validation."""

from datetime import datetime

import pytest

from timegoal.core.notify import Notice
from timegoal.core.timespec import (
    InvalidDateError,
    InvalidInputError,
    Mode,
    TimeSpec,
    from_absolute_end,
    last_day_of_month,
    parse_field,
    switch_mode,
    to_absolute_end,
    validate_deadline,
)

# ---------------------------------------------------------------------------
# TimeSpec value
# ---------------------------------------------------------------------------


class TestTimeSpecValue:
    def test_defaults_to_zero_duration(self) -> None:
        spec = TimeSpec()
        assert spec.mode == Mode.DURATION
        assert spec.is_zero()

    @pytest.mark.parametrize(
        "days, hours, minutes",
        [(-1, 0, 0), (0, 24, 0), (0, -1, 0), (0, 0, 60), (0, 0, -1)],
    )
    def test_out_of_range_fields_rejected(self, days: int, hours: int, minutes: int) -> None:
        with pytest.raises(ValueError):
            TimeSpec(Mode.DURATION, days, hours, minutes)


class TestLastDayOfMonth:
    @pytest.mark.parametrize(
        "year, month, expected",
        [(2024, 3, 31), (2024, 4, 30), (2024, 2, 29), (2023, 2, 28)],
    )
    def test_month_lengths(self, year: int, month: int, expected: int) -> None:
        assert last_day_of_month(datetime(year, month, 1)) == expected


# ---------------------------------------------------------------------------
# parse_field — raw input boundary
# ---------------------------------------------------------------------------


class TestParseField:
    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_blank_is_zero(self, raw: str | None) -> None:
        assert parse_field(raw) == 0

    def test_number_with_whitespace(self) -> None:
        assert parse_field(" 42 ") == 42

    @pytest.mark.parametrize("raw", ["abc", "-3", "1.5", "4x"])
    def test_non_numeric_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidInputError):
            parse_field(raw)


# ---------------------------------------------------------------------------
# to_absolute_end / from_absolute_end
# ---------------------------------------------------------------------------


class TestToAbsoluteEnd:
    def test_thirty_minute_duration(self, now: datetime) -> None:
        spec = TimeSpec(Mode.DURATION, 0, 0, 30)
        assert to_absolute_end(spec, now) == datetime(2024, 3, 15, 10, 30, 0)

    def test_duration_crosses_days(self, now: datetime) -> None:
        spec = TimeSpec(Mode.DURATION, 2, 15, 5)
        assert to_absolute_end(spec, now) == datetime(2024, 3, 18, 1, 5, 0)

    def test_deadline_drops_seconds(self) -> None:
        now = datetime(2024, 3, 15, 10, 0, 45, 123)
        spec = TimeSpec(Mode.DEADLINE, 20, 18, 30)
        assert to_absolute_end(spec, now) == datetime(2024, 3, 20, 18, 30, 0)

    def test_deadline_day_missing_from_month(self) -> None:
        spec = TimeSpec(Mode.DEADLINE, 31, 0, 0)
        with pytest.raises(InvalidDateError):
            to_absolute_end(spec, datetime(2024, 4, 10))

    def test_deadline_day_zero_is_invalid(self, now: datetime) -> None:
        with pytest.raises(InvalidDateError):
            to_absolute_end(TimeSpec(Mode.DEADLINE, 0, 10, 0), now)


class TestFromAbsoluteEnd:
    @pytest.mark.parametrize(
        "days, hours, minutes",
        [(0, 0, 1), (0, 0, 30), (1, 0, 0), (3, 23, 59), (16, 13, 7)],
    )
    def test_duration_round_trip(self, now: datetime, days: int, hours: int, minutes: int) -> None:
        spec = TimeSpec(Mode.DURATION, days, hours, minutes)
        assert from_absolute_end(to_absolute_end(spec, now), now, Mode.DURATION) == spec

    def test_duration_floors_partial_minutes(self) -> None:
        now = datetime(2024, 3, 15, 10, 0, 30)
        end = datetime(2024, 3, 15, 10, 30, 0)
        assert from_absolute_end(end, now, Mode.DURATION) == TimeSpec(Mode.DURATION, 0, 0, 29)

    def test_past_end_is_zero_duration(self, now: datetime) -> None:
        end = datetime(2024, 3, 15, 9, 0, 0)
        assert from_absolute_end(end, now, Mode.DURATION).is_zero()

    def test_deadline_fields(self, now: datetime) -> None:
        end = datetime(2024, 3, 22, 7, 45, 0)
        assert from_absolute_end(end, now, Mode.DEADLINE) == TimeSpec(Mode.DEADLINE, 22, 7, 45)


# ---------------------------------------------------------------------------
# validate_deadline
# ---------------------------------------------------------------------------


class TestValidateDeadline:
    def test_day_past_month_end_clamped(self, now: datetime) -> None:
        result = validate_deadline(TimeSpec(Mode.DEADLINE, 40, 12, 0), now)
        assert result.spec.days == 31
        assert Notice.MONTH_OVERFLOW in result.notices

    def test_day_before_today_raised_to_today(self, now: datetime) -> None:
        result = validate_deadline(TimeSpec(Mode.DEADLINE, 10, 0, 0), now)
        assert result.spec.days == 15

    def test_earlier_today_resets_to_now(self, now: datetime) -> None:
        result = validate_deadline(TimeSpec(Mode.DEADLINE, 15, 9, 30), now)
        assert result.spec == TimeSpec(Mode.DEADLINE, 15, 10, 0)
        assert result.notices == (Notice.DEADLINE_RESET,)

    def test_future_deadline_untouched(self, now: datetime) -> None:
        spec = TimeSpec(Mode.DEADLINE, 20, 8, 15)
        result = validate_deadline(spec, now)
        assert result.spec == spec
        assert result.notices == ()

    def test_later_today_untouched(self, now: datetime) -> None:
        spec = TimeSpec(Mode.DEADLINE, 15, 10, 1)
        assert validate_deadline(spec, now).spec == spec

    @pytest.mark.parametrize(
        "spec",
        [
            TimeSpec(Mode.DEADLINE, 40, 12, 0),
            TimeSpec(Mode.DEADLINE, 1, 0, 0),
            TimeSpec(Mode.DEADLINE, 15, 9, 59),
            TimeSpec(Mode.DEADLINE, 25, 23, 59),
        ],
    )
    def test_idempotent(self, spec: TimeSpec) -> None:
        now = datetime(2024, 3, 15, 10, 0, 42)
        once = validate_deadline(spec, now)
        twice = validate_deadline(once.spec, now)
        assert twice.spec == once.spec
        assert twice.notices == ()

    def test_requires_deadline_mode(self, now: datetime) -> None:
        with pytest.raises(ValueError):
            validate_deadline(TimeSpec(Mode.DURATION, 1, 0, 0), now)


# ---------------------------------------------------------------------------
# switch_mode
# ---------------------------------------------------------------------------


class TestSwitchMode:
    def test_duration_to_deadline(self, now: datetime) -> None:
        result = switch_mode(TimeSpec(Mode.DURATION, 1, 2, 30), now)
        assert result.spec == TimeSpec(Mode.DEADLINE, 16, 12, 30)
        assert result.notices == ()

    def test_zero_duration_becomes_now(self, now: datetime) -> None:
        result = switch_mode(TimeSpec(Mode.DURATION), now)
        assert result.spec == TimeSpec(Mode.DEADLINE, 15, 10, 0)

    def test_duration_past_month_end_resets_to_now(self, now: datetime) -> None:
        result = switch_mode(TimeSpec(Mode.DURATION, 20, 0, 0), now)
        assert result.spec == TimeSpec(Mode.DEADLINE, 15, 10, 0)
        assert Notice.DEADLINE_RESET in result.notices

    def test_deadline_to_duration(self, now: datetime) -> None:
        result = switch_mode(TimeSpec(Mode.DEADLINE, 16, 12, 30), now)
        assert result.spec == TimeSpec(Mode.DURATION, 1, 2, 30)

    def test_past_deadline_becomes_zero_duration(self, now: datetime) -> None:
        result = switch_mode(TimeSpec(Mode.DEADLINE, 15, 9, 0), now)
        assert result.spec == TimeSpec(Mode.DURATION)

    def test_invalid_deadline_becomes_zero_duration(self) -> None:
        result = switch_mode(TimeSpec(Mode.DEADLINE, 31, 9, 0), datetime(2024, 4, 10))
        assert result.spec == TimeSpec(Mode.DURATION)

    def test_switching_back_and_forth_preserves_fields(self, now: datetime) -> None:
        spec = TimeSpec(Mode.DURATION, 3, 4, 5)
        there = switch_mode(spec, now).spec
        assert switch_mode(there, now).spec == spec
