"""Countdown core — a pausable state machine ticking toward an absolute end time."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from timegoal.core.clock import Clock
from timegoal.core.notify import LoggingNotifier, Notice, Notifier

_ZERO = timedelta(0)


class CountdownState(Enum):
    """Possible states of a countdown."""

    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    STOPPED = "stopped"


class InvalidStateError(Exception):
    """Raised when an invalid state transition is attempted."""


class NonPositiveDurationError(Exception):
    """Raised when a goal would end now or in the past."""


_TERMINAL_STATES = frozenset({CountdownState.COMPLETED, CountdownState.STOPPED})


def format_remaining(remaining: timedelta) -> str:
    """Format *remaining* as ``HH:MM:SS``, folding whole days into the hours."""
    days, hours, minutes, seconds = _split(remaining)
    return f"{days * 24 + hours:02d}:{minutes:02d}:{seconds:02d}"


def format_remaining_detail(remaining: timedelta) -> str:
    """Format *remaining* with every unit spelled out, e.g. ``1d 2h 3m 4s``."""
    days, hours, minutes, seconds = _split(remaining)
    return f"{days}d {hours}h {minutes}m {seconds}s"


def _split(remaining: timedelta) -> tuple[int, int, int, int]:
    total = max(int(remaining.total_seconds()), 0)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return days, hours, minutes, seconds


class CountdownSession:
    """A countdown toward ``end_time`` driven by periodic :meth:`tick` calls.

    Holds no timer of its own: the host calls ``tick()`` (normally once a
    second) and reads the remaining time back.  While paused the remaining
    time is frozen; resuming shifts ``end_time`` forward by however long the
    pause lasted.
    """

    def __init__(
        self,
        goal: str,
        end_time: datetime,
        clock: Clock,
        notifier: Notifier | None = None,
    ) -> None:
        now = clock.now()
        if end_time <= now:
            raise NonPositiveDurationError(f"goal must end after {now:%Y-%m-%d %H:%M:%S}")
        self._goal = goal
        self._clock = clock
        self._notifier: Notifier = notifier if notifier is not None else LoggingNotifier()
        self._start_time = now
        self._end_time = end_time
        self._state = CountdownState.RUNNING
        self._paused_remaining = _ZERO

    # -- read-only properties ------------------------------------------------

    @property
    def goal(self) -> str:
        return self._goal

    @property
    def start_time(self) -> datetime:
        return self._start_time

    @property
    def end_time(self) -> datetime:
        return self._end_time

    @property
    def state(self) -> CountdownState:
        return self._state

    @property
    def paused_remaining(self) -> timedelta | None:
        """The frozen remaining time, or ``None`` unless paused."""
        if self._state != CountdownState.PAUSED:
            return None
        return self._paused_remaining

    # -- public interface ----------------------------------------------------

    def tick(self) -> timedelta:
        """Advance the countdown and return the remaining time.

        Transitions to COMPLETED (signalling SESSION_COMPLETED once) when the
        end time has been reached.
        """
        if self._state == CountdownState.RUNNING:
            remaining = self._end_time - self._clock.now()
            if remaining <= _ZERO:
                self._state = CountdownState.COMPLETED
                self._notifier.notify(Notice.SESSION_COMPLETED)
                return _ZERO
            return remaining
        return self.remaining()

    def remaining(self) -> timedelta:
        """Return the remaining time without changing state."""
        if self._state == CountdownState.RUNNING:
            return max(self._end_time - self._clock.now(), _ZERO)
        if self._state == CountdownState.PAUSED:
            return self._paused_remaining
        return _ZERO

    def pause(self) -> None:
        """Freeze the remaining time.  No-op when already paused."""
        if self._state == CountdownState.PAUSED:
            return
        self._require_active("pause")
        self._paused_remaining = max(self._end_time - self._clock.now(), _ZERO)
        self._state = CountdownState.PAUSED

    def resume(self) -> None:
        """Continue from the frozen remaining time.  No-op when already running."""
        if self._state == CountdownState.RUNNING:
            return
        self._require_active("resume")
        self._end_time = self._clock.now() + self._paused_remaining
        self._state = CountdownState.RUNNING

    def stop(self) -> None:
        """Abandon the goal.  No completion is signalled."""
        self._require_active("stop")
        self._state = CountdownState.STOPPED

    # -- private helpers -----------------------------------------------------

    def _require_active(self, method: str) -> None:
        """Raise ``InvalidStateError`` once the countdown has finished."""
        if self._state in _TERMINAL_STATES:
            raise InvalidStateError(f"{method}() is not valid from {self._state.value} state")
