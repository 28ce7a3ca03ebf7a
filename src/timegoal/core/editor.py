"""Goal editor — orchestrates editing a TimeSpec and starting a countdown."""

from __future__ import annotations

import logging
from datetime import datetime

from timegoal.core import stepper
from timegoal.core.clock import Clock
from timegoal.core.countdown import CountdownSession, NonPositiveDurationError
from timegoal.core.history import HistoryEntry, HistoryError, HistoryStore
from timegoal.core.notify import LoggingNotifier, Notice, Notifier
from timegoal.core.timespec import (
    Field,
    Mode,
    StepResult,
    TimeSpec,
    from_absolute_end,
    parse_field,
    switch_mode,
    to_absolute_end,
    validate_deadline,
)
from timegoal.core.undo import EmptyStackError, UndoStack

logger = logging.getLogger(__name__)


class GoalEditor:
    """The editing surface for a single goal.

    Owns the current :class:`TimeSpec` and its undo history, forwards every
    notice raised by the arithmetic to the notifier, and turns the finished
    spec into a :class:`CountdownSession`.  The history store is optional;
    its failures are reported as ``HISTORY_UNAVAILABLE`` and never
    interrupt editing or starting.
    """

    def __init__(
        self,
        clock: Clock,
        notifier: Notifier | None = None,
        history: HistoryStore | None = None,
        mode: Mode = Mode.DURATION,
    ) -> None:
        self._clock = clock
        self._notifier: Notifier = notifier if notifier is not None else LoggingNotifier()
        self._history = history
        self._undo = UndoStack()
        self._spec = self._blank(mode)

    # -- state ---------------------------------------------------------------

    @property
    def spec(self) -> TimeSpec:
        return self._spec

    @property
    def mode(self) -> Mode:
        return self._spec.mode

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    # -- editing -------------------------------------------------------------

    def set_field(self, field: Field, raw: str | None) -> None:
        """Set *field* from raw user text.  Invalid text leaves the spec untouched."""
        value = parse_field(raw)
        self._apply(stepper.set_field(self._spec, field, value, self._clock.now()))

    def increment(self, field: Field, record: bool = False) -> None:
        if record:
            self._undo.push(self._spec)
        self._apply(stepper.increment(self._spec, field, self._clock.now()))

    def decrement(self, field: Field, record: bool = False) -> None:
        if record:
            self._undo.push(self._spec)
        self._apply(stepper.decrement(self._spec, field, self._clock.now()))

    def quick_add(self, minutes: int) -> None:
        self._undo.push(self._spec)
        self._apply(stepper.quick_add(self._spec, minutes, self._clock.now()))

    def clear(self) -> None:
        """Reset every field, keeping the current mode."""
        self._undo.push(self._spec)
        self._spec = self._blank(self._spec.mode)

    def switch_mode(self) -> None:
        self._apply(switch_mode(self._spec, self._clock.now()))

    def undo(self) -> bool:
        """Restore the most recent snapshot.  Returns ``False`` if there was none."""
        try:
            self._spec = self._undo.pop()
        except EmptyStackError:
            return False
        return True

    # -- starting ------------------------------------------------------------

    def preview(self) -> tuple[datetime, TimeSpec]:
        """Return the absolute end and the effective duration of the current spec."""
        now = self._clock.now()
        end = self._resolve_end(now)
        return end, from_absolute_end(end, now, Mode.DURATION)

    def start(self, goal: str) -> CountdownSession:
        """Start a countdown for *goal* and reset the editing surface.

        Raises :class:`NonPositiveDurationError` when the goal would end now
        or in the past; no session is created and nothing is recorded.
        """
        now = self._clock.now()
        end = self._resolve_end(now)
        if end <= now:
            raise NonPositiveDurationError("set a time in the future to start a goal")
        effective = from_absolute_end(end, now, Mode.DURATION)

        session = CountdownSession(goal, end, self._clock, self._notifier)
        self._record(HistoryEntry(goal, effective.days, effective.hours, effective.minutes, now))
        logger.info("started goal %r, ends %s", goal, end.isoformat(timespec="seconds"))

        self._spec = self._blank(self._spec.mode)
        self._undo.clear()
        return session

    # -- history -------------------------------------------------------------

    def recent_history(self) -> list[HistoryEntry]:
        """Return recent goals, or an empty list if the store is unavailable."""
        if self._history is None:
            return []
        try:
            return self._history.load_recent()
        except HistoryError as exc:
            logger.warning("history unavailable: %s", exc)
            self._notifier.notify(Notice.HISTORY_UNAVAILABLE)
            return []

    # -- private helpers -----------------------------------------------------

    def _blank(self, mode: Mode) -> TimeSpec:
        # Deadline day 0 is raised to today by the first validation.
        return TimeSpec(mode)

    def _apply(self, result: StepResult) -> None:
        self._spec = result.spec
        for notice in result.notices:
            self._notifier.notify(notice)

    def _resolve_end(self, now: datetime) -> datetime:
        if self._spec.mode is Mode.DEADLINE:
            self._apply(validate_deadline(self._spec, now))
        return to_absolute_end(self._spec, now)

    def _record(self, entry: HistoryEntry) -> None:
        if self._history is None:
            return
        try:
            self._history.append(entry)
        except HistoryError as exc:
            logger.warning("goal not recorded: %s", exc)
            self._notifier.notify(Notice.HISTORY_UNAVAILABLE)
