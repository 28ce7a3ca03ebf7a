"""CLI entry point for timegoal.

Uses Click to expose the ``timegoal`` command group.  Commands build a
:class:`GoalEditor` from their options and, for ``start``, drive the
resulting countdown with a one-second tick in the foreground.
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Callable, TypeVar

import click

import timegoal
from timegoal.core.clock import SystemClock
from timegoal.core.countdown import (
    CountdownSession,
    CountdownState,
    InvalidStateError,
    NonPositiveDurationError,
    format_remaining,
    format_remaining_detail,
)
from timegoal.core.editor import GoalEditor
from timegoal.core.history import HistoryStore
from timegoal.core.notify import Notice
from timegoal.core.timespec import Field, InvalidInputError, Mode

T = TypeVar("T")

TICK_SECONDS = 1.0

_MESSAGES = {
    Notice.MONTH_OVERFLOW: "Goals cannot go past the end of this month; clamped to the last day.",
    Notice.DEADLINE_RESET: "That deadline has already passed; reset to now.",
    Notice.SESSION_COMPLETED: "Well done! Goal achieved.",
    Notice.HISTORY_UNAVAILABLE: "Goal history is unavailable.",
}


class EchoNotifier:
    """Prints notices to stderr."""

    def notify(self, notice: Notice) -> None:
        click.echo(_MESSAGES[notice], err=True)


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting domain errors to a CLI error.

    The message is printed to stderr and the process exits with code 1.
    """
    try:
        return action()
    except (InvalidStateError, NonPositiveDurationError, InvalidInputError) as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def _build_editor(
    config_dir: Path | None,
    deadline: bool,
    days: str | None,
    hours: str | None,
    minutes: str | None,
) -> GoalEditor:
    editor = GoalEditor(
        SystemClock(),
        notifier=EchoNotifier(),
        history=HistoryStore(config_dir),
        mode=Mode.DEADLINE if deadline else Mode.DURATION,
    )
    # Days first: deadline hours and minutes are validated against the chosen day.
    for field, raw in ((Field.DAYS, days), (Field.HOURS, hours), (Field.MINUTES, minutes)):
        if raw is not None:
            _run(lambda: editor.set_field(field, raw))
    return editor


def _run_countdown(session: CountdownSession) -> None:
    """Tick *session* until it completes or is stopped.

    Ctrl-C pauses the countdown and asks whether to stop; declining resumes
    it with the remaining time it had when paused.
    """
    while True:
        try:
            remaining = session.tick()
            if session.state != CountdownState.RUNNING:
                break
            line = f"{format_remaining(remaining)}  ({format_remaining_detail(remaining)})"
            click.echo(f"\r{line}", nl=False)
            time.sleep(TICK_SECONDS)
        except KeyboardInterrupt:
            session.pause()
            click.echo(f"\nPaused with {format_remaining(session.remaining())} remaining")
            if _confirm_stop():
                session.stop()
                break
            session.resume()
            click.echo("Resumed")
    click.echo()


def _confirm_stop() -> bool:
    """Ask whether to abandon the goal.  A second Ctrl-C or EOF means yes."""
    try:
        return click.confirm("Stop this goal?", default=False)
    except click.Abort:
        return True


_TIME_OPTIONS = (
    click.option("--deadline", is_flag=True, help="Treat the fields as a point in time this month."),
    click.option("--days", "-d", help="Days (duration) or day of this month (deadline)."),
    click.option("--hours", "-h", help="Hours (duration) or hour of the day (deadline)."),
    click.option("--minutes", "-m", help="Minutes (duration) or minute of the hour (deadline)."),
)


def _time_options(command: Callable) -> Callable:
    """Attach the shared ``--deadline/--days/--hours/--minutes`` options."""
    for option in reversed(_TIME_OPTIONS):
        command = option(command)
    return command


@click.group()
@click.version_option(version=timegoal.__version__, prog_name="timegoal")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="TIMEGOAL_CONFIG_DIR",
    help="Directory holding the goal history (default: ~/.config/timegoal).",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_dir: Path | None) -> None:
    """timegoal: count down toward a duration or deadline goal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config_dir


@cli.command()
@click.argument("goal")
@_time_options
@click.pass_obj
def start(
    config_dir: Path | None,
    goal: str,
    deadline: bool,
    days: str | None,
    hours: str | None,
    minutes: str | None,
) -> None:
    """Start GOAL and count down in the foreground.  Ctrl-C pauses it."""
    editor = _build_editor(config_dir, deadline, days, hours, minutes)
    session = _run(lambda: editor.start(goal))
    click.echo(f"Goal started: {goal} (ends {session.end_time:%Y-%m-%d %H:%M})")
    _run_countdown(session)
    if session.state == CountdownState.STOPPED:
        click.echo("Goal stopped", err=True)
        sys.exit(1)


@cli.command()
@_time_options
@click.pass_obj
def preview(
    config_dir: Path | None,
    deadline: bool,
    days: str | None,
    hours: str | None,
    minutes: str | None,
) -> None:
    """Show when a goal with these fields would end."""
    editor = _build_editor(config_dir, deadline, days, hours, minutes)
    end, effective = editor.preview()
    click.echo(f"Ends at {end:%Y-%m-%d %H:%M}")
    click.echo(f"Duration: {effective.days}d {effective.hours}h {effective.minutes}m")


@cli.command()
@click.pass_obj
def history(config_dir: Path | None) -> None:
    """List the most recent goals."""
    editor = GoalEditor(SystemClock(), notifier=EchoNotifier(), history=HistoryStore(config_dir))
    entries = editor.recent_history()
    if not entries:
        click.echo("No goals yet")
        return
    for entry in entries:
        click.echo(
            f"{entry.created_at:%Y-%m-%d %H:%M}  {entry.goal}  "
            f"{entry.days}d {entry.hours}h {entry.minutes}m"
        )
