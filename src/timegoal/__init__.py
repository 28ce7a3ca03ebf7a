"""timegoal: duration and deadline goals with a live countdown."""

__version__ = "0.1.0"
