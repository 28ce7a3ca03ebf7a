"""History store — recent goals persisted as JSON."""

from __future__ import annotations

import fcntl
import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "timegoal"
_HISTORY_FILE = "history.json"

MAX_ENTRIES = 10


class HistoryError(Exception):
    """Raised when the history file cannot be read or written."""


@dataclass(frozen=True)
class HistoryEntry:
    """A started goal, recorded with its effective duration."""

    goal: str
    days: int
    hours: int
    minutes: int
    created_at: datetime

    def to_dict(self) -> dict:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> HistoryEntry:
        return cls(
            goal=str(data["goal"]),
            days=int(data["days"]),
            hours=int(data["hours"]),
            minutes=int(data["minutes"]),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


class HistoryStore:
    """Keeps the most recent goals in ``<config_dir>/history.json``, newest first."""

    def __init__(self, config_dir: Path | None = None) -> None:
        self._config_dir: Path = config_dir if config_dir is not None else DEFAULT_CONFIG_DIR

    @property
    def path(self) -> Path:
        return self._config_dir / _HISTORY_FILE

    def load_recent(self) -> list[HistoryEntry]:
        """Return at most ``MAX_ENTRIES`` entries, newest first."""
        if not self.path.exists():
            return []
        try:
            with open(self.path) as f:
                fcntl.flock(f, fcntl.LOCK_SH)
                raw = json.load(f)
            entries = [HistoryEntry.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise HistoryError(f"cannot read {self.path}: {exc}") from exc
        return entries[:MAX_ENTRIES]

    def append(self, entry: HistoryEntry) -> None:
        """Prepend *entry* and keep only the newest ``MAX_ENTRIES``."""
        try:
            existing = self.load_recent()
        except HistoryError as exc:
            logger.warning("discarding unreadable history: %s", exc)
            existing = []
        entries = [entry, *existing][:MAX_ENTRIES]
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                fcntl.flock(f, fcntl.LOCK_EX)
                json.dump([e.to_dict() for e in entries], f, indent=2)
        except OSError as exc:
            raise HistoryError(f"cannot write {self.path}: {exc}") from exc
        logger.debug("recorded goal %r (%d entries kept)", entry.goal, len(entries))
