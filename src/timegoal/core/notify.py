"""Notification kinds raised by the engine and the default sink."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class Notice(Enum):
    """Conditions the host is told about, fire-and-forget."""

    MONTH_OVERFLOW = "month_overflow"
    DEADLINE_RESET = "deadline_reset"
    SESSION_COMPLETED = "session_completed"
    HISTORY_UNAVAILABLE = "history_unavailable"


class Notifier(Protocol):
    def notify(self, notice: Notice) -> None: ...


class LoggingNotifier:
    """Sink used when the host does not supply one."""

    def notify(self, notice: Notice) -> None:
        logger.info("notice: %s", notice.value)
