"""Transient, auto-dismissing user notifications.

Presentation layers connect to ``notified``/``dismissed``; the core only calls
``notify``. Each notification lives for ``timeout_ms`` and is then dropped by
a single-shot timer.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from ..config import get_settings

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Notification:
    id: int
    message: str
    severity: Severity


class Notifier(QObject):
    notified = Signal(object)  # Notification
    dismissed = Signal(int)  # notification id

    def __init__(self, parent: Optional[QObject] = None, *, timeout_ms: int | None = None):
        super().__init__(parent)
        self.timeout_ms = (
            get_settings().notification_timeout_ms if timeout_ms is None else timeout_ms
        )
        self._ids = itertools.count(1)
        self._active: Dict[int, Notification] = {}
        self._timers: Dict[int, QTimer] = {}

    def notify(self, message: str, severity: Severity | str = Severity.INFO) -> Notification:
        severity = Severity(severity)
        note = Notification(id=next(self._ids), message=message, severity=severity)
        self._active[note.id] = note
        logger.log(_LOG_LEVELS[severity], "[%s] %s", severity.value, message)
        self.notified.emit(note)
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda nid=note.id: self.dismiss(nid))
        self._timers[note.id] = timer
        timer.start(self.timeout_ms)
        return note

    def dismiss(self, notification_id: int) -> None:
        timer = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()
        if self._active.pop(notification_id, None) is not None:
            self.dismissed.emit(notification_id)

    def clear(self) -> None:
        """Dismiss everything still showing and stop pending timers."""
        for notification_id in list(self._active):
            self.dismiss(notification_id)

    def active(self) -> List[Notification]:
        return list(self._active.values())


__all__ = ["Notifier", "Notification", "Severity"]
