"""Autosave coordinator: non-blocking, ordered persistence of the current project.

Mutations call ``schedule``; rapid successive calls inside the debounce window
collapse into a single persist of the latest state. Persists run on one worker
thread fed through a queued signal, so they reach the store in issue order.

Status reported through ``statusChanged``:
    saved   nothing outstanding
    saving  a persist is debounced or in flight
    failed  the last persist raised; cleared by the next successful one
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from PySide6.QtCore import QEventLoop, QObject, QThread, QTimer, Signal, Slot

from ..config import get_settings
from ..core.project import Project
from ..exceptions import CutdeckError
from .store import ProjectStore

logger = logging.getLogger(__name__)


class SaveStatus(str, Enum):
    SAVED = "saved"
    SAVING = "saving"
    FAILED = "failed"


class _PersistWorker(QObject):
    persisted = Signal(str, bool)  # name, explicit
    failed = Signal(str, str, bool)  # name, message, explicit

    def __init__(self, store: ProjectStore):
        super().__init__()
        self._store = store

    @Slot(object, bool)
    def persist(self, project: Project, explicit: bool):  # executed in worker thread
        try:
            self._store.upsert(project)
        except CutdeckError as e:
            logger.error("Autosave of '%s' failed: %s", project.name, e)
            self.failed.emit(project.name, str(e), explicit)
            return
        logger.debug("Persisted '%s' (explicit=%s)", project.name, explicit)
        self.persisted.emit(project.name, explicit)


class AutosaveCoordinator(QObject):
    statusChanged = Signal(str)
    saved = Signal(str, bool)  # name, explicit
    saveFailed = Signal(str, str)  # name, message
    _persistRequested = Signal(object, bool)
    _drained = Signal()

    def __init__(
        self,
        store: ProjectStore,
        parent: Optional[QObject] = None,
        *,
        delay_ms: int | None = None,
    ):
        super().__init__(parent)
        self._store = store
        self._delay_ms = get_settings().autosave_delay_ms if delay_ms is None else delay_ms
        self._status = SaveStatus.SAVED
        self._in_flight = 0
        self._queued: Optional[Project] = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._dispatchQueued)

        self._thread = QThread(self)
        self._worker = _PersistWorker(store)
        self._worker.moveToThread(self._thread)
        self._persistRequested.connect(self._worker.persist)
        self._worker.persisted.connect(self._onPersisted)
        self._worker.failed.connect(self._onFailed)
        self._thread.finished.connect(self._worker.deleteLater)
        self._thread.start()

    @property
    def store(self) -> ProjectStore:
        return self._store

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def is_idle(self) -> bool:
        return self._queued is None and self._in_flight == 0

    # Public API
    def schedule(self, project: Project) -> None:
        """Persist ``project`` after the debounce window; returns immediately."""
        if self._queued is not None and self._queued.name != project.name:
            # a different document must not be dropped by the debounce
            self._timer.stop()
            self._dispatchQueued()
        self._queued = project
        self._setStatus(SaveStatus.SAVING)
        self._timer.start(self._delay_ms)

    def save_now(self, project: Project, explicit: bool = True) -> None:
        """Dispatch a persist without waiting for the debounce window.

        ``project`` supersedes any debounced state.
        """
        self._timer.stop()
        self._queued = None
        self._dispatch(project, explicit)

    def flush(self, timeout_ms: int = 5000) -> bool:
        """Dispatch debounced work and pump events until every persist completes."""
        if self._queued is not None:
            self._timer.stop()
            self._dispatchQueued()
        if self.is_idle:
            return True
        loop = QEventLoop()
        self._drained.connect(loop.quit)
        QTimer.singleShot(timeout_ms, loop.quit)
        loop.exec()
        self._drained.disconnect(loop.quit)
        return self.is_idle

    def shutdown(self, timeout_ms: int = 5000) -> None:
        self.flush(timeout_ms)
        self._thread.quit()
        self._thread.wait()

    # Internal
    def _dispatch(self, project: Project, explicit: bool) -> None:
        self._in_flight += 1
        self._setStatus(SaveStatus.SAVING)
        self._persistRequested.emit(project, explicit)

    @Slot()
    def _dispatchQueued(self) -> None:
        project, self._queued = self._queued, None
        if project is not None:
            self._dispatch(project, False)

    @Slot(str, bool)
    def _onPersisted(self, name: str, explicit: bool) -> None:
        self._in_flight -= 1
        self.saved.emit(name, explicit)
        if self.is_idle:
            self._setStatus(SaveStatus.SAVED)
            self._drained.emit()

    @Slot(str, str, bool)
    def _onFailed(self, name: str, message: str, explicit: bool) -> None:
        self._in_flight -= 1
        self.saveFailed.emit(name, message)
        if self.is_idle:
            self._setStatus(SaveStatus.FAILED)
            self._drained.emit()

    def _setStatus(self, status: SaveStatus) -> None:
        if status != self._status:
            self._status = status
            self.statusChanged.emit(status.value)


__all__ = ["AutosaveCoordinator", "SaveStatus"]
