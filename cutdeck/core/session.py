"""Edit session: owns the current project and routes every edit through history,
autosave and notifications.

Each mutation captures a snapshot of the current project into the history
stack, builds the edited project, hands it to the autosave coordinator and
announces it. Import replaces the project without touching history.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, Signal, Slot

from ..exceptions import MalformedDocument
from ..services.autosave import AutosaveCoordinator
from ..services.notifications import Notifier, Severity
from ..services.serialization import (
    UNPARSEABLE,
    ImportSource,
    import_project,
    write_export,
)
from ..services.store import ProjectStore
from .history import HistoryStack
from .project import Cut, Project, create_project, new_project_name, validate_project

logger = logging.getLogger(__name__)


def snapshot(project: Project) -> str:
    """Serialized, immutable copy of ``project`` for the history stack."""
    return json.dumps(project.to_dict(), separators=(",", ":"))


def restore(entry: str) -> Project:
    return validate_project(json.loads(entry))


class EditSession(QObject):
    documentChanged = Signal(object)  # Project
    historyChanged = Signal(bool, bool)  # can_undo, can_redo

    def __init__(
        self,
        project: Project,
        autosave: AutosaveCoordinator,
        notifier: Notifier,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._project = project
        self._history: HistoryStack[str] = HistoryStack()
        self._autosave = autosave
        self._notifier = notifier
        autosave.saved.connect(self._onSaved)
        autosave.saveFailed.connect(self._onSaveFailed)

    @classmethod
    def open(
        cls,
        store: ProjectStore,
        name: str | None = None,
        *,
        notifier: Notifier | None = None,
        delay_ms: int | None = None,
        parent: Optional[QObject] = None,
    ) -> "EditSession":
        """Start editing ``name``: the stored project, or a new empty one.

        Without a name an anonymous project is created. The initial state is
        autosaved once.
        """
        project = store.find(name) if name else None
        if project is None:
            project = create_project(name or new_project_name())
        session = cls(
            project,
            AutosaveCoordinator(store, delay_ms=delay_ms),
            notifier or Notifier(),
            parent,
        )
        session._autosave.schedule(project)
        return session

    # State
    @property
    def project(self) -> Project:
        return self._project

    @property
    def name(self) -> str:
        return self._project.name

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def autosave(self) -> AutosaveCoordinator:
        return self._autosave

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    # Mutations
    def add_cut(self, start: float = 0, end: float = 5) -> Project:
        edits = self._project.edits
        self._mutate(
            self._project.with_edits(cuts=edits.cuts + (Cut(start, end),)),
            f"Cut {start}s -> {end}s added",
            Severity.INFO,
        )
        return self._project

    def remove_cut(self, index: int) -> bool:
        """Remove the cut at ``index``; out-of-range indices change nothing."""
        cuts = self._project.edits.cuts
        if not 0 <= index < len(cuts):
            return False
        self._mutate(
            self._project.with_edits(cuts=cuts[:index] + cuts[index + 1 :]),
            "Cut removed",
            Severity.WARNING,
        )
        return True

    def add_filter(self, name: str = "grayscale") -> Project:
        edits = self._project.edits
        self._mutate(
            self._project.with_edits(filters=edits.filters + (name,)),
            f'Filter "{name}" added',
            Severity.INFO,
        )
        return self._project

    def remove_filter(self, index: int) -> bool:
        filters = self._project.edits.filters
        if not 0 <= index < len(filters):
            return False
        self._mutate(
            self._project.with_edits(filters=filters[:index] + filters[index + 1 :]),
            "Filter removed",
            Severity.WARNING,
        )
        return True

    def set_audio(self, audio: str = "bgm.mp3") -> Project:
        self._mutate(
            self._project.with_edits(audio=audio), f"Audio set: {audio}", Severity.INFO
        )
        return self._project

    def remove_audio(self) -> Project:
        self._mutate(self._project.with_edits(audio=None), "Audio removed", Severity.WARNING)
        return self._project

    # History
    def undo(self) -> Optional[Project]:
        entry = self._history.undo(snapshot(self._project))
        if entry is None:
            return None
        self._setDocument(restore(entry))
        self._notifier.notify("Undo", Severity.WARNING)
        return self._project

    def redo(self) -> Optional[Project]:
        entry = self._history.redo(snapshot(self._project))
        if entry is None:
            return None
        self._setDocument(restore(entry))
        self._notifier.notify("Redo", Severity.WARNING)
        return self._project

    # Persistence and exchange
    def save(self) -> None:
        """User-invoked save; confirmed with a success notification."""
        self._autosave.save_now(self._project, explicit=True)

    def export_to(self, directory: str | Path) -> Optional[Path]:
        try:
            path = write_export(self._project, directory)
        except (OSError, MalformedDocument) as e:
            logger.error("Export of '%s' failed: %s", self.name, e)
            self._notifier.notify("Failed to export", Severity.ERROR)
            return None
        self._notifier.notify("Project exported", Severity.SUCCESS)
        return path

    def import_from(self, source: ImportSource) -> Optional[Project]:
        """Replace the current project with an exported one.

        A same-named stored project is overwritten by the next save. On any
        failure the current project is left unchanged.
        """
        try:
            imported = import_project(source)
        except MalformedDocument as e:
            logger.warning("Import rejected: %s", e)
            if e.code == UNPARSEABLE:
                self._notifier.notify("Failed to import", Severity.ERROR)
            else:
                self._notifier.notify("Invalid project file", Severity.ERROR)
            return None
        except OSError as e:
            logger.warning("Import could not read source: %s", e)
            self._notifier.notify("Failed to import", Severity.ERROR)
            return None
        self._setDocument(imported)
        self._notifier.notify("Project imported", Severity.SUCCESS)
        return imported

    def close(self, timeout_ms: int = 5000) -> None:
        self._autosave.shutdown(timeout_ms)
        self._notifier.clear()

    # Internal
    def _mutate(self, project: Project, message: str, severity: Severity) -> None:
        self._history.record(snapshot(self._project))
        self._setDocument(project)
        self._notifier.notify(message, severity)

    def _setDocument(self, project: Project) -> None:
        self._project = project
        self._autosave.schedule(project)
        self.documentChanged.emit(project)
        self.historyChanged.emit(self.can_undo, self.can_redo)

    @Slot(str, bool)
    def _onSaved(self, name: str, explicit: bool) -> None:
        if explicit:
            self._notifier.notify("Project saved!", Severity.SUCCESS)

    @Slot(str, str)
    def _onSaveFailed(self, name: str, message: str) -> None:
        self._notifier.notify(f"Failed to save project: {message}", Severity.ERROR)


__all__ = ["EditSession", "snapshot", "restore"]
