"""Project library: create, upload, rename, delete and open stored projects.

This is the landing-page logic. Name uniqueness is enforced for explicit
creation and rename; uploads upsert under the media file name.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Protocol

from ..core.project import Project, create_project
from ..exceptions import DuplicateName, MalformedDocument, StoreUnavailable
from ..media.capture import MediaCapture
from .notifications import Notifier, Severity
from .store import ProjectStore

logger = logging.getLogger(__name__)


class Navigator(Protocol):
    def open_editor(self, name: str) -> None:
        ...


class ProjectLibrary:
    def __init__(
        self,
        store: ProjectStore,
        notifier: Notifier,
        navigator: Navigator,
        capture: MediaCapture | None = None,
    ):
        self.store = store
        self.notifier = notifier
        self.navigator = navigator
        self.capture = capture

    def projects(self) -> List[Project]:
        return self.store.list()

    def open(self, name: str) -> None:
        self.navigator.open_editor(name)

    def create_empty(self, name: str) -> Optional[Project]:
        name = (name or "").strip()
        if not name:
            self.notifier.notify("Enter a project name first", Severity.WARNING)
            return None
        project = create_project(name)
        try:
            self.store.insert_new(project)
        except DuplicateName as e:
            logger.info("Create rejected: %s", e)
            self.notifier.notify("Project name already exists", Severity.ERROR)
            return None
        except StoreUnavailable as e:
            self.notifier.notify(f"Failed to save project: {e}", Severity.ERROR)
            return None
        self.navigator.open_editor(name)
        return project

    def create_from_media(self, path: str | Path) -> None:
        """Capture a thumbnail from ``path``, store a new project and open it.

        Completes asynchronously; the project is created on capture or timeout.
        """
        if self.capture is None:
            raise RuntimeError("ProjectLibrary has no media capture configured")
        self.capture.capture(path, self._onCaptured)

    def rename(self, old_name: str, new_name: str) -> Optional[Project]:
        new_name = (new_name or "").strip()
        if not new_name:
            return None
        try:
            renamed = self.store.rename(old_name, new_name)
        except DuplicateName:
            self.notifier.notify("Name is already taken", Severity.ERROR)
            return None
        except (MalformedDocument, StoreUnavailable) as e:
            self.notifier.notify(f"Rename failed: {e}", Severity.ERROR)
            return None
        if renamed is not None:
            self.notifier.notify(f'Renamed to "{new_name}"', Severity.SUCCESS)
        return renamed

    def delete(self, name: str) -> bool:
        try:
            removed = self.store.delete(name)
        except StoreUnavailable as e:
            self.notifier.notify(f"Delete failed: {e}", Severity.ERROR)
            return False
        if removed:
            self.notifier.notify(f'Project "{name}" deleted', Severity.WARNING)
        return removed

    def _onCaptured(self, name: str, thumbnail: str) -> None:
        project = create_project(name, thumbnail)
        try:
            self.store.upsert(project)
        except StoreUnavailable as e:
            self.notifier.notify(f"Failed to save project: {e}", Severity.ERROR)
            return
        self.navigator.open_editor(name)


__all__ = ["Navigator", "ProjectLibrary"]
