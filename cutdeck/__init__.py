"""Top-level package exports.

Public API surface (keep minimal):
 - Project model and validation
 - EditSession (mutations, undo/redo, save, import/export)
 - ProjectStore and ProjectLibrary
"""

from .core.project import Cut, EditSet, Project, create_project, validate_project  # noqa: F401
from .core.session import EditSession  # noqa: F401
from .exceptions import (  # noqa: F401
    CutdeckError,
    DuplicateName,
    MalformedDocument,
    StoreUnavailable,
)
from .services.library import ProjectLibrary  # noqa: F401
from .services.store import ProjectStore  # noqa: F401

__all__ = [
    "Cut",
    "CutdeckError",
    "DuplicateName",
    "EditSession",
    "EditSet",
    "MalformedDocument",
    "Project",
    "ProjectLibrary",
    "ProjectStore",
    "StoreUnavailable",
    "create_project",
    "validate_project",
]
