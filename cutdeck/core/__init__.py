from .history import HistoryStack
from .project import Cut, EditSet, Project, create_project, new_project_name, validate_project
from .session import EditSession

__all__ = [
    "Cut",
    "EditSet",
    "EditSession",
    "HistoryStack",
    "Project",
    "create_project",
    "new_project_name",
    "validate_project",
]
