"""Error taxonomy for the project edit-history and persistence engine.

Every error carries a machine-readable ``code`` so callers (notification
layer, tests) can branch without string matching on messages.
"""

from __future__ import annotations


class CutdeckError(Exception):
    """Base exception for all cutdeck errors."""

    code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, code: str | None = None):
        self.message = message or self.__class__.message
        if code:
            self.code = code
        super().__init__(self.message)


class MalformedDocument(CutdeckError):
    """A candidate document does not have the shape of a Project."""

    code = "MALFORMED_DOCUMENT"
    message = "Malformed project document"


class DuplicateName(CutdeckError):
    """A project with the requested name already exists in the store."""

    code = "DUPLICATE_NAME"
    message = "Project name already exists"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Project name already exists: {name}")


class StoreUnavailable(CutdeckError):
    """The durable medium behind the store could not be read or written."""

    code = "STORE_UNAVAILABLE"
    message = "Project store is unavailable"


__all__ = ["CutdeckError", "MalformedDocument", "DuplicateName", "StoreUnavailable"]
