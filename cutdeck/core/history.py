"""Linear undo/redo over document snapshots.

Classic two-stack automaton: ``record`` pushes the pre-edit snapshot and
drops every pending redo entry, ``undo``/``redo`` swap the current state
with the top of the opposite stack. Entries are treated as opaque immutable
values; the edit session stores serialized projects here.
"""

from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class HistoryStack(Generic[T]):
    def __init__(self) -> None:
        self._undoable: List[T] = []
        self._redoable: List[T] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undoable)

    @property
    def can_redo(self) -> bool:
        return bool(self._redoable)

    def __len__(self) -> int:
        return len(self._undoable) + len(self._redoable)

    def record(self, snapshot: T) -> None:
        """Push the state captured *before* a mutation.

        Any new edit invalidates the redo path.
        """
        self._undoable.append(snapshot)
        self._redoable.clear()

    def undo(self, current: T) -> Optional[T]:
        if not self._undoable:
            return None
        previous = self._undoable.pop()
        self._redoable.append(current)
        return previous

    def redo(self, current: T) -> Optional[T]:
        if not self._redoable:
            return None
        following = self._redoable.pop()
        self._undoable.append(current)
        return following

    def clear(self) -> None:
        self._undoable.clear()
        self._redoable.clear()


__all__ = ["HistoryStack"]
