"""Project document model: a named bundle of cuts, filters and an audio track.

Projects are immutable value objects. Every edit produces a new ``Project``
via the ``with_*`` helpers, so snapshots held elsewhere never change under
their owner. The plain-dict form produced by ``to_dict`` is the shape used
for snapshots, the persisted collection and export files.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from numbers import Real
from typing import Any, Mapping, Optional, Sequence, Tuple

from ..exceptions import MalformedDocument


@dataclass(frozen=True)
class Cut:
    start: float  # seconds
    end: float  # seconds; start < end is not enforced

    def __post_init__(self):
        if not _is_number(self.start) or not _is_number(self.end):
            raise MalformedDocument(
                f"Cut bounds must be numbers, got {self.start!r}, {self.end!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class EditSet:
    cuts: Tuple[Cut, ...] = ()
    filters: Tuple[str, ...] = ()
    audio: Optional[str] = None

    def __post_init__(self):
        if not all(isinstance(c, Cut) for c in self.cuts):
            raise MalformedDocument("cuts must contain Cut values")
        if not all(isinstance(f, str) for f in self.filters):
            raise MalformedDocument("filters must contain strings")
        if self.audio is not None and not isinstance(self.audio, str):
            raise MalformedDocument("audio must be a string or None")

    def to_dict(self) -> dict[str, Any]:
        return {
            "cuts": [c.to_dict() for c in self.cuts],
            "filters": list(self.filters),
            "audio": self.audio,
        }


@dataclass(frozen=True)
class Project:
    name: str
    thumbnail: str = ""
    edits: EditSet = field(default_factory=EditSet)

    def with_edits(self, **changes: Any) -> "Project":
        """Return a copy whose edit set has ``changes`` applied."""
        return replace(self, edits=replace(self.edits, **changes))

    def with_name(self, name: str) -> "Project":
        if not name:
            raise MalformedDocument("Project name must not be empty")
        return replace(self, name=name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "thumbnail": self.thumbnail,
            "edits": self.edits.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        return validate_project(data)


def new_project_name() -> str:
    """Anonymous project name used when the editor is opened without one."""
    return f"project-{int(time.time() * 1000)}.mp4"


def create_project(name: str, thumbnail: str = "") -> Project:
    """Create a project with an empty edit set."""
    if not isinstance(name, str) or not name:
        raise MalformedDocument("Project name must be a non-empty string")
    return Project(name=name, thumbnail=thumbnail or "")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _validate_cut(index: int, raw: Any) -> Cut:
    if not isinstance(raw, Mapping):
        raise MalformedDocument(f"edits.cuts[{index}] is not an object")
    start, end = raw.get("start"), raw.get("end")
    if not _is_number(start) or not _is_number(end):
        raise MalformedDocument(f"edits.cuts[{index}] needs numeric start and end")
    return Cut(start=start, end=end)


def validate_project(candidate: Any) -> Project:
    """Check ``candidate`` has the Project shape and build a ``Project`` from it.

    Only structure is checked; ranges such as ``start >= end`` are accepted
    as-is.

    Raises
    ------
    MalformedDocument
        If the name is missing or empty, ``edits`` is missing, or any part of
        the edit set has the wrong type.
    """
    if not isinstance(candidate, Mapping):
        raise MalformedDocument("Project document must be an object")
    name = candidate.get("name")
    if not isinstance(name, str) or not name:
        raise MalformedDocument("Project name is missing or empty")
    thumbnail = candidate.get("thumbnail") or ""
    if not isinstance(thumbnail, str):
        raise MalformedDocument("Project thumbnail must be a string")

    edits = candidate.get("edits")
    if not isinstance(edits, Mapping):
        raise MalformedDocument("Project edits are missing")
    cuts = edits.get("cuts")
    filters = edits.get("filters")
    if not _is_sequence(cuts):
        raise MalformedDocument("edits.cuts must be a list")
    if not _is_sequence(filters):
        raise MalformedDocument("edits.filters must be a list")
    if not all(isinstance(f, str) for f in filters):
        raise MalformedDocument("edits.filters must contain strings")
    audio = edits.get("audio")
    if audio is not None and not isinstance(audio, str):
        raise MalformedDocument("edits.audio must be a string or null")

    return Project(
        name=name,
        thumbnail=thumbnail,
        edits=EditSet(
            cuts=tuple(_validate_cut(i, c) for i, c in enumerate(cuts)),
            filters=tuple(filters),
            audio=audio,
        ),
    )


__all__ = [
    "Cut",
    "EditSet",
    "Project",
    "create_project",
    "new_project_name",
    "validate_project",
]
