"""Portable export/import of a single project.

The export blob is the project's dict form as indented UTF-8 JSON, so an
export followed by an import yields an equal ``Project``.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import IO, Union

from ..core.project import Project, validate_project
from ..exceptions import MalformedDocument

UNPARSEABLE = "UNPARSEABLE_DOCUMENT"

ImportSource = Union[str, bytes, os.PathLike, IO[str], IO[bytes]]


def export_project(project: Project) -> str:
    return json.dumps(project.to_dict(), indent=2, ensure_ascii=False)


def export_filename(project: Project) -> str:
    """``<name>.json`` reduced to a single path component."""
    name = project.name
    name = name.replace("/", "_").replace("\\", "_").strip()
    if not name or set(name) == {"."}:
        raise MalformedDocument(f"Project name cannot be used as a file name: {project.name!r}")
    return f"{name}.json"


def write_export(project: Project, directory: str | Path) -> Path:
    """Write ``<name>.json`` into ``directory`` and return its path."""
    out = Path(directory) / export_filename(project)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(export_project(project) + "\n", encoding="utf-8")
    return out


def _read_text(source: ImportSource) -> str:
    if isinstance(source, os.PathLike):
        data: str | bytes = Path(source).read_bytes()
    elif isinstance(source, (str, bytes)):
        data = source
    else:
        data = source.read()
    if isinstance(data, bytes):
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedDocument(f"Project file is not UTF-8: {e}", code=UNPARSEABLE) from e
    return data


def import_project(source: ImportSource) -> Project:
    """Parse and validate an exported project.

    ``source`` is the blob itself (``str``/``bytes``), a path (``os.PathLike``)
    or a readable file object; it is read fully before parsing.

    Raises ``MalformedDocument``; its ``code`` is ``UNPARSEABLE_DOCUMENT`` when
    the input is not JSON at all.
    """
    text = _read_text(source)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocument(f"Project file is not valid JSON: {e}", code=UNPARSEABLE) from e
    return validate_project(data)


__all__ = [
    "UNPARSEABLE",
    "export_filename",
    "export_project",
    "import_project",
    "write_export",
]
