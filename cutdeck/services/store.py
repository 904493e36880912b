"""Durable, bounded collection of projects keyed by name.

The collection lives in a single JSON file (``<collection_key>.json``) holding
an array of project records, newest first. Every structural change rewrites
the file atomically. Reads never fail: an unreadable or corrupt file opens as
an empty collection.

The store is shared between the GUI thread (library, import) and the autosave
worker thread, so every operation runs under one lock.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import List, Optional

from ..config import Settings, get_settings
from ..core.project import Project, validate_project
from ..exceptions import DuplicateName, MalformedDocument, StoreUnavailable

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 50


class ProjectStore:
    """Name-indexed project collection with upsert/delete/list and a capacity bound."""

    def __init__(self, path: str | Path, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.path = Path(path)
        self.capacity = capacity
        self._lock = threading.Lock()
        self._records: List[Project] = self._load()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ProjectStore":
        settings = settings or get_settings()
        return cls(settings.store_path, capacity=settings.store_capacity)

    # Reads
    def list(self) -> List[Project]:
        with self._lock:
            return list(self._records)

    def find(self, name: str) -> Optional[Project]:
        with self._lock:
            idx = self._index(name)
            return None if idx is None else self._records[idx]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    # Writes
    def upsert(self, project: Project) -> Optional[Project]:
        """Insert ``project`` as newest, or replace the same-named record in place.

        Returns the record evicted to stay within capacity, if any.
        """
        with self._lock:
            idx = self._index(project.name)
            if idx is not None:
                if self._records[idx] == project:
                    return None
                updated = list(self._records)
                updated[idx] = project
                self._commit(updated)
                return None
            return self._insert(project)

    def insert_new(self, project: Project) -> Optional[Project]:
        """Insert a project whose name must not exist yet."""
        with self._lock:
            if self._index(project.name) is not None:
                raise DuplicateName(project.name)
            return self._insert(project)

    def delete(self, name: str) -> bool:
        with self._lock:
            idx = self._index(name)
            if idx is None:
                return False
            updated = list(self._records)
            del updated[idx]
            self._commit(updated)
            return True

    def rename(self, old_name: str, new_name: str) -> Optional[Project]:
        """Move a record to a new key, keeping its position and contents."""
        if not new_name:
            raise MalformedDocument("Project name must not be empty")
        with self._lock:
            idx = self._index(old_name)
            if idx is None:
                return None
            if new_name == old_name:
                return self._records[idx]
            if self._index(new_name) is not None:
                raise DuplicateName(new_name)
            renamed = self._records[idx].with_name(new_name)
            updated = list(self._records)
            updated[idx] = renamed
            self._commit(updated)
            return renamed

    # Internal (callers hold the lock)
    def _index(self, name: str) -> Optional[int]:
        for i, record in enumerate(self._records):
            if record.name == name:
                return i
        return None

    def _insert(self, project: Project) -> Optional[Project]:
        updated = [project] + self._records
        evicted = None
        if len(updated) > self.capacity:
            # newest is at the front, so the tail is never the record just inserted
            evicted = updated.pop()
            logger.info("Store full (%d); evicting '%s'", self.capacity, evicted.name)
        self._commit(updated)
        return evicted

    def _commit(self, records: List[Project]) -> None:
        text = json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)
        try:
            self._atomic_write_text(text)
        except OSError as e:
            logger.error("Failed to write project store %s: %s", self.path, e)
            raise StoreUnavailable(f"Cannot write project store: {e}") from e
        self._records = records

    def _atomic_write_text(self, content: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

    def _load(self) -> List[Project]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Project store %s unreadable, starting empty: %s", self.path, e)
            return []
        if not isinstance(raw, list):
            logger.warning("Project store %s is not a list, starting empty", self.path)
            return []

        records: List[Project] = []
        seen: set[str] = set()
        for i, item in enumerate(raw):
            try:
                project = validate_project(item)
            except MalformedDocument as e:
                logger.warning("Dropping malformed record #%d in %s: %s", i, self.path, e)
                continue
            if project.name in seen:
                logger.warning("Dropping duplicate record '%s' in %s", project.name, self.path)
                continue
            seen.add(project.name)
            records.append(project)
        return records[: self.capacity]


__all__ = ["ProjectStore", "DEFAULT_CAPACITY"]
