"""Thread-safe adapter around a MoviePy VideoFileClip.

Encapsulates the mutex so capture workers can read frames from any thread.
"""

from __future__ import annotations

from moviepy import VideoFileClip
from PySide6.QtCore import QMutex


class ClipAdapter:
    def __init__(self, clip):
        self._clip = clip
        self._mutex = QMutex()

    @property
    def size(self) -> tuple[int, int]:
        w, h = getattr(self._clip, "size", (0, 0)) or (0, 0)
        return int(w), int(h)

    def get_frame(self, t: float):
        self._mutex.lock()
        try:
            return self._clip.get_frame(t)
        finally:
            self._mutex.unlock()

    def first_frame(self):
        return self.get_frame(0.0)

    def close(self) -> None:
        self._mutex.lock()
        try:
            self._clip.close()
        finally:
            self._mutex.unlock()

    @classmethod
    def from_path(cls, path: str) -> "ClipAdapter":
        return cls(VideoFileClip(path))


__all__ = ["ClipAdapter"]
