"""Media capture: turn an uploaded video into a project name and a thumbnail.

The first frame is decoded on a worker thread, scaled to a fixed width and
encoded as a PNG data URI. A bounded wait guarantees the caller always gets an
answer: if decoding fails or the timeout elapses first, the thumbnail is empty.
"""

from __future__ import annotations

import base64
import logging
from io import BytesIO
from pathlib import Path
from typing import Callable, Optional, Set

import numpy as np
from PIL import Image
from PySide6.QtCore import QObject, QThread, QTimer, Signal, Slot

from ..config import get_settings
from ..core.project import new_project_name
from .clip_adapter import ClipAdapter

logger = logging.getLogger(__name__)

CaptureCallback = Callable[[str, str], None]  # name, thumbnail data URI ("" if none)


def frame_to_data_uri(frame, width: int, fallback_height: int) -> str:
    """Encode an RGB (or grayscale) frame array as a scaled PNG data URI."""
    frame = np.asarray(frame)
    if frame.ndim == 2:
        frame = np.stack([frame] * 3, axis=-1)
    src_h, src_w = frame.shape[0], frame.shape[1]
    height = round(src_h / src_w * width) if src_w else 0
    image = Image.fromarray(frame.astype(np.uint8)).convert("RGB")
    image = image.resize((width, height or fallback_height))
    buf = BytesIO()
    image.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


class CaptureWorker(QObject):
    captured = Signal(str)  # thumbnail data URI
    failed = Signal(str)  # error message

    def __init__(self, path: str, width: int, fallback_height: int):
        super().__init__()
        self._path = path
        self._width = width
        self._fallback_height = fallback_height

    @Slot()
    def run(self):  # executed in thread
        try:
            adapter = ClipAdapter.from_path(self._path)
        except Exception as e:  # moviepy raises OSError/IOError/KeyError depending on codec
            self.failed.emit(f"open error: {e}")
            return
        try:
            frame = adapter.first_frame()
            uri = frame_to_data_uri(frame, self._width, self._fallback_height)
        except Exception as e:
            self.failed.emit(f"frame error: {e}")
            return
        finally:
            adapter.close()
        self.captured.emit(uri)


class _CaptureRequest(QObject):
    """One capture: worker thread, timeout timer, and the single callback."""

    released = Signal(object)  # self, once the worker thread has stopped

    def __init__(self, path: str, callback: CaptureCallback, width: int,
                 fallback_height: int, timeout_ms: int, parent: QObject):
        super().__init__(parent)
        self.name = Path(path).name or new_project_name()
        self._callback = callback
        self._finished = False

        self.thread = QThread(self)
        self._worker = CaptureWorker(path, width, fallback_height)
        self._worker.moveToThread(self.thread)
        self.thread.started.connect(self._worker.run)
        self._worker.captured.connect(self._onCaptured)
        self._worker.failed.connect(self._onFailed)
        self._worker.captured.connect(self.thread.quit)
        self._worker.failed.connect(self.thread.quit)
        self.thread.finished.connect(self._worker.deleteLater)
        self.thread.finished.connect(self._onThreadFinished)

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._onTimeout)
        self._timer.start(timeout_ms)
        self.thread.start()

    @Slot(str)
    def _onCaptured(self, uri: str):
        self._finish(uri)

    @Slot(str)
    def _onFailed(self, message: str):
        logger.warning("Thumbnail capture for '%s' failed: %s", self.name, message)
        self._finish("")

    @Slot()
    def _onTimeout(self):
        logger.warning("Thumbnail capture for '%s' timed out", self.name)
        self._finish("")

    def _finish(self, thumbnail: str):
        if self._finished:
            return
        self._finished = True
        self._timer.stop()
        self._callback(self.name, thumbnail)

    @property
    def delivered(self) -> bool:
        return self._finished

    @Slot()
    def _onThreadFinished(self):
        self.released.emit(self)


class MediaCapture(QObject):
    def __init__(
        self,
        parent: Optional[QObject] = None,
        *,
        timeout_ms: int | None = None,
        width: int | None = None,
        fallback_height: int | None = None,
    ):
        super().__init__(parent)
        settings = get_settings()
        self.timeout_ms = settings.capture_timeout_ms if timeout_ms is None else timeout_ms
        self.width = settings.thumbnail_width if width is None else width
        self.fallback_height = (
            settings.thumbnail_fallback_height if fallback_height is None else fallback_height
        )
        self._requests: Set[_CaptureRequest] = set()

    def capture(self, path: str | Path, callback: CaptureCallback) -> None:
        """Asynchronously call ``callback(name, thumbnail)`` exactly once."""
        request = _CaptureRequest(
            str(path), callback, self.width, self.fallback_height, self.timeout_ms, self
        )
        self._requests.add(request)
        request.released.connect(self._release)

    def pending(self) -> int:
        """Captures whose callback has not been delivered yet."""
        return sum(1 for r in self._requests if not r.delivered)

    def shutdown(self) -> None:
        for request in list(self._requests):
            request.thread.quit()
            request.thread.wait()

    @Slot(object)
    def _release(self, request: _CaptureRequest):
        self._requests.discard(request)
        request.deleteLater()


__all__ = ["MediaCapture", "CaptureWorker", "frame_to_data_uri"]
