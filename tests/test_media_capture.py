import base64
import time
from io import BytesIO

import numpy as np
from moviepy import ColorClip
from PIL import Image
from PySide6.QtCore import QCoreApplication, QEventLoop

from cutdeck.media.capture import MediaCapture, frame_to_data_uri
from cutdeck.media.clip_adapter import ClipAdapter


def _wait_until(predicate, timeout_ms=10_000):
    deadline = time.monotonic() + timeout_ms / 1000
    while not predicate() and time.monotonic() < deadline:
        QCoreApplication.processEvents(QEventLoop.ProcessEventsFlag.AllEvents, 20)
    return predicate()


def _decode(uri):
    assert uri.startswith("data:image/png;base64,")
    return Image.open(BytesIO(base64.b64decode(uri.split(",", 1)[1])))


def test_frame_to_data_uri_keeps_aspect():
    frame = np.zeros((32, 64, 3), dtype=np.uint8)
    assert _decode(frame_to_data_uri(frame, 320, 180)).size == (320, 160)


def test_frame_to_data_uri_grayscale():
    frame = np.full((10, 10), 200, dtype=np.uint8)
    img = _decode(frame_to_data_uri(frame, 40, 180))
    assert img.size == (40, 40)
    assert img.mode == "RGB"


def test_clip_adapter_first_frame(tmp_path):
    video_path = tmp_path / "green.mp4"
    clip = ColorClip(size=(32, 16), color=(0, 255, 0), duration=0.5)
    clip.write_videofile(str(video_path), fps=24)
    clip.close()
    adapter = ClipAdapter.from_path(str(video_path))
    assert adapter.size == (32, 16)
    assert adapter.first_frame().shape[:2] == (16, 32)
    adapter.close()


def test_capture_produces_thumbnail(tmp_path):
    video_path = tmp_path / "clip.mp4"
    clip = ColorClip(size=(64, 32), color=(255, 0, 0), duration=0.5)
    clip.write_videofile(str(video_path), fps=24)
    clip.close()

    capture = MediaCapture(timeout_ms=10_000, width=320)
    results = []
    try:
        capture.capture(video_path, lambda name, thumb: results.append((name, thumb)))
        assert _wait_until(lambda: results)
        name, thumb = results[0]
        assert name == "clip.mp4"
        assert _decode(thumb).size == (320, 160)
        assert capture.pending() == 0
    finally:
        capture.shutdown()


def test_capture_failure_yields_empty_thumbnail(tmp_path):
    capture = MediaCapture(timeout_ms=5_000)
    results = []
    try:
        capture.capture(tmp_path / "missing.mp4", lambda name, thumb: results.append((name, thumb)))
        assert _wait_until(lambda: results)
        assert results == [("missing.mp4", "")]
    finally:
        capture.shutdown()
