import time

import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop

from cutdeck.services.notifications import Notifier, Severity


def _wait_until(predicate, timeout_ms=2000):
    deadline = time.monotonic() + timeout_ms / 1000
    while not predicate() and time.monotonic() < deadline:
        QCoreApplication.processEvents(QEventLoop.ProcessEventsFlag.AllEvents, 20)
    return predicate()


def test_notify_emits_and_auto_dismisses():
    notifier = Notifier(timeout_ms=10)
    seen, gone = [], []
    notifier.notified.connect(seen.append)
    notifier.dismissed.connect(gone.append)
    note = notifier.notify("Project saved!", "success")
    assert note.severity is Severity.SUCCESS
    assert seen == [note]
    assert notifier.active() == [note]
    assert _wait_until(lambda: gone == [note.id])
    assert notifier.active() == []


def test_manual_dismiss_is_idempotent():
    notifier = Notifier(timeout_ms=10_000)
    gone = []
    notifier.dismissed.connect(gone.append)
    note = notifier.notify("Cut removed", Severity.WARNING)
    notifier.dismiss(note.id)
    notifier.dismiss(note.id)
    assert gone == [note.id]


def test_unknown_severity_rejected():
    with pytest.raises(ValueError):
        Notifier().notify("hello", "loud")


def test_clear_dismisses_everything():
    notifier = Notifier(timeout_ms=60_000)
    gone = []
    notifier.dismissed.connect(gone.append)
    a = notifier.notify("one")
    b = notifier.notify("two", Severity.ERROR)
    notifier.clear()
    assert gone == [a.id, b.id]
    assert notifier.active() == []
