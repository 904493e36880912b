import gc

import pytest
from PySide6.QtCore import QCoreApplication, QEvent


def _drain():
    gc.collect()
    QCoreApplication.sendPostedEvents(None, QEvent.Type.DeferredDelete)
    QCoreApplication.processEvents()


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """One application object for the whole run, outliving every Qt object."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
    _drain()


@pytest.fixture(autouse=True)
def _release_qt_objects(qapp):
    yield
    _drain()
