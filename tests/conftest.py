from __future__ import annotations

import os

# Qt widgets require a platform plugin.  Offscreen avoids display and libGL
# dependencies inside the test container.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qt_app() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app
