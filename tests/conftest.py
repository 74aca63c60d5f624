"""
Shared pytest fixtures.
"""

import os
import sys

import pytest

# Widgets need a platform plugin; tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Create a QApplication instance for the test session (required for QTimer and widgets)."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv[:1])
    yield app
