"""
Context manager service for widget signal blocking.

Editors push values into widgets programmatically when they are built and
when options arrive; those updates must not be mistaken for user edits.

Pattern:
    Instead of:
        widget.blockSignals(True)
        widget.set_value(value)
        widget.blockSignals(False)

    Use:
        with SignalBlockingService.block_signals(widget):
            widget.set_value(value)

This guarantees signals are unblocked even if set_value() raises an exception.
"""

from contextlib import contextmanager
from PyQt6.QtCore import QObject
import logging

logger = logging.getLogger(__name__)


class SignalBlockingService:
    """Service for blocking widget signals using context managers."""

    @staticmethod
    @contextmanager
    def block_signals(*widgets: QObject):
        """
        Context manager for blocking widget signals.

        Blocks signals on all provided widgets on entry, and restores each
        widget's previous blocking state on exit (so nested blocks compose).

        Args:
            *widgets: One or more QObject instances to block signals on
        """
        previous = [(widget, widget.blockSignals(True)) for widget in widgets if widget is not None]
        try:
            yield
        finally:
            for widget, was_blocked in previous:
                widget.blockSignals(was_blocked)
