"""Shared helpers for widget tests."""

import time

from PyQt6.QtWidgets import QApplication


def run_now(task) -> None:
    """Background runner that executes lookups synchronously."""
    task()


class DeferredRunner:
    """Background runner that holds lookups until the test releases them."""

    def __init__(self) -> None:
        self.tasks = []

    def __call__(self, task) -> None:
        self.tasks.append(task)

    def run(self, index: int) -> None:
        self.tasks[index]()


class Recorder:
    """Collects every payload emitted by a Qt signal."""

    def __init__(self, signal) -> None:
        self.calls = []
        signal.connect(self._record)

    def _record(self, *args) -> None:
        self.calls.append(args[0] if len(args) == 1 else args)

    @property
    def last(self):
        return self.calls[-1]


def type_text(widget, text: str) -> None:
    """Simulate a user edit on a line edit."""
    widget.setText(text)
    widget.textEdited.emit(text)


def process_events(app: QApplication) -> None:
    for _ in range(3):
        app.processEvents()


def wait_until(app: QApplication, predicate, timeout: float = 5.0) -> bool:
    """Pump the event loop until ``predicate()`` holds or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        app.processEvents()
        time.sleep(0.01)
    return True
