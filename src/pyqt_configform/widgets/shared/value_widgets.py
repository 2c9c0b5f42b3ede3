"""
Leaf value widgets.

Each widget exposes ``get_value()`` / ``set_value()`` and a ``value_edited``
signal that fires only for user edits, carrying the already-converted value.
Programmatic ``set_value()`` calls never emit.
"""

import math
from typing import Any, Iterable, Optional, Tuple
import logging

from PyQt6.QtCore import QLocale, pyqtSignal
from PyQt6.QtGui import QDoubleValidator, QValidator
from PyQt6.QtWidgets import QCheckBox, QComboBox, QLineEdit, QPlainTextEdit

from .services.signal_blocking_service import SignalBlockingService

logger = logging.getLogger(__name__)


def parse_number(text: str) -> Optional[float]:
    """Parse number input: None for empty text, int when integral, float otherwise."""
    text = (text or '').strip()
    if text == "":
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def format_number(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class TextLineEdit(QLineEdit):
    """Single-line text editor; emits the raw text on every user edit."""

    value_edited = pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.textEdited.connect(self._on_text_edited)

    def _on_text_edited(self, text: str) -> None:
        self.value_edited.emit(text)

    def get_value(self) -> str:
        return self.text()

    def set_value(self, value: Any) -> None:
        with SignalBlockingService.block_signals(self):
            self.setText("" if value is None else str(value))


class NumberLineEdit(QLineEdit):
    """
    Numeric editor that emits None for a cleared input.

    Only input the validator accepts is emitted: intermediate text ("-", "1e")
    and numbers outside the optional min/max bounds are left unreported.
    """

    value_edited = pyqtSignal(object)

    def __init__(self, minimum: Optional[float] = None, maximum: Optional[float] = None, parent=None):
        super().__init__(parent)
        validator = QDoubleValidator(self)
        validator.setLocale(QLocale.c())
        if minimum is not None:
            validator.setBottom(minimum)
        if maximum is not None:
            validator.setTop(maximum)
        self.setValidator(validator)
        self.textEdited.connect(self._on_text_edited)

    def _on_text_edited(self, text: str) -> None:
        if not text.strip():
            self.value_edited.emit(None)
            return
        state, _, _ = self.validator().validate(text, 0)
        value = parse_number(text)
        if state != QValidator.State.Acceptable or value is None:
            logger.debug(f"Skipping number input the validator does not accept: {text!r}")
            return
        self.value_edited.emit(value)

    def get_value(self) -> Optional[float]:
        return parse_number(self.text())

    def set_value(self, value: Any) -> None:
        with SignalBlockingService.block_signals(self):
            self.setText(format_number(value))


class ToggleCheckBox(QCheckBox):
    """Binary toggle; emits a bool."""

    value_edited = pyqtSignal(object)

    def __init__(self, text: str = "", parent=None):
        super().__init__(text, parent)
        self.toggled.connect(self._on_toggled)

    def _on_toggled(self, checked: bool) -> None:
        self.value_edited.emit(bool(checked))

    def get_value(self) -> bool:
        return self.isChecked()

    def set_value(self, value: Any) -> None:
        with SignalBlockingService.block_signals(self):
            self.setChecked(bool(value))


class OptionComboBox(QComboBox):
    """
    Closed-choice editor over (value, label) options.

    The selected option's value is stored as item data; a value that matches
    no option leaves the combo unselected so the placeholder shows.
    """

    value_edited = pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._value: Any = None
        self.currentIndexChanged.connect(self._on_index_changed)

    def _on_index_changed(self, index: int) -> None:
        if index < 0:
            return
        self._value = self.itemData(index)
        self.value_edited.emit(self._value)

    def set_options(self, options: Iterable[Tuple[str, str]]) -> None:
        """Replace the option list, keeping the current value selected if still offered."""
        with SignalBlockingService.block_signals(self):
            self.clear()
            for value, label in options:
                self.addItem(label, value)
            self.setCurrentIndex(self.findData(self._value) if self._value not in (None, '') else -1)

    def get_value(self) -> Any:
        return self._value

    def set_value(self, value: Any) -> None:
        self._value = value
        with SignalBlockingService.block_signals(self):
            self.setCurrentIndex(self.findData(value) if value not in (None, '') else -1)


class MultiLineTextEdit(QPlainTextEdit):
    """Multi-line text editor (textarea); emits the full text on every edit."""

    value_edited = pyqtSignal(object)

    VISIBLE_ROWS = 4

    def __init__(self, parent=None):
        super().__init__(parent)
        line_height = self.fontMetrics().lineSpacing()
        self.setFixedHeight(line_height * self.VISIBLE_ROWS + 12)
        self.textChanged.connect(self._on_text_changed)

    def _on_text_changed(self) -> None:
        self.value_edited.emit(self.toPlainText())

    def get_value(self) -> str:
        return self.toPlainText()

    def set_value(self, value: Any) -> None:
        with SignalBlockingService.block_signals(self):
            self.setPlainText("" if value is None else str(value))
