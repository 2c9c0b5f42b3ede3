"""
Configuration Window for PyQt6

Dialog wrapping a DynamicForm with Save/Cancel, for editing one
component's configuration outside an inline panel.
"""

import logging
import dataclasses
from typing import Any, Callable, Mapping, Optional

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QPushButton, QLabel, QScrollArea, QWidget, QFrame
)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont

from pyqt_configform.core.field_manifest import FieldManifest
from pyqt_configform.widgets.dynamic_form import DynamicForm, FormConfig
from pyqt_configform.widgets.shared.scrollable_form_mixin import ScrollableFormMixin

logger = logging.getLogger(__name__)


class ConfigWindow(QDialog, ScrollableFormMixin):
    """
    PyQt6 Configuration Window.

    The dialog keeps the latest value emitted by its form; Save hands that
    value to listeners, Cancel drops it.
    """

    # Signals
    config_saved = pyqtSignal(object)  # saved value tree
    config_cancelled = pyqtSignal()

    def __init__(self, manifest: FieldManifest, current_value: Any = None,
                 on_save_callback: Optional[Callable[[Any], None]] = None,
                 form_config: Optional[FormConfig] = None, title: Optional[str] = None,
                 parent=None):
        """
        Initialize the configuration window.

        Args:
            manifest: Fields to edit
            current_value: Current configuration value tree
            on_save_callback: Function to call with the value when saved
            form_config: Options forwarded to the embedded DynamicForm
            title: Header text (defaults to the manifest's display name)
            parent: Parent widget
        """
        super().__init__(parent)

        self.manifest = manifest
        self.current_value = current_value if current_value is not None else {}
        self.on_save_callback = on_save_callback
        self.title = title or manifest.display_name or "Configuration"

        # The scroll area takes ownership of the form
        form_config = dataclasses.replace(form_config or FormConfig(), parent=None)
        self.form = DynamicForm(manifest, self.current_value, form_config)
        self.form.value_changed.connect(self._on_value_changed)

        self.setup_ui()

        logger.debug(f"Config window initialized for {self.title!r}")

    def setup_ui(self):
        """Setup the user interface."""
        self.setWindowTitle(f"Configuration - {self.title}")
        self.setModal(False)
        self.setMinimumSize(480, 360)
        self.resize(640, 520)

        layout = QVBoxLayout(self)
        layout.setSpacing(10)

        header_widget = QWidget()
        header_layout = QHBoxLayout(header_widget)
        header_layout.setContentsMargins(10, 10, 10, 10)

        header_label = QLabel(f"Configure {self.title}")
        header_label.setFont(QFont("Arial", 14, QFont.Weight.Bold))
        header_layout.addWidget(header_label)
        header_layout.addStretch()
        layout.addWidget(header_widget)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.scroll_area.setWidget(self.form)
        layout.addWidget(self.scroll_area, 1)

        layout.addWidget(self.create_button_panel())

    def create_button_panel(self) -> QWidget:
        """
        Create the button panel.

        Returns:
            Widget containing action buttons
        """
        panel = QFrame()
        panel.setFrameStyle(QFrame.Shape.NoFrame)

        layout = QHBoxLayout(panel)
        layout.addStretch()

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.setMinimumWidth(80)
        self.cancel_button.clicked.connect(self.reject)
        layout.addWidget(self.cancel_button)

        self.save_button = QPushButton("Save")
        self.save_button.setMinimumWidth(80)
        self.save_button.setDefault(True)
        self.save_button.clicked.connect(self.save_config)
        layout.addWidget(self.save_button)

        return panel

    def _on_value_changed(self, value: Any):
        self.current_value = value

    def show_errors(self, errors: Optional[Mapping[str, str]]):
        """Display validator errors and bring the first one into view."""
        self.form.set_errors(errors)
        first_path = self.form.errors.first_error_path()
        if first_path:
            self._scroll_to_field(first_path)

    def save_config(self):
        """Emit the current value and close."""
        logger.info(f"Saving configuration for {self.title!r}")
        self.config_saved.emit(self.current_value)

        if self.on_save_callback:
            self.on_save_callback(self.current_value)

        self.accept()

    def reject(self):
        """Handle dialog rejection (Cancel button)."""
        self.config_cancelled.emit()
        self._cleanup()
        super().reject()

    def accept(self):
        """Handle dialog acceptance (Save button)."""
        self._cleanup()
        super().accept()

    def closeEvent(self, event):
        """Handle window close event."""
        self._cleanup()
        super().closeEvent(event)

    def _cleanup(self):
        """Stop pending resource lookups; late results are dropped."""
        self.form.dispose()
        logger.debug("Config window closing, resource lookups disposed")
