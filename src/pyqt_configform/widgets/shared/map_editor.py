"""
Map editor: a string -> string mapping edited as (key, value) rows.

Fully controlled: the rows are rebuilt from the value the form holds, and
every edit dispatches the complete new mapping at the editor's path.
"""

from typing import Any, Dict, List
import logging

from PyQt6.QtWidgets import QHBoxLayout, QPushButton, QVBoxLayout, QWidget

from pyqt_configform.core.field_manifest import FieldDescriptor
from pyqt_configform.core.value_tree import (
    FieldPath, as_mapping, format_path, map_add_row, map_remove_key, map_rename_key, map_set_value
)

from .field_renderer_types import FieldFormHost
from .layout_constants import CURRENT_LAYOUT
from .value_widgets import TextLineEdit

logger = logging.getLogger(__name__)


class MapRow(QWidget):
    """One (key, value) pair with a remove button."""

    def __init__(self, key: str, value: Any, placeholder: str = "", parent=None):
        super().__init__(parent)
        self.key = key

        layout = QHBoxLayout(self)
        layout.setSpacing(CURRENT_LAYOUT.row_spacing)
        layout.setContentsMargins(0, 0, 0, 0)

        self.key_edit = TextLineEdit()
        self.key_edit.setPlaceholderText("Key")
        self.key_edit.set_value(key)
        layout.addWidget(self.key_edit, 1)

        self.value_edit = TextLineEdit()
        self.value_edit.setPlaceholderText(placeholder or "Value")
        self.value_edit.set_value(value)
        layout.addWidget(self.value_edit, 2)

        self.remove_button = QPushButton("Remove")
        self.remove_button.setMaximumWidth(70)
        layout.addWidget(self.remove_button)


class MapEditor(QWidget):
    """Editable list of key/value rows for a ``map`` field."""

    def __init__(self, host: FieldFormHost, field: FieldDescriptor, path: FieldPath, parent=None):
        super().__init__(parent)
        self.host = host
        self.field = field
        self.path = path
        self.rows: List[MapRow] = []

        layout = QVBoxLayout(self)
        layout.setSpacing(CURRENT_LAYOUT.row_spacing)
        layout.setContentsMargins(0, 0, 0, 0)

        self._rows_layout = QVBoxLayout()
        self._rows_layout.setSpacing(CURRENT_LAYOUT.row_spacing)
        layout.addLayout(self._rows_layout)

        self.add_button = QPushButton("Add")
        self.add_button.clicked.connect(self.add_row)
        self.add_button.setEnabled(not host.disabled)
        layout.addWidget(self.add_button)

        self.rebuild_rows()

    def current_mapping(self) -> Dict[str, Any]:
        return as_mapping(self.host.value_at(self.path))

    def rebuild_rows(self) -> None:
        for row in self.rows:
            self._rows_layout.removeWidget(row)
            row.setParent(None)
            row.deleteLater()
        self.rows = []

        for key, value in self.current_mapping().items():
            row = MapRow(key, value, self.field.placeholder)
            row.key_edit.editingFinished.connect(lambda row=row: self.rename_key(row.key, row.key_edit.text()))
            row.value_edit.value_edited.connect(lambda value, row=row: self.set_row_value(row.key, value))
            row.remove_button.clicked.connect(lambda checked=False, row=row: self.remove_key(row.key))
            row.setEnabled(not self.host.disabled)
            self._rows_layout.addWidget(row)
            self.rows.append(row)

    # ==================== OPERATIONS ====================

    def add_row(self) -> None:
        self._commit(map_add_row(self.current_mapping()), rebuild=True)

    def remove_key(self, key: str) -> None:
        self._commit(map_remove_key(self.current_mapping(), key), rebuild=True)

    def rename_key(self, old_key: str, new_key: str) -> None:
        current = self.current_mapping()
        # Rows of a rebuilt editor can still report focus-out for a key that no longer exists
        if new_key == old_key or old_key not in current:
            return
        if new_key in current:
            logger.debug(f"Renaming {old_key!r} to existing key {new_key!r} in {format_path(self.path)!r} overwrites it")
        self._commit(map_rename_key(current, old_key, new_key), rebuild=True)

    def set_row_value(self, key: str, value: Any) -> None:
        self._commit(map_set_value(self.current_mapping(), key, value), rebuild=False)

    def _commit(self, mapping: Dict[str, Any], rebuild: bool) -> None:
        self.host.dispatch_change(self.path, mapping)
        if rebuild:
            self.rebuild_rows()
