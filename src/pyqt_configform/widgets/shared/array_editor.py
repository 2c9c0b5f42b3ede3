"""
Array editor: an ordered list of scalar or object items.

Scalar items (``string``/``number``) get one line edit each. Object items
render their child fields through the regular field dispatcher, with paths
``path + (i, child)``, so nested resource/map/array fields inside items behave
exactly like top-level ones.
"""

from typing import Any, List
import logging

from PyQt6.QtWidgets import QFrame, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from pyqt_configform.core.field_manifest import FieldDescriptor, FieldKind
from pyqt_configform.core.value_tree import (
    FieldPath, array_append, array_default_item, array_remove, array_replace, as_list,
    child_path, format_path, item_path
)

from .field_renderer_types import FieldFormHost
from .layout_constants import CURRENT_LAYOUT
from .value_widgets import NumberLineEdit, TextLineEdit

logger = logging.getLogger(__name__)


class ArrayEditor(QWidget):
    """Add/remove/update list editor for an ``array`` field."""

    def __init__(self, host: FieldFormHost, field: FieldDescriptor, path: FieldPath, parent=None):
        super().__init__(parent)
        self.host = host
        self.field = field
        self.path = path
        self.item_type = field.item_type or FieldKind.STRING.value
        self.item_rows: List[QWidget] = []

        layout = QVBoxLayout(self)
        layout.setSpacing(CURRENT_LAYOUT.row_spacing)
        layout.setContentsMargins(0, 0, 0, 0)

        self._items_layout = QVBoxLayout()
        self._items_layout.setSpacing(CURRENT_LAYOUT.row_spacing)
        layout.addLayout(self._items_layout)

        self.add_button = QPushButton("Add Item")
        self.add_button.clicked.connect(self.add_item)
        self.add_button.setEnabled(not host.disabled)
        layout.addWidget(self.add_button)

        self.rebuild_items()

    @property
    def has_object_items(self) -> bool:
        return self.item_type == FieldKind.OBJECT.value

    def current_items(self) -> List[Any]:
        return as_list(self.host.value_at(self.path))

    def rebuild_items(self) -> None:
        with self.host.rebuild_scope(self.path):
            for row in self.item_rows:
                self._items_layout.removeWidget(row)
                row.setParent(None)
                row.deleteLater()
            self.item_rows = []

            for index, item in enumerate(self.current_items()):
                row = self._create_item_row(index, item)
                row.setEnabled(not self.host.disabled)
                self._items_layout.addWidget(row)
                self.item_rows.append(row)

        logger.debug(f"Rebuilt {len(self.item_rows)} item(s) for {format_path(self.path)!r}")

    def _create_item_row(self, index: int, item: Any) -> QWidget:
        row = QFrame() if self.has_object_items else QWidget()
        row.setObjectName(format_path(item_path(self.path, index)))
        layout = QHBoxLayout(row)
        layout.setSpacing(CURRENT_LAYOUT.row_spacing)
        layout.setContentsMargins(0, 0, 0, 0)

        if self.has_object_items:
            row.setFrameShape(QFrame.Shape.StyledPanel)
            layout.addWidget(self._create_object_item(index, item), 1)
        else:
            editor = NumberLineEdit() if self.item_type == FieldKind.NUMBER.value else TextLineEdit()
            editor.set_value(item)
            editor.value_edited.connect(lambda value, index=index: self.update_item(index, value))
            row.editor = editor
            layout.addWidget(editor, 1)

        remove_button = QPushButton("Remove")
        remove_button.setMaximumWidth(70)
        remove_button.clicked.connect(lambda checked=False, index=index: self.remove_item(index))
        row.remove_button = remove_button
        layout.addWidget(remove_button)
        return row

    def _create_object_item(self, index: int, item: Any) -> QWidget:
        from .field_renderer_config import create_field_widget_parametric

        body = QWidget()
        body_layout = QVBoxLayout(body)
        body_layout.setSpacing(CURRENT_LAYOUT.content_layout_spacing)
        body_layout.setContentsMargins(6, 6, 6, 6)

        path = item_path(self.path, index)
        if not self.field.fields:
            body_layout.addWidget(QLabel(f"Item {index + 1}"))
        for child in self.field.fields:
            child_widget = create_field_widget_parametric(
                self.host, child, child_path(path, child.name), error='', sibling_values=item
            )
            if child_widget is not None:
                body_layout.addWidget(child_widget)
        return body

    # ==================== OPERATIONS ====================

    def add_item(self) -> None:
        new_items = array_append(self.current_items(), array_default_item(self.item_type))
        self.host.dispatch_change(self.path, new_items)
        self.rebuild_items()

    def remove_item(self, index: int) -> None:
        self.host.dispatch_change(self.path, array_remove(self.current_items(), index))
        self.rebuild_items()

    def update_item(self, index: int, value: Any) -> None:
        self.host.dispatch_change(self.path, array_replace(self.current_items(), index, value))
