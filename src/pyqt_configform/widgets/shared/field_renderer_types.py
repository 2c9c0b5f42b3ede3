"""
Type-safe definitions for field renderer configuration.

Uses ABCs to enforce explicit contracts and enable static type checking.
"""

from abc import ABC, ABCMeta, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import TypedDict, Callable, Any, Dict

from PyQt6.QtWidgets import QWidget

from pyqt_configform.core.field_manifest import DynamicFormContext, FieldDescriptor
from pyqt_configform.core.value_tree import FieldPath


class DisplayInfo(TypedDict, total=False):
    """Type-safe display information for a field."""
    field_label: str
    description: str
    placeholder: str
    range_hint: str


class FieldIds(TypedDict, total=False):
    """Type-safe object name mapping for a field's widgets."""
    widget_id: str
    label_id: str
    error_id: str


class FieldFormHost(ABC):
    """
    ABC for whatever composes the field tree (DynamicForm).

    Editors never capture parent values: they read their slice through
    ``value_at`` and write through ``dispatch_change`` with their absolute
    path, so every change is applied to the current root. Paths are
    segment tuples; ``widgets`` is keyed by their rendered form.
    """

    disabled: bool
    context: DynamicFormContext
    widgets: Dict[str, Any]

    @abstractmethod
    def value_at(self, path: FieldPath) -> Any:
        """Current value at ``path`` in the root tree."""
        pass

    @abstractmethod
    def dispatch_change(self, path: FieldPath, value: Any) -> None:
        """Replace the value at ``path`` and emit the new root."""
        pass

    @abstractmethod
    def resolver_for(self, path: FieldPath, field: FieldDescriptor) -> Any:
        """Per-path resource option resolver (created on first use)."""
        pass

    @abstractmethod
    def register_widget(self, path: FieldPath, widget: QWidget) -> None:
        """Record the main editor rendered for ``path``."""
        pass

    @abstractmethod
    def rebuild_scope(self, prefix: FieldPath) -> AbstractContextManager:
        """Context for rebuilding every widget under ``prefix``."""
        pass


class _CombinedMeta(type(QWidget), ABCMeta):
    """Metaclass for QWidget subclasses that also implement an ABC."""
    pass


# Handler signature: (host, field, path, current_value, display_info, field_ids) -> QWidget
MainWidgetHandler = Callable[
    ['FieldFormHost', FieldDescriptor, FieldPath, Any, DisplayInfo, FieldIds],
    QWidget
]


@dataclass
class FieldRendererConfig:
    """Type-safe configuration for one field kind."""
    is_composite: bool
    create_main_widget: MainWidgetHandler
    needs_label: bool
    needs_description: bool = True
    self_managed_enabled_state: bool = False
