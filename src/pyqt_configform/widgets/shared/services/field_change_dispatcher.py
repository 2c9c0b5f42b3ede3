"""
Unified Field Change Dispatcher.

Centralizes all field change handling into a single event-driven dispatcher.
Editors never patch their parent's value themselves: they report
(path, value) and the dispatcher applies a pure ``set_in`` on the form's
current root, so every emitted tree reflects all earlier edits.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pyqt_configform.core.value_tree import FieldPath, format_path, set_in

if TYPE_CHECKING:
    from pyqt_configform.widgets.dynamic_form import DynamicForm

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldChangeEvent:
    """Immutable event representing a field change."""
    path: FieldPath                 # Absolute path in the root tree
    value: Any                      # New value for that path
    source_form: 'DynamicForm'      # Form the change originated in


class FieldChangeDispatcher:
    """Singleton dispatcher for all field changes. Stateless."""

    _instance = None

    @classmethod
    def instance(cls) -> 'FieldChangeDispatcher':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def dispatch(self, event: FieldChangeEvent) -> None:
        """Handle a field change event."""
        form = event.source_form
        logger.debug(f"DISPATCH: {format_path(event.path)} = {repr(event.value)[:50]}")

        # Reentrancy guard: listeners reacting to value_changed must not re-enter
        if form._dispatching:
            logger.warning(f"DISPATCH BLOCKED: {format_path(event.path)} (form already dispatching)")
            return
        form._dispatching = True

        try:
            new_root = set_in(form.get_value(), event.path, event.value)
            form._commit_value(new_root)

            form.field_changed.emit(format_path(event.path), event.value)
            form.value_changed.emit(new_root)
        finally:
            form._dispatching = False

        form._after_value_committed()
