"""
Mixin for widgets that host a DynamicForm inside a scroll area.

Provides scrolling to a field by path, used to bring the first invalid
field into view.
"""
import logging
from PyQt6.QtWidgets import QScrollArea

from pyqt_configform.core.value_tree import is_within

logger = logging.getLogger(__name__)


class ScrollableFormMixin:
    """
    Mixin for widgets that have:
    - self.scroll_area: QScrollArea containing the form
    - self.form: DynamicForm with path-keyed widgets
    """

    # Type hints for attributes that must be provided by the implementing class
    scroll_area: QScrollArea
    form: 'DynamicForm'  # Forward reference

    def _scroll_to_field(self, path: str) -> bool:
        """Scroll so the widget at ``path`` is visible. Returns False if it cannot."""
        logger.debug(f"Scrolling to field: {path}")

        if getattr(self, 'scroll_area', None) is None:
            logger.warning("Scroll area not initialized; cannot navigate to field")
            return False

        widget = self.form.widgets.get(path)
        if widget is None:
            # Nested error keys scroll to their nearest rendered ancestor
            candidates = [p for p in self.form.widgets if is_within(path, p)]
            if not candidates:
                logger.warning(f"Field '{path}' has no rendered widget")
                return False
            widget = self.form.widgets[max(candidates, key=len)]

        # Map widget position to scroll area coordinates, keeping some context above
        widget_pos = widget.mapTo(self.scroll_area.widget(), widget.rect().topLeft())
        self.scroll_area.verticalScrollBar().setValue(max(0, widget_pos.y() - 50))
        return True
