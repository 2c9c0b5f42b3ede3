"""
Schema-driven configuration form for PyQt6.

Turns a FieldManifest into an editable widget tree over a JSON-like value.
The host owns the value: the form emits a fresh tree on every edit and
accepts a new one through ``set_value()``.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Set
import logging

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtWidgets import QLabel, QScrollArea, QVBoxLayout, QWidget

from pyqt_configform.core.field_manifest import DynamicFormContext, FieldDescriptor, FieldErrors, FieldManifest
from pyqt_configform.core.value_tree import (
    ROOT_PATH, FieldPath, as_mapping, child_path, format_path, get_in, is_below
)
from pyqt_configform.services.inventory_service import InventoryLookupService, StaticInventoryService
from pyqt_configform.widgets.shared.error_overlay import ErrorOverlay
from pyqt_configform.widgets.shared.field_renderer_config import create_field_widget_parametric
from pyqt_configform.widgets.shared.field_renderer_types import FieldFormHost, _CombinedMeta
from pyqt_configform.widgets.shared.layout_constants import CURRENT_LAYOUT
from pyqt_configform.widgets.shared.resource_option_resolver import (
    BackgroundRunner, ResolverArena, ResourceOptionResolver
)
from pyqt_configform.widgets.shared.services.field_change_dispatcher import (
    FieldChangeDispatcher, FieldChangeEvent
)
from pyqt_configform.widgets.shared.services.visibility_service import (
    collect_visible_paths, has_visibility_conditions
)

logger = logging.getLogger(__name__)


@dataclass
class FormConfig:
    """
    Configuration for DynamicForm initialization.

    Consolidates the optional constructor parameters into a single config object.
    """
    parent: Optional[QWidget] = None
    disabled: bool = False
    errors: Optional[FieldErrors] = None
    context: Optional[DynamicFormContext] = None
    inventory: Optional[InventoryLookupService] = None
    run_in_background: Optional[BackgroundRunner] = None
    use_scroll_area: Optional[bool] = None  # None = DEFAULT_USE_SCROLL_AREA


class DynamicForm(QWidget, FieldFormHost, metaclass=_CombinedMeta):
    """
    Recursive form over a field manifest.

    Signals:
        value_changed(object): full new value tree after every edit
        field_changed(str, object): path and new value of the edited slice
    """

    value_changed = pyqtSignal(object)
    field_changed = pyqtSignal(str, object)

    DEFAULT_USE_SCROLL_AREA = False
    EMPTY_MANIFEST_TEXT = "No configuration required for this component."

    def __init__(self, manifest: FieldManifest, value: Any = None, config: Optional[FormConfig] = None):
        config = config or FormConfig()
        QWidget.__init__(self, config.parent)

        self.manifest = manifest
        self._value = as_mapping(value) if value is not None else {}
        self.errors = ErrorOverlay(config.errors)
        self.context = config.context or DynamicFormContext()
        self.disabled = config.disabled
        self.use_scroll_area = (
            self.DEFAULT_USE_SCROLL_AREA if config.use_scroll_area is None else config.use_scroll_area
        )

        self.widgets: Dict[str, QWidget] = {}
        self._widget_paths: Dict[str, FieldPath] = {}
        self._arena = ResolverArena(config.inventory or StaticInventoryService(), config.run_in_background)
        self._touched_resolvers: Set[FieldPath] = set()
        self._dispatching = False
        self._rebuild_pending = False
        self._has_conditions = has_visibility_conditions(manifest.fields)
        self._visible_paths = frozenset()
        self._content: Optional[QWidget] = None
        self.empty_notice: Optional[QLabel] = None

        self.setup_ui()
        logger.debug(f"DynamicForm built: {len(manifest.fields)} field(s), {len(self.widgets)} widget(s)")

    @classmethod
    def from_manifest_dict(cls, manifest: Mapping[str, Any], value: Any = None, **config_kwargs) -> 'DynamicForm':
        """Create a form straight from the JSON-like manifest source."""
        return cls(FieldManifest.from_dict(manifest), value, FormConfig(**config_kwargs))

    # ==================== UI CONSTRUCTION ====================

    def setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setSpacing(CURRENT_LAYOUT.main_layout_spacing)
        layout.setContentsMargins(*CURRENT_LAYOUT.main_layout_margins)

        self._content_holder = QWidget()
        self._content_layout = QVBoxLayout(self._content_holder)
        self._content_layout.setContentsMargins(0, 0, 0, 0)

        if self.use_scroll_area:
            self.scroll_area = QScrollArea()
            self.scroll_area.setWidgetResizable(True)
            self.scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
            self.scroll_area.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
            self.scroll_area.setWidget(self._content_holder)
            layout.addWidget(self.scroll_area)
        else:
            self.scroll_area = None
            layout.addWidget(self._content_holder)

        self.rebuild()

    def build_form(self) -> QWidget:
        """Build the content widget for the current manifest, value and errors."""
        content_widget = QWidget()
        content_layout = QVBoxLayout(content_widget)
        content_layout.setSpacing(CURRENT_LAYOUT.content_layout_spacing)
        content_layout.setContentsMargins(*CURRENT_LAYOUT.content_layout_margins)

        if self.manifest.is_empty:
            self.empty_notice = QLabel(self.EMPTY_MANIFEST_TEXT)
            self.empty_notice.setObjectName("no_configuration_notice")
            self.empty_notice.setStyleSheet(f"color: {CURRENT_LAYOUT.description_color};")
            content_layout.addWidget(self.empty_notice)
            return content_widget

        self.empty_notice = None
        for field in self.manifest.fields:
            path = child_path(ROOT_PATH, field.name)
            widget = create_field_widget_parametric(
                self, field, path,
                error=self.errors.error_for(format_path(path)),
                sibling_values=self._value,
            )
            if widget is not None:
                content_layout.addWidget(widget)
        content_layout.addStretch()
        return content_widget

    def rebuild(self) -> None:
        """Discard and rebuild every field widget (resolvers for surviving paths are kept)."""
        self._rebuild_pending = False
        with self.rebuild_scope(ROOT_PATH):
            if self._content is not None:
                self._content_layout.removeWidget(self._content)
                self._content.setParent(None)
                self._content.deleteLater()
            self._content = self.build_form()
            self._content_layout.addWidget(self._content)

        if self._has_conditions:
            self._visible_paths = collect_visible_paths(self.manifest.fields, self._value)

    # ==================== FieldFormHost ====================

    def value_at(self, path: FieldPath) -> Any:
        return get_in(self._value, path)

    def dispatch_change(self, path: FieldPath, value: Any) -> None:
        FieldChangeDispatcher.instance().dispatch(FieldChangeEvent(path, value, self))

    def resolver_for(self, path: FieldPath, field: FieldDescriptor) -> ResourceOptionResolver:
        self._touched_resolvers.add(path)
        return self._arena.get_or_create(path, field)

    def register_widget(self, path: FieldPath, widget: QWidget) -> None:
        key = format_path(path)
        self.widgets[key] = widget
        self._widget_paths[key] = path

    @contextmanager
    def rebuild_scope(self, prefix: FieldPath):
        """
        Rebuild everything strictly below ``prefix``.

        Widgets registered below the prefix are forgotten; resolvers below it
        survive only if the rebuild asks for them again.
        """
        for key in [k for k, p in self._widget_paths.items() if is_below(p, prefix)]:
            del self.widgets[key]
            del self._widget_paths[key]

        previous = {p for p in self._arena.resolvers if is_below(p, prefix)}
        for path in previous:
            self._arena.resolvers[path].disconnect_listeners()

        outer_touched = self._touched_resolvers
        self._touched_resolvers = set()
        try:
            yield
        finally:
            touched = self._touched_resolvers
            self._touched_resolvers = outer_touched | touched
            self._arena.dispose_where(lambda path: path in previous and path not in touched)

    # ==================== HOST API ====================

    def get_value(self) -> Dict[str, Any]:
        return self._value

    def set_value(self, value: Any) -> None:
        """Replace the edited tree (host re-supplying props); equal trees are ignored."""
        value = as_mapping(value) if value is not None else {}
        if value is self._value or value == self._value:
            self._value = value
            return
        self._value = value
        self.rebuild()

    def set_manifest(self, manifest: FieldManifest) -> None:
        """Swap the schema; resource fields whose descriptor changed get a fresh resolver."""
        if manifest == self.manifest:
            return
        self.manifest = manifest
        self._has_conditions = has_visibility_conditions(manifest.fields)
        self.rebuild()

    def set_errors(self, errors: Optional[FieldErrors]) -> None:
        overlay = ErrorOverlay(errors)
        if overlay == self.errors:
            return
        self.errors = overlay
        self.rebuild()

    def set_context(self, context: Optional[DynamicFormContext]) -> None:
        """Swap the ambient context; resource fields re-fire their lookups."""
        self.context = context or DynamicFormContext()
        for path, resolver in list(self._arena.resolvers.items()):
            if resolver.refresh(self.context):
                logger.info(f"Resource options for {format_path(path)!r} reloading for new context")

    def set_disabled(self, disabled: bool) -> None:
        if disabled != self.disabled:
            self.disabled = disabled
            self.rebuild()

    @property
    def resolvers(self) -> Dict[str, ResourceOptionResolver]:
        """Live resolvers keyed by rendered path."""
        return {format_path(path): resolver for path, resolver in self._arena.resolvers.items()}

    def dispose(self) -> None:
        """Cancel all pending lookups; results arriving later are dropped."""
        self._arena.dispose_all()

    def closeEvent(self, event) -> None:
        self.dispose()
        super().closeEvent(event)

    # ==================== DISPATCH HOOKS ====================

    def _commit_value(self, new_root: Dict[str, Any]) -> None:
        self._value = new_root

    def _after_value_committed(self) -> None:
        if not self._has_conditions or self._rebuild_pending:
            return
        visible = collect_visible_paths(self.manifest.fields, self._value)
        if visible != self._visible_paths:
            # Defer: the widget that emitted this change may be torn down by the rebuild
            logger.debug("Field visibility changed; scheduling rebuild")
            self._rebuild_pending = True
            QTimer.singleShot(0, self.rebuild)


