"""
Field renderer configuration - parametric pattern.

Single source of truth for how each field kind is rendered.

Architecture:
- Field handlers: one typed callable per FieldKind creating the main editor
- Unified config: single _FIELD_RENDERER_CONFIG dict with all metadata
- Parametric dispatch: create_field_widget_parametric() is the only entry point

Every FieldKind must have an entry; this is checked when the module is
imported, so a new kind cannot be added without a renderer.
"""

from typing import Any, Optional
import logging

from PyQt6.QtWidgets import QGroupBox, QLabel, QVBoxLayout, QWidget

from pyqt_configform.core.field_manifest import FieldDescriptor, FieldKind, as_bool
from pyqt_configform.core.value_tree import FieldPath, as_mapping, child_path, empty_value_for, format_path

from .field_renderer_types import DisplayInfo, FieldFormHost, FieldIds, FieldRendererConfig
from .layout_constants import CURRENT_LAYOUT
from .value_widgets import (
    MultiLineTextEdit, NumberLineEdit, OptionComboBox, TextLineEdit, ToggleCheckBox, format_number
)

logger = logging.getLogger(__name__)

UNSUPPORTED_TEXT = "Unsupported field type: {type}"
RANGE_TEXT = "Range: {min} - {max}"


# ============================================================================
# DISPLAY HELPERS
# ============================================================================

def _build_display_info(field: FieldDescriptor) -> DisplayInfo:
    label = field.label
    if field.required:
        label = f"{label} *"
    info: DisplayInfo = {
        'field_label': label,
        'description': field.description,
        'placeholder': field.placeholder,
    }
    if field.kind is FieldKind.NUMBER and field.min is not None and field.max is not None:
        info['range_hint'] = RANGE_TEXT.format(min=format_number(field.min), max=format_number(field.max))
    return info


def _build_field_ids(path: FieldPath) -> FieldIds:
    key = format_path(path)
    return {
        'widget_id': key,
        'label_id': f"{key}_label",
        'error_id': f"{key}_error",
    }


def _initial_value(field: FieldDescriptor, current_value: Any) -> Any:
    """Value to show: the tree's value, else the manifest default (display only)."""
    if isinstance(current_value, (dict, list)):
        # Container where a scalar belongs; show the kind's empty value
        logger.debug(f"Coercing malformed value for scalar field {field.name!r}")
        return empty_value_for(field.kind)
    if current_value is not None:
        return current_value
    if field.default_value is not None:
        return field.default_value
    return empty_value_for(field.kind)


def _connect_dispatch(host: FieldFormHost, widget: Any, path: FieldPath) -> None:
    # Closure captures the path only; the value is resolved against the root at dispatch time
    widget.value_edited.connect(lambda value: host.dispatch_change(path, value))


# ============================================================================
# FIELD HANDLERS - one per kind
# ============================================================================

def _create_text_input(host, field, path, current_value, display_info, field_ids):
    widget = TextLineEdit()
    widget.setPlaceholderText(display_info['placeholder'])
    widget.set_value(_initial_value(field, current_value))
    _connect_dispatch(host, widget, path)
    return widget


def _create_number_input(host, field, path, current_value, display_info, field_ids):
    widget = NumberLineEdit(field.min, field.max)
    widget.setPlaceholderText(display_info['placeholder'])
    widget.set_value(_initial_value(field, current_value))
    _connect_dispatch(host, widget, path)
    return widget


def _create_toggle(host, field, path, current_value, display_info, field_ids):
    # Label lives in the checkbox text
    widget = ToggleCheckBox(display_info['field_label'])
    widget.set_value(as_bool(_initial_value(field, current_value)))
    _connect_dispatch(host, widget, path)
    return widget


def _create_select(host, field, path, current_value, display_info, field_ids):
    widget = OptionComboBox()
    widget.setPlaceholderText(display_info['placeholder'])
    widget.set_options((option.value, option.label) for option in field.options)
    widget.set_value(_initial_value(field, current_value))
    _connect_dispatch(host, widget, path)
    return widget


def _create_resource_select(host, field, path, current_value, display_info, field_ids):
    from .resource_field_widget import ResourceComboBox

    resolver = host.resolver_for(path, field)
    widget = ResourceComboBox(resolver, display_info['placeholder'], form_disabled=host.disabled)
    widget.set_value(_initial_value(field, current_value))
    _connect_dispatch(host, widget, path)
    resolver.refresh(host.context)
    return widget


def _create_textarea(host, field, path, current_value, display_info, field_ids):
    widget = MultiLineTextEdit()
    widget.setPlaceholderText(display_info['placeholder'])
    widget.set_value(_initial_value(field, current_value))
    _connect_dispatch(host, widget, path)
    return widget


def _create_map_editor(host, field, path, current_value, display_info, field_ids):
    from .map_editor import MapEditor
    return MapEditor(host, field, path)


def _create_array_editor(host, field, path, current_value, display_info, field_ids):
    from .array_editor import ArrayEditor
    return ArrayEditor(host, field, path)


def _create_object_fields(host, field, path, current_value, display_info, field_ids):
    """Recurse into child descriptors; children get no error of their own."""
    body = QWidget()
    layout = QVBoxLayout(body)
    layout.setSpacing(CURRENT_LAYOUT.content_layout_spacing)
    layout.setContentsMargins(CURRENT_LAYOUT.nested_indent, 0, 0, 0)

    siblings = as_mapping(current_value)
    for child in field.fields:
        child_widget = create_field_widget_parametric(
            host, child, child_path(path, child.name), error='', sibling_values=siblings
        )
        if child_widget is not None:
            layout.addWidget(child_widget)
    return body


# ============================================================================
# UNIFIED FIELD RENDERER CONFIGURATION (typed, no eval strings)
# ============================================================================

_FIELD_RENDERER_CONFIG: dict[FieldKind, FieldRendererConfig] = {
    FieldKind.STRING: FieldRendererConfig(
        is_composite=False,
        create_main_widget=_create_text_input,
        needs_label=True,
    ),
    FieldKind.NUMBER: FieldRendererConfig(
        is_composite=False,
        create_main_widget=_create_number_input,
        needs_label=True,
    ),
    FieldKind.BOOLEAN: FieldRendererConfig(
        is_composite=False,
        create_main_widget=_create_toggle,
        needs_label=False,
    ),
    FieldKind.SELECT: FieldRendererConfig(
        is_composite=False,
        create_main_widget=_create_select,
        needs_label=True,
    ),
    FieldKind.RESOURCE: FieldRendererConfig(
        is_composite=False,
        create_main_widget=_create_resource_select,
        needs_label=True,
        self_managed_enabled_state=True,
    ),
    FieldKind.TEXTAREA: FieldRendererConfig(
        is_composite=False,
        create_main_widget=_create_textarea,
        needs_label=True,
    ),
    FieldKind.MAP: FieldRendererConfig(
        is_composite=False,
        create_main_widget=_create_map_editor,
        needs_label=True,
        self_managed_enabled_state=True,
    ),
    FieldKind.ARRAY: FieldRendererConfig(
        is_composite=False,
        create_main_widget=_create_array_editor,
        needs_label=True,
        self_managed_enabled_state=True,
    ),
    FieldKind.OBJECT: FieldRendererConfig(
        is_composite=True,
        create_main_widget=_create_object_fields,
        needs_label=False,
        self_managed_enabled_state=True,
    ),
}


# ============================================================================
# UNIFIED FIELD CREATION FUNCTION
# ============================================================================

def _create_unsupported_placeholder(field: FieldDescriptor, key: str) -> QWidget:
    logger.warning(f"Unsupported field type {field.type!r} at {key!r}")
    label = QLabel(UNSUPPORTED_TEXT.format(type=field.type))
    label.setObjectName(f"{key}_unsupported")
    label.setStyleSheet(f"color: {CURRENT_LAYOUT.description_color};")
    return label


def _create_caption(text: str, object_name: str, color: str) -> QLabel:
    label = QLabel(text)
    label.setObjectName(object_name)
    label.setWordWrap(True)
    label.setStyleSheet(f"color: {color};")
    return label


def create_field_widget_parametric(host: FieldFormHost, field: FieldDescriptor, path: FieldPath,
                                   error: str = '', sibling_values: Any = None) -> Optional[QWidget]:
    """
    UNIFIED: Create the widget for one field using parametric dispatch.

    Args:
        host: Form composing the field tree
        field: Descriptor to render
        path: Absolute path (segment tuple) of the field's value in the root tree
        error: Validation message to show for this field (whole subtree for objects)
        sibling_values: Mapping holding the field, for visibility conditions

    Returns:
        QWidget container, or None when the field is hidden
    """
    if not field.is_visible(sibling_values):
        logger.debug(f"Skipping hidden field {format_path(path)!r}")
        return None

    field_ids = _build_field_ids(path)
    key = field_ids['widget_id']
    kind = field.kind
    if kind is None:
        return _create_unsupported_placeholder(field, key)

    config = _FIELD_RENDERER_CONFIG[kind]
    display_info = _build_display_info(field)
    current_value = host.value_at(path)

    container = QGroupBox(display_info['field_label']) if config.is_composite else QWidget()
    container.setObjectName(f"{key}_container")
    layout = QVBoxLayout(container)
    layout.setSpacing(CURRENT_LAYOUT.field_spacing)
    if not config.is_composite:
        layout.setContentsMargins(*CURRENT_LAYOUT.field_margins)

    if config.needs_label:
        label = QLabel(display_info['field_label'])
        label.setObjectName(field_ids['label_id'])
        layout.addWidget(label)

    # Objects describe themselves above their children
    if config.is_composite and display_info['description']:
        layout.addWidget(_create_caption(
            display_info['description'], f"{key}_description", CURRENT_LAYOUT.description_color
        ))

    main_widget = config.create_main_widget(host, field, path, current_value, display_info, field_ids)
    main_widget.setObjectName(field_ids['widget_id'])
    layout.addWidget(main_widget)

    if not config.is_composite and config.needs_description and display_info['description']:
        layout.addWidget(_create_caption(
            display_info['description'], f"{key}_description", CURRENT_LAYOUT.description_color
        ))

    if display_info.get('range_hint'):
        layout.addWidget(_create_caption(
            display_info['range_hint'], f"{key}_range", CURRENT_LAYOUT.description_color
        ))

    if error:
        layout.addWidget(_create_caption(error, field_ids['error_id'], CURRENT_LAYOUT.error_color))
        main_widget.setProperty("invalid", True)

    host.register_widget(path, main_widget)

    if host.disabled and not config.self_managed_enabled_state:
        main_widget.setEnabled(False)

    return container


# ============================================================================
# VALIDATION
# ============================================================================

def _validate_field_renderers() -> None:
    """Validate that every field kind has a renderer."""
    missing = [kind.value for kind in FieldKind if kind not in _FIELD_RENDERER_CONFIG]
    if missing:
        raise RuntimeError(f"No renderer configured for field kinds: {', '.join(missing)}")
    for kind, config in _FIELD_RENDERER_CONFIG.items():
        if config.create_main_widget is None:
            raise RuntimeError(f"{kind.value}: create_main_widget is required")

    logger.debug(f"Validated {len(_FIELD_RENDERER_CONFIG)} field renderers")


# Run validation at module load time
_validate_field_renderers()
