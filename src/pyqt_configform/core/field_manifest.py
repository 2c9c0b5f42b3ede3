"""
Field manifest model.

Declarative schema describing one configuration shape: an ordered list of
field descriptors, each tagged with a kind and carrying kind-specific
metadata (static options, resource type, nested fields, item shape).

The manifest source is external (component/trigger definitions served by the
API), so parsing never rejects input: every missing or malformed key falls
back to a neutral default and unknown kind tags are preserved as-is so the
renderer can show an explicit placeholder for them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class FieldKind(Enum):
    """Supported field kinds - one renderer handler per member."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    RESOURCE = "resource"
    TEXTAREA = "textarea"
    MAP = "map"
    ARRAY = "array"
    OBJECT = "object"

    @classmethod
    def from_tag(cls, tag: Any) -> Optional['FieldKind']:
        """Return the kind for a raw tag, or None if the tag is unknown."""
        try:
            return cls(tag)
        except ValueError:
            return None


def _first(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Read the first present key (camelCase wire name or snake_case alias)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _as_mapping(data: Any) -> Mapping[str, Any]:
    return data if isinstance(data, Mapping) else {}


def _as_sequence(data: Any) -> Tuple[Any, ...]:
    return tuple(data) if isinstance(data, (list, tuple)) else ()


_TRUE_STRINGS = frozenset({'true', '1', 'yes', 'on'})


def as_bool(value: Any) -> bool:
    """JSON-style truthiness: only real booleans, non-zero numbers and true-like strings are True."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (int, float)):
        return value != 0
    return False


@dataclass(frozen=True)
class SelectOption:
    """One static choice of a select field."""
    value: str
    label: str

    @classmethod
    def from_dict(cls, data: Any) -> 'SelectOption':
        data = _as_mapping(data)
        value = str(_first(data, 'value', default=''))
        label = str(_first(data, 'label', default=value))
        return cls(value=value, label=label)


@dataclass(frozen=True)
class VisibilityCondition:
    """Show a field only while a sibling field holds one of ``values``."""
    field: str = ''
    values: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> 'VisibilityCondition':
        data = _as_mapping(data)
        return cls(
            field=str(_first(data, 'field', default='')),
            values=tuple(str(v) for v in _as_sequence(data.get('values'))),
        )

    def is_satisfied(self, sibling_values: Mapping[str, Any]) -> bool:
        # Conditions missing either half hold trivially
        if not self.field or not self.values:
            return True
        current = sibling_values.get(self.field) if isinstance(sibling_values, Mapping) else None
        current_str = '' if current is None else _stringify(current)
        return current_str in self.values


def _stringify(value: Any) -> str:
    # Booleans compare against their JSON spelling ("true"/"false")
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


@dataclass(frozen=True)
class FieldDescriptor:
    """
    One schema node.

    ``type`` keeps the raw tag exactly as supplied; ``kind`` resolves it to a
    :class:`FieldKind` (None for tags this engine does not know).
    """
    name: str = ''
    type: str = ''
    display_name: str = ''
    description: str = ''
    placeholder: str = ''
    required: bool = False
    hidden: bool = False
    options: Tuple[SelectOption, ...] = ()
    resource_type: str = ''
    item_type: str = ''
    fields: Tuple['FieldDescriptor', ...] = ()
    default_value: Any = None
    min: Optional[float] = None
    max: Optional[float] = None
    visibility_conditions: Tuple[VisibilityCondition, ...] = ()

    @property
    def kind(self) -> Optional[FieldKind]:
        return FieldKind.from_tag(self.type)

    @property
    def label(self) -> str:
        """Display label: display name, falling back to the field name."""
        return self.display_name or self.name

    def is_visible(self, sibling_values: Any = None) -> bool:
        """False for hidden fields and for fields whose conditions do not hold."""
        if self.hidden:
            return False
        siblings = _as_mapping(sibling_values)
        return all(condition.is_satisfied(siblings) for condition in self.visibility_conditions)

    @classmethod
    def from_dict(cls, data: Any) -> 'FieldDescriptor':
        """Build a descriptor from the JSON-like manifest source."""
        data = _as_mapping(data)
        return cls(
            name=str(_first(data, 'name', default='')),
            type=str(_first(data, 'type', 'kind', default='')),
            display_name=str(_first(data, 'displayName', 'display_name', 'label', default='')),
            description=str(_first(data, 'description', default='')),
            placeholder=str(_first(data, 'placeholder', default='')),
            required=as_bool(_first(data, 'required', default=False)),
            hidden=as_bool(_first(data, 'hidden', default=False)),
            options=tuple(SelectOption.from_dict(o) for o in _as_sequence(data.get('options'))),
            resource_type=str(_first(data, 'resourceType', 'resource_type', default='')),
            item_type=str(_first(data, 'itemType', 'item_type', default='')),
            fields=tuple(cls.from_dict(f) for f in _as_sequence(data.get('fields'))),
            default_value=_first(data, 'defaultValue', 'default_value'),
            min=_as_number(_first(data, 'min')),
            max=_as_number(_first(data, 'max')),
            visibility_conditions=tuple(
                VisibilityCondition.from_dict(c)
                for c in _as_sequence(_first(data, 'visibilityConditions', 'visibility_conditions'))
            ),
        )


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric bound: {value!r}")
        return None


@dataclass(frozen=True)
class FieldManifest:
    """Ordered list of field descriptors for one configuration shape."""
    fields: Tuple[FieldDescriptor, ...] = ()
    display_name: str = ''
    type: str = ''

    @property
    def is_empty(self) -> bool:
        return not self.fields

    @classmethod
    def from_dict(cls, data: Any) -> 'FieldManifest':
        data = _as_mapping(data)
        return cls(
            fields=tuple(FieldDescriptor.from_dict(f) for f in _as_sequence(data.get('fields'))),
            display_name=str(_first(data, 'displayName', 'display_name', default='')),
            type=str(_first(data, 'type', default='')),
        )


@dataclass(frozen=True)
class DynamicFormContext:
    """
    Read-only ambient context threaded unchanged through every field.

    Only resource fields read it, to scope their inventory lookup.
    """
    integration_name: Optional[str] = None
    organization_id: Optional[str] = None
    canvas_id: Optional[str] = None

    @property
    def has_resource_scope(self) -> bool:
        return bool(self.integration_name) and bool(self.canvas_id)

    @classmethod
    def from_dict(cls, data: Any) -> 'DynamicFormContext':
        data = _as_mapping(data)
        return cls(
            integration_name=_first(data, 'integrationName', 'integration_name'),
            organization_id=_first(data, 'organizationId', 'organization_id'),
            canvas_id=_first(data, 'canvasId', 'canvas_id'),
        )


# Errors supplied by the external validator: field name (or path) -> message
FieldErrors = Dict[str, str]
