"""
Visibility tracking for conditionally shown fields.

A field with visibility conditions appears or disappears when a sibling's
value changes. The form compares the set of visible paths before and after
each change and rebuilds only when that set moved.
"""

from typing import Any, FrozenSet, Iterable, Set

from pyqt_configform.core.field_manifest import FieldDescriptor, FieldKind
from pyqt_configform.core.value_tree import ROOT_PATH, FieldPath, as_list, as_mapping, child_path, item_path


def has_visibility_conditions(fields: Iterable[FieldDescriptor]) -> bool:
    """True if any descriptor in the tree carries visibility conditions."""
    return any(
        field.visibility_conditions or has_visibility_conditions(field.fields)
        for field in fields
    )


def collect_visible_paths(fields: Iterable[FieldDescriptor], value: Any,
                          parent_path: FieldPath = ROOT_PATH) -> FrozenSet[FieldPath]:
    """Paths of every field that would be rendered for ``value``."""
    visible: Set[FieldPath] = set()
    siblings = as_mapping(value)
    for field in fields:
        if not field.is_visible(siblings):
            continue
        path = child_path(parent_path, field.name)
        visible.add(path)

        if field.kind is FieldKind.OBJECT:
            visible |= collect_visible_paths(field.fields, siblings.get(field.name), path)
        elif field.kind is FieldKind.ARRAY and field.item_type == FieldKind.OBJECT.value:
            for index, item in enumerate(as_list(siblings.get(field.name))):
                visible |= collect_visible_paths(field.fields, item, item_path(path, index))
    return frozenset(visible)
