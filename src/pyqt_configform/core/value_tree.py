"""
Value tree path algebra.

The value being edited is an untyped JSON-like tree (dicts, lists, scalars)
owned by the host. Nothing in this module mutates its input: every operation
shallow-copies the containers along the touched path and returns a new tree,
so siblings are shared by reference and never modified.

A :data:`FieldPath` is a tuple of segments: a ``str`` key for object descent,
an ``int`` index for array descent. Keys are taken verbatim, so a field named
``metadata.labels`` (or one with no name at all) addresses exactly that key.
The dotted/bracketed rendering from :func:`format_path` is only a display
key for widgets, errors and logs; it is never parsed back.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from .field_manifest import FieldKind

PathSegment = Union[str, int]
FieldPath = Tuple[PathSegment, ...]

ROOT_PATH: FieldPath = ()

_MISSING = object()


# ==================== PATHS ====================

def child_path(parent: FieldPath, name: str) -> FieldPath:
    """Path of a named child; a missing name addresses the ``''`` key."""
    return (*parent, name or '')


def item_path(parent: FieldPath, index: int) -> FieldPath:
    """Path of an array item."""
    return (*parent, index)


def format_path(path: FieldPath) -> str:
    """Render ``('a', 'b', 2, 'c')`` as ``a.b[2].c``."""
    rendered = ''
    for segment in path:
        if isinstance(segment, int):
            rendered = f"{rendered}[{segment}]"
        elif rendered:
            rendered = f"{rendered}.{segment}"
        else:
            rendered = segment
    return rendered


def is_below(path: FieldPath, prefix: FieldPath) -> bool:
    """True if ``path`` lies strictly below ``prefix``."""
    return len(path) > len(prefix) and path[:len(prefix)] == prefix


def is_within(path: str, prefix: str) -> bool:
    """Display-key check: ``path`` is ``prefix`` itself or renders below it."""
    if not prefix:
        return True
    return path == prefix or path.startswith(f"{prefix}.") or path.startswith(f"{prefix}[")


# ==================== READ / WRITE ====================

def get_in(root: Any, path: FieldPath, default: Any = None) -> Any:
    """Read the value at ``path``; ``default`` for any missing or mistyped step."""
    node = root
    for segment in path:
        if isinstance(segment, int):
            if not isinstance(node, list) or not 0 <= segment < len(node):
                return default
            node = node[segment]
        else:
            if not isinstance(node, dict):
                return default
            node = node.get(segment, _MISSING)
            if node is _MISSING:
                return default
    return node


def set_in(root: Any, path: FieldPath, value: Any) -> Any:
    """
    Return a new tree equal to ``root`` except that ``path`` holds ``value``.

    Missing intermediate containers are created (dict for keys, list for
    indexes). The root path replaces the whole tree.
    """
    if not path:
        return value
    return _set_segments(root, tuple(path), value)


def _set_segments(node: Any, segments: Tuple[PathSegment, ...], value: Any) -> Any:
    head, rest = segments[0], segments[1:]

    if isinstance(head, int):
        items = list(node) if isinstance(node, list) else []
        while len(items) <= head:
            items.append(None)
        items[head] = _set_segments(items[head], rest, value) if rest else value
        return items

    mapping = dict(node) if isinstance(node, dict) else {}
    mapping[head] = _set_segments(mapping.get(head), rest, value) if rest else value
    return mapping


# ==================== EMPTY VALUES ====================

def empty_value_for(kind: Optional[FieldKind]) -> Any:
    """Render-time coercion target for a missing value of the given kind."""
    if kind in (FieldKind.STRING, FieldKind.TEXTAREA, FieldKind.SELECT, FieldKind.RESOURCE):
        return ''
    if kind is FieldKind.BOOLEAN:
        return False
    if kind is FieldKind.ARRAY:
        return []
    if kind in (FieldKind.MAP, FieldKind.OBJECT):
        return {}
    return None


def as_mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


# ==================== MAP ALGEBRA ====================

def map_add_row(mapping: Any) -> Dict[str, Any]:
    """Append an empty ``"" -> ""`` row."""
    updated = dict(as_mapping(mapping))
    updated[''] = ''
    return updated


def map_remove_key(mapping: Any, key: str) -> Dict[str, Any]:
    return {k: v for k, v in as_mapping(mapping).items() if k != key}


def map_rename_key(mapping: Any, old_key: str, new_key: str) -> Dict[str, Any]:
    """
    Rename ``old_key`` to ``new_key`` as delete + insert.

    An existing entry under ``new_key`` is overwritten without notice:
    ``{a: 1, b: 2}`` renamed ``a -> b`` gives ``{b: 1}``.
    """
    current = as_mapping(mapping)
    if new_key == old_key or old_key not in current:
        return dict(current)
    value = current[old_key]
    updated = {k: v for k, v in current.items() if k != old_key}
    updated[new_key] = value
    return updated


def map_set_value(mapping: Any, key: str, value: Any) -> Dict[str, Any]:
    updated = dict(as_mapping(mapping))
    updated[key] = value
    return updated


# ==================== ARRAY ALGEBRA ====================

def array_default_item(item_type: str) -> Any:
    """New item for "add": ``0`` for numbers, ``{}`` for objects, ``""`` otherwise."""
    if item_type == FieldKind.NUMBER.value:
        return 0
    if item_type == FieldKind.OBJECT.value:
        return {}
    return ''


def array_append(items: Any, item: Any) -> List[Any]:
    return [*as_list(items), item]


def array_remove(items: Any, index: int) -> List[Any]:
    """Drop the item at ``index``; later items shift down."""
    return [item for i, item in enumerate(as_list(items)) if i != index]


def array_replace(items: Any, index: int, item: Any) -> List[Any]:
    updated = list(as_list(items))
    if 0 <= index < len(updated):
        updated[index] = item
    return updated
