"""Path-keyed validation messages supplied by an external validator."""

from typing import Dict, Mapping, Optional


class ErrorOverlay:
    """
    Read-only view over validator errors.

    Keys are field names at the top level, or dotted/bracketed paths for
    nested fields. A field with no message of its own surfaces the first
    message recorded below it (``a.b`` or ``a[0]`` for field ``a``), since
    composite fields show one error for their whole subtree.
    """

    def __init__(self, errors: Optional[Mapping[str, str]] = None):
        self._errors: Dict[str, str] = {k: v for k, v in (errors or {}).items() if v}

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __eq__(self, other) -> bool:
        return isinstance(other, ErrorOverlay) and self._errors == other._errors

    def error_for(self, path: str) -> str:
        if not path:
            return ''
        message = self._errors.get(path)
        if message:
            return message
        for key, nested_message in self._errors.items():
            if key.startswith(f"{path}.") or key.startswith(f"{path}["):
                return nested_message
        return ''

    def first_error_path(self) -> Optional[str]:
        return next(iter(self._errors), None)
