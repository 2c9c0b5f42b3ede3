"""
Asynchronous option resolution for resource fields.

One resolver exists per resource field instance (owned by the form, keyed by
the field's path). It issues one inventory lookup per distinct
(integration, canvas, resource type) key, runs it off the GUI thread and
hands the options back through a Qt signal.

Stale results are discarded with a generation counter: every new request and
``dispose()`` bump the generation, and a result is only applied if it still
carries the current one.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
import logging

from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_configform.core.field_manifest import DynamicFormContext, FieldDescriptor, FieldKind
from pyqt_configform.core.value_tree import FieldPath
from pyqt_configform.services.inventory_service import InventoryLookupService

logger = logging.getLogger(__name__)

Option = Tuple[str, str]
BackgroundRunner = Callable[[Callable[[], None]], None]


def run_in_daemon_thread(task: Callable[[], None]) -> None:
    """Default background runner: one daemon thread per lookup."""
    thread = threading.Thread(target=task, daemon=True)
    thread.start()


class ResolverState(Enum):
    NO_SCOPE = "no_scope"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class ResourceLookupKey:
    integration_name: str
    canvas_id: str
    resource_type: str

    @classmethod
    def for_field(cls, field: FieldDescriptor, context: Optional[DynamicFormContext]) -> Optional['ResourceLookupKey']:
        """Key for a lookup, or None when the trigger condition does not hold."""
        if field.kind is not FieldKind.RESOURCE or not field.resource_type:
            return None
        if context is None or not context.has_resource_scope:
            return None
        return cls(context.integration_name, context.canvas_id, field.resource_type)


def options_from_items(items: Iterable[Any]) -> List[Option]:
    """Map inventory items to (value, label): ``name`` falling back to ``id``."""
    options = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        identifier = item.get('name') or item.get('id') or ''
        if not identifier:
            continue
        identifier = str(identifier)
        options.append((identifier, identifier))
    return options


class ResourceOptionResolver(QObject):
    """Per-field-instance option cache with cancellable background lookups."""

    state_changed = pyqtSignal()

    # Internal signal carrying (generation, options) back to the GUI thread
    _lookup_complete = pyqtSignal(int, object)

    def __init__(self, field: FieldDescriptor, inventory: InventoryLookupService,
                 run_in_background: Optional[BackgroundRunner] = None, parent=None):
        super().__init__(parent)
        self.field = field
        self.inventory = inventory
        self._run_in_background = run_in_background or run_in_daemon_thread
        self._generation = 0
        self._active_key: Optional[ResourceLookupKey] = None
        self._disposed = False
        self.state = ResolverState.NO_SCOPE
        self.options: List[Option] = []
        self.lookup_count = 0
        self._lookup_complete.connect(self._on_lookup_complete)

    @property
    def active_key(self) -> Optional[ResourceLookupKey]:
        return self._active_key

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def refresh(self, context: Optional[DynamicFormContext]) -> bool:
        """
        Re-evaluate the trigger for ``context``.

        Returns:
            True if a new lookup was issued
        """
        if self._disposed:
            return False

        key = ResourceLookupKey.for_field(self.field, context)
        if key is None:
            if self.state is not ResolverState.NO_SCOPE or self._active_key is not None:
                # Drop any in-flight lookup for the previous scope
                self._generation += 1
                self._active_key = None
                self.options = []
                self._set_state(ResolverState.NO_SCOPE)
            return False

        if key == self._active_key:
            return False

        self._generation += 1
        generation = self._generation
        self._active_key = key
        self.lookup_count += 1
        organization_id = context.organization_id if context else None
        self._set_state(ResolverState.LOADING)

        logger.debug(f"Resource lookup #{generation} for {key}")

        def lookup():
            try:
                items = self.inventory.list_resources(
                    key.resource_type, key.integration_name, key.canvas_id, organization_id
                )
                options = options_from_items(items)
            except Exception as e:
                logger.error(f"Error loading resource options for {key}: {e}")
                options = []
            try:
                self._lookup_complete.emit(generation, options)
            except RuntimeError as e:
                # Resolver's Qt object is gone; nothing left to update
                logger.debug(f"Dropping lookup #{generation} result: {e}")

        self._run_in_background(lookup)
        return True

    def _on_lookup_complete(self, generation: int, options: List[Option]) -> None:
        if self._disposed or generation != self._generation:
            logger.debug(f"Discarding stale lookup #{generation} (current #{self._generation})")
            return
        self.options = list(options)
        self._set_state(ResolverState.READY)

    def _set_state(self, state: ResolverState) -> None:
        self.state = state
        self.state_changed.emit()

    def disconnect_listeners(self) -> None:
        """Detach widgets listening to this resolver (before they are rebuilt)."""
        try:
            self.state_changed.disconnect()
        except TypeError:
            pass

    def dispose(self) -> None:
        """Cancel any in-flight lookup and stop delivering results."""
        self._disposed = True
        self._generation += 1
        self.disconnect_listeners()


class ResolverArena:
    """Resolvers owned by one form, keyed by field path."""

    def __init__(self, inventory: InventoryLookupService, run_in_background: Optional[BackgroundRunner] = None):
        self.inventory = inventory
        self.run_in_background = run_in_background
        self.resolvers: Dict[FieldPath, ResourceOptionResolver] = {}

    def get_or_create(self, path: FieldPath, field: FieldDescriptor) -> ResourceOptionResolver:
        resolver = self.resolvers.get(path)
        if resolver is not None and resolver.field != field:
            # Same path now holds a different descriptor (manifest swapped)
            resolver.dispose()
            resolver = None
        if resolver is None:
            resolver = ResourceOptionResolver(field, self.inventory, self.run_in_background)
            self.resolvers[path] = resolver
        return resolver

    def dispose_where(self, predicate: Callable[[FieldPath], bool]) -> None:
        for path in [p for p in self.resolvers if predicate(p)]:
            self.resolvers.pop(path).dispose()

    def dispose_all(self) -> None:
        self.dispose_where(lambda path: True)
