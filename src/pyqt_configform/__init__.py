"""
pyqt-configform

Schema-driven configuration forms for PyQt6: a field manifest plus a
JSON-like value tree in, an editable widget tree and fresh value trees out.
"""

import sys
import logging

# Check for SILENT mode BEFORE any submodule imports
if '--log-level' in sys.argv:
    log_level_idx = sys.argv.index('--log-level')
    if log_level_idx + 1 < len(sys.argv) and sys.argv[log_level_idx + 1] == 'SILENT':
        logging.disable(logging.CRITICAL)
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.CRITICAL + 1)

__version__ = "0.1.0"

from pyqt_configform.core.field_manifest import (
    DynamicFormContext, FieldDescriptor, FieldKind, FieldManifest
)
from pyqt_configform.services.inventory_service import (
    HttpInventoryService, InventoryLookupError, InventoryServiceConfig, StaticInventoryService
)
from pyqt_configform.widgets.dynamic_form import DynamicForm, FormConfig
from pyqt_configform.windows.config_window import ConfigWindow

__all__ = [
    "ConfigWindow",
    "DynamicForm",
    "DynamicFormContext",
    "FieldDescriptor",
    "FieldKind",
    "FieldManifest",
    "FormConfig",
    "HttpInventoryService",
    "InventoryLookupError",
    "InventoryServiceConfig",
    "StaticInventoryService",
]
