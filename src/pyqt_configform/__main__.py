#!/usr/bin/env python3
"""
pyqt-configform demo - Module Entry Point

Opens a ConfigWindow for a manifest stored as JSON:
    python -m pyqt_configform manifest.json --value value.json

Resource fields are served from ``--inventory`` (a JSON object mapping
resource type to items) or from a live API given ``--base-url``.
"""

import sys
import logging

# Check for SILENT mode BEFORE any package imports
if '--log-level' in sys.argv:
    log_level_idx = sys.argv.index('--log-level')
    if log_level_idx + 1 < len(sys.argv) and sys.argv[log_level_idx + 1] == 'SILENT':
        # Disable ALL logging before any imports
        logging.disable(logging.CRITICAL)
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.CRITICAL + 1)

import argparse
import json
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'SILENT']


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='configform-demo',
        description='Render a configuration manifest as an editable form'
    )
    parser.add_argument('manifest', type=Path, help='JSON file with the field manifest')
    parser.add_argument('--value', type=Path, help='JSON file with the initial value')
    parser.add_argument('--errors', type=Path, help='JSON file mapping field paths to messages')
    parser.add_argument('--inventory', type=Path, help='JSON file mapping resource type to items')
    parser.add_argument('--base-url', help='Inventory API base URL (overrides --inventory)')
    parser.add_argument('--integration', help='Integration name for resource lookups')
    parser.add_argument('--canvas', help='Canvas id for resource lookups')
    parser.add_argument('--organization', help='Organization id sent with API lookups')
    parser.add_argument('--disabled', action='store_true', help='Render the form read-only')
    parser.add_argument('--log-level', default='INFO', choices=LOG_LEVELS, help='Logging level')
    return parser.parse_args(argv)


def _load_json(path: Path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def setup_logging(level: str) -> None:
    if level == 'SILENT':
        return
    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def build_inventory(args: argparse.Namespace):
    from pyqt_configform.services.inventory_service import (
        HttpInventoryService, InventoryServiceConfig, StaticInventoryService
    )

    if args.base_url:
        logger.info(f"Using inventory API at {args.base_url}")
        return HttpInventoryService(InventoryServiceConfig(
            base_url=args.base_url, organization_id=args.organization
        ))
    return StaticInventoryService(_load_json(args.inventory) if args.inventory else {})


def main(argv=None) -> int:
    """Main entry point with graceful error handling for missing GUI dependencies."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        from PyQt6.QtWidgets import QApplication
        from pyqt_configform.core.field_manifest import DynamicFormContext, FieldManifest
        from pyqt_configform.widgets.dynamic_form import FormConfig
        from pyqt_configform.windows.config_window import ConfigWindow
    except ImportError as e:
        if 'PyQt6' in str(e):
            print("ERROR: PyQt6 is not installed.", file=sys.stderr)
            print("", file=sys.stderr)
            print("To install it, run:", file=sys.stderr)
            print("  pip install PyQt6", file=sys.stderr)
            return 1
        raise

    try:
        manifest = FieldManifest.from_dict(_load_json(args.manifest))
        value = _load_json(args.value) if args.value else {}
        errors = _load_json(args.errors) if args.errors else None
        inventory = build_inventory(args)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load input: {e}")
        return 1

    app = QApplication.instance() or QApplication(sys.argv[:1])

    context = DynamicFormContext(
        integration_name=args.integration,
        organization_id=args.organization,
        canvas_id=args.canvas,
    )
    window = ConfigWindow(
        manifest, value,
        on_save_callback=lambda saved: print(json.dumps(saved, indent=2)),
        form_config=FormConfig(
            disabled=args.disabled,
            context=context,
            inventory=inventory,
        ),
    )
    if errors:
        window.show_errors(errors)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
