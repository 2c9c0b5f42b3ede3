from __future__ import annotations

import json
from pathlib import Path

from pyqt_configform.__main__ import build_inventory, main, parse_args
from pyqt_configform.services.inventory_service import HttpInventoryService, StaticInventoryService


def test_static_inventory_loaded_from_file(tmp_path: Path) -> None:
    inventory_file = tmp_path / "inventory.json"
    inventory_file.write_text(json.dumps({"repository": [{"name": "api"}]}), encoding="utf-8")

    args = parse_args(["manifest.json", "--inventory", str(inventory_file)])
    inventory = build_inventory(args)

    assert isinstance(inventory, StaticInventoryService)
    assert inventory.list_resources("repository", "github", "c1") == [{"name": "api"}]


def test_base_url_selects_http_inventory() -> None:
    args = parse_args(["manifest.json", "--base-url", "http://localhost:9000", "--organization", "org-1"])
    inventory = build_inventory(args)

    assert isinstance(inventory, HttpInventoryService)
    assert inventory.config.base_url == "http://localhost:9000"
    assert inventory.config.organization_id == "org-1"


def test_missing_manifest_file_exits_with_error(tmp_path: Path) -> None:
    assert main([str(tmp_path / "absent.json"), "--log-level", "SILENT"]) == 1


def test_unreadable_inventory_exits_with_error(tmp_path: Path) -> None:
    manifest_file = tmp_path / "manifest.json"
    manifest_file.write_text(json.dumps({"fields": []}), encoding="utf-8")
    broken_inventory = tmp_path / "inventory.json"
    broken_inventory.write_text("{not json", encoding="utf-8")

    assert main([str(manifest_file), "--inventory", str(tmp_path / "absent.json"), "--log-level", "SILENT"]) == 1
    assert main([str(manifest_file), "--inventory", str(broken_inventory), "--log-level", "SILENT"]) == 1
