"""Rule map serialization — convert dataclasses to JSON-safe dicts."""

from __future__ import annotations

from typing import Any

from .models import LayoutMapConfig, LayoutMapResult, SelectorRule, LegacyRule


def selector_rule_to_dict(r: SelectorRule) -> dict:
    return {
        "Priority": r.priority,
        "SourceBlockName": r.source_block_name,
        "VisibilityValue": r.visibility_value,
        "LayoutBlockName": r.layout_block_name,
        "FallbackModules": r.fallback_modules,
    }


def legacy_rule_to_dict(r: LegacyRule) -> dict:
    return {
        "DeviceKey": r.device_key,
        "LayoutBlockName": r.layout_block_name,
        "FallbackModules": r.fallback_modules,
    }


def layout_map_to_dict(config: LayoutMapConfig) -> dict:
    """Serialize a LayoutMapConfig to the PanelLayoutMap.json document shape."""
    d: dict[str, Any] = {
        "Version": config.version,
        "DefaultModulesPerRow": config.default_modules_per_row,
        "AttributeTags": {
            "Device": config.attribute_tags.device,
            "Modules": config.attribute_tags.modules,
            "Group": config.attribute_tags.group,
            "Note": config.attribute_tags.note,
        },
        "SelectorRules": [selector_rule_to_dict(r) for r in config.selector_rules],
        "LayoutMap": [legacy_rule_to_dict(r) for r in config.legacy_rules],
    }
    return d


def layout_map_result_to_dict(result: LayoutMapResult) -> dict:
    """Serialize a LayoutMapResult for the web API."""
    return {
        "ok": result.ok,
        "selector_rule_count": len(result.config.selector_rules),
        "legacy_rule_count": len(result.config.legacy_rules),
        "map": layout_map_to_dict(result.config),
        "errors": [
            {"section": e.section, "row": e.row, "field": e.field, "message": e.message}
            for e in result.errors
        ],
    }
