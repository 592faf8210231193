"""Mapper — resolves each drawing device to a layout block and module count.

Submodules:
  models        Signature, raw/mapped device dataclasses, resolution variants.
  selector      Selector rule matching and priority/specificity resolution.
  legacy        Device-key index over legacy rules.
  modules       Declared vs fallback module count merge.
  engine        Per-device mapping with skip diagnostics (map_devices).
  parsing       Exported drawing selection -> RawDevice list.
  serialization JSON conversion.
"""

from .models import (
    DeviceSignature, RawDevice, MappedDevice,
    Resolution, SelectorMatch, LegacyMatch, Unresolved,
)
from .selector import resolve_selector_rule, rule_matches
from .legacy import build_legacy_index, lookup_legacy_rule
from .modules import resolve_module_count
from .engine import map_devices, resolve_device, display_label
from .parsing import parse_selection, sort_selection, SelectionError
from .serialization import raw_device_to_dict, mapped_device_to_dict, parse_mapped_devices

__all__ = [
    # Models
    "DeviceSignature", "RawDevice", "MappedDevice",
    "Resolution", "SelectorMatch", "LegacyMatch", "Unresolved",
    # Resolution
    "resolve_selector_rule", "rule_matches",
    "build_legacy_index", "lookup_legacy_rule",
    "resolve_module_count",
    # Engine
    "map_devices", "resolve_device", "display_label",
    # Parsing / Serialization
    "parse_selection", "sort_selection", "SelectionError",
    "raw_device_to_dict", "mapped_device_to_dict", "parse_mapped_devices",
]
