"""Panel layout — OLS device mapping and DIN-rail module placement."""

from panel_layout.pipeline.mapping import resolve_selector_rule, map_devices
from panel_layout.pipeline.packer import pack_layout

__all__ = ["resolve_selector_rule", "map_devices", "pack_layout"]

__version__ = "0.1.0"
