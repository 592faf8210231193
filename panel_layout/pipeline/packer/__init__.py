"""Packer — places mapped devices on fixed-capacity DIN rails.

Submodules:
  models        PlacementRow output dataclass.
  engine        Greedy rail filling with cross-rail splits (pack_layout).
  geometry      Slot / rail rectangles on the panel face (shapely).
  blocks        Render-time missing layout block check.
  serialization JSON conversion (placement_to_dict, parse_placement).
"""

from .models import PlacementRow
from .engine import pack_layout, count_segments, normalize_modules_per_row, rows_used
from .geometry import slot_box, row_frame, insertion_point, layout_bounds
from .blocks import check_layout_blocks
from .serialization import placement_to_dict, placement_row_to_dict, parse_placement

__all__ = [
    # Models
    "PlacementRow",
    # Engine
    "pack_layout", "count_segments", "normalize_modules_per_row", "rows_used",
    # Geometry
    "slot_box", "row_frame", "insertion_point", "layout_bounds",
    # Render checks
    "check_layout_blocks",
    # Serialization
    "placement_to_dict", "placement_row_to_dict", "parse_placement",
]
