"""Panel-face geometry for placed segments.

Rails run left to right; rail 1 is at the top and later rails step
downward by the row pitch.  Each rail occupies a band one pitch tall
whose top edge sits at the origin's y for rail 1.
"""

from __future__ import annotations

from shapely.geometry import Polygon, box as shapely_box
from shapely.ops import unary_union

from panel_layout.pipeline.config import LAYOUT_RULES

from .models import PlacementRow


def _band(din_row: int, row_pitch_mm: float, oy: float) -> tuple[float, float]:
    """Return (y_bottom, y_top) of a rail band."""
    top = oy - (din_row - 1) * row_pitch_mm
    return (top - row_pitch_mm, top)


def slot_box(
    row: PlacementRow,
    *,
    module_width_mm: float = LAYOUT_RULES.module_width_mm,
    row_pitch_mm: float = LAYOUT_RULES.row_pitch_mm,
    origin: tuple[float, float] = (0.0, 0.0),
) -> Polygon:
    """Rectangle a segment occupies on the panel face."""
    ox, oy = origin
    y0, y1 = _band(row.din_row, row_pitch_mm, oy)
    x0 = ox + (row.slot_start - 1) * module_width_mm
    x1 = ox + row.slot_end * module_width_mm
    return shapely_box(x0, y0, x1, y1)


def row_frame(
    din_row: int,
    modules_per_row: int,
    *,
    module_width_mm: float = LAYOUT_RULES.module_width_mm,
    row_pitch_mm: float = LAYOUT_RULES.row_pitch_mm,
    origin: tuple[float, float] = (0.0, 0.0),
) -> Polygon:
    """Rectangle of a whole rail at full capacity."""
    ox, oy = origin
    y0, y1 = _band(din_row, row_pitch_mm, oy)
    return shapely_box(ox, y0, ox + modules_per_row * module_width_mm, y1)


def insertion_point(
    row: PlacementRow,
    *,
    module_width_mm: float = LAYOUT_RULES.module_width_mm,
    row_pitch_mm: float = LAYOUT_RULES.row_pitch_mm,
    origin: tuple[float, float] = (0.0, 0.0),
) -> tuple[float, float]:
    """Where a renderer inserts the layout block: left edge, rail centre line."""
    b = slot_box(row, module_width_mm=module_width_mm,
                 row_pitch_mm=row_pitch_mm, origin=origin)
    xmin, ymin, _, ymax = b.bounds
    return (xmin, (ymin + ymax) / 2)


def layout_bounds(
    rows: list[PlacementRow],
    *,
    module_width_mm: float = LAYOUT_RULES.module_width_mm,
    row_pitch_mm: float = LAYOUT_RULES.row_pitch_mm,
    origin: tuple[float, float] = (0.0, 0.0),
) -> tuple[float, float, float, float] | None:
    """(xmin, ymin, xmax, ymax) of everything placed; None for an empty layout."""
    if not rows:
        return None
    shapes = [
        slot_box(r, module_width_mm=module_width_mm,
                 row_pitch_mm=row_pitch_mm, origin=origin)
        for r in rows
    ]
    return unary_union(shapes).bounds
