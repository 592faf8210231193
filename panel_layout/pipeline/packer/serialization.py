"""Placement serialization — JSON conversion."""

from __future__ import annotations

from .models import PlacementRow


def placement_row_to_dict(r: PlacementRow) -> dict:
    return {
        "id": r.id,
        "din_row": r.din_row,
        "slot_start": r.slot_start,
        "slot_end": r.slot_end,
        "layout_block_name": r.layout_block_name,
        "label": r.label,
        "module_count": r.module_count,
        "segment_index": r.segment_index,
        "segment_count": r.segment_count,
        "group": r.group,
        "note": r.note,
    }


def placement_to_dict(rows: list[PlacementRow], modules_per_row: int) -> dict:
    """Serialize packer output to a JSON-safe dict."""
    return {
        "modules_per_row": modules_per_row,
        "rows": [placement_row_to_dict(r) for r in rows],
    }


def parse_placement(data: dict) -> tuple[list[PlacementRow], int]:
    """Parse a layout.json placement dict back into rows and rail capacity."""
    rows = [
        PlacementRow(
            id=r["id"],
            din_row=r["din_row"],
            slot_start=r["slot_start"],
            slot_end=r["slot_end"],
            layout_block_name=r["layout_block_name"],
            label=r["label"],
            module_count=r["module_count"],
            segment_index=r["segment_index"],
            segment_count=r["segment_count"],
            group=r.get("group"),
            note=r.get("note"),
        )
        for r in data["rows"]
    ]
    return rows, data["modules_per_row"]
