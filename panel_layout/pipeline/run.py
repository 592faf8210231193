"""One layout run — selection → mapping → packing, with issue reporting."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from panel_layout.core.reporting import IssueReporter, write_report
from panel_layout.rules.models import LayoutMapConfig

from .mapping import (
    RawDevice, MappedDevice,
    map_devices, parse_selection, sort_selection,
    raw_device_to_dict, mapped_device_to_dict,
)
from .packer import (
    PlacementRow,
    pack_layout, normalize_modules_per_row, rows_used,
    check_layout_blocks, placement_row_to_dict,
)


log = logging.getLogger(__name__)


@dataclass
class LayoutRun:
    devices: list[RawDevice]
    mapped: list[MappedDevice]
    rows: list[PlacementRow]
    modules_per_row: int
    reporter: IssueReporter = field(default_factory=IssueReporter)

    @property
    def din_rows(self) -> int:
        return rows_used(self.rows)


def run_layout(
    selection: list[dict],
    layout_map: LayoutMapConfig,
    *,
    modules_per_row: int | None = None,
    strict: bool = False,
    available_blocks: list[str] | None = None,
) -> LayoutRun:
    """Build a panel layout from an exported drawing selection.

    The selection is put in drawing reading order once, here; later
    stages keep that order.  *modules_per_row* defaults to the map's
    rail capacity.  When *available_blocks* is given, layout blocks
    missing from it are reported like any other skipped device.

    Raises
    ------
    SelectionError
        If a selection record has no id or block name.
    """
    reporter = IssueReporter()
    devices = sort_selection(parse_selection(selection, layout_map.attribute_tags))

    mapped, _ = map_devices(
        devices,
        layout_map.selector_rules,
        layout_map.legacy_rules,
        strict=strict,
        reporter=reporter,
    )

    capacity = normalize_modules_per_row(
        modules_per_row if modules_per_row is not None else layout_map.default_modules_per_row)
    rows = pack_layout(mapped, capacity)

    if available_blocks is not None:
        check_layout_blocks(rows, available_blocks, reporter, mapped=mapped)

    log.info("Layout run: %d devices, %d placed, %d rows, %d issues, %d ambiguous",
             len(devices), len(mapped), rows_used(rows),
             len(reporter.issues), len(reporter.ambiguities))
    return LayoutRun(
        devices=devices,
        mapped=mapped,
        rows=rows,
        modules_per_row=capacity,
        reporter=reporter,
    )


def layout_run_to_dict(run: LayoutRun) -> dict:
    """Serialize a run; key order is fixed so repeated runs diff cleanly."""
    return {
        "modules_per_row": run.modules_per_row,
        "din_rows": run.din_rows,
        "devices": [raw_device_to_dict(d) for d in run.devices],
        "mapped": [mapped_device_to_dict(m) for m in run.mapped],
        "rows": [placement_row_to_dict(r) for r in run.rows],
        "issues": [
            {
                "id": i.id,
                "reason": i.reason,
                "device_key": i.device_key,
                "source_block_name": i.source_block_name,
            }
            for i in run.reporter.issues
        ],
        "ambiguities": [
            {
                "device_id": w.device_id,
                "source_block_name": w.source_block_name,
                "visibility_value": w.visibility_value,
                "candidates": w.candidates,
                "chosen_layout_block_name": w.chosen_layout_block_name,
            }
            for w in run.reporter.ambiguities
        ],
    }


def write_run(run: LayoutRun, out_dir: Path) -> Path:
    """Write layout.json and report.md into *out_dir*. Returns the layout path."""
    out_dir.mkdir(parents=True, exist_ok=True)
    layout_path = out_dir / "layout.json"
    layout_path.write_text(
        json.dumps(layout_run_to_dict(run), indent=2, ensure_ascii=False),
        encoding="utf-8")
    write_report(
        out_dir, run.reporter,
        modules_per_row=run.modules_per_row,
        device_count=len(run.devices),
        mapped_count=len(run.mapped),
        row_count=len(run.rows),
        din_rows=run.din_rows,
    )
    return layout_path
