"""DIN-rail packer — greedy, single-pass, order-preserving placement."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from panel_layout.pipeline.config import LAYOUT_RULES
from panel_layout.pipeline.mapping.models import MappedDevice

from .models import PlacementRow


log = logging.getLogger(__name__)

# (din_row, slot_start, chunk, segment_index)
RecordFn = Callable[[int, int, int, int], None]


@dataclass
class RowCursor:
    """Fill position: current rail and slots already used on it."""
    din_row: int = 1
    occupied: int = 0


def normalize_modules_per_row(value: int) -> int:
    return value if value > 0 else LAYOUT_RULES.default_modules_per_row


def _fill(
    modules: int,
    cursor: RowCursor,
    modules_per_row: int,
    record: RecordFn | None = None,
) -> int:
    """Lay *modules* onto rails starting at *cursor*, advancing it.

    With *record* each segment is reported as it is cut; without it the
    walk is a simulation.  Returns the number of segments.
    """
    remaining = modules
    segments = 0
    while remaining > 0:
        if cursor.occupied >= modules_per_row:
            cursor.din_row += 1
            cursor.occupied = 0
        free_slots = modules_per_row - cursor.occupied
        chunk = min(remaining, free_slots)
        segments += 1
        if record is not None:
            record(cursor.din_row, cursor.occupied + 1, chunk, segments)
        cursor.occupied += chunk
        remaining -= chunk
    return segments


def count_segments(modules: int, occupied: int, modules_per_row: int) -> int:
    """Segments a device of *modules* width needs when the rail has *occupied* slots used."""
    modules_per_row = normalize_modules_per_row(modules_per_row)
    return _fill(max(1, modules), RowCursor(1, occupied), modules_per_row)


def pack_layout(
    mapped_devices: list[MappedDevice],
    modules_per_row: int,
) -> list[PlacementRow]:
    """Place devices on DIN rails in the given order.

    Each device continues where the previous one ended.  A device that
    does not fit in the remaining rail space is cut at the rail end and
    continues on the next rail.  Rails are never revisited, so the output
    depends only on the device order and *modules_per_row*.

    Parameters
    ----------
    mapped_devices : list[MappedDevice]
        Devices in placement order.
    modules_per_row : int
        Rail capacity in modules; values <= 0 fall back to 24.

    Returns
    -------
    list[PlacementRow]
        Segments in placement order.
    """
    modules_per_row = normalize_modules_per_row(modules_per_row)
    cursor = RowCursor()
    rows: list[PlacementRow] = []

    for device in mapped_devices:
        modules = max(1, device.modules)
        # Dry run on a copy: every segment needs the final count up front.
        segment_count = _fill(modules, replace(cursor), modules_per_row)

        def _record(din_row: int, slot_start: int, chunk: int, index: int,
                    device: MappedDevice = device, segment_count: int = segment_count) -> None:
            rows.append(PlacementRow(
                id=device.id,
                din_row=din_row,
                slot_start=slot_start,
                slot_end=slot_start + chunk - 1,
                layout_block_name=device.layout_block_name,
                label=device.display_label,
                module_count=chunk,
                segment_index=index,
                segment_count=segment_count,
                group=device.group,
                note=device.note,
            ))

        _fill(modules, cursor, modules_per_row, _record)
        if segment_count > 1:
            log.debug("Split %s (%d modules) into %d segments",
                      device.id, modules, segment_count)

    log.info("Packed %d devices into %d segments on %d rows (%d modules per row)",
             len(mapped_devices), len(rows), rows_used(rows), modules_per_row)
    return rows


def rows_used(rows: list[PlacementRow]) -> int:
    return max((r.din_row for r in rows), default=0)
