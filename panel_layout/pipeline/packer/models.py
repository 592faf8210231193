"""Packer output dataclasses."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlacementRow:
    """One contiguous run of slots on one DIN rail for (part of) a device.

    Slots are 1-based.  A device split across rails produces several rows
    sharing ``id`` and ``segment_count``, numbered by ``segment_index``.
    """

    id: str
    din_row: int
    slot_start: int
    slot_end: int
    layout_block_name: str
    label: str
    module_count: int
    segment_index: int
    segment_count: int
    group: str | None = None
    note: str | None = None

    @property
    def is_split(self) -> bool:
        return self.segment_count > 1
