"""Mapping serialization — JSON conversion."""

from __future__ import annotations

from .models import MappedDevice, RawDevice


def raw_device_to_dict(d: RawDevice) -> dict:
    return {
        "id": d.id,
        "source_block_name": d.signature.source_block_name,
        "visibility_value": d.signature.visibility_value,
        "device_key": d.device_key,
        "declared_modules": d.declared_modules,
        "group": d.group,
        "note": d.note,
        "x": d.x,
        "y": d.y,
    }


def mapped_device_to_dict(d: MappedDevice) -> dict:
    return {
        "id": d.id,
        "source_block_name": d.source_block_name,
        "device_key": d.device_key,
        "display_label": d.display_label,
        "layout_block_name": d.layout_block_name,
        "modules": d.modules,
        "group": d.group,
        "note": d.note,
    }


def parse_mapped_devices(data: list[dict]) -> list[MappedDevice]:
    """Parse mapped devices back from JSON (e.g. a saved mapping stage)."""
    return [
        MappedDevice(
            id=m["id"],
            source_block_name=m["source_block_name"],
            device_key=m.get("device_key"),
            display_label=m["display_label"],
            layout_block_name=m["layout_block_name"],
            modules=int(m["modules"]),
            group=m.get("group"),
            note=m.get("note"),
        )
        for m in data
    ]
