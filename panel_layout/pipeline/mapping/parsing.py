"""Selection parsing — convert exported drawing block records into RawDevices.

Record format (one per selected block, as exported from the drawing):

    {"id": "2A4F", "block_name": "OLS_BREAKER", "visibility": "2P",
     "x": 120.0, "y": 340.0,
     "attributes": {"АППАРАТ": "QF1", "МОДУЛЕЙ": "2", "ГРУППА": "L1"}}
"""

from __future__ import annotations

from panel_layout.rules.models import AttributeTags

from .models import DeviceSignature, RawDevice


class SelectionError(Exception):
    """Raised when a selection record lacks its id or block name."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"Selection record {index}: {reason}")


def _attribute(attributes: dict, tag: str) -> str | None:
    """Case-insensitive attribute lookup; blank text counts as missing."""
    folded = tag.casefold()
    for k, v in attributes.items():
        if str(k).strip().casefold() == folded:
            text = "" if v is None else str(v).strip()
            return text or None
    return None


def _parse_modules(text: str | None) -> int:
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        return 0


def _optional(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_device(record: dict, tags: AttributeTags, index: int = 0) -> RawDevice:
    if not isinstance(record, dict):
        raise SelectionError(index, "must be an object")
    device_id = _optional(record.get("id"))
    if device_id is None:
        raise SelectionError(index, "missing 'id'")
    block_name = _optional(record.get("block_name"))
    if block_name is None:
        raise SelectionError(index, "missing 'block_name'")

    try:
        x = float(record.get("x") or 0.0)
        y = float(record.get("y") or 0.0)
    except (TypeError, ValueError):
        raise SelectionError(index, "'x'/'y' must be numbers") from None

    attributes = record.get("attributes") or {}
    if not isinstance(attributes, dict):
        raise SelectionError(index, "'attributes' must be an object")
    return RawDevice(
        id=device_id,
        signature=DeviceSignature(block_name, _optional(record.get("visibility"))),
        device_key=_attribute(attributes, tags.device),
        declared_modules=_parse_modules(_attribute(attributes, tags.modules)),
        group=_attribute(attributes, tags.group),
        note=_attribute(attributes, tags.note),
        x=x,
        y=y,
    )


def parse_selection(records: list[dict], tags: AttributeTags | None = None) -> list[RawDevice]:
    """Parse exported block records, keeping their order."""
    tags = tags or AttributeTags()
    return [parse_device(r, tags, i) for i, r in enumerate(records)]


def sort_selection(devices: list[RawDevice]) -> list[RawDevice]:
    """Drawing reading order: descending Y, then ascending X (stable)."""
    return sorted(devices, key=lambda d: d.sort_key)
