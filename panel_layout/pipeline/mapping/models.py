"""Mapping dataclasses — drawing devices in, mapped devices out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from panel_layout.rules.models import SelectorRule, LegacyRule


@dataclass(frozen=True, eq=False)
class DeviceSignature:
    """Visual template of a device: block name + dynamic-block visibility.

    Equality and hashing ignore case, like block names in the drawing.
    """

    source_block_name: str
    visibility_value: str | None = None

    @property
    def key(self) -> tuple[str, str | None]:
        vis = self.visibility_value.casefold() if self.visibility_value else None
        return (self.source_block_name.casefold(), vis)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeviceSignature):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return f"{self.source_block_name}|{self.visibility_value or '*'}"


@dataclass(frozen=True)
class RawDevice:
    """A device block read from the one-line diagram."""

    id: str
    signature: DeviceSignature
    device_key: str | None = None
    declared_modules: int = 0
    group: str | None = None
    note: str | None = None
    x: float = 0.0
    y: float = 0.0

    @property
    def source_block_name(self) -> str:
        return self.signature.source_block_name

    @property
    def sort_key(self) -> tuple[float, float]:
        """Drawing reading order: top to bottom, then left to right."""
        return (-self.y, self.x)


@dataclass(frozen=True)
class MappedDevice:
    """A device with a resolved layout block and module count, ready to pack."""

    id: str
    source_block_name: str
    device_key: str | None
    display_label: str
    layout_block_name: str
    modules: int
    group: str | None = None
    note: str | None = None


# ── Resolution outcome ─────────────────────────────────────────────


@dataclass(frozen=True)
class SelectorMatch:
    rule: SelectorRule
    ambiguity: int = 1          # equally good candidates, winner included
    borrowed_fallback: int | None = None   # from a legacy rule with the same key

    @property
    def layout_block_name(self) -> str:
        return self.rule.layout_block_name

    @property
    def fallback_modules(self) -> int | None:
        if self.rule.fallback_modules is not None:
            return self.rule.fallback_modules
        return self.borrowed_fallback


@dataclass(frozen=True)
class LegacyMatch:
    rule: LegacyRule

    @property
    def layout_block_name(self) -> str:
        return self.rule.layout_block_name

    @property
    def fallback_modules(self) -> int | None:
        return self.rule.fallback_modules


@dataclass(frozen=True)
class Unresolved:
    pass


Resolution = Union[SelectorMatch, LegacyMatch, Unresolved]
