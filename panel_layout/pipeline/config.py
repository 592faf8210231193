"""Shared layout constants for the panel pipeline.

These values describe the physical DIN rail a panel is built on and the
limits the rule map enforces.  Both the **mapper** (which validates rule
fallback module counts) and the **packer** (which fills rails and computes
slot geometry) read them from this single source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutRules:
    """Physical DIN-rail rules for panel layout.

    All distances are in millimetres.
    """

    default_modules_per_row: int = 24
    """Rail capacity used when the caller passes a non-positive value."""

    max_modules: int = 72
    """Upper bound for rail capacity and rule fallback module counts."""

    module_width_mm: float = 18.0
    """Width of one DIN module on the rail."""

    row_pitch_mm: float = 125.0
    """Vertical distance between consecutive rails."""

    # ── Derived helpers ────────────────────────────────────────────

    def accepts_module_count(self, value: int | None) -> bool:
        """True if *value* is a usable module count (1..max_modules)."""
        return value is not None and 0 < value <= self.max_modules


# Module-level singleton — importable everywhere.
LAYOUT_RULES = LayoutRules()
