"""Module count resolution."""

from __future__ import annotations


def resolve_module_count(declared: int, fallback: int | None) -> int:
    """Merge a device's declared module count with a rule fallback.

    The declared count wins when positive, then a positive fallback.
    0 means neither is usable; it is a failure signal, not a width.
    """
    if declared > 0:
        return declared
    if fallback is not None and fallback > 0:
        return fallback
    return 0
