"""Legacy device-key lookup used when no selector rule applies."""

from __future__ import annotations

import logging

from panel_layout.rules.models import LegacyRule


log = logging.getLogger(__name__)


def normalize_device_key(device_key: str | None) -> str:
    return (device_key or "").strip().casefold()


def build_legacy_index(rules: list[LegacyRule]) -> dict[str, LegacyRule]:
    """Index legacy rules by normalised device key.

    The first rule for a key wins; later duplicates are ignored.
    """
    index: dict[str, LegacyRule] = {}
    for rule in rules:
        key = normalize_device_key(rule.device_key)
        if not key:
            continue
        if key in index:
            log.debug("Duplicate legacy key '%s' ignored (keeping %s)",
                      rule.device_key, index[key].layout_block_name)
            continue
        index[key] = rule
    return index


def lookup_legacy_rule(
    index: dict[str, LegacyRule], device_key: str | None,
) -> LegacyRule | None:
    key = normalize_device_key(device_key)
    if not key:
        return None
    return index.get(key)
