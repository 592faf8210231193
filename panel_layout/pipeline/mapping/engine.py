"""Device mapper — raw drawing devices to layout blocks and module counts."""

from __future__ import annotations

import logging

from panel_layout.core.reporting import AmbiguityWarning, IssueReporter, SkippedDeviceIssue
from panel_layout.rules.models import LegacyRule, SelectorRule, sort_selector_rules

from .legacy import build_legacy_index, lookup_legacy_rule
from .models import (
    DeviceSignature, RawDevice, MappedDevice,
    Resolution, SelectorMatch, LegacyMatch, Unresolved,
)
from .modules import resolve_module_count
from .selector import resolve_selector_rule


log = logging.getLogger(__name__)

REASON_NO_RULE = "no rule for SOURCE={signature}"
REASON_NO_DATA = "no rule and no device data for SOURCE={signature}"
REASON_NO_MODULES = "no module count and no fallback"


def resolve_device(
    signature: DeviceSignature,
    device_key: str | None,
    selector_rules: list[SelectorRule],
    legacy_index: dict[str, LegacyRule],
) -> Resolution:
    """Resolve one device to a selector match, a legacy match, or nothing.

    A selector rule without its own fallback module count may borrow one
    from the legacy rule for the same device key.  Only the module count
    is borrowed; the layout block always comes from the selector rule.
    """
    rule, ambiguity = resolve_selector_rule(signature, selector_rules)
    if rule is not None:
        borrowed = None
        if rule.fallback_modules is None:
            legacy = lookup_legacy_rule(legacy_index, device_key)
            if legacy is not None:
                borrowed = legacy.fallback_modules
        return SelectorMatch(rule=rule, ambiguity=ambiguity, borrowed_fallback=borrowed)

    legacy = lookup_legacy_rule(legacy_index, device_key)
    if legacy is not None:
        return LegacyMatch(rule=legacy)
    return Unresolved()


def display_label(device: RawDevice) -> str:
    """Device key when the drawing has one, else SOURCE|VISIBILITY."""
    key = (device.device_key or "").strip()
    if key:
        return key
    return str(device.signature)


def _is_artifact(device: RawDevice) -> bool:
    # No key and no declared width: a decorative block, not a device.
    return not (device.device_key or "").strip() and device.declared_modules <= 0


def map_devices(
    raw_devices: list[RawDevice],
    selector_rules: list[SelectorRule],
    legacy_rules: list[LegacyRule],
    *,
    strict: bool = False,
    reporter: IssueReporter | None = None,
) -> tuple[list[MappedDevice], list[SkippedDeviceIssue]]:
    """Map devices to layout blocks, preserving input order.

    Parameters
    ----------
    raw_devices : list[RawDevice]
        Devices in drawing order (top to bottom, left to right).
        They are not re-sorted here.
    selector_rules, legacy_rules
        Normalised rule lists from the layout map.
    strict : bool
        Report unresolved devices that have neither a key nor a declared
        module count instead of dropping them silently.
    reporter : IssueReporter, optional
        Receives skip issues and ambiguity warnings as they occur.

    Returns
    -------
    (mapped, issues)
        Mapped devices in input order, and one issue per dropped device
        (silently dropped artifacts excluded).
    """
    ordered_rules = sort_selector_rules(selector_rules)
    legacy_index = build_legacy_index(legacy_rules)

    mapped: list[MappedDevice] = []
    issues: list[SkippedDeviceIssue] = []

    def _skip(device: RawDevice, reason: str) -> None:
        issue = SkippedDeviceIssue(
            id=device.id,
            reason=reason,
            device_key=device.device_key,
            source_block_name=device.source_block_name,
        )
        issues.append(issue)
        if reporter is not None:
            reporter.skip(issue)

    for device in raw_devices:
        resolution = resolve_device(
            device.signature, device.device_key, ordered_rules, legacy_index)

        if isinstance(resolution, Unresolved):
            if _is_artifact(device):
                if strict:
                    _skip(device, REASON_NO_DATA.format(signature=device.signature))
                else:
                    log.debug("Dropped %s (%s): no rule, key or modules",
                              device.id, device.signature)
                continue
            _skip(device, REASON_NO_RULE.format(signature=device.signature))
            continue

        if isinstance(resolution, SelectorMatch) and resolution.ambiguity > 1:
            warning = AmbiguityWarning(
                device_id=device.id,
                source_block_name=device.signature.source_block_name,
                visibility_value=device.signature.visibility_value,
                candidates=resolution.ambiguity,
                chosen_layout_block_name=resolution.layout_block_name,
            )
            if reporter is not None:
                reporter.ambiguous(warning)
            else:
                log.warning("Ambiguous selector rules: %s", warning)

        modules = resolve_module_count(device.declared_modules, resolution.fallback_modules)
        if modules == 0:
            _skip(device, REASON_NO_MODULES)
            continue

        mapped.append(MappedDevice(
            id=device.id,
            source_block_name=device.source_block_name,
            device_key=(device.device_key or "").strip() or None,
            display_label=display_label(device),
            layout_block_name=resolution.layout_block_name,
            modules=modules,
            group=device.group,
            note=device.note,
        ))
        log.debug("Mapped %s (%s) -> %s, %d modules",
                  device.id, device.signature, resolution.layout_block_name, modules)

    log.info("Mapped %d of %d devices (%d skipped)",
             len(mapped), len(raw_devices), len(issues))
    return mapped, issues
