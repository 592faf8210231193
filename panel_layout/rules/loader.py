"""Rule map loader — reads, normalises, validates and saves PanelLayoutMap.json."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from panel_layout.pipeline.config import LAYOUT_RULES

from .models import (
    MAP_VERSION,
    AttributeTags, LayoutMapConfig, LayoutMapError, LayoutMapResult,
    LegacyRule, SelectorRule, ValidationError,
    sort_selector_rules,
)
from .serialization import layout_map_to_dict


log = logging.getLogger(__name__)

MAP_FILENAME = "PanelLayoutMap.json"
MAP_DIR = Path(__file__).resolve().parent.parent.parent / "config"
MAP_ENV_VAR = "PANEL_LAYOUT_MAP"

DEFAULT_RULE_PRIORITY = 100

SELECTOR_SECTION = "SelectorRules"
LEGACY_SECTION = "LayoutMap"


def default_map_path() -> Path:
    """Map location: $PANEL_LAYOUT_MAP if set, else config/PanelLayoutMap.json."""
    override = os.environ.get(MAP_ENV_VAR)
    if override:
        return Path(override)
    return MAP_DIR / MAP_FILENAME


# ── Field helpers ──────────────────────────────────────────────────

def _get(data: dict, key: str, default: Any = None) -> Any:
    """Case-insensitive key lookup (map files are hand-edited)."""
    if key in data:
        return data[key]
    folded = key.casefold()
    for k, v in data.items():
        if isinstance(k, str) and k.casefold() == folded:
            return v
    return default


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> str | None:
    text = _text(value)
    return text or None


def _as_int(value: Any) -> int | None:
    """Parse an integer field; None when absent or not an integer."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _normalize_fallback(value: Any) -> int | None:
    n = _as_int(value)
    return n if LAYOUT_RULES.accepts_module_count(n) else None


def _normalize_modules_per_row(value: Any) -> int:
    n = _as_int(value)
    return n if LAYOUT_RULES.accepts_module_count(n) else LAYOUT_RULES.default_modules_per_row


# ── Parsing ────────────────────────────────────────────────────────

def _parse_tags(data: Any) -> AttributeTags:
    defaults = AttributeTags()
    if not isinstance(data, dict):
        return defaults
    return AttributeTags(
        device=_text(_get(data, "Device")) or defaults.device,
        modules=_text(_get(data, "Modules")) or defaults.modules,
        group=_text(_get(data, "Group")) or defaults.group,
        note=_text(_get(data, "Note")) or defaults.note,
    )


def _parse_selector_rule(
    data: dict, row: int, errors: list[ValidationError],
) -> SelectorRule | None:
    source = _text(_get(data, "SourceBlockName"))
    layout = _text(_get(data, "LayoutBlockName"))
    visibility = _optional_text(_get(data, "VisibilityValue"))
    raw_priority = _get(data, "Priority")
    raw_fallback = _get(data, "FallbackModules")

    if not (source or layout or visibility or raw_fallback is not None):
        return None  # blank row left by the editor
    if not source:
        errors.append(ValidationError(SELECTOR_SECTION, "SourceBlockName", "Must not be empty", row))
        return None
    if not layout:
        errors.append(ValidationError(SELECTOR_SECTION, "LayoutBlockName", "Must not be empty", row))
        return None

    if raw_priority is None:
        priority = DEFAULT_RULE_PRIORITY
    else:
        priority = _as_int(raw_priority)
        if priority is None:
            errors.append(ValidationError(
                SELECTOR_SECTION, "Priority", f"Not an integer: {raw_priority!r}", row))
            return None

    return SelectorRule(
        priority=max(0, priority),
        source_block_name=source,
        visibility_value=visibility,
        layout_block_name=layout,
        fallback_modules=_normalize_fallback(raw_fallback),
    )


def _parse_legacy_rule(
    data: dict, row: int, errors: list[ValidationError],
) -> LegacyRule | None:
    key = _text(_get(data, "DeviceKey"))
    layout = _text(_get(data, "LayoutBlockName"))
    raw_fallback = _get(data, "FallbackModules")

    if not (key or layout or raw_fallback is not None):
        return None
    if not key:
        errors.append(ValidationError(LEGACY_SECTION, "DeviceKey", "Must not be empty", row))
        return None
    if not layout:
        errors.append(ValidationError(LEGACY_SECTION, "LayoutBlockName", "Must not be empty", row))
        return None

    return LegacyRule(
        device_key=key,
        layout_block_name=layout,
        fallback_modules=_normalize_fallback(raw_fallback),
    )


def _parse_rows(data: Any, section: str, errors: list[ValidationError]) -> list[dict]:
    if data is None:
        return []
    if not isinstance(data, list):
        errors.append(ValidationError(section, "_section", "Must be a list"))
        return []
    rows = []
    for i, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            errors.append(ValidationError(section, "_row", "Must be an object", i))
            rows.append({})
            continue
        rows.append(item)
    return rows


def parse_layout_map(data: dict) -> LayoutMapResult:
    """Parse a raw PanelLayoutMap.json dict into a normalised config.

    Rows are trimmed and clamped the same way the map editor does it:
    blank visibility becomes a wildcard, negative priority becomes 0,
    fallback module counts outside 1..72 are dropped.  Rows missing a
    required name are skipped and reported.
    """
    errors: list[ValidationError] = []
    if not isinstance(data, dict):
        errors.append(ValidationError("_map", "json", "Top-level value must be an object"))
        return LayoutMapResult(config=LayoutMapConfig(), errors=errors)

    selector_rules: list[SelectorRule] = []
    for i, row in enumerate(_parse_rows(_get(data, "SelectorRules"), SELECTOR_SECTION, errors), start=1):
        rule = _parse_selector_rule(row, i, errors)
        if rule is not None:
            selector_rules.append(rule)

    legacy_rules: list[LegacyRule] = []
    for i, row in enumerate(_parse_rows(_get(data, "LayoutMap"), LEGACY_SECTION, errors), start=1):
        rule = _parse_legacy_rule(row, i, errors)
        if rule is not None:
            legacy_rules.append(rule)

    config = LayoutMapConfig(
        version=_text(_get(data, "Version")) or MAP_VERSION,
        default_modules_per_row=_normalize_modules_per_row(_get(data, "DefaultModulesPerRow")),
        attribute_tags=_parse_tags(_get(data, "AttributeTags")),
        selector_rules=selector_rules,
        legacy_rules=legacy_rules,
    )
    return LayoutMapResult(config=config, errors=errors)


# ── Validation ─────────────────────────────────────────────────────

def validate_layout_map(config: LayoutMapConfig) -> list[ValidationError]:
    """Check an in-memory config before it is saved. Returns errors (empty = valid)."""
    errs: list[ValidationError] = []
    max_modules = LAYOUT_RULES.max_modules

    if not LAYOUT_RULES.accepts_module_count(config.default_modules_per_row):
        errs.append(ValidationError(
            "_map", "DefaultModulesPerRow", f"Must be in 1..{max_modules}"))

    for i, r in enumerate(config.selector_rules, start=1):
        if not (r.source_block_name.strip() or r.layout_block_name.strip()
                or r.visibility_value or r.fallback_modules is not None):
            continue
        if not r.source_block_name.strip():
            errs.append(ValidationError(SELECTOR_SECTION, "SourceBlockName", "Must not be empty", i))
        if not r.layout_block_name.strip():
            errs.append(ValidationError(SELECTOR_SECTION, "LayoutBlockName", "Must not be empty", i))
        if r.priority < 0:
            errs.append(ValidationError(SELECTOR_SECTION, "Priority", "Must be >= 0", i))
        if r.fallback_modules is not None and not LAYOUT_RULES.accepts_module_count(r.fallback_modules):
            errs.append(ValidationError(
                SELECTOR_SECTION, "FallbackModules", f"Must be in 1..{max_modules}", i))

    for i, r in enumerate(config.legacy_rules, start=1):
        if not (r.device_key.strip() or r.layout_block_name.strip()
                or r.fallback_modules is not None):
            continue
        if not r.device_key.strip():
            errs.append(ValidationError(LEGACY_SECTION, "DeviceKey", "Must not be empty", i))
        if not r.layout_block_name.strip():
            errs.append(ValidationError(LEGACY_SECTION, "LayoutBlockName", "Must not be empty", i))
        if r.fallback_modules is not None and not LAYOUT_RULES.accepts_module_count(r.fallback_modules):
            errs.append(ValidationError(
                LEGACY_SECTION, "FallbackModules", f"Must be in 1..{max_modules}", i))

    return errs


# ── Public API ─────────────────────────────────────────────────────

def load_layout_map(path: Path | None = None) -> LayoutMapResult:
    """Load the rule map from disk.

    Never raises for bad data: a missing file gives the default config,
    an unreadable or malformed file gives the default config plus an error.
    """
    p = path or default_map_path()
    if not p.exists():
        log.info("Layout map %s not found, using defaults", p)
        return LayoutMapResult(config=LayoutMapConfig(), errors=[])

    try:
        raw = json.loads(p.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as exc:
        log.warning("Layout map %s is not valid JSON: %s", p, exc)
        return LayoutMapResult(
            config=LayoutMapConfig(),
            errors=[ValidationError("_map", "json", f"Parse error: {exc}")])
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("Layout map %s could not be read: %s", p, exc)
        return LayoutMapResult(
            config=LayoutMapConfig(),
            errors=[ValidationError("_map", "file", f"Read error: {exc}")])

    result = parse_layout_map(raw)
    for err in result.errors:
        log.warning("Layout map %s: %s", p.name, err)
    log.info("Loaded layout map %s: selector=%d, legacy=%d",
             p, len(result.config.selector_rules), len(result.config.legacy_rules))
    return result


def save_layout_map(config: LayoutMapConfig, path: Path | None = None) -> Path:
    """Validate and persist the rule map.

    Selector rules are written in resolution order; blank rows are dropped.

    Raises
    ------
    LayoutMapError
        If the config fails validation.  Nothing is written.
    """
    errors = validate_layout_map(config)
    if errors:
        raise LayoutMapError(errors)

    selector_rules = sort_selector_rules([
        SelectorRule(
            priority=r.priority,
            source_block_name=r.source_block_name.strip(),
            visibility_value=(r.visibility_value or "").strip() or None,
            layout_block_name=r.layout_block_name.strip(),
            fallback_modules=r.fallback_modules,
        )
        for r in config.selector_rules
        if r.source_block_name.strip() and r.layout_block_name.strip()
    ])
    legacy_rules = [
        LegacyRule(r.device_key.strip(), r.layout_block_name.strip(), r.fallback_modules)
        for r in config.legacy_rules
        if r.device_key.strip() and r.layout_block_name.strip()
    ]
    normalized = LayoutMapConfig(
        version=MAP_VERSION,
        default_modules_per_row=config.default_modules_per_row,
        attribute_tags=config.attribute_tags,
        selector_rules=selector_rules,
        legacy_rules=legacy_rules,
    )

    p = path or default_map_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(
        json.dumps(layout_map_to_dict(normalized), indent=2, ensure_ascii=False),
        encoding="utf-8")
    log.info("Saved layout map %s: selector=%d, legacy=%d, modules per row=%d",
             p, len(selector_rules), len(legacy_rules), normalized.default_modules_per_row)
    return p
