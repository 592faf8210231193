"""Rule map dataclasses — typed representations of PanelLayoutMap.json."""

from __future__ import annotations

from dataclasses import dataclass, field

from panel_layout.pipeline.config import LAYOUT_RULES


MAP_VERSION = "2.0"

DEFAULT_DEVICE_TAG = "АППАРАТ"
DEFAULT_MODULES_TAG = "МОДУЛЕЙ"
DEFAULT_GROUP_TAG = "ГРУППА"
DEFAULT_NOTE_TAG = "ПРИМЕЧАНИЕ"


@dataclass(frozen=True)
class SelectorRule:
    """Maps a source block (+ optional visibility variant) to a layout block."""

    priority: int                       # lower wins
    source_block_name: str
    visibility_value: str | None        # None = wildcard
    layout_block_name: str
    fallback_modules: int | None = None

    @property
    def is_wildcard(self) -> bool:
        return self.visibility_value is None


def selector_sort_key(rule: SelectorRule) -> tuple[int, str, str]:
    """Resolution order: priority, then source name, then visibility (wildcards first)."""
    return (
        rule.priority,
        rule.source_block_name.casefold(),
        (rule.visibility_value or "").casefold(),
    )


def sort_selector_rules(rules: list[SelectorRule]) -> list[SelectorRule]:
    """Return *rules* in resolution order.

    The sort is stable: rules that compare equal keep the caller's order,
    which is what breaks ties between equally specific rules.
    """
    return sorted(rules, key=selector_sort_key)


@dataclass(frozen=True)
class LegacyRule:
    """Older device-key → layout block mapping kept for compatibility."""

    device_key: str
    layout_block_name: str
    fallback_modules: int | None = None


@dataclass
class AttributeTags:
    """Block attribute tags the selection reader looks for."""

    device: str = DEFAULT_DEVICE_TAG
    modules: str = DEFAULT_MODULES_TAG
    group: str = DEFAULT_GROUP_TAG
    note: str = DEFAULT_NOTE_TAG


@dataclass
class LayoutMapConfig:
    version: str = MAP_VERSION
    default_modules_per_row: int = LAYOUT_RULES.default_modules_per_row
    attribute_tags: AttributeTags = field(default_factory=AttributeTags)
    selector_rules: list[SelectorRule] = field(default_factory=list)
    legacy_rules: list[LegacyRule] = field(default_factory=list)


@dataclass
class ValidationError:
    section: str                        # "SelectorRules" | "LayoutMap" | "_map"
    field: str
    message: str
    row: int | None = None              # 1-based row within the section

    def __str__(self) -> str:
        where = f"{self.section} row {self.row}" if self.row is not None else self.section
        return f"[{where}] {self.field}: {self.message}"


@dataclass
class LayoutMapResult:
    """Result of loading the rule map — config + any validation errors."""
    config: LayoutMapConfig
    errors: list[ValidationError]

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0


class LayoutMapError(Exception):
    """Raised when refusing to persist an invalid rule map."""

    def __init__(self, errors: list[ValidationError]) -> None:
        self.errors = errors
        detail = "; ".join(str(e) for e in errors[:3])
        more = f" (+{len(errors) - 3} more)" if len(errors) > 3 else ""
        super().__init__(f"Invalid layout map: {detail}{more}")
