"""Small apartment panel fixture — rules and selection for end-to-end tests.

Selector rules:
  - OLS_BREAKER|1P  -> PANEL_QF_1P (priority 10, fallback 1)
  - OLS_BREAKER|3P  -> PANEL_QF_3P (priority 10, fallback 3)
  - OLS_BREAKER|*   -> PANEL_QF    (priority 20, no fallback)
  - OLS_RCD|*       -> PANEL_RCD   (priority 20, fallback 2)
  - OLS_INPUT|*     -> PANEL_QS    (priority 30, fallback 4)

Legacy rules:
  - KM -> PANEL_KM (fallback 2)
  - QF -> PANEL_QF (fallback 2)

Selection (exported order is scrambled; drawing order is top-down, left-right):
  - in_1   input switch, top of the sheet           -> 4 modules
  - qf_1   1P breaker, declared 1 module            -> 1 module
  - qf_2   3P breaker, no declared modules          -> 3 modules (rule fallback)
  - qf_3   2P breaker, key "QF"                     -> 2 modules (borrowed from legacy)
  - rcd_1  RCD, declared 22 modules                 -> splits across rows at 24/row
  - km_1   contactor block with no selector rule    -> legacy PANEL_KM, 2 modules
  - x_1    unknown block with key "XX"              -> skipped, no rule
  - frame  title-block artifact, no key, no modules -> dropped silently
"""

from __future__ import annotations

from panel_layout.rules.models import LayoutMapConfig, LegacyRule, SelectorRule


def make_selector_rules() -> list[SelectorRule]:
    return [
        SelectorRule(20, "OLS_BREAKER", None, "PANEL_QF"),
        SelectorRule(10, "OLS_BREAKER", "3P", "PANEL_QF_3P", 3),
        SelectorRule(10, "OLS_BREAKER", "1P", "PANEL_QF_1P", 1),
        SelectorRule(20, "OLS_RCD", None, "PANEL_RCD", 2),
        SelectorRule(30, "OLS_INPUT", None, "PANEL_QS", 4),
    ]


def make_legacy_rules() -> list[LegacyRule]:
    return [
        LegacyRule("KM", "PANEL_KM", 2),
        LegacyRule("QF", "PANEL_QF", 2),
    ]


def make_layout_map() -> LayoutMapConfig:
    return LayoutMapConfig(
        default_modules_per_row=24,
        selector_rules=make_selector_rules(),
        legacy_rules=make_legacy_rules(),
    )


def make_selection() -> list[dict]:
    """Exported block records, deliberately not in drawing order."""
    return [
        {"id": "qf_2", "block_name": "OLS_BREAKER", "visibility": "3P",
         "x": 40.0, "y": 300.0, "attributes": {"АППАРАТ": "QF2", "ГРУППА": "L2"}},
        {"id": "in_1", "block_name": "OLS_INPUT",
         "x": 0.0, "y": 400.0, "attributes": {"АППАРАТ": "QS1"}},
        {"id": "qf_1", "block_name": "ols_breaker", "visibility": "1p",
         "x": 20.0, "y": 300.0, "attributes": {"аппарат": "QF1", "МОДУЛЕЙ": "1", "ГРУППА": "L1"}},
        {"id": "qf_3", "block_name": "OLS_BREAKER", "visibility": "2P",
         "x": 60.0, "y": 300.0, "attributes": {"АППАРАТ": "QF", "ГРУППА": "L3"}},
        {"id": "rcd_1", "block_name": "OLS_RCD",
         "x": 0.0, "y": 200.0, "attributes": {"АППАРАТ": "QD1", "МОДУЛЕЙ": "22",
                                             "ПРИМЕЧАНИЕ": "30 mA"}},
        {"id": "km_1", "block_name": "OLS_CONTACTOR",
         "x": 20.0, "y": 200.0, "attributes": {"АППАРАТ": "KM"}},
        {"id": "x_1", "block_name": "OLS_UNKNOWN",
         "x": 40.0, "y": 200.0, "attributes": {"АППАРАТ": "XX"}},
        {"id": "frame", "block_name": "TITLE_FRAME",
         "x": 0.0, "y": 0.0, "attributes": {}},
    ]


# Expected drawing order after sorting by (-y, x).
EXPECTED_ORDER = ["in_1", "qf_1", "qf_2", "qf_3", "rcd_1", "km_1", "x_1", "frame"]
