"""Tests for selector rule resolution.

Validates:
  - Block name and visibility match case-insensitively
  - Wildcard rules match every visibility variant
  - Lower priority wins; on a priority tie the explicit visibility wins
  - Ties between equally specific rules are counted, not hidden
  - The result does not depend on the order rules are supplied in
"""

from __future__ import annotations

import unittest

from panel_layout.pipeline.mapping import DeviceSignature, resolve_selector_rule, rule_matches
from panel_layout.rules.models import SelectorRule, sort_selector_rules


class TestRuleMatching(unittest.TestCase):

    def test_exact_match(self):
        rule = SelectorRule(10, "QF", "2P", "B")
        self.assertTrue(rule_matches(rule, DeviceSignature("QF", "2P")))

    def test_case_insensitive(self):
        rule = SelectorRule(10, "ols_breaker", "2p", "B")
        self.assertTrue(rule_matches(rule, DeviceSignature("OLS_BREAKER", "2P")))

    def test_wildcard_matches_any_visibility(self):
        rule = SelectorRule(10, "QF", None, "A")
        self.assertTrue(rule_matches(rule, DeviceSignature("QF", "2P")))
        self.assertTrue(rule_matches(rule, DeviceSignature("QF", None)))

    def test_explicit_visibility_needs_device_visibility(self):
        rule = SelectorRule(10, "QF", "2P", "B")
        self.assertFalse(rule_matches(rule, DeviceSignature("QF", None)))
        self.assertFalse(rule_matches(rule, DeviceSignature("QF", "3P")))

    def test_other_block_never_matches(self):
        rule = SelectorRule(10, "QF", None, "A")
        self.assertFalse(rule_matches(rule, DeviceSignature("QD", "2P")))


class TestResolveSelectorRule(unittest.TestCase):

    def test_specific_beats_wildcard_on_priority_tie(self):
        a = SelectorRule(10, "QF", None, "A")
        b = SelectorRule(10, "QF", "2P", "B")
        rule, ambiguity = resolve_selector_rule(DeviceSignature("QF", "2P"), [a, b])
        self.assertIs(rule, b)
        self.assertEqual(ambiguity, 1)

    def test_priority_beats_specificity(self):
        wildcard = SelectorRule(5, "QF", None, "A")
        specific = SelectorRule(10, "QF", "2P", "B")
        rule, _ = resolve_selector_rule(DeviceSignature("QF", "2P"), [specific, wildcard])
        self.assertIs(rule, wildcard)

    def test_wildcard_used_when_no_specific_match(self):
        a = SelectorRule(10, "QF", None, "A")
        b = SelectorRule(10, "QF", "2P", "B")
        rule, ambiguity = resolve_selector_rule(DeviceSignature("QF", "4P"), [a, b])
        self.assertIs(rule, a)
        self.assertEqual(ambiguity, 1)

    def test_no_match(self):
        rule, ambiguity = resolve_selector_rule(
            DeviceSignature("KM", None), [SelectorRule(10, "QF", None, "A")])
        self.assertIsNone(rule)
        self.assertEqual(ambiguity, 0)

    def test_empty_rule_set(self):
        self.assertEqual(resolve_selector_rule(DeviceSignature("QF", "2P"), []), (None, 0))

    def test_equal_rules_are_ambiguous(self):
        first = SelectorRule(10, "QF", "2P", "FIRST")
        second = SelectorRule(10, "qf", "2p", "SECOND")
        rule, ambiguity = resolve_selector_rule(DeviceSignature("QF", "2P"), [first, second])
        self.assertIs(rule, first)
        self.assertEqual(ambiguity, 2)

    def test_equal_wildcards_are_ambiguous(self):
        rules = [
            SelectorRule(10, "QF", None, "A"),
            SelectorRule(10, "QF", None, "B"),
            SelectorRule(10, "QF", None, "C"),
        ]
        rule, ambiguity = resolve_selector_rule(DeviceSignature("QF", None), rules)
        self.assertEqual(rule.layout_block_name, "A")
        self.assertEqual(ambiguity, 3)

    def test_lower_ranked_matches_do_not_count_as_ambiguous(self):
        rules = [
            SelectorRule(10, "QF", "2P", "B"),
            SelectorRule(10, "QF", None, "A1"),
            SelectorRule(10, "QF", None, "A2"),
        ]
        rule, ambiguity = resolve_selector_rule(DeviceSignature("QF", "2P"), rules)
        self.assertEqual(rule.layout_block_name, "B")
        self.assertEqual(ambiguity, 1)

    def test_order_independent(self):
        rules = [
            SelectorRule(30, "QF", None, "LOW"),
            SelectorRule(10, "QF", None, "WILD"),
            SelectorRule(10, "QF", "2P", "SPECIFIC"),
            SelectorRule(5, "QD", None, "OTHER"),
        ]
        sig = DeviceSignature("QF", "2P")
        expected = resolve_selector_rule(sig, rules)
        self.assertEqual(resolve_selector_rule(sig, list(reversed(rules))), expected)
        self.assertEqual(resolve_selector_rule(sig, rules[1:] + rules[:1]), expected)
        self.assertEqual(expected[0].layout_block_name, "SPECIFIC")

    def test_deterministic(self):
        rules = [SelectorRule(10, "QF", "2P", "X"), SelectorRule(10, "QF", "2P", "Y")]
        sig = DeviceSignature("QF", "2P")
        self.assertEqual(resolve_selector_rule(sig, rules), resolve_selector_rule(sig, rules))


class TestRuleOrdering(unittest.TestCase):

    def test_sort_key(self):
        rules = [
            SelectorRule(20, "B", None, "x"),
            SelectorRule(10, "b", "2P", "x"),
            SelectorRule(10, "a", None, "x"),
            SelectorRule(10, "B", None, "x"),
        ]
        ordered = sort_selector_rules(rules)
        self.assertEqual(
            [(r.priority, r.source_block_name, r.visibility_value) for r in ordered],
            [(10, "a", None), (10, "B", None), (10, "b", "2P"), (20, "B", None)],
        )

    def test_sort_is_stable_for_equal_keys(self):
        first = SelectorRule(10, "QF", "2P", "FIRST")
        second = SelectorRule(10, "QF", "2P", "SECOND")
        self.assertEqual(sort_selector_rules([first, second]), [first, second])
        self.assertEqual(sort_selector_rules([second, first]), [second, first])


class TestDeviceSignature(unittest.TestCase):

    def test_case_insensitive_equality(self):
        self.assertEqual(DeviceSignature("QF", "2P"), DeviceSignature("qf", "2p"))
        self.assertEqual(hash(DeviceSignature("QF", "2P")), hash(DeviceSignature("qf", "2p")))
        self.assertNotEqual(DeviceSignature("QF", "2P"), DeviceSignature("QF", None))

    def test_str_uses_star_for_wildcard(self):
        self.assertEqual(str(DeviceSignature("QF", None)), "QF|*")
        self.assertEqual(str(DeviceSignature("QF", "2P")), "QF|2P")


if __name__ == "__main__":
    unittest.main()
