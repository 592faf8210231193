"""Selector rule resolution — priority first, then visibility specificity."""

from __future__ import annotations

from panel_layout.rules.models import SelectorRule, sort_selector_rules

from .models import DeviceSignature


def rule_matches(rule: SelectorRule, signature: DeviceSignature) -> bool:
    """True if *rule* applies to *signature*.

    Block names compare case-insensitively.  A rule without a visibility
    value matches every variant of its block.
    """
    if rule.source_block_name.casefold() != signature.source_block_name.casefold():
        return False
    if rule.visibility_value is None:
        return True
    if signature.visibility_value is None:
        return False
    return rule.visibility_value.casefold() == signature.visibility_value.casefold()


def _rank(rule: SelectorRule) -> tuple[int, int]:
    # Lower is better: priority, then explicit visibility before wildcard.
    return (rule.priority, 1 if rule.is_wildcard else 0)


def resolve_selector_rule(
    signature: DeviceSignature,
    rules: list[SelectorRule],
) -> tuple[SelectorRule | None, int]:
    """Pick the winning selector rule for a device signature.

    Rules are put in resolution order first, so the result does not depend
    on the order the caller supplies them in, except between rules that
    are indistinguishable by that order.

    Returns
    -------
    (rule, ambiguity)
        *rule* is the winner, or None when nothing matches.  *ambiguity*
        is the number of matching rules ranked equal to the winner
        (0 = no match, 1 = clean match, >1 = configuration conflict the
        caller must surface as a warning).
    """
    best: SelectorRule | None = None
    best_rank: tuple[int, int] | None = None
    ties = 0

    for rule in sort_selector_rules(rules):
        if not rule_matches(rule, signature):
            continue
        rank = _rank(rule)
        if best_rank is None or rank < best_rank:
            best, best_rank, ties = rule, rank, 1
        elif rank == best_rank:
            ties += 1

    return best, ties
