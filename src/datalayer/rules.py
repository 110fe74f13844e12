from __future__ import annotations

from collections.abc import Mapping

from datalayer.contracts import GatedRule, GlobalData, LoadRule, PredicateRule, StaticRule
from datalayer.observability import Observability, null_observability


def coerce_rule(rule: object) -> LoadRule | None:
    """Resolve raw host input into a LoadRule variant, or None if malformed."""
    if isinstance(rule, (StaticRule, PredicateRule, GatedRule)):
        return rule
    if isinstance(rule, bool):
        return StaticRule(enabled=rule)
    if isinstance(rule, Mapping):
        predicate = rule.get("rule")
        if not callable(predicate):
            return None
        return GatedRule(rule=predicate, test=rule.get("test", False))
    if callable(rule):
        return PredicateRule(predicate=rule)
    return None


def evaluate_rule(
    rule: object,
    data: GlobalData,
    test_mode_active: bool,
    *,
    observability: Observability | None = None,
) -> object:
    resolved = coerce_rule(rule)
    if isinstance(resolved, StaticRule):
        return resolved.enabled
    if isinstance(resolved, PredicateRule):
        return resolved.predicate(data)
    if isinstance(resolved, GatedRule):
        if not resolved.test or (resolved.test is True and test_mode_active):
            return resolved.rule(data)
        return False
    (observability or null_observability()).log_invalid_rule(rule=rule)
    return False
