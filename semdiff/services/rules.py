"""
Rule engine service.
Resolves classified changes with an ordered list of condition-based merge rules.
"""

import logging
import operator
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence

from semdiff.errors import InvalidRuleError
from semdiff.models import (
    ActionType,
    AlternativeSource,
    ChangeStatus,
    ChangeType,
    ClassifiedChange,
    ImpactLevel,
    LengthCondition,
    MergeRule,
    MergeStats,
    PreferVersion,
    RuleAction,
    RuleConditions,
)

logger = logging.getLogger(__name__)


LENGTH_OPERATORS: Dict[str, Callable[[float, float], bool]] = {
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
    "=": operator.eq,
}

LENGTH_UNITS = ("words", "characters")


# ============================================================
# RESOLUTION
# ============================================================

def apply_rules(
    changes: Sequence[ClassifiedChange],
    rules: Iterable[MergeRule] | None,
) -> List[ClassifiedChange]:
    """
    Resolve each change with the first enabled rule whose conditions all hold.

    Rules run in ascending priority (stable for equal priorities). A change
    is touched by at most one rule; changes no rule matches stay as they are.
    Only pending changes are resolved.

    Returns:
        New list of changes; the input changes are not mutated
    """
    ordered = sorted((r for r in (rules or ()) if r.enabled), key=lambda r: r.priority)

    resolved = []
    for change in changes:
        rule = _first_match(change, ordered) if change.status == ChangeStatus.PENDING else None
        resolved.append(_apply_action(change, rule) if rule else _copy(change))
    return resolved


def _first_match(change: ClassifiedChange, rules: Sequence[MergeRule]) -> MergeRule | None:
    for rule in rules:
        if matches_conditions(change, rule.conditions, rule_id=rule.id):
            return rule
    return None


def _apply_action(change: ClassifiedChange, rule: MergeRule) -> ClassifiedChange:
    action = rule.action
    impact = action.set_priority or change.impact

    if action.type == ActionType.AUTO_ACCEPT:
        resolved = change.resolve(
            ChangeStatus.AUTO_HANDLED,
            preferred_alternative(change, action.prefer_version),
        )
    elif action.type == ActionType.HIDE:
        resolved = change.resolve(ChangeStatus.AUTO_HANDLED)
    else:
        resolved = change

    logger.debug("Rule %s resolved change %s as %s", rule.id, change.id, action.type.value)
    return replace(
        resolved,
        alternatives=list(change.alternatives),
        impact=impact,
        rule_applied=rule.name,
    )


def _copy(change: ClassifiedChange) -> ClassifiedChange:
    return replace(change, alternatives=list(change.alternatives))


def preferred_alternative(change: ClassifiedChange, preference: PreferVersion | None) -> str | None:
    """Version id of the alternative a rule prefers, if any."""
    if preference == PreferVersion.MANUAL:
        candidates = [alt for alt in change.alternatives if alt.is_manual]
    elif preference == PreferVersion.AI:
        candidates = [alt for alt in change.alternatives if not alt.is_manual]
    elif preference == PreferVersion.SELECTED:
        candidates = list(change.alternatives)
    else:
        return None
    return candidates[0].version_id if candidates else None


# ============================================================
# CONDITIONS
# ============================================================

def matches_conditions(
    change: ClassifiedChange,
    conditions: RuleConditions,
    rule_id: str = "",
) -> bool:
    """
    Evaluate a conjunction of conditions; omitted conditions always hold.

    A malformed condition makes the whole rule non-matching.
    """
    if conditions.change_types is not None and change.type not in conditions.change_types:
        return False

    if conditions.length is not None and not _matches_length(change, conditions.length, rule_id):
        return False

    if conditions.sections is not None and change.location.section not in conditions.sections:
        return False

    if conditions.semantic_shift is not None and change.semantic_shift != conditions.semantic_shift:
        return False

    if conditions.impacts is not None and change.impact not in conditions.impacts:
        return False

    if conditions.source is not None:
        if not any(alt.source == conditions.source for alt in change.alternatives):
            return False

    if conditions.keywords is not None:
        haystack = " ".join([change.original_text] + [alt.text for alt in change.alternatives]).lower()
        if not any(keyword.lower() in haystack for keyword in conditions.keywords):
            return False

    return True


def _matches_length(change: ClassifiedChange, condition: LengthCondition, rule_id: str) -> bool:
    compare = LENGTH_OPERATORS.get(condition.operator)
    if compare is None or condition.unit not in LENGTH_UNITS:
        logger.warning(
            "Rule %s has malformed length condition %r; treating as non-matching",
            rule_id, condition,
        )
        return False

    if condition.unit == "characters":
        text = change.original_text if change.type == ChangeType.DELETION else change.modified_text
        measured = len(text)
    else:
        measured = change.length
    return compare(measured, condition.value)


# ============================================================
# LOADING
# ============================================================

def rules_from_dicts(data: Iterable[Mapping[str, Any]]) -> List[MergeRule]:
    """
    Build rules from plain dicts (the JSON shape used by the API).

    Raises:
        InvalidRuleError: when a rule lacks an id, or its action, priority
            or conditions cannot be read
    """
    return [rule_from_dict(item) for item in data]


def rule_from_dict(data: Mapping[str, Any]) -> MergeRule:
    """Build one rule; unknown enum values in conditions simply never match."""
    if not isinstance(data, Mapping) or "id" not in data:
        raise InvalidRuleError(f"Rule must be an object with an id: {data!r}")

    action_data = data.get("action") or {}
    cond = data.get("conditions") or {}
    if not isinstance(action_data, Mapping):
        raise InvalidRuleError(f"Rule {data['id']!r} action must be an object, got {action_data!r}")
    if not isinstance(cond, Mapping):
        raise InvalidRuleError(f"Rule {data['id']!r} conditions must be an object, got {cond!r}")

    try:
        priority = int(data.get("priority", 0))
    except (TypeError, ValueError) as e:
        raise InvalidRuleError(f"Rule {data['id']!r} has an invalid priority: {e}") from e

    try:
        action = RuleAction(
            type=ActionType(action_data.get("type")),
            prefer_version=_optional(PreferVersion, action_data.get("prefer_version")),
            set_priority=_optional(ImpactLevel, action_data.get("set_priority")),
        )
    except (TypeError, ValueError) as e:
        raise InvalidRuleError(f"Rule {data['id']!r} has an invalid action: {e}") from e

    length = cond.get("length")
    try:
        conditions = RuleConditions(
            change_types=_values(ChangeType, cond.get("change_types")),
            length=LengthCondition(
                operator=str(length.get("operator")),
                value=float(length.get("value")),
                unit=str(length.get("unit", "words")),
            ) if length is not None else None,
            sections=tuple(cond["sections"]) if cond.get("sections") is not None else None,
            semantic_shift=cond.get("semantic_shift"),
            impacts=_values(ImpactLevel, cond.get("impacts")),
            source=_optional(AlternativeSource, cond.get("source")),
            keywords=tuple(cond["keywords"]) if cond.get("keywords") is not None else None,
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise InvalidRuleError(f"Rule {data['id']!r} has invalid conditions: {e}") from e

    return MergeRule(
        id=str(data["id"]),
        name=str(data.get("name", data["id"])),
        priority=priority,
        conditions=conditions,
        action=action,
        enabled=bool(data.get("enabled", True)),
    )


def _optional(enum_cls, value):
    return enum_cls(value) if value is not None else None


def _values(enum_cls, values):
    """Coerce to enum members, keeping unknown values as raw strings."""
    if values is None:
        return None
    known = {member.value: member for member in enum_cls}
    return tuple(known.get(v, v) for v in values)


def rule_to_dict(rule: MergeRule) -> Dict[str, Any]:
    """Inverse of rule_from_dict, omitting unset conditions."""
    cond = rule.conditions
    conditions: Dict[str, Any] = {}
    if cond.change_types is not None:
        conditions["change_types"] = [getattr(t, "value", t) for t in cond.change_types]
    if cond.length is not None:
        conditions["length"] = {
            "operator": cond.length.operator,
            "value": cond.length.value,
            "unit": cond.length.unit,
        }
    if cond.sections is not None:
        conditions["sections"] = list(cond.sections)
    if cond.semantic_shift is not None:
        conditions["semantic_shift"] = cond.semantic_shift
    if cond.impacts is not None:
        conditions["impacts"] = [getattr(i, "value", i) for i in cond.impacts]
    if cond.source is not None:
        conditions["source"] = cond.source.value
    if cond.keywords is not None:
        conditions["keywords"] = list(cond.keywords)

    action: Dict[str, Any] = {"type": rule.action.type.value}
    if rule.action.prefer_version is not None:
        action["prefer_version"] = rule.action.prefer_version.value
    if rule.action.set_priority is not None:
        action["set_priority"] = rule.action.set_priority.value

    return {
        "id": rule.id,
        "name": rule.name,
        "enabled": rule.enabled,
        "priority": rule.priority,
        "conditions": conditions,
        "action": action,
    }


# ============================================================
# STATISTICS
# ============================================================

def merge_stats(changes: Sequence[ClassifiedChange]) -> MergeStats:
    """Count changes by impact and review state."""
    stats = MergeStats(total=len(changes))
    for change in changes:
        if change.impact == ImpactLevel.CRITICAL:
            stats.critical += 1
        elif change.impact == ImpactLevel.IMPORTANT:
            stats.important += 1
        elif change.impact == ImpactLevel.NORMAL:
            stats.normal += 1
        else:
            stats.low += 1

        if change.status == ChangeStatus.AUTO_HANDLED:
            stats.auto_handled += 1
        elif change.status in (ChangeStatus.ACCEPTED, ChangeStatus.REJECTED):
            stats.reviewed += 1
    return stats
