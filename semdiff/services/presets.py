"""
Preset library.
Named, immutable rule lists for the merge rule engine.
"""

from typing import Tuple

from semdiff.errors import PresetNotFoundError
from semdiff.models import (
    ActionType,
    ChangeType,
    ImpactLevel,
    LengthCondition,
    MergePreset,
    MergeRule,
    PreferVersion,
    RuleAction,
    RuleConditions,
)

MINOR_FIXES = (ChangeType.GRAMMAR, ChangeType.PUNCTUATION, ChangeType.SPELLING)


QUICK_REVIEW = MergePreset(
    id="quick-review",
    name="Quick Review",
    description="Only show me conflicts and structural changes",
    rules=(
        MergeRule(
            id="quick-1",
            name="Auto-accept grammar fixes",
            priority=1,
            conditions=RuleConditions(change_types=MINOR_FIXES),
            action=RuleAction(ActionType.AUTO_ACCEPT, prefer_version=PreferVersion.AI),
        ),
        MergeRule(
            id="quick-2",
            name="Auto-accept minor word changes",
            priority=2,
            conditions=RuleConditions(
                change_types=(ChangeType.WORD_CHOICE,),
                length=LengthCondition("<", 3, "words"),
            ),
            action=RuleAction(ActionType.AUTO_ACCEPT, prefer_version=PreferVersion.AI),
        ),
        MergeRule(
            id="quick-3",
            name="Show structural changes",
            priority=3,
            conditions=RuleConditions(change_types=(ChangeType.STRUCTURE,)),
            action=RuleAction(ActionType.SHOW, set_priority=ImpactLevel.CRITICAL),
        ),
    ),
)

BALANCED_REVIEW = MergePreset(
    id="balanced-review",
    name="Balanced Review",
    description="Smart defaults - review what matters",
    rules=(
        MergeRule(
            id="balanced-1",
            name="Auto-handle minor edits",
            priority=1,
            conditions=RuleConditions(
                change_types=MINOR_FIXES,
                length=LengthCondition("<", 5, "words"),
            ),
            action=RuleAction(ActionType.AUTO_ACCEPT, prefer_version=PreferVersion.AI),
        ),
        MergeRule(
            id="balanced-2",
            name="Flag structural changes",
            priority=2,
            conditions=RuleConditions(change_types=(ChangeType.STRUCTURE,)),
            action=RuleAction(ActionType.SHOW, set_priority=ImpactLevel.CRITICAL),
        ),
        MergeRule(
            id="balanced-3",
            name="Flag tone changes",
            priority=3,
            conditions=RuleConditions(semantic_shift=True),
            action=RuleAction(ActionType.SHOW, set_priority=ImpactLevel.IMPORTANT),
        ),
        MergeRule(
            id="balanced-4",
            name="Show significant additions",
            priority=4,
            conditions=RuleConditions(
                change_types=(ChangeType.ADDITION,),
                length=LengthCondition(">", 10, "words"),
            ),
            action=RuleAction(ActionType.SHOW, set_priority=ImpactLevel.IMPORTANT),
        ),
    ),
)

BRAND_GUARDIAN = MergePreset(
    id="brand-guardian",
    name="Brand Guardian",
    description="Protect your voice and tone",
    rules=(
        MergeRule(
            id="brand-1",
            name="Auto-accept grammar only",
            priority=1,
            conditions=RuleConditions(change_types=MINOR_FIXES),
            action=RuleAction(ActionType.AUTO_ACCEPT, prefer_version=PreferVersion.AI),
        ),
        MergeRule(
            id="brand-2",
            name="Prefer manual for tone",
            priority=2,
            conditions=RuleConditions(change_types=(ChangeType.TONE,)),
            # show keeps the change pending; prefer_version only matters for auto-accept
            action=RuleAction(
                ActionType.SHOW,
                prefer_version=PreferVersion.MANUAL,
                set_priority=ImpactLevel.CRITICAL,
            ),
        ),
        MergeRule(
            id="brand-3",
            name="Flag all semantic shifts",
            priority=3,
            conditions=RuleConditions(semantic_shift=True),
            action=RuleAction(ActionType.SHOW, set_priority=ImpactLevel.CRITICAL),
        ),
    ),
)

THOROUGH_REVIEW = MergePreset(
    id="thorough-review",
    name="Thorough Review",
    description="See everything, decide on all changes",
    rules=(
        MergeRule(
            id="thorough-1",
            name="Show all changes",
            priority=1,
            conditions=RuleConditions(),
            action=RuleAction(ActionType.SHOW),
        ),
    ),
)

MERGE_PRESETS: Tuple[MergePreset, ...] = (
    QUICK_REVIEW,
    BALANCED_REVIEW,
    BRAND_GUARDIAN,
    THOROUGH_REVIEW,
)


def get_preset(preset_id: str) -> MergePreset:
    """Look up a shipped preset by id or by display name."""
    for preset in MERGE_PRESETS:
        if preset_id in (preset.id, preset.name):
            return preset
    raise PresetNotFoundError(preset_id)
