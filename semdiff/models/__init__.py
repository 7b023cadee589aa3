"""
Models package - data structures and schemas.
"""

from semdiff.models.enums import (
    ActionType,
    AlternativeSource,
    ChangeScale,
    ChangeStatus,
    ChangeType,
    ImpactLevel,
    OperationKind,
    PreferVersion,
    TokenKind,
)
from semdiff.models.schemas import (
    ContentBlock,
    Token,
    DiffOperation,
    Span,
    Location,
    Alternative,
    ClassifiedChange,
    LengthCondition,
    RuleConditions,
    RuleAction,
    MergeRule,
    MergePreset,
    MergeStats,
    DiffStats,
    DiffAnalysis,
    MergeResult,
    DiffRequest,
    DiffResponse,
    ClassifyRequest,
    ChangeDetail,
    MergeRequest,
    MergeResponse,
    PresetOut,
)

__all__ = [
    "ActionType",
    "AlternativeSource",
    "ChangeScale",
    "ChangeStatus",
    "ChangeType",
    "ImpactLevel",
    "OperationKind",
    "PreferVersion",
    "TokenKind",
    "ContentBlock",
    "Token",
    "DiffOperation",
    "Span",
    "Location",
    "Alternative",
    "ClassifiedChange",
    "LengthCondition",
    "RuleConditions",
    "RuleAction",
    "MergeRule",
    "MergePreset",
    "MergeStats",
    "DiffStats",
    "DiffAnalysis",
    "MergeResult",
    "DiffRequest",
    "DiffResponse",
    "ClassifyRequest",
    "ChangeDetail",
    "MergeRequest",
    "MergeResponse",
    "PresetOut",
]
