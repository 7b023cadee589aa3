"""
Data models and schemas for semantic diffing and merge resolution.

Engine-side structures are plain dataclasses; the API request/response
shapes at the bottom are pydantic models.
"""

from dataclasses import dataclass, field, asdict, replace
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, Field

from semdiff.errors import InvalidTransitionError
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


@dataclass
class ContentBlock:
    """A single unit of document content."""
    index: int          # Position in document
    block_type: str     # "paragraph" or "table"
    content: str        # The actual text


@dataclass(frozen=True)
class Token:
    """A contiguous substring of the source text."""
    kind: TokenKind
    text: str
    start: int          # Character offset in the source


@dataclass(frozen=True)
class DiffOperation:
    """One step of an edit script.

    source_index is the token position in the old sequence for equal and
    delete operations, and in the new sequence for insert operations.
    """
    kind: OperationKind
    text: str
    source_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "text": self.text, "source_index": self.source_index}


@dataclass(frozen=True)
class Span:
    """A compacted run of changed text, optionally paired with its replacement."""
    original: str
    modified: str
    old_offset: int     # Character offset in the old text
    new_offset: int     # Character offset in the new text

    @property
    def is_replacement(self) -> bool:
        return bool(self.original) and bool(self.modified)


@dataclass(frozen=True)
class Location:
    """Coarse position of a change: paragraph index plus its section label."""
    index: int
    section: str = ""


@dataclass(frozen=True)
class Alternative:
    """A proposed replacement for the original text."""
    version_id: str
    text: str
    source: AlternativeSource = AlternativeSource.MANUAL
    version_number: str = ""

    @property
    def is_manual(self) -> bool:
        return self.source == AlternativeSource.MANUAL


_ALLOWED_TRANSITIONS = {
    ChangeStatus.PENDING: {
        ChangeStatus.ACCEPTED,
        ChangeStatus.REJECTED,
        ChangeStatus.AUTO_HANDLED,
    },
}


@dataclass
class ClassifiedChange:
    """A single reviewable change with its classification and review state."""
    id: str
    type: ChangeType
    impact: ImpactLevel
    location: Location
    original_text: str
    alternatives: List[Alternative] = field(default_factory=list)
    length: int = 0                     # Word count used by length rules
    semantic_shift: bool = False
    status: ChangeStatus = ChangeStatus.PENDING
    selected_alternative_id: str | None = None
    rule_applied: str | None = None
    explanation: str = ""
    move_to: Location | None = None     # Destination of a move; location is the source
    confidence: float | None = None     # Similarity score for moves

    @property
    def modified_text(self) -> str:
        """Text of the first alternative, or "" when there is none."""
        return self.alternatives[0].text if self.alternatives else ""

    def resolve(
        self,
        status: ChangeStatus,
        selected_alternative_id: str | None = None,
    ) -> "ClassifiedChange":
        """Return a copy moved out of pending; any other transition is refused."""
        if status not in _ALLOWED_TRANSITIONS.get(self.status, set()):
            raise InvalidTransitionError(
                f"Change {self.id!r} cannot move from {self.status.value} to {status.value}"
            )
        return replace(
            self,
            status=status,
            selected_alternative_id=selected_alternative_id or self.selected_alternative_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        data["impact"] = self.impact.value
        data["status"] = self.status.value
        data["alternatives"] = [
            {
                "version_id": alt.version_id,
                "version_number": alt.version_number,
                "text": alt.text,
                "source": alt.source.value,
                "is_manual": alt.is_manual,
            }
            for alt in self.alternatives
        ]
        return data


@dataclass(frozen=True)
class LengthCondition:
    """Compare a change's length against a threshold."""
    operator: str               # "<", ">", "<=", ">=", "="
    value: float
    unit: str = "words"         # "words" or "characters"


@dataclass(frozen=True)
class RuleConditions:
    """Conjunction of optional predicates; an omitted predicate always holds."""
    change_types: Tuple[ChangeType, ...] | None = None
    length: LengthCondition | None = None
    sections: Tuple[str, ...] | None = None
    semantic_shift: bool | None = None
    impacts: Tuple[ImpactLevel, ...] | None = None
    source: AlternativeSource | None = None
    keywords: Tuple[str, ...] | None = None


@dataclass(frozen=True)
class RuleAction:
    """What to do with a change once a rule matches."""
    type: ActionType
    prefer_version: PreferVersion | None = None
    set_priority: ImpactLevel | None = None


@dataclass(frozen=True)
class MergeRule:
    """An ordered, condition-based resolution rule."""
    id: str
    name: str
    priority: int               # Lower number = evaluated first
    conditions: RuleConditions
    action: RuleAction
    enabled: bool = True


@dataclass(frozen=True)
class MergePreset:
    """A named, immutable list of merge rules."""
    id: str
    name: str
    description: str
    rules: Tuple[MergeRule, ...]


@dataclass
class MergeStats:
    """Counts over a resolved change list."""
    total: int = 0
    critical: int = 0
    important: int = 0
    normal: int = 0
    low: int = 0
    auto_handled: int = 0
    reviewed: int = 0


@dataclass
class DiffStats:
    """Span counts over a compacted operation list."""
    additions: int = 0
    deletions: int = 0
    unchanged: int = 0


@dataclass
class DiffAnalysis:
    """Word diff plus whole-document measurements."""
    operations: List[DiffOperation]
    stats: DiffStats
    change_percent: float
    similarity: float
    change_scale: ChangeScale
    suggested_mode: str         # "tracking" or "diff-regenerate"
    fallback: bool = False      # True when the edit-distance cap forced a coarse diff


@dataclass
class MergeResult:
    """Resolved changes for a document pair."""
    changes: List[ClassifiedChange]
    stats: MergeStats
    summary: str


# ============================================================
# API SCHEMAS
# ============================================================

class DiffRequest(BaseModel):
    """Request body for the word diff endpoint."""
    old_text: str
    new_text: str
    strip_html: bool = False


class DiffOperationOut(BaseModel):
    kind: str
    text: str
    source_index: int


class DiffStatsOut(BaseModel):
    additions: int
    deletions: int
    unchanged: int


class DiffResponse(BaseModel):
    """Response from the word diff endpoint."""
    operations: List[DiffOperationOut]
    stats: DiffStatsOut
    change_percent: float
    similarity: float
    change_scale: str
    suggested_mode: str
    fallback: bool


class ClassifyRequest(BaseModel):
    """Request body for classifying a single span pair."""
    original: str = ""
    modified: str = ""
    location: int = 0
    section: str = ""


class AlternativeOut(BaseModel):
    version_id: str
    version_number: str
    text: str
    source: str
    is_manual: bool


class LocationOut(BaseModel):
    index: int
    section: str


class ChangeDetail(BaseModel):
    """Detailed information about a single classified change."""
    id: str
    type: str
    impact: str
    location: LocationOut
    original_text: str
    alternatives: List[AlternativeOut]
    length: int
    semantic_shift: bool
    status: str
    selected_alternative_id: str | None = None
    rule_applied: str | None = None
    explanation: str = ""
    move_to: LocationOut | None = None
    confidence: float | None = None


class MergeRequest(BaseModel):
    """Request body for classifying and resolving a document pair.

    Either preset_id or an explicit rule list may be given; explicit rules win.
    """
    old_text: str
    new_text: str
    preset_id: str | None = None
    rules: List[Dict[str, Any]] | None = None
    sections: List[str] | None = None
    strip_html: bool = False


class MergeStatsOut(BaseModel):
    total: int
    critical: int
    important: int
    normal: int
    low: int
    auto_handled: int
    reviewed: int


class MergeResponse(BaseModel):
    """Response from the merge and compare endpoints."""
    success: bool
    changes: List[ChangeDetail]
    stats: MergeStatsOut
    summary: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class PresetOut(BaseModel):
    id: str
    name: str
    description: str
    rules: List[Dict[str, Any]]
