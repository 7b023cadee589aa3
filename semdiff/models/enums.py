"""
Enums for semantic diffing and merge resolution.
"""

from enum import Enum


class TokenKind(str, Enum):
    """Kind of an atomic text token."""
    WORD = "word"
    WHITESPACE = "whitespace"
    PUNCTUATION = "punctuation"


class OperationKind(str, Enum):
    """Kind of a single diff operation."""
    EQUAL = "equal"
    DELETE = "delete"
    INSERT = "insert"


class ChangeType(str, Enum):
    """Semantic category of a change between two versions."""
    ADDITION = "addition"
    DELETION = "deletion"
    MODIFICATION = "modification"
    MOVE = "move"
    GRAMMAR = "grammar"
    PUNCTUATION = "punctuation"
    SPELLING = "spelling"
    WORD_CHOICE = "word-choice"
    TONE = "tone"
    STRUCTURE = "structure"


class ImpactLevel(str, Enum):
    """How much attention a change deserves during review."""
    CRITICAL = "critical"
    IMPORTANT = "important"
    NORMAL = "normal"
    LOW = "low"


class ChangeStatus(str, Enum):
    """Review state of a classified change."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    AUTO_HANDLED = "auto-handled"


class AlternativeSource(str, Enum):
    """Who produced a proposed replacement."""
    MANUAL = "manual"
    AI = "ai"


class ActionType(str, Enum):
    """What a merge rule does with a matching change."""
    AUTO_ACCEPT = "auto-accept"
    SHOW = "show"
    HIDE = "hide"


class PreferVersion(str, Enum):
    """Which alternative an auto-accept rule pins."""
    MANUAL = "manual"
    AI = "ai"
    SELECTED = "selected"


class ChangeScale(str, Enum):
    """Overall size of the difference between two documents."""
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    REWRITE = "rewrite"
