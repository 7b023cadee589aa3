"""
Classification service.
Rule-based change typing, impact scoring and tone-shift detection.
"""

import re
from typing import Dict, Tuple

from semdiff.models import ChangeType, ClassifiedChange, ImpactLevel, Location
from semdiff.services.similarity import SPELLING_MAX_DISTANCE, levenshtein
from semdiff.services.tokenizer import count_words


# ============================================================
# TONE PATTERNS
# ============================================================

FIRST_PERSON_PATTERN = re.compile(r"\b(i|we|my|our|me|us)\b", re.IGNORECASE)

EMOTIONAL_PATTERN = re.compile(
    r"\b(passionate|excited|love|amazing|incredible|awesome)\b", re.IGNORECASE
)

# Checked in order; the first family with a keyword hit labels the span
TONE_FAMILIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("personal", ("i", "we", "my", "our", "me", "us")),
    ("professional", ("organization", "company", "service", "solution", "provide")),
    ("casual", ("really", "pretty", "kinda", "stuff", "thing")),
    ("formal", ("furthermore", "therefore", "consequently", "additionally")),
)

_FAMILY_PATTERNS = [
    (family, re.compile(r"\b(" + "|".join(words) + r")\b", re.IGNORECASE))
    for family, words in TONE_FAMILIES
]

_NON_WORD_PATTERN = re.compile(r"[^\w\s]")

KEY_SECTION_MARKERS = ("intro", "conclusion")

EXPLANATIONS: Dict[ChangeType, str] = {
    ChangeType.GRAMMAR: "Minor correction that improves readability.",
    ChangeType.PUNCTUATION: "Minor correction that improves readability.",
    ChangeType.SPELLING: "Minor correction that improves readability.",
    ChangeType.STRUCTURE: "Changes document flow and organization - review carefully.",
    ChangeType.WORD_CHOICE: "Word choice variation - may affect clarity or style.",
    ChangeType.MOVE: "Content relocated within the document.",
}


# ============================================================
# RULE-BASED CLASSIFIER
# ============================================================

def classify(original: str, modified: str, location: Location) -> ClassifiedChange:
    """
    Classify a single changed span.

    The result is partial: id is empty and alternatives are left for the
    caller, which owns version and author metadata.

    Args:
        original: Text removed from the old version ("" for additions)
        modified: Text that replaces it ("" for deletions)
        location: Paragraph index and section label of the change

    Returns:
        ClassifiedChange with type, impact, length and semantic_shift set
    """
    change_type = detect_change_type(original, modified)
    impact = calculate_impact(original, modified, change_type, location.section)
    length = count_words(original) if change_type == ChangeType.DELETION else count_words(modified)

    change = ClassifiedChange(
        id="",
        type=change_type,
        impact=impact,
        location=location,
        original_text=original,
        length=length,
        semantic_shift=detect_semantic_shift(original, modified),
    )
    change.explanation = explain_impact(change)
    return change


def detect_change_type(original: str, modified: str) -> ChangeType:
    """Pick the change category; the first matching test wins."""
    if not original and modified:
        return ChangeType.ADDITION
    if original and not modified:
        return ChangeType.DELETION

    if _NON_WORD_PATTERN.sub("", original) == _NON_WORD_PATTERN.sub("", modified):
        return ChangeType.PUNCTUATION

    orig_words = original.lower().split()
    mod_words = modified.lower().split()

    if len(orig_words) == len(mod_words) and _is_spelling_fix(orig_words, mod_words):
        return ChangeType.SPELLING

    delta = abs(len(orig_words) - len(mod_words))
    if delta > 10:
        return ChangeType.STRUCTURE

    if detect_tone_change(original, modified):
        return ChangeType.TONE

    if delta <= 3:
        return ChangeType.WORD_CHOICE

    return ChangeType.MODIFICATION


def _is_spelling_fix(orig_words: list, mod_words: list) -> bool:
    """Exactly one word differs and it is within SPELLING_MAX_DISTANCE edits."""
    differing = [(a, b) for a, b in zip(orig_words, mod_words) if a != b]
    if len(differing) != 1:
        return False
    old_word, new_word = differing[0]
    return levenshtein(old_word, new_word) <= SPELLING_MAX_DISTANCE


def calculate_impact(
    original: str,
    modified: str,
    change_type: ChangeType,
    section: str,
) -> ImpactLevel:
    """Score how much review attention a change needs."""
    if change_type == ChangeType.STRUCTURE:
        return ImpactLevel.CRITICAL
    if change_type == ChangeType.DELETION and count_words(original) > 20:
        return ImpactLevel.CRITICAL

    section_lower = (section or "").lower()
    if any(marker in section_lower for marker in KEY_SECTION_MARKERS):
        if change_type in (ChangeType.TONE, ChangeType.MODIFICATION):
            return ImpactLevel.CRITICAL

    if change_type == ChangeType.TONE:
        return ImpactLevel.IMPORTANT
    if change_type == ChangeType.ADDITION and count_words(modified) > 10:
        return ImpactLevel.IMPORTANT
    if change_type == ChangeType.WORD_CHOICE and count_words(modified) > 5:
        return ImpactLevel.IMPORTANT

    if change_type in (ChangeType.GRAMMAR, ChangeType.PUNCTUATION, ChangeType.SPELLING):
        return ImpactLevel.LOW

    return ImpactLevel.NORMAL


def detect_tone_change(original: str, modified: str) -> bool:
    """True when exactly one side is first-person, or exactly one side is emotional."""
    if bool(FIRST_PERSON_PATTERN.search(original)) != bool(FIRST_PERSON_PATTERN.search(modified)):
        return True
    return bool(EMOTIONAL_PATTERN.search(original)) != bool(EMOTIONAL_PATTERN.search(modified))


def tone_family(text: str) -> str:
    """Label text with the first tone family whose keywords it uses, or ""."""
    for family, pattern in _FAMILY_PATTERNS:
        if pattern.search(text):
            return family
    return ""


def detect_semantic_shift(original: str, modified: str) -> bool:
    """Both sides carry a tone family and the families differ."""
    original_tone = tone_family(original)
    modified_tone = tone_family(modified)
    return bool(original_tone) and bool(modified_tone) and original_tone != modified_tone


def explain_impact(change: ClassifiedChange) -> str:
    """One-line reviewer hint for a classified change."""
    if change.type == ChangeType.TONE:
        if change.semantic_shift:
            return "Significant tone shift detected - may affect voice and brand perception."
        return "Subtle tone adjustment."
    if change.type == ChangeType.ADDITION:
        if change.length > 20:
            return "Substantial new content added - verify accuracy and relevance."
        return "New content added."
    if change.type == ChangeType.DELETION:
        if change.length > 10:
            return "Significant content removed - ensure this is intentional."
        return "Content removed."
    return EXPLANATIONS.get(change.type, "Content modified.")
