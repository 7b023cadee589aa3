"""
Diff analysis service.
Whole-document measurements over a word diff: stats, similarity and scale.
"""

from collections import Counter
from typing import Sequence

from semdiff.models import (
    ChangeScale,
    ChangeType,
    ClassifiedChange,
    DiffAnalysis,
    DiffStats,
    OperationKind,
)
from semdiff.services.differ import diff_words_with_fallback

# Plural labels in the order they appear in summaries
SUMMARY_LABELS = (
    (ChangeType.ADDITION, "additions"),
    (ChangeType.DELETION, "deletions"),
    (ChangeType.MODIFICATION, "modifications"),
    (ChangeType.MOVE, "moves"),
    (ChangeType.STRUCTURE, "structural changes"),
    (ChangeType.TONE, "tone changes"),
    (ChangeType.WORD_CHOICE, "word choice changes"),
    (ChangeType.SPELLING, "spelling fixes"),
    (ChangeType.GRAMMAR, "grammar fixes"),
    (ChangeType.PUNCTUATION, "punctuation changes"),
)


def analyze_diff(old_text: str, new_text: str) -> DiffAnalysis:
    """
    Word-diff two texts and measure how far apart they are.

    similarity is 2 * equal characters / total characters of both texts;
    change_percent is the share of characters sitting in changed spans.
    """
    operations, fallback = diff_words_with_fallback(old_text, new_text)

    stats = DiffStats()
    equal_chars = changed_chars = 0
    for op in operations:
        if op.kind == OperationKind.EQUAL:
            stats.unchanged += 1
            equal_chars += len(op.text)
        elif op.kind == OperationKind.INSERT:
            stats.additions += 1
            changed_chars += len(op.text)
        else:
            stats.deletions += 1
            changed_chars += len(op.text)

    total_chars = len(old_text) + len(new_text)
    similarity = 1.0 if total_chars == 0 else 2 * equal_chars / total_chars

    shown_chars = equal_chars + changed_chars
    change_percent = changed_chars / shown_chars * 100 if shown_chars else 0.0

    scale = ChangeScale.REWRITE if fallback else change_scale(similarity)

    return DiffAnalysis(
        operations=operations,
        stats=stats,
        change_percent=round(change_percent, 1),
        similarity=round(similarity, 4),
        change_scale=scale,
        suggested_mode=(
            "diff-regenerate" if scale in (ChangeScale.MAJOR, ChangeScale.REWRITE) else "tracking"
        ),
        fallback=fallback,
    )


def change_scale(similarity: float) -> ChangeScale:
    """Bucket a document similarity score."""
    if similarity > 0.9:
        return ChangeScale.MINOR
    if similarity > 0.7:
        return ChangeScale.MODERATE
    if similarity > 0.3:
        return ChangeScale.MAJOR
    return ChangeScale.REWRITE


def summarize_changes(changes: Sequence[ClassifiedChange]) -> str:
    """Short human summary such as "2 additions, 1 tone changes"."""
    counts = Counter(change.type for change in changes)
    parts = [f"{counts[kind]} {label}" for kind, label in SUMMARY_LABELS if counts[kind]]
    return ", ".join(parts) if parts else "No changes"
