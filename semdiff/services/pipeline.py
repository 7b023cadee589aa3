"""
Document comparison pipeline.
Aligns paragraphs, word-diffs the changed ones, classifies every span,
folds moves together and resolves the result with merge rules.
"""

import logging
import re
from difflib import SequenceMatcher
from typing import Iterable, List, Sequence, Tuple

from semdiff.models import (
    Alternative,
    AlternativeSource,
    ClassifiedChange,
    Location,
    MergeResult,
    MergeRule,
)
from semdiff.services.analysis import summarize_changes
from semdiff.services.classifier import classify
from semdiff.services.differ import diff_words_with_fallback, extract_spans
from semdiff.services.moves import detect_moves
from semdiff.services.rules import apply_rules, merge_stats
from semdiff.services.similarity import REPLACEMENT_THRESHOLD, similarity

logger = logging.getLogger(__name__)

# Paragraphs below this ratio are treated as a deletion plus an addition
PARAGRAPH_MATCH_THRESHOLD = 0.5

_WORD_PATTERN = re.compile(r"\w+")

# (original text, modified text, location)
RawChange = Tuple[str, str, Location]


def split_paragraphs(text: str) -> List[str]:
    """One entry per non-empty line, stripped."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def section_label(index: int, total: int) -> str:
    """Default section names: first paragraph is the intro, last is the conclusion."""
    if index == 0:
        return "Introduction"
    if total >= 3 and index == total - 1:
        return "Conclusion"
    return "Body"


def compare_documents(
    old_text: str,
    new_text: str,
    *,
    sections: Sequence[str] | None = None,
    source: AlternativeSource = AlternativeSource.MANUAL,
    version_id: str = "modified",
    version_number: str = "",
) -> List[ClassifiedChange]:
    """
    Compare two plain-text documents and classify every change.

    Paragraphs are aligned first so that each word diff stays small.
    Unchanged paragraphs are skipped, removed and added paragraphs become
    deletion and addition changes, and modified paragraphs are word-diffed
    span by span.

    Args:
        old_text: Original document, paragraphs separated by newlines
        new_text: Modified document
        sections: Optional section label per original paragraph; an added
            paragraph takes the label of the original paragraph it follows,
            or of the one it replaces
        source: Who produced the modified version
        version_id: Id recorded on each alternative
        version_number: Display number recorded on each alternative

    Returns:
        Classified changes in alignment order, with moves detected
    """
    old_paras = split_paragraphs(old_text)
    new_paras = split_paragraphs(new_text)

    def old_location(i: int) -> Location:
        return Location(i, _section(i, len(old_paras), sections))

    def new_location(j: int, anchor: int) -> Location:
        # explicit labels follow the old document
        if sections:
            return Location(j, _section(anchor, len(old_paras), sections))
        return Location(j, section_label(j, len(new_paras)))

    matcher = SequenceMatcher(None, old_paras, new_paras, autojunk=False)
    raw: List[RawChange] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():

        if tag == 'equal':
            continue

        elif tag == 'delete':
            for i in range(i1, i2):
                raw.append((old_paras[i], "", old_location(i)))

        elif tag == 'insert':
            for j in range(j1, j2):
                raw.append(("", new_paras[j], new_location(j, max(i1 - 1, 0))))

        elif tag == 'replace':
            for i, j in _match_similar_paragraphs(range(i1, i2), range(j1, j2), old_paras, new_paras):
                if i is None:
                    raw.append(("", new_paras[j], new_location(j, i1)))
                elif j is None:
                    raw.append((old_paras[i], "", old_location(i)))
                else:
                    raw.extend(_word_changes(old_paras[i], new_paras[j], old_location(i)))

    changes = []
    for n, (original, modified, location) in enumerate(raw, start=1):
        change = classify(original, modified, location)
        change.id = f"change-{n}"
        if modified:
            change.alternatives = [
                Alternative(
                    version_id=version_id,
                    text=modified,
                    source=source,
                    version_number=version_number,
                )
            ]
        changes.append(change)

    logger.debug(
        "Compared %d -> %d paragraphs, %d raw changes",
        len(old_paras), len(new_paras), len(changes),
    )
    return detect_moves(changes)


def merge_documents(
    old_text: str,
    new_text: str,
    rules: Iterable[MergeRule] | None,
    **kwargs,
) -> MergeResult:
    """Compare two documents and resolve the changes with a rule list."""
    changes = compare_documents(old_text, new_text, **kwargs)
    resolved = apply_rules(changes, rules)
    return MergeResult(
        changes=resolved,
        stats=merge_stats(resolved),
        summary=summarize_changes(resolved),
    )


def filter_in_bounds(changes: Sequence[ClassifiedChange], paragraph_count: int) -> List[ClassifiedChange]:
    """
    Drop changes whose location no longer exists in the current document.

    Documents are live, so a change computed earlier may point past the
    end by the time it is rendered; such changes are skipped, not errors.
    """
    kept = []
    for change in changes:
        if 0 <= change.location.index < paragraph_count:
            kept.append(change)
        else:
            logger.warning(
                "Skipping change %s at paragraph %d (document has %d)",
                change.id, change.location.index, paragraph_count,
            )
    return kept


def _section(index: int, total: int, sections: Sequence[str] | None) -> str:
    if sections and 0 <= index < len(sections):
        return sections[index]
    return section_label(index, total)


def _word_changes(original: str, modified: str, location: Location) -> List[RawChange]:
    """
    Word-diff one modified paragraph into changed spans.

    Whitespace-only spans are dropped. A single-word replacement whose
    similarity is below REPLACEMENT_THRESHOLD is an unrelated deletion
    plus addition rather than a replacement.
    """
    operations, _ = diff_words_with_fallback(original, modified)
    raw: List[RawChange] = []

    for span in extract_spans(operations):
        old_part, new_part = span.original.strip(), span.modified.strip()
        if not old_part and not new_part:
            continue

        if (
            span.is_replacement
            and _is_single_word(old_part)
            and _is_single_word(new_part)
            and similarity(old_part, new_part) < REPLACEMENT_THRESHOLD
        ):
            raw.append((old_part, "", location))
            raw.append(("", new_part, location))
        else:
            raw.append((old_part, new_part, location))

    return raw


def _is_single_word(text: str) -> bool:
    return _WORD_PATTERN.fullmatch(text) is not None


def _match_similar_paragraphs(
    old_range: Iterable[int],
    new_range: Iterable[int],
    old_paras: List[str],
    new_paras: List[str],
) -> List[tuple]:
    """
    Pair paragraphs inside a replaced block by similarity.

    Returns (old_index, new_index) tuples; an index is None when the
    paragraph has no partner at or above PARAGRAPH_MATCH_THRESHOLD.
    """
    results = []
    candidates = list(new_range)
    used_new = set()

    for i in old_range:
        best_match = None
        best_sim = 0.0

        for j in candidates:
            if j in used_new:
                continue
            sim = SequenceMatcher(None, old_paras[i], new_paras[j]).ratio()
            if sim > best_sim:
                best_sim = sim
                best_match = j

        if best_match is not None and best_sim >= PARAGRAPH_MATCH_THRESHOLD:
            used_new.add(best_match)
            results.append((i, best_match))
        else:
            results.append((i, None))

    for j in candidates:
        if j not in used_new:
            results.append((None, j))

    return results
