"""
Diff engine service.
Word-level shortest edit script (Myers O(ND)) and span compaction.
"""

import logging
from typing import List, Sequence, Tuple

from semdiff.config import settings
from semdiff.models import DiffOperation, OperationKind, Span, Token
from semdiff.services.tokenizer import tokenize, tokenize_lines

logger = logging.getLogger(__name__)


class EditDistanceExceeded(Exception):
    """Raised internally when the edit distance passes the configured cap."""


def diff_tokens(
    old_tokens: Sequence[Token],
    new_tokens: Sequence[Token],
    max_edits: int | None = None,
) -> List[DiffOperation]:
    """
    Compute the shortest edit script between two token sequences.

    Every old token appears exactly once as equal or delete, every new
    token exactly once as equal or insert.

    Args:
        old_tokens: Tokens of the original text
        new_tokens: Tokens of the modified text
        max_edits: Give up once the edit distance passes this value

    Raises:
        EditDistanceExceeded: when max_edits is set and exceeded
    """
    old = [t.text for t in old_tokens]
    new = [t.text for t in new_tokens]

    if old == new:
        return [DiffOperation(OperationKind.EQUAL, text, i) for i, text in enumerate(old)]
    if not old:
        return [DiffOperation(OperationKind.INSERT, text, j) for j, text in enumerate(new)]
    if not new:
        return [DiffOperation(OperationKind.DELETE, text, i) for i, text in enumerate(old)]

    trace = _shortest_edit(old, new, max_edits)
    return _backtrack(old, new, trace)


def _shortest_edit(old: List[str], new: List[str], max_edits: int | None) -> List[List[int]]:
    """
    Forward pass over increasing edit distance d.

    Returns one frontier snapshot per round, taken before the round runs.
    Snapshot d holds the furthest x for diagonals -(d+1)..(d+1), so diagonal
    k lives at position k + d + 1.
    """
    n, m = len(old), len(new)
    limit = n + m if max_edits is None else min(n + m, max_edits)

    offset = limit + 2
    v = [0] * (2 * offset + 1)
    trace: List[List[int]] = []

    for d in range(limit + 1):
        trace.append(v[offset - d - 1:offset + d + 2])
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
                x = v[offset + k + 1]
            else:
                x = v[offset + k - 1] + 1
            y = x - k

            while x < n and y < m and old[x] == new[y]:
                x += 1
                y += 1

            v[offset + k] = x
            if x >= n and y >= m:
                return trace

    raise EditDistanceExceeded(f"edit distance exceeds {limit}")


def _backtrack(old: List[str], new: List[str], trace: List[List[int]]) -> List[DiffOperation]:
    """Walk the recorded frontiers from (N, M) back to the origin."""
    ops: List[DiffOperation] = []
    x, y = len(old), len(new)

    for d in range(len(trace) - 1, -1, -1):
        snapshot = trace[d]
        k = x - y
        if k == -d or (k != d and snapshot[k - 1 + d + 1] < snapshot[k + 1 + d + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = snapshot[prev_k + d + 1]
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            x -= 1
            y -= 1
            ops.append(DiffOperation(OperationKind.EQUAL, old[x], x))

        if d > 0:
            if x == prev_x:
                ops.append(DiffOperation(OperationKind.INSERT, new[prev_y], prev_y))
            else:
                ops.append(DiffOperation(OperationKind.DELETE, old[prev_x], prev_x))

        x, y = prev_x, prev_y

    ops.reverse()
    return ops


def compact_operations(operations: Sequence[DiffOperation]) -> List[DiffOperation]:
    """Merge consecutive operations of the same kind, keeping the first source_index."""
    merged: List[DiffOperation] = []
    for op in operations:
        if merged and merged[-1].kind == op.kind:
            last = merged[-1]
            merged[-1] = DiffOperation(last.kind, last.text + op.text, last.source_index)
        else:
            merged.append(DiffOperation(op.kind, op.text, op.source_index))
    return merged


def diff_words_with_fallback(
    old_text: str,
    new_text: str,
    max_edits: int | None = None,
) -> Tuple[List[DiffOperation], bool]:
    """
    Word diff that degrades to a line diff, then to a whole-text replace,
    when the edit distance passes the cap.

    Returns:
        (compacted operations, whether a fallback was used)
    """
    if old_text == new_text:
        return [DiffOperation(OperationKind.EQUAL, old_text, 0)], False

    cap = settings.MAX_EDIT_DISTANCE if max_edits is None else max_edits

    try:
        ops = diff_tokens(tokenize(old_text), tokenize(new_text), cap)
        return compact_operations(ops), False
    except EditDistanceExceeded:
        logger.debug("Word diff passed %d edits, falling back to line diff", cap)

    try:
        ops = diff_tokens(tokenize_lines(old_text), tokenize_lines(new_text), cap)
        return compact_operations(ops), True
    except EditDistanceExceeded:
        logger.debug("Line diff passed %d edits, replacing whole text", cap)

    ops = []
    if old_text:
        ops.append(DiffOperation(OperationKind.DELETE, old_text, 0))
    if new_text:
        ops.append(DiffOperation(OperationKind.INSERT, new_text, 0))
    return ops, True


def diff_words(old_text: str, new_text: str) -> List[DiffOperation]:
    """
    Compare two texts at word granularity.

    Joining equal+delete texts gives old_text back; joining equal+insert
    texts gives new_text back.
    """
    ops, _ = diff_words_with_fallback(old_text, new_text)
    return ops


def extract_spans(operations: Sequence[DiffOperation]) -> List[Span]:
    """
    Group compacted operations into changed spans.

    A delete directly followed by an insert (or the reverse) is one
    replacement span; lone deletes and inserts stand alone. Span offsets
    are character positions in the old and new texts.
    """
    spans: List[Span] = []
    old_pos = new_pos = 0
    i = 0
    ops = compact_operations(operations)

    while i < len(ops):
        op = ops[i]
        if op.kind == OperationKind.EQUAL:
            old_pos += len(op.text)
            new_pos += len(op.text)
            i += 1
            continue

        nxt = ops[i + 1] if i + 1 < len(ops) else None
        if nxt is not None and nxt.kind not in (OperationKind.EQUAL, op.kind):
            delete, insert = (op, nxt) if op.kind == OperationKind.DELETE else (nxt, op)
            spans.append(Span(delete.text, insert.text, old_pos, new_pos))
            old_pos += len(delete.text)
            new_pos += len(insert.text)
            i += 2
        elif op.kind == OperationKind.DELETE:
            spans.append(Span(op.text, "", old_pos, new_pos))
            old_pos += len(op.text)
            i += 1
        else:
            spans.append(Span("", op.text, old_pos, new_pos))
            new_pos += len(op.text)
            i += 1

    return spans
