"""
Move detection service.
Pairs deletions with near-identical insertions and reports them as moves.
"""

import logging
from typing import List, Sequence

from semdiff.models import ChangeType, ClassifiedChange, ImpactLevel
from semdiff.services.classifier import explain_impact
from semdiff.services.similarity import MOVE_THRESHOLD, similarity

logger = logging.getLogger(__name__)


def detect_moves(changes: Sequence[ClassifiedChange]) -> List[ClassifiedChange]:
    """
    Replace deletion/addition pairs that carry the same text with one move.

    Pairing is greedy: candidates are stable-sorted by location, then each
    deletion claims the first unclaimed addition whose similarity is above
    MOVE_THRESHOLD. The input list and its changes are left untouched.

    Args:
        changes: Classified changes for one document pair

    Returns:
        New change list in input order; each move takes its deletion's place
        and the paired addition is dropped
    """
    ordered = sorted(changes, key=lambda c: c.location.index)
    deletions = [c for c in ordered if c.type == ChangeType.DELETION]
    additions = [c for c in ordered if c.type == ChangeType.ADDITION]

    claimed = set()
    moves = {}   # id(deletion) -> move change

    for deletion in deletions:
        for addition in additions:
            if id(addition) in claimed:
                continue
            score = similarity(deletion.original_text, addition.modified_text)
            if score > MOVE_THRESHOLD:
                claimed.add(id(addition))
                claimed.add(id(deletion))
                moves[id(deletion)] = _build_move(deletion, addition, score)
                break

    if moves:
        logger.debug("Detected %d moved passage(s)", len(moves))

    result = []
    for change in changes:
        if id(change) in moves:
            result.append(moves[id(change)])
        elif id(change) not in claimed:
            result.append(change)
    return result


def _build_move(deletion: ClassifiedChange, addition: ClassifiedChange, score: float) -> ClassifiedChange:
    """One change carrying the deleted text (from) and the inserted text (to)."""
    move = ClassifiedChange(
        id=deletion.id or addition.id,
        type=ChangeType.MOVE,
        impact=ImpactLevel.NORMAL,
        location=deletion.location,
        original_text=deletion.original_text,
        alternatives=list(addition.alternatives),
        length=addition.length,
        semantic_shift=False,
        move_to=addition.location,
        confidence=round(score, 4),
    )
    move.explanation = explain_impact(move)
    return move
