"""
String similarity service.
Levenshtein edit distance and the normalised similarity derived from it.
"""

# A word-level replace pair below this is an unrelated delete + insert
REPLACEMENT_THRESHOLD = 0.3

# A deletion and an insertion above this are one moved passage
MOVE_THRESHOLD = 0.8

# A single swapped word within this distance is a spelling fix
SPELLING_MAX_DISTANCE = 2


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit cost for insertion, deletion and substitution."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Two rolling rows of the DP table, indexed by position in b
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current[j] = min(
                previous[j] + 1,          # deletion
                current[j - 1] + 1,       # insertion
                previous[j - 1] + cost,   # substitution
            )
        previous = current
    return previous[len(b)]


def similarity(a: str, b: str) -> float:
    """
    Similarity in [0, 1]: 1 - levenshtein / length of the longer string.

    Two empty strings are identical (1.0).
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest
