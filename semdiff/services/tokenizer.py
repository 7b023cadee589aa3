"""
Tokenizer service.
Splits text into words, whitespace runs and single punctuation marks.
"""

import re
from typing import List

from semdiff.models import Token, TokenKind


# Alternation order matters: whitespace, then word runs, then any single leftover char
_TOKEN_PATTERN = re.compile(r"(?P<whitespace>\s+)|(?P<word>\w+)|(?P<punctuation>[^\w\s])")


def tokenize(text: str) -> List[Token]:
    """
    Tokenize text so that joining every token's text gives back the input.

    Args:
        text: Plain text (markup already stripped by the caller)

    Returns:
        Ordered list of Token objects
    """
    return [
        Token(kind=TokenKind(match.lastgroup), text=match.group(), start=match.start())
        for match in _TOKEN_PATTERN.finditer(text)
    ]


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def tokenize_lines(text: str) -> List[Token]:
    """Coarse tokenization: one token per line, line endings kept."""
    tokens = []
    offset = 0
    for line in text.splitlines(keepends=True):
        tokens.append(Token(kind=TokenKind.WORD, text=line, start=offset))
        offset += len(line)
    return tokens
