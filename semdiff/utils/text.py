"""
Text helpers shared by the API and the pipeline.
"""

import html
import re

_BLOCK_END_PATTERN = re.compile(r"</(?:p|div|li|h[1-6]|blockquote|tr)\s*>|<br\s*/?>", re.IGNORECASE)
_TAG_PATTERN = re.compile(r"<[^>]*>")
_SPACES_PATTERN = re.compile(r"[^\S\n]+")


def strip_html(markup: str) -> str:
    """
    Reduce HTML to plain text before diffing.

    Block-level elements end up on their own line so paragraphs survive;
    whitespace inside a line is collapsed and blank lines are dropped.
    """
    text = _BLOCK_END_PATTERN.sub("\n", markup)
    text = _TAG_PATTERN.sub(" ", text)
    text = html.unescape(text.replace("&nbsp;", " ")).replace("\xa0", " ")
    lines = (_SPACES_PATTERN.sub(" ", line).strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)
