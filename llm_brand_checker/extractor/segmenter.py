"""
Item segmentation for LLM Brand Checker.

Splits normalized answer text into the ordered candidate items the brand
matcher scans. LLM answers are usually newline-delimited lists, so lines are
the primary unit; when the answer is a single line the text is split on
commas and semicolons instead ("Acme, Globex, Initech" -> three items).

This is a heuristic: prose sentences with internal commas on a single line
will over-segment.
"""

import re

LINE_SPLIT_RE = re.compile(r"\r?\n")
DELIMITER_SPLIT_RE = re.compile(r",|;|\n")


def _clean(pieces: list[str]) -> list[str]:
    return [piece.strip() for piece in pieces if piece.strip()]


def split_into_items(text: str) -> list[str]:
    """
    Split answer text into trimmed, non-empty items in source order.

    Args:
        text: Plain answer text (output of the normalizer)

    Returns:
        List of items; empty list for empty text

    Example:
        >>> split_into_items("1. Acme\\n2. Globex\\n")
        ['1. Acme', '2. Globex']
        >>> split_into_items("Acme, Globex; Initech")
        ['Acme', 'Globex', 'Initech']
    """
    if not text:
        return []

    items = _clean(LINE_SPLIT_RE.split(text))
    if len(items) <= 1:
        items = _clean(DELIMITER_SPLIT_RE.split(text))
    return items
