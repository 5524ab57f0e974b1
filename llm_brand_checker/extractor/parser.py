"""
Brand check pipeline for LLM Brand Checker.

Ties the three extraction stages together:

    raw provider payload -> normalize -> split_into_items -> find_brand_positions

Example:
    >>> text, result = check_response(
    ...     {"choices": [{"message": {"content": "1. Globex\\n2. Acme"}}]},
    ...     brand="Acme",
    ... )
    >>> text
    '1. Globex\\n2. Acme'
    >>> result.positions
    [2]
"""

import logging
from typing import Any

from .brand_matcher import MatchResult, find_brand_positions
from .normalizer import normalize
from .segmenter import split_into_items

logger = logging.getLogger(__name__)


def check_text(text: str, brand: str) -> MatchResult:
    """
    Segment plain answer text and match the brand against its items.

    Args:
        text: Plain answer text
        brand: Brand name to look for

    Returns:
        MatchResult for the brand
    """
    items = split_into_items(text)
    result = find_brand_positions(items, brand)

    logger.debug(
        f"Matched brand over {len(items)} items: "
        f"mentioned={result.mentioned}, positions={result.positions}"
    )

    return result


def check_response(raw: Any, brand: str) -> tuple[str, MatchResult]:
    """
    Normalize a raw provider payload, then run check_text on it.

    Returns:
        (normalized_text, match_result)
    """
    text = normalize(raw)
    return text, check_text(text, brand)
