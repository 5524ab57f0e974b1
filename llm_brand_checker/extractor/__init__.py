"""
Extractor module for locating a brand in LLM responses.

Public API:
    - normalize: Extract plain text from a provider payload of any shape
    - split_into_items: Segment text into ordered candidate items
    - find_brand_positions: Exact/substring/fuzzy brand matching with ranks
    - MatchResult: Result of find_brand_positions
    - levenshtein: Case-insensitive edit distance
    - check_text / check_response: The full pipeline
"""

from llm_brand_checker.extractor.brand_matcher import (
    MatchResult,
    find_brand_positions,
    levenshtein,
)
from llm_brand_checker.extractor.normalizer import normalize
from llm_brand_checker.extractor.parser import check_response, check_text
from llm_brand_checker.extractor.segmenter import split_into_items

__all__ = [
    "MatchResult",
    "check_response",
    "check_text",
    "find_brand_positions",
    "levenshtein",
    "normalize",
    "split_into_items",
]
