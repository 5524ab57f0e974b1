"""
Brand matching for LLM Brand Checker.

Scans segmented answer items for a single brand and reports where it was
found. Each item is tested with three strategies, strongest first:

1. Exact: whole-word, case-insensitive regex (brand is re.escape()d)
2. Substring: case-insensitive containment
3. Fuzzy: per-token Levenshtein distance against the brand, both stripped
   of non-alphanumeric characters, within max(2, floor(len * 0.25)) edits

Numbered-list markers ("1." / "2)") set a running rank. Exact and substring
hits report that rank instead of the item position; fuzzy hits always report
the item position. The rank is NOT reset by unranked items, so a trailing
unranked line inherits the last rank seen:

    >>> find_brand_positions(["1. Acme Corp", "2. Other Co", "Acme again"], "Acme").positions
    [1, 2]

The matcher is a pure function of its inputs: no module state, inputs are
never mutated.
"""

import re
from dataclasses import dataclass, field

from rapidfuzz.distance import Levenshtein

# Leading numbered-list marker: "1.", "2)", " 10. "
RANK_MARKER_RE = re.compile(r"^\s*(\d+)[.)]\s*")

NON_ALNUM_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)

# Fuzzy tolerance: at least MIN_FUZZY_EDITS, more for longer brand names
MIN_FUZZY_EDITS = 2
FUZZY_EDIT_RATIO = 0.25


@dataclass
class MatchResult:
    """
    Where a brand was found in a list of answer items.

    Attributes:
        mentioned: True iff positions is non-empty
        positions: Reported positions in item order (rank or 1-based index);
            may contain duplicates when a rank carries over
        position: First reported position, None if not mentioned
    """

    mentioned: bool = False
    positions: list[int] = field(default_factory=list)
    position: int | None = None

    @classmethod
    def from_positions(cls, positions: list[int]) -> "MatchResult":
        positions = list(positions)
        return cls(
            mentioned=bool(positions),
            positions=positions,
            position=positions[0] if positions else None,
        )

    def to_dict(self) -> dict:
        return {
            "mentioned": self.mentioned,
            "positions": list(self.positions),
            "position": self.position,
        }


def levenshtein(a: str, b: str) -> int:
    """
    Case-insensitive Levenshtein distance between two strings.

    Counts single-character insertions, deletions and substitutions.

    Example:
        >>> levenshtein("Acme", "acne")
        1
        >>> levenshtein("", "acme")
        4
    """
    if not a:
        return len(b)
    if not b:
        return len(a)
    return Levenshtein.distance(a.lower(), b.lower())


def clean_token(text: str) -> str:
    """Strip everything but ASCII letters and digits."""
    return NON_ALNUM_RE.sub("", text)


def fuzzy_threshold(clean_brand: str) -> int:
    """Maximum edit distance accepted for a brand of this (cleaned) length."""
    return max(MIN_FUZZY_EDITS, int(len(clean_brand) * FUZZY_EDIT_RATIO))


def create_brand_pattern(brand: str) -> re.Pattern:
    """
    Create a whole-word, case-insensitive pattern for the brand.

    Special regex characters are escaped, so "Warmly.io" only matches a
    literal dot.
    """
    return re.compile(r"\b" + re.escape(brand) + r"\b", re.IGNORECASE)


def split_rank_marker(item: str) -> tuple[int | None, str]:
    """
    Separate a leading numbered-list marker from an item.

    Returns:
        (rank, remaining_text); rank is None when there is no marker

    Example:
        >>> split_rank_marker("2) Globex")
        (2, 'Globex')
        >>> split_rank_marker("Globex")
        (None, 'Globex')
    """
    marker = RANK_MARKER_RE.match(item)
    if not marker:
        return None, item
    return int(marker.group(1)), item[marker.end() :]


def _fuzzy_hit(text: str, clean_brand: str) -> bool:
    threshold = fuzzy_threshold(clean_brand)
    for token in text.split():
        clean = clean_token(token)
        if not clean:
            continue
        if levenshtein(clean, clean_brand) <= threshold:
            return True
    return False


def find_brand_positions(items: list[str], brand: str) -> MatchResult:
    """
    Find every item mentioning the brand and report its position.

    Args:
        items: Ordered answer items (output of split_into_items)
        brand: Brand name to look for (case-insensitive)

    Returns:
        MatchResult with positions in item order. An empty or whitespace-only
        brand, or no items, yields an empty result.

    Example:
        >>> result = find_brand_positions(["Globex", "Acme Corp"], "acme")
        >>> result.mentioned, result.positions, result.position
        (True, [2], 2)
    """
    if not items or not brand or brand.isspace():
        return MatchResult()

    pattern = create_brand_pattern(brand)
    brand_lower = brand.lower()
    clean_brand = clean_token(brand_lower)

    positions: list[int] = []
    current_rank = 0

    for index, item in enumerate(items, start=1):
        rank, text = split_rank_marker(item)
        if rank is not None:
            current_rank = rank

        if pattern.search(text) or brand_lower in text.lower():
            positions.append(current_rank if current_rank > 0 else index)
            continue

        # Empty cleaned brand would match every token at distance 0
        if clean_brand and _fuzzy_hit(text, clean_brand):
            positions.append(index)

    return MatchResult.from_positions(positions)
