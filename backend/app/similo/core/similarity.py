"""
Attribute Similarity

Pure functions that compare two attribute values and return a score in
[0, 1]. Bad input never raises: unparsable numbers and coordinates
simply score 0.0.
"""

import math
import re
from typing import Optional, Tuple

from .locator import MetricKind


DEFAULT_MAX_DISTANCE = 500.0

_WHITESPACE = re.compile(r"\s+")


def levenshtein_distance(s1: str, s2: str) -> int:
    """Case-insensitive single-character insert/delete/substitute distance"""
    s1 = s1.lower()
    s2 = s2.lower()
    if len(s1) < len(s2):
        s1, s2 = s2, s1
    if not s2:
        return len(s1)

    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i]
        for j, c2 in enumerate(s2, start=1):
            current.append(min(
                previous[j] + 1,               # deletion
                current[j - 1] + 1,            # insertion
                previous[j - 1] + (c1 != c2),  # substitution
            ))
        previous = current
    return previous[-1]


def exact_similarity(a: str, b: str) -> float:
    return 1.0 if a.lower() == b.lower() else 0.0


def levenshtein_similarity(a: str, b: str) -> float:
    """1 - distance / longest length; two empty strings are identical"""
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    # Lengths after case folding: lower() can lengthen a string ("İ")
    a = a.lower()
    b = b.lower()
    distance = levenshtein_distance(a, b)
    return max(0.0, 1.0 - distance / max(len(a), len(b)))


def numeric_similarity(a: str, b: str) -> float:
    """Relative closeness of two integers"""
    try:
        v1 = int(a.strip())
        v2 = int(b.strip())
    except (ValueError, AttributeError):
        return 0.0

    largest = max(abs(v1), abs(v2))
    if largest == 0:
        return 1.0
    return max(0.0, 1.0 - abs(v1 - v2) / largest)


def parse_point(value: str) -> Optional[Tuple[int, int]]:
    """Parse an "x,y" coordinate pair"""
    parts = value.split(",")
    if len(parts) != 2:
        return None
    try:
        return int(parts[0].strip()), int(parts[1].strip())
    except ValueError:
        return None


def spatial_similarity(a: str, b: str, max_distance: float = DEFAULT_MAX_DISTANCE) -> float:
    """Euclidean closeness of two "x,y" points, zero beyond max_distance"""
    p1 = parse_point(a)
    p2 = parse_point(b)
    if p1 is None or p2 is None:
        return 0.0
    distance = math.hypot(p1[0] - p2[0], p1[1] - p2[1])
    return max(0.0, 1.0 - distance / max_distance)


def token_overlap_similarity(a: str, b: str) -> float:
    """
    Jaccard similarity of the whitespace-separated word sets.

    Empty on either side scores 0.0, including when both sides are empty.
    """
    tokens_a = {t.lower() for t in _WHITESPACE.split(a.strip()) if t}
    tokens_b = {t.lower() for t in _WHITESPACE.split(b.strip()) if t}
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


class AttributeSimilarityEngine:
    """Dispatches a pair of values to the metric declared for the attribute"""

    def __init__(self, max_distance: float = DEFAULT_MAX_DISTANCE):
        self.max_distance = max_distance

    def similarity(self, metric: MetricKind, a: Optional[str], b: Optional[str]) -> Optional[float]:
        """
        Compare two attribute values.

        Returns:
            Similarity in [0, 1], or None when either value is absent
            (the attribute then takes no part in the weighted sum).
        """
        if a is None or b is None:
            return None

        if metric == MetricKind.EXACT:
            return exact_similarity(a, b)
        if metric == MetricKind.STRING_EDIT:
            return levenshtein_similarity(a, b)
        if metric == MetricKind.NUMERIC:
            return numeric_similarity(a, b)
        if metric == MetricKind.SPATIAL:
            return spatial_similarity(a, b, self.max_distance)
        if metric == MetricKind.TOKEN_OVERLAP:
            return token_overlap_similarity(a, b)

        raise ValueError(f"Unsupported metric: {metric}")
