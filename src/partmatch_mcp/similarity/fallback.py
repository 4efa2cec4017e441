"""Generic string heuristics and the default (category-agnostic) calculator."""

import math
import os
import re

from rapidfuzz.distance import Levenshtein

from ..patterns import PatternRegistry
from ..taxonomy import resolve_category
from .base import SimilarityCalculator


def shared_prefix_ratio(a: str, b: str) -> float:
    """Length of the common prefix over the longer length."""
    longest = max(len(a), len(b))
    if not longest:
        return 0.0
    return len(os.path.commonprefix([a, b])) / longest


def coarse_similarity(a: str, b: str, floor: float, cap: float) -> float:
    """Map shared-prefix ratio into [floor, cap].

    Used when no extraction rule matches, so that unparsed but similar
    strings are not pushed to the floor.
    """
    return floor + (cap - floor) * shared_prefix_ratio(a, b)


def text_similarity(a: str | None, b: str | None) -> float:
    """Normalized Levenshtein similarity; 0.0 if either side is missing."""
    if not a or not b:
        return 0.0
    return Levenshtein.normalized_similarity(a, b)


# ============================================================================
# Default calculator
# ============================================================================

_PREFIX_RE = re.compile(r'^[A-Z]+')
_NUMBER_RE = re.compile(r'\d+')
_SUFFIX_RE = re.compile(r'[A-Z]+$')

PREFIX_WEIGHT = 0.3
NUMBER_WEIGHT = 0.5
SUFFIX_WEIGHT = 0.2


def _number_similarity(a: str | None, b: str | None) -> float:
    """Closeness of two digit runs; log-scaled for large values."""
    if a is None or b is None:
        return 0.0
    v1, v2 = int(a), int(b)
    if v1 == v2:
        return 1.0
    largest = max(v1, v2)
    diff = abs(v1 - v2)
    if largest > 1000:
        return max(0.0, 1.0 - math.log10(diff + 1) / math.log10(largest + 1))
    return 1.0 - diff / largest


def _suffix_similarity(a: str | None, b: str | None) -> float:
    if a is None and b is None:
        return 1.0
    if a is None or b is None:
        return 0.5
    return text_similarity(a, b)


def _first(pattern: re.Pattern, text: str) -> str | None:
    match = pattern.search(text)
    return match.group() if match else None


class DefaultSimilarityCalculator(SimilarityCalculator):
    """Prefix / number / suffix heuristic for any category.

    Used as the dispatcher fallback when no category calculator applies.
    """

    name = "default"
    ceiling = 1.0

    def is_applicable(self, category) -> bool:
        return resolve_category(category) is not None

    def _score(self, mpn1: str, mpn2: str, registry: PatternRegistry) -> float:
        prefix = text_similarity(_first(_PREFIX_RE, mpn1), _first(_PREFIX_RE, mpn2))
        number = _number_similarity(_first(_NUMBER_RE, mpn1), _first(_NUMBER_RE, mpn2))
        suffix = _suffix_similarity(_first(_SUFFIX_RE, mpn1), _first(_SUFFIX_RE, mpn2))
        # Distinct strings never reach the identity score
        score = PREFIX_WEIGHT * prefix + NUMBER_WEIGHT * number + SUFFIX_WEIGHT * suffix
        return min(score, 0.99)
