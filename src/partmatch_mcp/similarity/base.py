"""Similarity calculator contract."""

import logging
import math
from abc import ABC, abstractmethod

from ..patterns import PatternRegistry, normalize_mpn
from ..taxonomy import ComponentType, resolve_category

logger = logging.getLogger(__name__)


def clamp_score(score: float, ceiling: float = 1.0) -> float:
    """Clamp ``score`` into [0, ceiling]; NaN and non-numbers become 0.0."""
    try:
        score = float(score)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(score):
        return 0.0
    return max(0.0, min(ceiling, score))


class SimilarityCalculator(ABC):
    """Scores how interchangeable two MPNs of one component family are.

    Subclasses set ``base_category`` and ``ceiling`` and implement
    ``_score``. The template method here owns input validation,
    normalization, the exact-match shortcut and argument ordering, so every
    calculator is null-safe, symmetric and bounded the same way.
    """

    name: str = "base"
    base_category: ComponentType = ComponentType.GENERIC
    ceiling: float = 1.0

    def is_applicable(self, category) -> bool:
        """True if ``category`` is this calculator's base or one of its refinements."""
        resolved = resolve_category(category)
        return resolved is not None and resolved.base is self.base_category

    def calculate_similarity(self, mpn1, mpn2, registry) -> float:
        """Similarity of two MPNs in [0, ceiling]. Never raises.

        Returns 0.0 if either MPN or the registry is missing or invalid.
        """
        if not isinstance(registry, PatternRegistry):
            return 0.0
        n1 = normalize_mpn(mpn1)
        n2 = normalize_mpn(mpn2)
        if not n1 or not n2:
            return 0.0
        if n1 == n2:
            return self.ceiling

        first, second = sorted((n1, n2))
        score = self._score(first, second, registry)
        logger.debug(f"{self.name}: {first!r} vs {second!r} -> {score:.3f}")
        return clamp_score(score, self.ceiling)

    @abstractmethod
    def _score(self, mpn1: str, mpn2: str, registry: PatternRegistry) -> float:
        """Score two distinct, normalized MPNs (already in canonical order)."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
