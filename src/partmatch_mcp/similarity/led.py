"""LED similarity.

Priority cascade, most specific first:

1. Same normalized MPN -> CEILING
2. Same series, only bin/package differs -> CEILING
3. Same series, color codes the registry classifies differently -> LOW
4. Same series, color codes of the same class -> CEILING
5. Different series in a shared equivalence group -> EQUIVALENT
6. Anything else -> coarse prefix similarity

The ceiling is 0.9, not 1.0: the top of the range is left for a stricter
"different MPN, everything else identical" tier.
"""

import logging

from ..patterns import ParsedFields, PatternRegistry
from ..taxonomy import ComponentType
from .base import SimilarityCalculator
from .fallback import coarse_similarity

logger = logging.getLogger(__name__)

CEILING = 0.9
EQUIVALENT = 0.7
MEDIUM = 0.5
LOW = 0.3
BASE = 0.1


def _lookup_tokens(fields: ParsedFields | None, mpn: str) -> list[str]:
    """Tokens to try against equivalence groups, most specific first.

    The full MPN, then each shorter dash-delimited prefix, then the parsed
    base and series.
    """
    tokens = [mpn]
    parts = mpn.split("-")
    for i in range(len(parts) - 1, 0, -1):
        tokens.append("-".join(parts[:i]))
    if fields is not None:
        tokens.append(fields.base)
        if fields.series:
            tokens.append(fields.series)
    return tokens


def _groups(registry: PatternRegistry, fields: ParsedFields | None, mpn: str) -> frozenset[str]:
    found: set[str] = set()
    for token in _lookup_tokens(fields, mpn):
        found |= registry.equivalence_groups(ComponentType.LED, token)
    return frozenset(found)


def _color_classes(
    f1: ParsedFields | None, f2: ParsedFields | None, registry: PatternRegistry
) -> tuple[str | None, str | None]:
    c1 = f1.get("color") if f1 else None
    c2 = f2.get("color") if f2 else None
    k1 = registry.lookup("led_color_class", c1) if c1 else None
    k2 = registry.lookup("led_color_class", c2) if c2 else None
    return k1, k2


class LEDSimilarityCalculator(SimilarityCalculator):
    """Similarity for LED and its manufacturer refinements."""

    name = "led"
    base_category = ComponentType.LED
    ceiling = CEILING

    def _score(self, mpn1: str, mpn2: str, registry: PatternRegistry) -> float:
        f1 = registry.parse(self.base_category, mpn1)
        f2 = registry.parse(self.base_category, mpn2)

        if f1 is not None and f2 is not None and f1.series == f2.series:
            return self._score_same_series(f1, f2, registry)

        shared = _groups(registry, f1, mpn1) & _groups(registry, f2, mpn2)
        if shared:
            k1, k2 = _color_classes(f1, f2, registry)
            if k1 and k2 and k1 != k2:
                return LOW
            logger.debug(f"Equivalent LED series via {sorted(shared)}: {mpn1} vs {mpn2}")
            return EQUIVALENT

        if f1 is not None and f2 is not None:
            return coarse_similarity(f1.series, f2.series, BASE, MEDIUM)
        return coarse_similarity(mpn1, mpn2, BASE, MEDIUM)

    @staticmethod
    def _score_same_series(f1: ParsedFields, f2: ParsedFields, registry: PatternRegistry) -> float:
        c1, c2 = f1.get("color"), f2.get("color")
        if c1 == c2 or not c1 or not c2:
            # Bin and package letters are not a functional difference
            return CEILING
        k1, k2 = _color_classes(f1, f2, registry)
        if k1 and k2:
            if k1 != k2:
                logger.debug(f"Color boundary {c1}/{k1} vs {c2}/{k2}")
                return LOW
            return CEILING
        return MEDIUM
