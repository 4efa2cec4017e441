"""Microcontroller similarity.

Ordering codes vary a lot across vendors, so discrimination is weaker than
for LEDs or connectors: any two MCUs start from a 0.5 floor and field
agreement lifts the score toward 1.0.
"""

from ..patterns import ParsedFields, PatternRegistry
from ..taxonomy import ComponentType
from .base import SimilarityCalculator
from .fallback import coarse_similarity, text_similarity

CEILING = 1.0
HIGH = 0.9
BASE = 0.5  # Both are microcontrollers
RELATED_FAMILY = 0.8

FAMILY_WEIGHT = 0.5
DEVICE_WEIGHT = 0.3
VARIANT_WEIGHT = 0.15
PACKAGE_WEIGHT = 0.05

_VARIANT_FIELDS = ("variant", "pins", "memory")
_PACKAGE_FIELDS = ("package", "grade")


def family_similarity(f1: ParsedFields, f2: ParsedFields, registry: PatternRegistry) -> float:
    fam1, fam2 = f1.get("family"), f2.get("family")
    if fam1 == fam2:
        return 1.0
    if registry.are_equivalent(ComponentType.MICROCONTROLLER, fam1, fam2):
        return RELATED_FAMILY
    return text_similarity(fam1, fam2)


def device_similarity(d1: str | None, d2: str | None) -> float:
    """Device numbers: exact, numeric closeness, or edit similarity."""
    if d1 == d2:
        return 1.0
    if d1 and d2 and d1.isdigit() and d2.isdigit():
        return max(0.0, 1.0 - abs(int(d1) - int(d2)) / 100)
    return text_similarity(d1, d2)


def field_agreement(f1: ParsedFields, f2: ParsedFields, names: tuple[str, ...]) -> float:
    """Share of equal fields among those present on either side (1.0 if none)."""
    present = [n for n in names if f1.get(n) or f2.get(n)]
    if not present:
        return 1.0
    equal = sum(1 for n in present if f1.get(n) == f2.get(n))
    return equal / len(present)


class MCUSimilarityCalculator(SimilarityCalculator):
    """Similarity for MICROCONTROLLER and its vendor refinements."""

    name = "microcontroller"
    base_category = ComponentType.MICROCONTROLLER
    ceiling = CEILING

    def _score(self, mpn1: str, mpn2: str, registry: PatternRegistry) -> float:
        f1 = registry.parse(self.base_category, mpn1)
        f2 = registry.parse(self.base_category, mpn2)
        if f1 is None or f2 is None:
            return coarse_similarity(mpn1, mpn2, BASE, HIGH)

        weighted = (
            FAMILY_WEIGHT * family_similarity(f1, f2, registry)
            + DEVICE_WEIGHT * device_similarity(f1.get("device"), f2.get("device"))
            + VARIANT_WEIGHT * field_agreement(f1, f2, _VARIANT_FIELDS)
            + PACKAGE_WEIGHT * field_agreement(f1, f2, _PACKAGE_FIELDS)
        )
        return BASE + (CEILING - BASE) * weighted
