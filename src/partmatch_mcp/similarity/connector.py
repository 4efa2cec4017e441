"""Connector similarity.

Connectors are matched on series identity first. Within a series, plating
and finish variants are near-interchangeable; across series the score is
built up from shared characteristics (position count, pitch, mount).
"""

import logging

from ..patterns import ParsedFields, PatternRegistry
from ..taxonomy import ComponentType
from .base import SimilarityCalculator
from .fallback import coarse_similarity

logger = logging.getLogger(__name__)

EXACT = 1.0
HIGH = 0.9
SAME_SERIES = 0.8
MEDIUM = 0.5
LOW = 0.3
BASE = 0.1  # Both are connectors

POSITIONS_BONUS = 0.2
PITCH_BONUS = 0.2
MOUNT_BONUS = 0.1

# Fields that never make two parts functionally different
_COSMETIC_FIELDS = frozenset({"variant", "plating"})


def _number(value: str | None) -> float | None:
    try:
        return float(value) if value else None
    except ValueError:
        return None


def _same_value(a: str | None, b: str | None) -> bool:
    """Equal as numbers when both are numeric ("04" == "4"), else as text."""
    if a is None or b is None:
        return False
    n1, n2 = _number(a), _number(b)
    if n1 is not None and n2 is not None:
        return n1 == n2
    return a == b


def _pitch(fields: ParsedFields, registry: PatternRegistry) -> str | None:
    return fields.get("pitch") or registry.lookup("connector_pitch", fields.series)


def _mount(fields: ParsedFields, registry: PatternRegistry) -> str | None:
    code = fields.get("mount")
    if not code:
        return None
    return registry.lookup("connector_mount", f"{fields.manufacturer}:{code}")


class ConnectorSimilarityCalculator(SimilarityCalculator):
    """Similarity for CONNECTOR and its manufacturer refinements."""

    name = "connector"
    base_category = ComponentType.CONNECTOR
    ceiling = EXACT

    def _score(self, mpn1: str, mpn2: str, registry: PatternRegistry) -> float:
        f1 = registry.parse(self.base_category, mpn1)
        f2 = registry.parse(self.base_category, mpn2)
        if f1 is None or f2 is None:
            return coarse_similarity(mpn1, mpn2, BASE, MEDIUM)

        if self._same_series(f1, f2):
            return self._score_same_series(f1, f2)
        return self._score_characteristics(f1, f2, registry)

    @staticmethod
    def _same_series(f1: ParsedFields, f2: ParsedFields) -> bool:
        return (
            f1.manufacturer == f2.manufacturer
            and f1.series == f2.series
            and f1.get("prefix") == f2.get("prefix")
        )

    @staticmethod
    def _score_same_series(f1: ParsedFields, f2: ParsedFields) -> float:
        names = set(f1.fields) | set(f2.fields)
        differing = {n for n in names if not _same_value(f1.get(n), f2.get(n))}
        if not differing:
            # Same part written differently (e.g. "53047-0210" vs "0530470210")
            return EXACT
        if differing & (f1.critical | f2.critical):
            logger.debug(f"Critical field mismatch {sorted(differing)}: {f1.mpn} vs {f2.mpn}")
            return LOW
        if differing <= _COSMETIC_FIELDS:
            return HIGH
        return SAME_SERIES

    @staticmethod
    def _score_characteristics(f1: ParsedFields, f2: ParsedFields, registry: PatternRegistry) -> float:
        score = BASE
        if _same_value(f1.get("positions"), f2.get("positions")):
            score += POSITIONS_BONUS
        if _same_value(_pitch(f1, registry), _pitch(f2, registry)):
            score += PITCH_BONUS
        mount1, mount2 = _mount(f1, registry), _mount(f2, registry)
        if mount1 and mount1 == mount2:
            score += MOUNT_BONUS
        return score
