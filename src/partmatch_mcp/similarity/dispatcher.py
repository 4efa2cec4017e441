"""Calculator dispatch by component category."""

import logging
from collections.abc import Iterable

from .base import SimilarityCalculator
from .connector import ConnectorSimilarityCalculator
from .fallback import DefaultSimilarityCalculator
from .led import LEDSimilarityCalculator
from .microcontroller import MCUSimilarityCalculator

logger = logging.getLogger(__name__)


class CalculatorDispatcher:
    """Ordered, fixed set of calculators.

    ``select`` returns the first calculator that applies to a category.
    ``fallback`` is used by ``calculate_similarity`` when none does; without
    one, unmatched categories score 0.0.
    """

    def __init__(
        self,
        calculators: Iterable[SimilarityCalculator],
        fallback: SimilarityCalculator | None = None,
    ):
        self._calculators = tuple(calculators)
        self._fallback = fallback

    @property
    def calculators(self) -> tuple[SimilarityCalculator, ...]:
        return self._calculators

    @property
    def fallback(self) -> SimilarityCalculator | None:
        return self._fallback

    def select(self, category) -> SimilarityCalculator | None:
        """First registered calculator applicable to ``category``, or None."""
        for calculator in self._calculators:
            if calculator.is_applicable(category):
                return calculator
        return None

    def resolve(self, category) -> SimilarityCalculator | None:
        """Like ``select``, but falls back to the fallback calculator."""
        calculator = self.select(category)
        if calculator is None and self._fallback is not None and self._fallback.is_applicable(category):
            return self._fallback
        return calculator

    def calculate_similarity(self, category, mpn1, mpn2, registry) -> float:
        calculator = self.resolve(category)
        if calculator is None:
            logger.debug(f"No calculator for category {category!r}")
            return 0.0
        return calculator.calculate_similarity(mpn1, mpn2, registry)


def create_default_dispatcher() -> CalculatorDispatcher:
    """Connector, LED and MCU calculators, with the default heuristic as fallback."""
    return CalculatorDispatcher(
        [
            ConnectorSimilarityCalculator(),
            LEDSimilarityCalculator(),
            MCUSimilarityCalculator(),
        ],
        fallback=DefaultSimilarityCalculator(),
    )
