"""Similarity calculators for manufacturer part numbers.

Each calculator covers one component family (base category plus its
manufacturer refinements). The dispatcher picks one by category.
"""

from .base import SimilarityCalculator, clamp_score
from .connector import ConnectorSimilarityCalculator
from .dispatcher import CalculatorDispatcher, create_default_dispatcher
from .fallback import (
    DefaultSimilarityCalculator,
    coarse_similarity,
    shared_prefix_ratio,
    text_similarity,
)
from .led import LEDSimilarityCalculator
from .microcontroller import MCUSimilarityCalculator

__all__ = [
    "SimilarityCalculator",
    "clamp_score",
    "ConnectorSimilarityCalculator",
    "LEDSimilarityCalculator",
    "MCUSimilarityCalculator",
    "DefaultSimilarityCalculator",
    "CalculatorDispatcher",
    "create_default_dispatcher",
    "coarse_similarity",
    "shared_prefix_ratio",
    "text_similarity",
]
