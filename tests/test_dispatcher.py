"""Tests for calculator dispatch and the shared calculator contract."""

import pytest
from partmatch_mcp.patterns import PatternRegistry
from partmatch_mcp.rules import default_registry
from partmatch_mcp.similarity import (
    CalculatorDispatcher,
    ConnectorSimilarityCalculator,
    DefaultSimilarityCalculator,
    LEDSimilarityCalculator,
    MCUSimilarityCalculator,
    create_default_dispatcher,
)
from partmatch_mcp.taxonomy import ComponentType as CT


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def dispatcher():
    return create_default_dispatcher()


ALL_CALCULATORS = [
    ConnectorSimilarityCalculator(),
    LEDSimilarityCalculator(),
    MCUSimilarityCalculator(),
    DefaultSimilarityCalculator(),
]

SAMPLE_MPNS = [
    "TLHR5400", "XPERED-L1-FKA", "LW E67C", "STM32F103C8T6", "ATMEGA328P-AU",
    "61300211121", "282836-2", "B2B-PH-K-S", "RC0603FR-0710KL", "???", "a", "0",
    "  mixed Case  ", "ÄÖÜ-123", "x" * 80,
]


# =============================================================================
# Dispatcher
# =============================================================================


class TestSelect:
    """Test calculator selection order and fallback policy."""

    @pytest.mark.parametrize("category,expected", [
        (CT.CONNECTOR, ConnectorSimilarityCalculator),
        (CT.CONNECTOR_HARWIN, ConnectorSimilarityCalculator),
        (CT.LED_NICHIA, LEDSimilarityCalculator),
        (CT.MCU_ST, MCUSimilarityCalculator),
        ("microcontroller", MCUSimilarityCalculator),
    ])
    def test_selects_category_calculator(self, dispatcher, category, expected):
        assert isinstance(dispatcher.select(category), expected)

    @pytest.mark.parametrize("category", [CT.RESISTOR, CT.CAPACITOR, CT.TRANSISTOR, None, "bogus"])
    def test_select_returns_none_without_match(self, dispatcher, category):
        assert dispatcher.select(category) is None

    def test_resolve_uses_fallback_for_known_category(self, dispatcher):
        assert isinstance(dispatcher.resolve(CT.RESISTOR), DefaultSimilarityCalculator)

    def test_resolve_unknown_category_is_none(self, dispatcher):
        assert dispatcher.resolve("bogus") is None
        assert dispatcher.resolve(None) is None

    def test_first_applicable_wins(self):
        first = DefaultSimilarityCalculator()
        second = ConnectorSimilarityCalculator()
        dispatcher = CalculatorDispatcher([first, second])
        assert dispatcher.select(CT.CONNECTOR) is first

    @pytest.mark.parametrize("category", [CT.RESISTOR, CT.CAPACITOR, CT.TRANSISTOR])
    def test_passives_and_transistors_have_no_dedicated_calculator(self, dispatcher, category):
        for calc in dispatcher.calculators:
            assert not calc.is_applicable(category), calc.name

    @pytest.mark.parametrize("category", [CT.RESISTOR, CT.CAPACITOR, CT.TRANSISTOR, CT.GENERIC, CT.LED_CREE])
    def test_fallback_applies_to_every_known_category(self, dispatcher, category):
        assert dispatcher.fallback.is_applicable(category)

    def test_calculators_are_immutable(self, dispatcher):
        assert isinstance(dispatcher.calculators, tuple)
        assert len(dispatcher.calculators) == 3


class TestDispatchCalculate:
    """Test end-to-end scoring through the dispatcher."""

    def test_routes_to_led_ceiling(self, dispatcher, registry):
        score = dispatcher.calculate_similarity(CT.LED, "TLHR5400", "TLHR5401", registry)
        assert score == pytest.approx(0.9, abs=0.01)

    def test_fallback_scores_unsupported_category(self, dispatcher, registry):
        score = dispatcher.calculate_similarity(CT.RESISTOR, "RC0603FR-0710KL", "RC0603JR-0710KL", registry)
        assert 0.0 < score < 1.0

    def test_no_fallback_reports_zero(self, registry):
        dispatcher = CalculatorDispatcher([LEDSimilarityCalculator()])
        assert dispatcher.calculate_similarity(CT.RESISTOR, "R1", "R1", registry) == 0.0

    def test_unknown_category_reports_zero(self, dispatcher, registry):
        assert dispatcher.calculate_similarity("bogus", "TLHR5400", "TLHR5400", registry) == 0.0


# =============================================================================
# Contract properties shared by every calculator
# =============================================================================


@pytest.mark.parametrize("calc", ALL_CALCULATORS, ids=lambda c: c.name)
class TestCalculatorContract:
    """Null safety, bounds and symmetry hold for every calculator."""

    def test_absent_category_not_applicable(self, calc):
        assert not calc.is_applicable(None)

    @pytest.mark.parametrize("mpn", SAMPLE_MPNS)
    def test_absent_inputs_are_zero(self, calc, registry, mpn):
        assert calc.calculate_similarity(None, mpn, registry) == 0.0
        assert calc.calculate_similarity(mpn, None, registry) == 0.0
        assert calc.calculate_similarity(mpn, mpn, None) == 0.0

    def test_bounded_and_symmetric(self, calc, registry):
        for a in SAMPLE_MPNS:
            for b in SAMPLE_MPNS:
                forward = calc.calculate_similarity(a, b, registry)
                backward = calc.calculate_similarity(b, a, registry)
                assert 0.0 <= forward <= 1.0
                assert forward == pytest.approx(backward, abs=0.001)

    def test_identity_is_maximum(self, calc, registry):
        for a in SAMPLE_MPNS:
            identity = calc.calculate_similarity(a, a, registry)
            assert identity == calc.ceiling
            for b in SAMPLE_MPNS:
                assert calc.calculate_similarity(a, b, registry) <= identity

    def test_empty_registry_still_bounded(self, calc):
        empty = PatternRegistry()
        score = calc.calculate_similarity("TLHR5400", "TLHR5401", empty)
        assert 0.0 <= score <= calc.ceiling
