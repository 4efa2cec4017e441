"""Tests for the pattern registry and default extraction rules."""

import re

import pytest
from partmatch_mcp.patterns import ExtractionRule, PatternRegistry, normalize_mpn
from partmatch_mcp.rules import default_registry
from partmatch_mcp.taxonomy import ComponentType as CT


@pytest.fixture
def registry():
    return default_registry()


class TestNormalizeMpn:
    """Test MPN normalization."""

    def test_case_and_whitespace(self):
        assert normalize_mpn("  stm32f103c8t6 ") == "STM32F103C8T6"
        assert normalize_mpn("LW   e67c") == "LW E67C"

    def test_fullwidth_characters(self):
        assert normalize_mpn("ＬＭ３０１Ｂ") == "LM301B"

    @pytest.mark.parametrize("value", [None, 123, b"LM301B", ""])
    def test_non_strings_become_empty(self, value):
        assert normalize_mpn(value) == ""


class TestRegistryStructure:
    """Test registry construction and immutability."""

    def test_default_registry_is_cached(self):
        assert default_registry() is default_registry()

    def test_rules_grouped_by_base(self, registry):
        for rule in registry.rules_for(CT.CONNECTOR):
            assert rule.category.base is CT.CONNECTOR
        # Refinement resolves to the same rule set as its base
        assert registry.rules_for(CT.CONNECTOR_MOLEX) == registry.rules_for(CT.CONNECTOR)

    def test_unknown_category_has_no_rules(self, registry):
        assert registry.rules_for(CT.RESISTOR) == ()
        assert registry.rules_for("nonsense") == ()
        assert registry.rules_for(None) == ()

    def test_internal_tables_are_read_only(self, registry):
        with pytest.raises(TypeError):
            registry._rules[CT.RESISTOR] = ()
        with pytest.raises(TypeError):
            registry._dictionaries["led_color_class"]["XX"] = "x"

    def test_len_and_repr(self, registry):
        assert len(registry) > 20
        assert "PatternRegistry" in repr(registry)

    def test_manufacturers(self, registry):
        makers = registry.manufacturers(CT.CONNECTOR)
        assert "Molex" in makers
        assert "JST" in makers
        assert len(makers) == len(set(makers))

    def test_empty_registry(self):
        empty = PatternRegistry()
        assert len(empty) == 0
        assert empty.parse(CT.LED, "LM301B") is None
        assert empty.equivalence_groups(CT.LED, "LM301B") == frozenset()
        assert empty.lookup("led_color_class", "FK") is None
        assert empty.detect_category("LM301B") is None


class TestPrefixOrdering:
    """Longest matching prefix wins over registration order."""

    def test_longest_prefix_first(self):
        short = ExtractionRule(
            category=CT.LED_OSRAM,
            pattern=re.compile(r'(?P<series>AB\w+)'),
            prefixes=("AB",),
            name="short",
        )
        long = ExtractionRule(
            category=CT.LED_LG,
            pattern=re.compile(r'(?P<series>ABC\w+)'),
            prefixes=("ABC",),
            name="long",
        )
        registry = PatternRegistry(rules=[short, long])
        assert registry.parse(CT.LED, "ABC123").rule == "long"
        assert registry.parse(CT.LED, "ABD123").rule == "short"

    def test_lg_innotek_before_osram(self, registry):
        assert registry.parse(CT.LED, "LG R971").manufacturer == "LG Innotek"
        assert registry.parse(CT.LED, "LG E67C").manufacturer == "Osram"


class TestConnectorRules:
    """Test connector field extraction."""

    def test_wurth_header(self, registry):
        parsed = registry.parse(CT.CONNECTOR, "61300211121")
        assert parsed.manufacturer == "Wurth Elektronik"
        assert parsed.series == "6130"
        assert parsed.get("positions") == "02"
        assert parsed.critical == frozenset({"positions"})

    def test_te_dash_number_with_prefix(self, registry):
        parsed = registry.parse(CT.CONNECTOR, "1-284392-0")
        assert parsed.category is CT.CONNECTOR_TE
        assert parsed.get("prefix") == "1"
        assert parsed.series == "284392"
        assert parsed.get("variant") == "0"

    def test_te_literal_prefix(self, registry):
        parsed = registry.parse(CT.CONNECTOR, "TE5-520196-2")
        assert parsed.category is CT.CONNECTOR_TE
        assert parsed.series == "520196"

    @pytest.mark.parametrize("mpn", ["53047-0210", "0530470210"])
    def test_molex_catalog_forms(self, registry, mpn):
        parsed = registry.parse(CT.CONNECTOR, mpn)
        assert parsed.manufacturer == "Molex"
        assert parsed.series == "53047"
        assert parsed.get("positions") == "02"

    def test_jst_header(self, registry):
        parsed = registry.parse(CT.CONNECTOR, "SM04B-SRSS-TB")
        assert parsed.manufacturer == "JST"
        assert parsed.series == "SRSS"
        assert parsed.get("positions") == "04"
        assert parsed.get("mount") == "SM"

    def test_hirose_pitch_in_mpn(self, registry):
        parsed = registry.parse(CT.CONNECTOR, "DF13-2P-1.25DSA")
        assert parsed.manufacturer == "Hirose"
        assert parsed.series == "DF13"
        assert parsed.get("pitch") == "1.25"

    def test_amphenol_lead_free_suffix(self, registry):
        parsed = registry.parse(CT.CONNECTOR, "10118194-0001LF")
        assert parsed.manufacturer == "Amphenol"
        assert parsed.get("variant") == "0001"
        assert parsed.get("plating") == "LF"

    def test_harwin(self, registry):
        parsed = registry.parse(CT.CONNECTOR, "M20-9990245")
        assert parsed.manufacturer == "Harwin"
        assert parsed.get("positions") == "02"

    def test_unmatched_returns_none(self, registry):
        assert registry.parse(CT.CONNECTOR, "NOT-A-CONNECTOR") is None
        assert registry.parse(CT.CONNECTOR, "") is None
        assert registry.parse(CT.CONNECTOR, None) is None


class TestLEDRules:
    """Test LED field extraction."""

    def test_vishay_bin(self, registry):
        parsed = registry.parse(CT.LED, "TLHR5400")
        assert parsed.series == "TLHR540"
        assert parsed.get("bin") == "0"
        assert parsed.base == "TLHR540"

    def test_cree_color_and_bin(self, registry):
        parsed = registry.parse(CT.LED, "XPERED-L1-FKA")
        assert parsed.manufacturer == "Cree"
        assert parsed.series == "XPERED"
        assert parsed.get("color") == "FK"
        assert parsed.get("bin") == "A"

    def test_osram_color_prefix(self, registry):
        parsed = registry.parse(CT.LED, "lcw e6sf")
        assert parsed.manufacturer == "Osram"
        assert parsed.get("color") == "LCW"
        assert parsed.series == "E6SF"
        # Base never collapses to an empty string
        assert parsed.base == "LCW E6SF"

    def test_samsung_does_not_claim_regulators(self, registry):
        assert registry.parse(CT.LED, "LM301B-K").manufacturer == "Samsung"
        assert registry.parse(CT.LED, "LM317T") is None


class TestMCURules:
    """Test microcontroller field extraction."""

    def test_stm32_ordering_code(self, registry):
        parsed = registry.parse(CT.MICROCONTROLLER, "STM32F103C8T6")
        assert parsed.manufacturer == "STMicroelectronics"
        assert parsed.get("family") == "STM32F1"
        assert parsed.get("device") == "03"
        assert parsed.get("pins") == "C"
        assert parsed.get("memory") == "8"
        assert parsed.get("package") == "T"
        assert parsed.get("grade") == "6"

    def test_stm32_letter_memory_code(self, registry):
        parsed = registry.parse(CT.MICROCONTROLLER, "STM32F103CBT6")
        assert parsed.get("memory") == "B"
        assert parsed.get("package") == "T"

    def test_clone_uses_same_layout(self, registry):
        parsed = registry.parse(CT.MICROCONTROLLER, "GD32F103C8T6")
        assert parsed.manufacturer == "GigaDevice"
        assert parsed.get("family") == "GD32F1"

    def test_avr_package_suffix(self, registry):
        parsed = registry.parse(CT.MICROCONTROLLER, "ATMEGA328P-AU")
        assert parsed.get("family") == "ATMEGA"
        assert parsed.get("device") == "328"
        assert parsed.get("variant") == "P"
        assert parsed.get("package") == "AU"

    def test_pic_grade_and_package(self, registry):
        parsed = registry.parse(CT.MICROCONTROLLER, "PIC16F877A-I/P")
        assert parsed.get("family") == "PIC16"
        assert parsed.get("device") == "877A"
        assert parsed.get("grade") == "I"
        assert parsed.get("package") == "P"

    def test_esp32_module(self, registry):
        parsed = registry.parse(CT.MICROCONTROLLER, "ESP32-S3-WROOM-1-N16R8")
        assert parsed.get("family") == "ESP32"
        assert parsed.get("variant") == "S3"
        assert parsed.get("package") == "WROOM-1"
        assert parsed.get("memory") == "N16R8"


class TestEquivalenceAndDictionaries:
    """Test equivalence groups and token dictionaries."""

    def test_token_in_multiple_groups(self, registry):
        groups = registry.equivalence_groups(CT.MICROCONTROLLER, "STM32F1")
        assert {"stm32", "stm32f1-compatible"} <= groups

    def test_are_equivalent(self, registry):
        assert registry.are_equivalent(CT.MICROCONTROLLER, "STM32F1", "GD32F1")
        assert registry.are_equivalent(CT.MICROCONTROLLER_ATMEL, "ATMEGA", "ATTINY")
        assert not registry.are_equivalent(CT.MICROCONTROLLER, "ATMEGA", "STM32F1")
        assert not registry.are_equivalent(CT.MICROCONTROLLER, None, "STM32F1")

    def test_equivalence_is_case_insensitive(self, registry):
        assert registry.equivalence_groups(CT.LED, "lw e67c") == frozenset({"osram-e6-white"})

    def test_lookup(self, registry):
        assert registry.lookup("led_color_class", "fk") == "warm-white"
        assert registry.lookup("connector_pitch", "PH") == "2.00"
        assert registry.lookup("missing_table", "PH") is None
        assert registry.lookup("connector_pitch", None) is None


class TestDetectCategory:
    """Test category detection from numbering schemes."""

    @pytest.mark.parametrize("mpn,expected", [
        ("STM32F103C8T6", CT.MICROCONTROLLER_ST),
        ("ATMEGA328P-AU", CT.MICROCONTROLLER_ATMEL),
        ("XPERED-L1-FKA", CT.LED_CREE),
        ("TLHR5400", CT.LED_VISHAY),
        ("61300211121", CT.CONNECTOR_WURTH),
        ("B2B-PH-K-S", CT.CONNECTOR_JST),
    ])
    def test_detects_known_schemes(self, registry, mpn, expected):
        assert registry.detect_category(mpn) is expected

    @pytest.mark.parametrize("mpn", ["", None, "RC0603FR-0710KL", "????"])
    def test_unknown_returns_none(self, registry, mpn):
        assert registry.detect_category(mpn) is None
