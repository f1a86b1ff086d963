# tests/test_symbols.py
"""
Symbol Codec Tests - Unit Tests for Routing/Display Conversion

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- cryptotrack.domain.symbols (to_routing_form, to_display_form, SymbolPair)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from cryptotrack.domain.symbols import SymbolPair, to_display_form, to_routing_form


class TestToRoutingForm:
    def test_single_separator(self):
        assert to_routing_form("BTC/USD") == "BTC-USD"

    def test_only_first_separator_is_replaced(self):
        # Cardinality is not validated; the rest passes through untouched
        assert to_routing_form("BTC/USD/EXTRA") == "BTC-USD/EXTRA"

    def test_no_separator_passes_through(self):
        assert to_routing_form("BTCUSD") == "BTCUSD"
        assert to_routing_form("") == ""

    def test_routing_form_is_unchanged(self):
        assert to_routing_form("BTC-USD") == "BTC-USD"


class TestToDisplayForm:
    def test_single_separator(self):
        assert to_display_form("BTC-USD") == "BTC/USD"

    def test_only_first_separator_is_replaced(self):
        assert to_display_form("BTC-USD-EXTRA") == "BTC/USD-EXTRA"

    def test_no_separator_passes_through(self):
        assert to_display_form("BTCUSD") == "BTCUSD"


class TestRoundTrip:
    @pytest.mark.parametrize("display", ["BTC/USD", "ETH/EUR", "XAU/USD", "A/B"])
    def test_display_round_trip(self, display):
        assert to_display_form(to_routing_form(display)) == display

    @pytest.mark.parametrize("routing", ["BTC-USD", "ETH-EUR", "A-B"])
    def test_routing_round_trip(self, routing):
        assert to_routing_form(to_display_form(routing)) == routing


class TestSymbolPair:
    def test_from_display(self):
        pair = SymbolPair.from_display("BTC/USD")
        assert pair == SymbolPair(routing="BTC-USD", display="BTC/USD")

    def test_from_routing(self):
        pair = SymbolPair.from_routing("ETH-USD")
        assert pair.display == "ETH/USD"
        assert pair.routing == "ETH-USD"
