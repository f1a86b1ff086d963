# src/cryptotrack/domain/symbols.py
"""
Symbol Codec - Routing/Display Symbol Conversion

An instrument symbol has two string forms:
- display form, slash-separated, as returned by the API (e.g. "BTC/USD")
- routing form, dash-separated, safe inside a URL path (e.g. "BTC-USD")

Only the first separator is replaced and the shape of the symbol is not
validated, so "BTC/USD/EXTRA" becomes "BTC-USD/EXTRA". Conversion
round-trips for symbols with exactly one separator.

Files that USE this module:
- cryptotrack.domain.models (CryptoIndex.routing_symbol)
- cryptotrack.application.tracker_service (history feed ids and URLs)
- tests.test_symbols (unit tests)

Files that this module USES:
- None (pure functions)
"""
from __future__ import annotations

from dataclasses import dataclass

DISPLAY_SEPARATOR = "/"
ROUTING_SEPARATOR = "-"


def to_routing_form(display: str) -> str:
    """
    Convert a display-form symbol to its routing form.

    Args:
        display: Symbol with slash (e.g. "BTC/USD")

    Returns:
        Symbol with the first slash replaced by a dash (e.g. "BTC-USD")
    """
    return display.replace(DISPLAY_SEPARATOR, ROUTING_SEPARATOR, 1)


def to_display_form(routing: str) -> str:
    """
    Convert a routing-form symbol to its display form.

    Args:
        routing: Symbol with dash (e.g. "BTC-USD")

    Returns:
        Symbol with the first dash replaced by a slash (e.g. "BTC/USD")
    """
    return routing.replace(ROUTING_SEPARATOR, DISPLAY_SEPARATOR, 1)


@dataclass(frozen=True)
class SymbolPair:
    """Both forms of one instrument symbol."""
    routing: str
    display: str

    @classmethod
    def from_display(cls, display: str) -> SymbolPair:
        return cls(routing=to_routing_form(display), display=display)

    @classmethod
    def from_routing(cls, routing: str) -> SymbolPair:
        return cls(routing=routing, display=to_display_form(routing))
