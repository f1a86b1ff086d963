# src/cryptotrack/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models, the usage classifier and the symbol
codec. No dependencies on infrastructure or external systems.
"""

from cryptotrack.domain.models import (
    CryptoHistory,
    CryptoIndex,
    HistoryDataPoint,
    Severity,
    UsageClassification,
    UsageCounters,
    UsageReport,
)
from cryptotrack.domain.errors import (
    DomainError,
    FeedNotRegisteredError,
    FetchErrorKind,
    TransientFetchError,
)
from cryptotrack.domain.symbols import SymbolPair, to_display_form, to_routing_form
from cryptotrack.domain.usage import classify, severity_for

__all__ = [
    "CryptoIndex",
    "CryptoHistory",
    "HistoryDataPoint",
    "Severity",
    "UsageCounters",
    "UsageClassification",
    "UsageReport",
    "DomainError",
    "FeedNotRegisteredError",
    "FetchErrorKind",
    "TransientFetchError",
    "SymbolPair",
    "to_routing_form",
    "to_display_form",
    "classify",
    "severity_for",
]
