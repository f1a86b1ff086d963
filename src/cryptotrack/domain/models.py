# src/cryptotrack/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains the payloads returned by the pricing API and the
derived usage view:
- Instrument snapshots (CryptoIndex)
- Price history with summary statistics (CryptoHistory)
- Raw usage counters and their classification (UsageCounters, UsageReport)

Files that USE this module:
- cryptotrack.adapters.api.client (builds models from JSON payloads)
- cryptotrack.domain.usage (classifies UsageCounters)
- cryptotrack.application.tracker_service (feed payload types)
- tests.* (tests use domain models for test data)

Files that this module USES:
- cryptotrack.domain.symbols (routing form of instrument symbols)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass  # Decorator for creating data classes
from enum import Enum  # Severity tiers
from typing import Optional  # Type hints for optional values

from cryptotrack.domain.symbols import to_routing_form


class Severity(str, Enum):
    """Usage severity tier."""
    OK = "ok"
    WARN = "warn"
    CRITICAL = "critical"


@dataclass(frozen=True)
class CryptoIndex:
    """
    Current snapshot of one tracked instrument.

    Attributes:
        symbol: Display-form symbol (e.g. "BTC/USD")
        name: Instrument name
        current_price: Latest price
        percent_change: 24h percentage change
        exchange: Exchange name
        timestamp: Last update time in epoch milliseconds
    """
    symbol: str
    name: str
    current_price: float
    percent_change: float
    exchange: str
    timestamp: int

    @property
    def routing_symbol(self) -> str:
        return to_routing_form(self.symbol)

    @staticmethod
    def from_json(data: dict) -> "CryptoIndex":
        return CryptoIndex(
            symbol=str(data["symbol"]),
            name=str(data.get("name") or data["symbol"]),
            current_price=float(data["currentPrice"]),
            percent_change=float(data.get("percentChange") or 0.0),
            exchange=str(data.get("exchange") or ""),
            timestamp=int(data.get("timestamp") or 0),
        )


@dataclass(frozen=True)
class HistoryDataPoint:
    """One daily OHLC point."""
    date: str
    open: float
    high: float
    low: float
    close: float
    volume: Optional[str] = None

    @staticmethod
    def from_json(data: dict) -> "HistoryDataPoint":
        volume = data.get("volume")
        return HistoryDataPoint(
            date=str(data["date"]),
            open=float(data["open"]),
            high=float(data["high"]),
            low=float(data["low"]),
            close=float(data["close"]),
            volume=str(volume) if volume is not None else None,
        )


@dataclass(frozen=True)
class CryptoHistory:
    """
    Historical series for one instrument with summary statistics.

    Statistics are computed upstream and taken as-is.
    """
    symbol: str
    name: str
    history: tuple[HistoryDataPoint, ...]
    min_price: float
    max_price: float
    avg_price: float

    @staticmethod
    def from_json(data: dict) -> "CryptoHistory":
        points = tuple(HistoryDataPoint.from_json(p) for p in data.get("history") or [])
        return CryptoHistory(
            symbol=str(data["symbol"]),
            name=str(data.get("name") or data["symbol"]),
            history=points,
            min_price=float(data["minPrice"]),
            max_price=float(data["maxPrice"]),
            avg_price=float(data["avgPrice"]),
        )


@dataclass(frozen=True)
class UsageCounters:
    """
    Raw usage counters reported by the backend.

    used <= limit is a producer invariant and is not enforced here.
    """
    monthly_used: int = 0
    monthly_limit: int = 0
    minute_used: int = 0
    minute_limit: int = 0

    @staticmethod
    def from_json(data: dict) -> "UsageCounters":
        # Missing keys default to 0; values are normalised by the classifier.
        return UsageCounters(
            monthly_used=data.get("monthlyUsed", 0),
            monthly_limit=data.get("monthlyLimit", 0),
            minute_used=data.get("minuteUsed", 0),
            minute_limit=data.get("minuteLimit", 0),
        )


@dataclass(frozen=True)
class UsageClassification:
    """
    Severity-annotated usage view. Derived, never persisted.

    Attributes:
        monthly_percentage: Monthly usage in percent, clamped to [0, 100]
        monthly_remaining: Requests left this month (never negative)
        minute_percentage: Current-minute usage in percent, clamped to [0, 100]
        minute_remaining: Requests left in the current minute (never negative)
        severity: Tier of the monthly budget
        minute_severity: Tier of the per-minute window
    """
    monthly_percentage: float
    monthly_remaining: int
    minute_percentage: float
    minute_remaining: int
    severity: Severity
    minute_severity: Severity = Severity.OK


@dataclass(frozen=True)
class UsageReport:
    """Payload of the budget feed: raw counters plus their classification."""
    counters: UsageCounters
    classification: UsageClassification
    warning_level: bool = False
