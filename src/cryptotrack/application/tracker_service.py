# src/cryptotrack/application/tracker_service.py
"""
Tracker Service - Pricing API Feeds

This module wires the pricing API into the feed synchronizer. It defines
the three feeds the dashboard needs and the fetch functions behind them:
- indices: snapshot of every instrument
- limits: usage counters, classified on every refresh
- history:<routing symbol>: price history of one instrument

The API client is blocking (requests), so every fetch runs it in a worker
thread via asyncio.to_thread and the event loop never blocks.

Files that USE this module:
- cryptotrack.app (registers the feeds at startup)
- tests.test_tracker_service (unit tests)

Files that this module USES:
- cryptotrack.adapters.api.client (TrackerApiClient)
- cryptotrack.application.feed_sync (FeedSynchronizer, FeedDescriptor, FeedState)
- cryptotrack.domain.usage (classify)
- cryptotrack.domain.symbols (routing/display conversion)
- cryptotrack.config (default intervals)
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from cryptotrack.adapters.api.client import TrackerApiClient
from cryptotrack.application.feed_sync import (
    FeedDescriptor,
    FeedRegistration,
    FeedState,
    FeedSynchronizer,
)
from cryptotrack.config import settings
from cryptotrack.domain.models import CryptoHistory, CryptoIndex, Severity, UsageReport
from cryptotrack.domain.symbols import to_display_form, to_routing_form
from cryptotrack.domain.usage import classify

logger = logging.getLogger(__name__)

INDICES_FEED = "indices"
LIMITS_FEED = "limits"
HISTORY_FEED_PREFIX = "history:"


def history_feed_id(symbol: str) -> str:
    """Feed id of an instrument's history; accepts either symbol form."""
    return f"{HISTORY_FEED_PREFIX}{to_routing_form(symbol)}"


def symbol_from_feed_id(feed_id: str) -> Optional[str]:
    """Display-form symbol of a history feed id, None for other feeds."""
    if not feed_id.startswith(HISTORY_FEED_PREFIX):
        return None
    return to_display_form(feed_id[len(HISTORY_FEED_PREFIX):])


class TrackerService:
    """Registers and reads the pricing API feeds."""

    def __init__(
        self,
        client: TrackerApiClient,
        synchronizer: FeedSynchronizer,
        indices_interval: Optional[float] = None,
        limits_interval: Optional[float] = None,
        history_interval: Optional[float] = None,
    ):
        """
        Initialize the tracker service.

        Args:
            client: Pricing API client
            synchronizer: Synchronizer that owns the feeds
            indices_interval: Seconds between instrument list fetches
            limits_interval: Seconds between usage counter fetches
            history_interval: Seconds between history fetches
        """
        self.client = client
        self.synchronizer = synchronizer
        self.indices_interval = indices_interval or settings.indices_interval_seconds
        self.limits_interval = limits_interval or settings.limits_interval_seconds
        self.history_interval = history_interval or settings.history_interval_seconds

    # --- Fetch functions ----------------------------------------------------

    async def fetch_indices(self) -> List[CryptoIndex]:
        return await asyncio.to_thread(self.client.fetch_indices)

    async def fetch_history(self, symbol: str) -> CryptoHistory:
        return await asyncio.to_thread(self.client.fetch_history, symbol)

    async def fetch_usage(self) -> UsageReport:
        """Fetch the usage counters and classify them."""
        counters, warning_level = await asyncio.to_thread(self.client.fetch_limits)
        classification = classify(counters)
        if classification.severity is not Severity.OK:
            logger.warning(
                "API budget %s: %.1f%% of monthly limit used, %d remaining",
                classification.severity.value,
                classification.monthly_percentage,
                classification.monthly_remaining,
            )
        return UsageReport(counters=counters, classification=classification, warning_level=warning_level)

    # --- Registration -------------------------------------------------------

    def watch_indices(self) -> FeedRegistration:
        return self.synchronizer.register(
            FeedDescriptor(INDICES_FEED, self.fetch_indices, self.indices_interval)
        )

    def watch_limits(self) -> FeedRegistration:
        return self.synchronizer.register(
            FeedDescriptor(LIMITS_FEED, self.fetch_usage, self.limits_interval)
        )

    def watch_history(self, symbol: str) -> FeedRegistration:
        """
        Start polling the history of one instrument.

        Args:
            symbol: Instrument symbol in display ("BTC/USD") or routing ("BTC-USD") form

        Returns:
            FeedRegistration of feed "history:<routing form>"
        """
        routing = to_routing_form(symbol)

        async def fetch() -> CryptoHistory:
            return await self.fetch_history(routing)

        return self.synchronizer.register(
            FeedDescriptor(history_feed_id(routing), fetch, self.history_interval)
        )

    # --- State --------------------------------------------------------------

    def indices_state(self) -> FeedState[List[CryptoIndex]]:
        return self.synchronizer.get_state(INDICES_FEED)

    def limits_state(self) -> FeedState[UsageReport]:
        return self.synchronizer.get_state(LIMITS_FEED)

    def history_state(self, symbol: str) -> FeedState[CryptoHistory]:
        return self.synchronizer.get_state(history_feed_id(symbol))
