# tests/test_tracker_service.py
"""
Tracker Service Tests - Unit Tests for the Pricing API Feeds

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- cryptotrack.application.tracker_service (TrackerService, feed ids)
- cryptotrack.application.feed_sync (FeedSynchronizer)
- cryptotrack.domain.models (payload models for test data)
- unittest.mock (Mock client)
- pytest, pytest_asyncio (testing framework and async fixtures)
"""
import asyncio  # Event loop helpers

import pytest  # Testing framework for writing and running tests
import pytest_asyncio  # Async fixtures

from unittest.mock import Mock  # Mock API client

from cryptotrack.application.feed_sync import FeedSynchronizer
from cryptotrack.application.tracker_service import (
    INDICES_FEED,
    LIMITS_FEED,
    TrackerService,
    history_feed_id,
    symbol_from_feed_id,
)
from cryptotrack.domain.errors import FetchErrorKind, TransientFetchError
from cryptotrack.domain.models import CryptoHistory, CryptoIndex, Severity, UsageCounters

HOUR = 3600.0


async def wait_settled(synchronizer, feed_id, timeout=2.0):
    """Wait until the feed's fetch (run in a worker thread) has settled."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while synchronizer.get_state(feed_id).loading:
        if loop.time() > deadline:
            raise AssertionError(f"feed {feed_id} did not settle")
        await asyncio.sleep(0.005)
    return synchronizer.get_state(feed_id)


@pytest.fixture
def client():
    mock_client = Mock()
    mock_client.fetch_indices.return_value = [
        CryptoIndex("BTC/USD", "Bitcoin US Dollar", 67000.0, 1.5, "Coinbase Pro", 1730800000000),
        CryptoIndex("ETH/USD", "Ethereum US Dollar", 2400.0, -0.5, "Coinbase Pro", 1730800000000),
    ]
    mock_client.fetch_limits.return_value = (
        UsageCounters(monthly_used=450, monthly_limit=500, minute_used=5, minute_limit=20),
        True,
    )
    mock_client.fetch_history.return_value = CryptoHistory(
        symbol="BTC/USD", name="Bitcoin/USD", history=(), min_price=1.0, max_price=3.0, avg_price=2.0
    )
    return mock_client


@pytest_asyncio.fixture
async def synchronizer():
    sync = FeedSynchronizer()
    yield sync
    await sync.close()


@pytest.fixture
def service(client, synchronizer):
    return TrackerService(
        client, synchronizer, indices_interval=HOUR, limits_interval=HOUR, history_interval=HOUR
    )


class TestFeedIds:
    def test_history_feed_id_uses_routing_form(self):
        assert history_feed_id("BTC/USD") == "history:BTC-USD"
        assert history_feed_id("BTC-USD") == "history:BTC-USD"

    def test_symbol_from_feed_id(self):
        assert symbol_from_feed_id("history:BTC-USD") == "BTC/USD"
        assert symbol_from_feed_id(INDICES_FEED) is None


class TestTrackerService:
    def test_default_intervals_from_settings(self, client):
        service = TrackerService(client, FeedSynchronizer())
        assert service.indices_interval == 90.0
        assert service.limits_interval == 30.0
        assert service.history_interval == 300.0

    @pytest.mark.asyncio
    async def test_watch_indices(self, service, synchronizer, client):
        service.watch_indices()
        state = await wait_settled(synchronizer, INDICES_FEED)

        assert [i.symbol for i in state.data] == ["BTC/USD", "ETH/USD"]
        assert service.indices_state() is state
        client.fetch_indices.assert_called_once()

    @pytest.mark.asyncio
    async def test_watch_limits_classifies_counters(self, service, synchronizer):
        service.watch_limits()
        state = await wait_settled(synchronizer, LIMITS_FEED)

        report = state.data
        assert report.counters.monthly_used == 450
        assert report.classification.monthly_percentage == 90.0
        assert report.classification.monthly_remaining == 50
        assert report.classification.severity is Severity.CRITICAL
        assert report.warning_level is True
        assert service.limits_state() is state

    @pytest.mark.asyncio
    async def test_watch_history_accepts_display_form(self, service, synchronizer, client):
        registration = service.watch_history("BTC/USD")
        assert registration.feed_id == "history:BTC-USD"

        state = await wait_settled(synchronizer, "history:BTC-USD")
        assert state.data.symbol == "BTC/USD"
        client.fetch_history.assert_called_once_with("BTC-USD")
        assert service.history_state("BTC/USD") is state
        assert service.history_state("BTC-USD") is state

    @pytest.mark.asyncio
    async def test_failing_limits_do_not_affect_indices(self, service, synchronizer, client):
        client.fetch_limits.side_effect = TransientFetchError(
            "Pricing API HTTP 500: boom", kind=FetchErrorKind.HTTP_STATUS, status_code=500
        )
        service.watch_indices()
        service.watch_limits()

        limits = await wait_settled(synchronizer, LIMITS_FEED)
        indices = await wait_settled(synchronizer, INDICES_FEED)

        assert limits.error.kind is FetchErrorKind.HTTP_STATUS
        assert limits.data is None
        assert indices.error is None
        assert len(indices.data) == 2

    @pytest.mark.asyncio
    async def test_unwatch_history(self, service, synchronizer):
        registration = service.watch_history("ETH/USD")
        await wait_settled(synchronizer, "history:ETH-USD")
        registration()

        assert not synchronizer.is_registered("history:ETH-USD")
