# tests/test_app.py
"""
App Tests - Unit Tests for the Console Runner

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- cryptotrack.app (describe_update, run)
- cryptotrack.config (Settings)
- unittest.mock (patch for the API client)
- pytest (testing framework)
"""
import asyncio  # Stop event for the runner

import pytest  # Testing framework for writing and running tests

from unittest.mock import patch  # Replace the API client

from cryptotrack.app import describe_update, run
from cryptotrack.application.feed_sync import Err, FeedState
from cryptotrack.config import Settings
from cryptotrack.domain.errors import FetchErrorKind
from cryptotrack.domain.models import (
    CryptoHistory,
    CryptoIndex,
    UsageCounters,
    UsageReport,
)
from cryptotrack.domain.usage import classify

BTC = CryptoIndex("BTC/USD", "Bitcoin US Dollar", 67000.0, 1.5, "Coinbase Pro", 1730800000000)
COUNTERS = UsageCounters(monthly_used=450, monthly_limit=500, minute_used=5, minute_limit=20)
HISTORY = CryptoHistory("BTC/USD", "Bitcoin/USD", (), 1.0, 3.0, 2.0)


class TestDescribeUpdate:
    def test_indices(self):
        state = FeedState(data=[BTC, BTC], loading=False)
        assert describe_update("indices", state) == "indices ok: 2 instruments"

    def test_limits(self):
        report = UsageReport(COUNTERS, classify(COUNTERS))
        line = describe_update("limits", FeedState(data=report, loading=False))
        assert line.startswith("limits ok: monthly 90.0% (50 left, critical)")
        assert "minute 25.0% (15 left)" in line

    def test_history(self):
        line = describe_update("history:BTC-USD", FeedState(data=HISTORY, loading=False))
        assert line == "history:BTC-USD ok: 0 points, min=1.0 max=3.0 avg=2.0"

    def test_failing_feed(self):
        error = Err(FetchErrorKind.NETWORK, "Pricing API request failed: refused")
        line = describe_update("indices", FeedState(loading=False, error=error))
        assert line == "indices failing: Pricing API request failed: refused"

    def test_stale_feed(self):
        error = Err(FetchErrorKind.TIMEOUT, "Pricing API timeout after 10s")
        line = describe_update("indices", FeedState(data=[BTC], loading=False, error=error))
        assert line == "indices stale: 1 instruments [error: Pricing API timeout after 10s]"


class TestRun:
    @pytest.mark.asyncio
    async def test_registers_feeds_and_stops(self):
        config = Settings(
            api_base_url="http://api.test/api",
            history_symbols="BTC/USD,ETH-USD",
            health_interval_seconds=0.05,
        )
        stop = asyncio.Event()

        with patch("cryptotrack.app.TrackerApiClient") as client_cls:
            client = client_cls.return_value
            client.base_url = "http://api.test/api"
            client.check_health.return_value = True
            client.fetch_indices.return_value = [BTC]
            client.fetch_limits.return_value = (COUNTERS, False)
            client.fetch_history.return_value = HISTORY

            asyncio.get_running_loop().call_later(0.2, stop.set)
            await asyncio.wait_for(run(config, stop=stop), timeout=5)

        client_cls.assert_called_once_with(base_url="http://api.test/api", timeout=10)
        client.check_health.assert_called_once()
        client.fetch_indices.assert_called()
        client.fetch_limits.assert_called()
        fetched = sorted(call.args[0] for call in client.fetch_history.call_args_list)
        assert fetched == ["BTC-USD", "ETH-USD"]
