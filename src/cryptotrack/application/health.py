# src/cryptotrack/application/health.py
"""
Health Checker - Backend and Feed Diagnostics

This module reports whether the pricing backend is reachable and how every
registered feed is doing:
- loading: first fetch not settled yet
- ok: last fetch succeeded
- stale: last fetch failed, last-known-good data still available
- failing: last fetch failed and no data was ever received

Files that USE this module:
- cryptotrack.app (startup check and periodic health report)
- tests.test_health (unit tests)

Files that this module USES:
- cryptotrack.adapters.api.client (TrackerApiClient.check_health)
- cryptotrack.application.feed_sync (FeedSynchronizer, FeedState)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from cryptotrack.adapters.api.client import TrackerApiClient
from cryptotrack.application.feed_sync import FeedState, FeedSynchronizer

logger = logging.getLogger(__name__)


@dataclass
class HealthStatus:
    """Represents the health status of a component."""
    is_healthy: bool
    message: str
    last_check: datetime
    details: Optional[Dict[str, Any]] = None


def feed_status(state: FeedState[Any]) -> str:
    """Short status label of a feed state."""
    if state.error is None:
        return "loading" if state.data is None else "ok"
    return "stale" if state.is_stale else "failing"


class HealthChecker:
    """Health checks for the backend and every registered feed."""

    def __init__(
        self,
        client: TrackerApiClient,
        synchronizer: FeedSynchronizer,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.client = client
        self.synchronizer = synchronizer
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def check_backend(self) -> HealthStatus:
        """Check that the pricing backend answers. Blocking (HTTP)."""
        reachable = self.client.check_health()
        return HealthStatus(
            is_healthy=reachable,
            message=(
                f"Backend reachable at {self.client.base_url}"
                if reachable
                else f"Backend unreachable at {self.client.base_url}"
            ),
            last_check=self._clock(),
            details={"base_url": self.client.base_url},
        )

    def check_feed(self, feed_id: str) -> HealthStatus:
        """
        Check one feed from its published state. Never fetches.

        A feed is healthy unless its last settled fetch failed.
        """
        state = self.synchronizer.get_state(feed_id)
        status = feed_status(state)
        now = self._clock()
        age_seconds = (
            int((now - state.last_updated_at).total_seconds())
            if state.last_updated_at
            else None
        )

        if status == "ok":
            message = f"{feed_id}: ok, updated {age_seconds}s ago"
        elif status == "loading":
            message = f"{feed_id}: waiting for first fetch"
        elif status == "stale":
            message = f"{feed_id}: stale ({state.error.kind.value}), last good data {age_seconds}s old"
        else:
            message = f"{feed_id}: failing ({state.error.kind.value}), no data yet"

        return HealthStatus(
            is_healthy=state.error is None,
            message=message,
            last_check=now,
            details={
                "status": status,
                "loading": state.loading,
                "age_seconds": age_seconds,
                "error": state.error.detail if state.error else None,
            },
        )

    def check_feeds(self) -> Dict[str, HealthStatus]:
        return {feed_id: self.check_feed(feed_id) for feed_id in self.synchronizer.feed_ids()}

    def get_overall_health(self, include_backend: bool = False) -> Dict[str, Any]:
        """
        Get overall health of the feeds (and optionally the backend).

        Returns degraded status if any check fails.
        """
        checks = dict(self.check_feeds())
        if include_backend:
            checks["backend"] = self.check_backend()

        failed_checks = [name for name, check in checks.items() if not check.is_healthy]
        overall_healthy = not failed_checks

        if overall_healthy:
            status_message = "All feeds healthy"
        else:
            status_message = f"Degraded - {len(failed_checks)} check(s) failed: {', '.join(failed_checks)}"

        return {
            "overall_healthy": overall_healthy,
            "status": "healthy" if overall_healthy else "degraded",
            "message": status_message,
            "failed_components": failed_checks,
            "timestamp": self._clock().isoformat(),
            "checks": {
                name: {
                    "healthy": check.is_healthy,
                    "message": check.message,
                    "last_check": check.last_check.isoformat(),
                    "details": check.details,
                }
                for name, check in checks.items()
            },
        }
