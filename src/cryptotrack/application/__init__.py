# src/cryptotrack/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the feed synchronizer and the services built on it.
"""

from cryptotrack.application.feed_sync import (
    Err,
    FeedDescriptor,
    FeedRegistration,
    FeedState,
    FeedSynchronizer,
    FetchResult,
    Ok,
)
from cryptotrack.application.tracker_service import (
    INDICES_FEED,
    LIMITS_FEED,
    TrackerService,
    history_feed_id,
)
from cryptotrack.application.health import HealthChecker, HealthStatus

__all__ = [
    "FeedSynchronizer",
    "FeedDescriptor",
    "FeedRegistration",
    "FeedState",
    "FetchResult",
    "Ok",
    "Err",
    "TrackerService",
    "INDICES_FEED",
    "LIMITS_FEED",
    "history_feed_id",
    "HealthChecker",
    "HealthStatus",
]
