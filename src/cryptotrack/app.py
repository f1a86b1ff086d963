# src/cryptotrack/app.py
"""
Application Entry Point - Console Runner

This module serves as the composition root for CryptoTrack. It wires the
API client, the feed synchronizer and the tracker feeds, logs every feed
update and a periodic health report, and runs until interrupted.

Files that USE this module:
- the `cryptotrack` console script (pyproject entry point)

Files that this module USES:
- cryptotrack.shared.logging_conf (setup_logging for logging configuration)
- cryptotrack.config (settings for configuration management)
- cryptotrack.adapters.api.client (TrackerApiClient)
- cryptotrack.application.feed_sync (FeedSynchronizer, FeedState)
- cryptotrack.application.tracker_service (TrackerService and feed ids)
- cryptotrack.application.health (HealthChecker)
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Any, Optional

from cryptotrack.shared.logging_conf import setup_logging
from cryptotrack.config import Settings
from cryptotrack.adapters.api.client import TrackerApiClient
from cryptotrack.application.feed_sync import FeedState, FeedSynchronizer
from cryptotrack.application.health import HealthChecker, feed_status
from cryptotrack.application.tracker_service import (
    INDICES_FEED,
    LIMITS_FEED,
    TrackerService,
    symbol_from_feed_id,
)

logger = logging.getLogger(__name__)


def describe_update(feed_id: str, state: FeedState[Any]) -> str:
    """
    One-line summary of a settled feed state, for the log.

    Args:
        feed_id: Feed that published the state
        state: Published state

    Returns:
        Summary such as "indices ok: 12 instruments"
    """
    status = feed_status(state)
    if state.data is None:
        detail = state.error.detail if state.error else "no data"
    elif feed_id == INDICES_FEED:
        detail = f"{len(state.data)} instruments"
    elif feed_id == LIMITS_FEED:
        c = state.data.classification
        detail = (
            f"monthly {c.monthly_percentage:.1f}% ({c.monthly_remaining} left, {c.severity.value}), "
            f"minute {c.minute_percentage:.1f}% ({c.minute_remaining} left)"
        )
    elif symbol_from_feed_id(feed_id):
        h = state.data
        detail = f"{len(h.history)} points, min={h.min_price} max={h.max_price} avg={h.avg_price}"
    else:
        detail = type(state.data).__name__

    if state.is_stale:
        detail = f"{detail} [error: {state.error.detail}]"
    return f"{feed_id} {status}: {detail}"


def _log_update(feed_id: str, state: FeedState[Any]) -> None:
    if state.loading:
        return
    if state.error is not None:
        logger.warning(describe_update(feed_id, state))
    else:
        logger.info(describe_update(feed_id, state))


async def run(config: Settings, stop: Optional[asyncio.Event] = None) -> None:
    """
    Register the feeds and keep them running until `stop` is set.

    Args:
        config: Application settings
        stop: Event ending the run (a new one tied to SIGINT/SIGTERM if omitted)
    """
    if stop is None:
        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, stop.set)
            except (NotImplementedError, RuntimeError):
                # Not supported on this platform; KeyboardInterrupt still ends asyncio.run
                pass

    client = TrackerApiClient(base_url=config.api_base_url, timeout=config.http_timeout_seconds)
    synchronizer = FeedSynchronizer()
    health = HealthChecker(client, synchronizer)
    tracker = TrackerService(
        client,
        synchronizer,
        indices_interval=config.indices_interval_seconds,
        limits_interval=config.limits_interval_seconds,
        history_interval=config.history_interval_seconds,
    )

    backend = await asyncio.to_thread(health.check_backend)
    if backend.is_healthy:
        logger.info(backend.message)
    else:
        logger.warning("%s; feeds will keep retrying on their schedule", backend.message)

    synchronizer.add_listener(_log_update)
    tracker.watch_indices()
    tracker.watch_limits()
    for symbol in config.history_symbol_list:
        tracker.watch_history(symbol)

    logger.info(
        "Tracking %d feeds: indices=%ss, limits=%ss, history=%ss",
        len(synchronizer.feed_ids()),
        tracker.indices_interval,
        tracker.limits_interval,
        tracker.history_interval,
    )

    try:
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=config.health_interval_seconds)
            except asyncio.TimeoutError:
                report = health.get_overall_health()
                log_fn = logger.info if report["overall_healthy"] else logger.warning
                log_fn("Health: %s", report["message"])
    finally:
        await synchronizer.close()


def main() -> None:
    """
    Start the console runner.

    This function:
    1. Loads settings and sets up logging
    2. Checks that the backend answers
    3. Registers the indices, limits and history feeds
    4. Runs until SIGINT/SIGTERM
    """
    from cryptotrack.config import settings

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        log_stdout=settings.log_stdout,
    )
    logger.info("Starting CryptoTrack against %s", settings.api_base_url)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception("Unexpected error: %s (type: %s)", e, type(e).__name__)
        raise
    logger.info("CryptoTrack stopped")


if __name__ == "__main__":
    main()
