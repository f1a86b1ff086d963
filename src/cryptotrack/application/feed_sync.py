# src/cryptotrack/application/feed_sync.py
"""
Feed Synchronizer - Independent Polling of Data Feeds

This module owns one polling loop per registered feed. Every feed has its own
fixed interval, its own in-flight flag and its own published FeedState, so a
slow or failing feed never delays or mutates another one.

Rules per feed:
- at most one fetch in flight per feed id, across re-registrations; a tick
  that finds one running is skipped
- every fetch carries a sequence number; a completion that is not newer than
  the last applied one, or that belongs to a replaced registration, is dropped
- a failure keeps the last good data and only sets the error
- loading always returns to False once a fetch settles

Everything runs on one asyncio event loop. Fetch callables are coroutines;
blocking transports must be wrapped (see tracker_service).

Files that USE this module:
- cryptotrack.application.tracker_service (registers the API feeds)
- cryptotrack.application.health (reads feed state)
- cryptotrack.app (creates the synchronizer, listens to publications)
- tests.test_feed_sync (unit tests)

Files that this module USES:
- cryptotrack.domain.errors (TransientFetchError, FetchErrorKind, FeedNotRegisteredError)
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar, Union

from cryptotrack.domain.errors import FeedNotRegisteredError, FetchErrorKind, TransientFetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[str, "FeedState[Any]"], None]


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful fetch outcome."""
    value: T


@dataclass(frozen=True)
class Err:
    """Failed fetch outcome, also published as FeedState.error."""
    kind: FetchErrorKind
    detail: str
    status_code: Optional[int] = None


FetchOutcome = Union[Ok[Any], Err]


@dataclass(frozen=True)
class FetchResult:
    """Completion message of one fetch, consumed by the state-update routine."""
    feed_id: str
    seq: int
    outcome: FetchOutcome


@dataclass(frozen=True)
class FeedState(Generic[T]):
    """
    Latest published state of one feed.

    Attributes:
        data: Last successfully fetched payload (kept across failures)
        loading: True while a fetch is in flight
        error: Error of the last settled fetch, None after a success
        last_updated_at: UTC time of the last successful fetch
    """
    data: Optional[T] = None
    loading: bool = True
    error: Optional[Err] = None
    last_updated_at: Optional[datetime] = None

    @property
    def is_stale(self) -> bool:
        """True when showing last-known-good data alongside an error."""
        return self.error is not None and self.data is not None


@dataclass(frozen=True)
class FeedDescriptor(Generic[T]):
    """
    What to fetch and how often.

    Attributes:
        feed_id: Unique feed identifier
        fetch: Coroutine function returning the payload
        interval_seconds: Delay between scheduled fetches
    """
    feed_id: str
    fetch: Callable[[], Awaitable[T]]
    interval_seconds: float

    def __post_init__(self) -> None:
        if not self.feed_id:
            raise ValueError("feed_id must not be empty")
        if self.interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {self.interval_seconds}")


@dataclass(eq=False)
class _FeedSlot:
    """Mutable per-registration bookkeeping, private to the synchronizer."""
    descriptor: FeedDescriptor[Any]
    state: FeedState[Any]
    first_seq: int
    applied_seq: int = 0
    active: bool = True
    pending_fetch: bool = False
    timer: Optional[asyncio.Task] = field(default=None, repr=False)


class FeedRegistration:
    """
    Handle returned by FeedSynchronizer.register.

    Calling it (or cancel()) stops the feed. Safe to call any number of
    times; a handle never stops a newer registration of the same feed id.
    """

    def __init__(self, synchronizer: FeedSynchronizer, slot: _FeedSlot):
        self._synchronizer = synchronizer
        self._slot = slot

    @property
    def feed_id(self) -> str:
        return self._slot.descriptor.feed_id

    @property
    def active(self) -> bool:
        return self._slot.active

    def cancel(self) -> None:
        self._synchronizer._deactivate(self._slot)

    def __call__(self) -> None:
        self.cancel()

    def __repr__(self) -> str:
        return f"FeedRegistration(feed_id={self.feed_id!r}, active={self.active})"


class FeedSynchronizer:
    """Runs independent polling loops and publishes per-feed state."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize an empty synchronizer.

        Args:
            clock: Optional function returning the current time
                   (defaults to UTC now)
        """
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._feeds: Dict[str, _FeedSlot] = {}
        self._last_seq: Dict[str, int] = {}
        self._in_flight: Dict[str, int] = {}
        self._listeners: list[Listener] = []
        self._fetch_tasks: set[asyncio.Task] = set()

    # --- Registration -------------------------------------------------------

    def register(self, descriptor: FeedDescriptor[T]) -> FeedRegistration:
        """
        Start polling a feed.

        Issues a fetch immediately, then one every interval_seconds until
        the returned registration is cancelled. Registering an id that is
        already active replaces it: the old timer stops and any result it
        still has in flight is discarded. While that old fetch is running the
        first fetch of the new registration waits for it. Must be called from
        a running event loop.

        Args:
            descriptor: Feed to poll

        Returns:
            FeedRegistration used to stop the feed
        """
        feed_id = descriptor.feed_id
        previous = self._feeds.get(feed_id)
        if previous is not None:
            logger.info("Feed %s re-registered, replacing previous registration", feed_id)
            self._deactivate(previous)

        slot = _FeedSlot(
            descriptor=descriptor,
            state=FeedState(),
            first_seq=self._last_seq.get(feed_id, 0) + 1,
        )
        self._feeds[feed_id] = slot
        self._notify(feed_id, slot.state)

        self._issue(slot)
        slot.timer = asyncio.get_running_loop().create_task(
            self._schedule(slot), name=f"feed-timer:{feed_id}"
        )
        logger.info("Feed %s registered (interval=%ss)", feed_id, descriptor.interval_seconds)
        return FeedRegistration(self, slot)

    def unregister(self, feed_id: str) -> bool:
        """
        Stop polling a feed by id.

        Returns:
            True if the feed was registered, False otherwise
        """
        slot = self._feeds.get(feed_id)
        if slot is None:
            return False
        self._deactivate(slot)
        return True

    def _deactivate(self, slot: _FeedSlot) -> None:
        if not slot.active:
            return
        slot.active = False
        if slot.timer is not None:
            slot.timer.cancel()
        feed_id = slot.descriptor.feed_id
        if self._feeds.get(feed_id) is slot:
            del self._feeds[feed_id]
        self._forget_if_idle(feed_id)
        logger.info("Feed %s unregistered", feed_id)

    # --- Reading ------------------------------------------------------------

    def get_state(self, feed_id: str) -> FeedState[Any]:
        """
        Return the most recently published state of a feed.

        Never blocks and never triggers a fetch.

        Raises:
            FeedNotRegisteredError: If no feed with this id is registered
        """
        slot = self._feeds.get(feed_id)
        if slot is None:
            raise FeedNotRegisteredError(feed_id)
        return slot.state

    def is_registered(self, feed_id: str) -> bool:
        return feed_id in self._feeds

    def feed_ids(self) -> list[str]:
        return list(self._feeds)

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """
        Subscribe to every state publication.

        Args:
            listener: Called with (feed_id, state) after each publication

        Returns:
            Function removing the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # --- Fetch cycle --------------------------------------------------------

    def refresh(self, feed_id: str) -> bool:
        """
        Fetch a feed now, outside its schedule.

        Returns:
            True if a fetch was issued, False if one is already in flight

        Raises:
            FeedNotRegisteredError: If no feed with this id is registered
        """
        slot = self._feeds.get(feed_id)
        if slot is None:
            raise FeedNotRegisteredError(feed_id)
        return self._issue(slot)

    async def _schedule(self, slot: _FeedSlot) -> None:
        interval = slot.descriptor.interval_seconds
        while slot.active:
            await asyncio.sleep(interval)
            if not slot.active:
                break
            self._issue(slot)

    def _next_seq(self, feed_id: str) -> int:
        seq = self._last_seq.get(feed_id, 0) + 1
        self._last_seq[feed_id] = seq
        return seq

    def _issue(self, slot: _FeedSlot) -> bool:
        feed_id = slot.descriptor.feed_id
        if not slot.active:
            return False
        running = self._in_flight.get(feed_id)
        if running is not None:
            if running < slot.first_seq:
                # Fetch of a replaced registration; start ours once it settles
                slot.pending_fetch = True
            logger.debug("Feed %s: fetch #%d still in flight, skipping tick", feed_id, running)
            return False

        seq = self._next_seq(feed_id)
        self._in_flight[feed_id] = seq
        if not slot.state.loading:
            self._set_state(slot, replace(slot.state, loading=True))

        task = asyncio.get_running_loop().create_task(
            self._fetch(slot, seq), name=f"feed-fetch:{feed_id}:{seq}"
        )
        self._fetch_tasks.add(task)
        task.add_done_callback(self._fetch_tasks.discard)
        return True

    async def _fetch(self, slot: _FeedSlot, seq: int) -> None:
        feed_id = slot.descriptor.feed_id
        outcome: FetchOutcome
        try:
            value = await slot.descriptor.fetch()
        except TransientFetchError as e:
            logger.warning("Feed %s fetch #%d failed (%s): %s", feed_id, seq, e.kind.value, e)
            outcome = Err(kind=e.kind, detail=str(e), status_code=e.status_code)
        except Exception as e:
            logger.error("Feed %s fetch #%d raised unexpectedly: %s", feed_id, seq, e, exc_info=True)
            outcome = Err(kind=FetchErrorKind.UNEXPECTED, detail=f"{type(e).__name__}: {e}")
        else:
            outcome = Ok(value)
        finally:
            if self._in_flight.get(feed_id) == seq:
                del self._in_flight[feed_id]
            self._forget_if_idle(feed_id)

        self._apply(FetchResult(feed_id=feed_id, seq=seq, outcome=outcome))

        current = self._feeds.get(feed_id)
        if current is not None and current.pending_fetch:
            current.pending_fetch = False
            self._issue(current)

    def _apply(self, result: FetchResult) -> None:
        """Single state-update routine for fetch completions."""
        slot = self._feeds.get(result.feed_id)
        if slot is None or not slot.active:
            logger.debug("Feed %s: dropping result #%d of inactive feed", result.feed_id, result.seq)
            return
        if result.seq < slot.first_seq or result.seq <= slot.applied_seq:
            logger.debug(
                "Feed %s: dropping stale result #%d (applied #%d)",
                result.feed_id, result.seq, slot.applied_seq,
            )
            if slot.state.loading and not self._busy(slot):
                self._set_state(slot, replace(slot.state, loading=False))
            return

        slot.applied_seq = result.seq
        outcome = result.outcome
        if isinstance(outcome, Ok):
            new_state = FeedState(
                data=outcome.value,
                loading=self._busy(slot),
                error=None,
                last_updated_at=self._clock(),
            )
        else:
            new_state = replace(slot.state, loading=self._busy(slot), error=outcome)
        self._set_state(slot, new_state)

    def _busy(self, slot: _FeedSlot) -> bool:
        return slot.pending_fetch or slot.descriptor.feed_id in self._in_flight

    def _forget_if_idle(self, feed_id: str) -> None:
        """Drop the sequence counter of a feed that is gone and has nothing in flight."""
        if feed_id not in self._feeds and feed_id not in self._in_flight:
            self._last_seq.pop(feed_id, None)

    def _set_state(self, slot: _FeedSlot, state: FeedState[Any]) -> None:
        slot.state = state
        self._notify(slot.descriptor.feed_id, state)

    def _notify(self, feed_id: str, state: FeedState[Any]) -> None:
        for listener in list(self._listeners):
            try:
                listener(feed_id, state)
            except Exception as e:
                logger.error("Listener failed for feed %s: %s", feed_id, e, exc_info=True)

    # --- Shutdown -----------------------------------------------------------

    async def close(self) -> None:
        """Stop every feed and cancel fetches still in flight."""
        timers = []
        for slot in list(self._feeds.values()):
            self._deactivate(slot)
            if slot.timer is not None:
                timers.append(slot.timer)
        pending = [t for t in self._fetch_tasks if not t.done()]
        for task in pending:
            task.cancel()
        pending.extend(timers)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("Feed synchronizer closed")
