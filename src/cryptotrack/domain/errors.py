# src/cryptotrack/domain/errors.py
"""
Domain Errors - Fetch and Feed Exceptions

This module defines the exceptions shared by the API client and the
feed synchronizer.

Files that USE this module:
- cryptotrack.adapters.api.client (raises TransientFetchError)
- cryptotrack.application.feed_sync (translates fetch errors into Err outcomes)
- tests.* (error assertions)

Files that this module USES:
- None (pure domain layer)
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class FetchErrorKind(str, Enum):
    """Category of a failed fetch, independent of the transport library."""
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    INVALID_PAYLOAD = "invalid_payload"
    UNEXPECTED = "unexpected"


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class TransientFetchError(DomainError):
    """
    Raised when an upstream fetch fails (network, timeout, non-2xx, bad payload).

    Never fatal: the feed keeps its last good data and the next scheduled
    tick retries.
    """

    def __init__(
        self,
        message: str,
        kind: FetchErrorKind = FetchErrorKind.NETWORK,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


class FeedNotRegisteredError(DomainError, KeyError):
    """Raised when state is requested for a feed id that is not registered."""

    def __init__(self, feed_id: str):
        super().__init__(feed_id)
        self.feed_id = feed_id

    def __str__(self) -> str:
        return f"Feed not registered: {self.feed_id}"
