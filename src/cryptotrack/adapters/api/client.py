# src/cryptotrack/adapters/api/client.py
"""
Pricing API Client - HTTP Access to the Crypto Tracker Backend

This module implements the client for the three read-only resources of the
pricing backend:
- GET /indices                      current snapshot of every instrument
- GET /indices/{symbol}/history     price history of one instrument
- GET /meta/limits                  raw API usage counters

Every transport problem (timeout, connection error, non-2xx status, bad JSON
or unexpected schema) is raised as TransientFetchError with a FetchErrorKind,
so callers never inspect requests' exception types.

Files that USE this module:
- cryptotrack.application.tracker_service (feed fetch functions)
- cryptotrack.application.health (backend reachability)
- cryptotrack.app (creates the client)
- tests.test_api_client (unit tests)

Files that this module USES:
- cryptotrack.config (settings for base URL and timeout)
- cryptotrack.domain.models (payload models)
- cryptotrack.domain.errors (TransientFetchError, FetchErrorKind)
- cryptotrack.domain.symbols (routing form for history URLs)
"""
from __future__ import annotations

import logging
import urllib.parse
from typing import Any, List, Optional

import requests

from cryptotrack.config import settings
from cryptotrack.domain.errors import FetchErrorKind, TransientFetchError
from cryptotrack.domain.models import CryptoHistory, CryptoIndex, UsageCounters
from cryptotrack.domain.symbols import to_routing_form

log = logging.getLogger(__name__)


class TrackerApiClient:
    """Synchronous client for the pricing backend."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize the API client.

        Args:
            base_url: Optional API base URL (defaults to settings.api_base_url)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.headers = {"Content-Type": "application/json", "Accept": "application/json"}

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        """Prefer the backend's {"error": ...} body, fall back to the reason phrase."""
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return resp.reason or "no reason given"

    def _get_json(self, path: str) -> Any:
        """
        GET a path and decode its JSON body.

        Raises:
            TransientFetchError: On timeout, network error, non-2xx status or invalid JSON
        """
        url = self._url(path)
        try:
            log.debug("GET %s", url)
            resp = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            log.warning("Pricing API timeout after %d seconds: %s", self.timeout, url)
            raise TransientFetchError(
                f"Pricing API timeout after {self.timeout}s", kind=FetchErrorKind.TIMEOUT
            ) from e
        except requests.exceptions.RequestException as e:
            log.warning("Pricing API request failed (network/connection error): %s", e)
            raise TransientFetchError(
                f"Pricing API request failed: {e}", kind=FetchErrorKind.NETWORK
            ) from e

        if not 200 <= resp.status_code < 300:
            message = self._error_message(resp)
            log.warning("Pricing API returned HTTP %d for %s: %s", resp.status_code, path, message)
            raise TransientFetchError(
                f"Pricing API HTTP {resp.status_code}: {message}",
                kind=FetchErrorKind.HTTP_STATUS,
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            log.error("Pricing API returned invalid JSON for %s: %s", path, e)
            raise TransientFetchError(
                f"Pricing API returned invalid JSON: {e}", kind=FetchErrorKind.INVALID_PAYLOAD
            ) from e

    @staticmethod
    def _schema_error(what: str, data: Any, e: Exception) -> TransientFetchError:
        log.error("Pricing API unexpected %s schema: %r", what, data)
        return TransientFetchError(
            f"Pricing API {what} schema error: {e}", kind=FetchErrorKind.INVALID_PAYLOAD
        )

    def fetch_indices(self) -> List[CryptoIndex]:
        """
        Fetch the current snapshot of every tracked instrument.

        Returns:
            List of CryptoIndex

        Raises:
            TransientFetchError: If the request fails or the payload is malformed
        """
        data = self._get_json("/indices")
        if not isinstance(data, list):
            raise self._schema_error("indices", data, TypeError("expected a JSON array"))
        try:
            indices = [CryptoIndex.from_json(item) for item in data]
        except (KeyError, ValueError, TypeError) as e:
            raise self._schema_error("indices", data, e) from e
        log.info("Fetched %d indices", len(indices))
        return indices

    def fetch_history(self, symbol: str) -> CryptoHistory:
        """
        Fetch the price history and summary statistics of one instrument.

        Args:
            symbol: Instrument symbol in either form ("BTC/USD" or "BTC-USD");
                    the routing form is used in the URL

        Returns:
            CryptoHistory

        Raises:
            TransientFetchError: If the request fails or the payload is malformed
        """
        routing = urllib.parse.quote(to_routing_form(symbol), safe="")
        data = self._get_json(f"/indices/{routing}/history")
        if not isinstance(data, dict):
            raise self._schema_error("history", data, TypeError("expected a JSON object"))
        try:
            history = CryptoHistory.from_json(data)
        except (KeyError, ValueError, TypeError) as e:
            raise self._schema_error("history", data, e) from e
        log.info("Fetched %d history points for %s", len(history.history), history.symbol)
        return history

    def fetch_limits(self) -> tuple[UsageCounters, bool]:
        """
        Fetch the raw API usage counters.

        Server-derived percentages are ignored; they are recomputed locally.

        Returns:
            Tuple of (UsageCounters, upstream warningLevel flag)

        Raises:
            TransientFetchError: If the request fails or the payload is not an object
        """
        data = self._get_json("/meta/limits")
        if not isinstance(data, dict):
            raise self._schema_error("limits", data, TypeError("expected a JSON object"))
        counters = UsageCounters.from_json(data)
        log.debug("Fetched usage counters: %s", counters)
        return counters, bool(data.get("warningLevel", False))

    def check_health(self) -> bool:
        """
        Check whether the backend is reachable.

        Returns:
            True if /meta/limits answers with a 2xx status, False otherwise
        """
        try:
            self._get_json("/meta/limits")
            return True
        except TransientFetchError as e:
            log.warning("Backend health check failed: %s", e)
            return False
