# src/cryptotrack/adapters/api/__init__.py
"""
API Adapters - Pricing Backend Client

This package contains the HTTP client for the pricing backend.
"""

from cryptotrack.adapters.api.client import TrackerApiClient

__all__ = ["TrackerApiClient"]
