# src/cryptotrack/shared/validators.py
"""
Input Validation Utilities - Configuration Validation

This module provides validation functions for configuration values: the
API base URL, instrument symbols and logging levels.

Files that USE this module:
- cryptotrack.config.settings (uses validation functions in Settings field validators)

Files that this module USES:
- None (pure utility functions)
"""
import logging
import re
import urllib.parse
from typing import List


_SYMBOL_RE = re.compile(r"^[A-Za-z0-9]+([/-][A-Za-z0-9]+)?$")


def validate_base_url(url: str) -> bool:
    """
    Validate the pricing API base URL.

    Args:
        url: Base URL to validate (e.g. "http://localhost:8080/api")

    Returns:
        True if the URL is absolute http(s) with a host, False otherwise
    """
    if not url:
        return False
    parsed = urllib.parse.urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_symbol(symbol: str) -> bool:
    """
    Validate an instrument symbol in display ("BTC/USD") or routing ("BTC-USD") form.

    Args:
        symbol: Symbol to validate

    Returns:
        True if valid, False otherwise
    """
    if not symbol:
        return False
    return bool(_SYMBOL_RE.match(symbol))


def parse_symbol_list(raw: str) -> List[str]:
    """
    Split a comma-separated symbol list, dropping blanks.

    Args:
        raw: e.g. "BTC/USD, ETH/USD"

    Returns:
        List of stripped symbols
    """
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


def validate_log_level(level: str) -> bool:
    """
    Validate a logging level name.

    Args:
        level: Level name such as "INFO" or "debug"

    Returns:
        True if the logging module knows the level, False otherwise
    """
    if not level:
        return False
    return isinstance(logging.getLevelName(level.upper()), int)
