# src/cryptotrack/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from cryptotrack.shared.validators import (
    parse_symbol_list,
    validate_base_url,
    validate_log_level,
    validate_symbol,
)
from cryptotrack.shared.logging_conf import setup_logging

__all__ = [
    "validate_base_url",
    "validate_symbol",
    "validate_log_level",
    "parse_symbol_list",
    "setup_logging",
]
