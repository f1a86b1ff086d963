# src/cryptotrack/domain/usage.py
"""
Usage Classifier - API Budget Classification

Turns the raw usage counters reported by the backend into percentages,
remaining requests and a severity tier. The classifier is display logic,
not a validator: negative counters, used > limit, a zero limit or
non-numeric values are clamped into the valid range and never raise.

Tiers (lower bound inclusive):
- critical: percentage >= 80
- warn:     percentage >= 60
- ok:       otherwise

Files that USE this module:
- cryptotrack.application.tracker_service (classifies every budget feed refresh)
- tests.test_usage (unit tests)

Files that this module USES:
- cryptotrack.domain.models (UsageCounters, UsageClassification, Severity)
"""
from __future__ import annotations

import math

from cryptotrack.domain.models import Severity, UsageClassification, UsageCounters

CRITICAL_THRESHOLD_PCT = 80.0
WARN_THRESHOLD_PCT = 60.0


def _counter(value: object) -> int:
    """Coerce a reported counter to a non-negative int (0 when unusable)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return max(value, 0)
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


def _percentage(used: int, limit: int) -> float:
    if limit <= 0:
        return 0.0
    return min(max(used * 100.0 / limit, 0.0), 100.0)


def severity_for(percentage: float) -> Severity:
    """
    Map a usage percentage to its severity tier.

    Args:
        percentage: Usage in percent

    Returns:
        Severity.CRITICAL, Severity.WARN or Severity.OK
    """
    if percentage >= CRITICAL_THRESHOLD_PCT:
        return Severity.CRITICAL
    if percentage >= WARN_THRESHOLD_PCT:
        return Severity.WARN
    return Severity.OK


def classify(counters: UsageCounters) -> UsageClassification:
    """
    Classify raw usage counters.

    Args:
        counters: Counters as reported by the backend

    Returns:
        UsageClassification recomputed from scratch; severity follows the
        monthly budget
    """
    monthly_used = _counter(counters.monthly_used)
    monthly_limit = _counter(counters.monthly_limit)
    minute_used = _counter(counters.minute_used)
    minute_limit = _counter(counters.minute_limit)

    monthly_pct = _percentage(monthly_used, monthly_limit)
    minute_pct = _percentage(minute_used, minute_limit)

    return UsageClassification(
        monthly_percentage=monthly_pct,
        monthly_remaining=max(monthly_limit - monthly_used, 0),
        minute_percentage=minute_pct,
        minute_remaining=max(minute_limit - minute_used, 0),
        severity=severity_for(monthly_pct),
        minute_severity=severity_for(minute_pct),
    )
