# tests/test_usage.py
"""
Usage Classifier Tests - Unit Tests for API Budget Classification

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- cryptotrack.domain.usage (classify, severity_for)
- cryptotrack.domain.models (UsageCounters, Severity)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from cryptotrack.domain.models import Severity, UsageCounters
from cryptotrack.domain.usage import classify, severity_for


class TestClassify:
    def test_critical_budget(self):
        result = classify(UsageCounters(monthly_used=450, monthly_limit=500, minute_used=5, minute_limit=20))
        assert result.monthly_percentage == 90.0
        assert result.monthly_remaining == 50
        assert result.severity == "critical"
        assert result.severity is Severity.CRITICAL
        assert result.minute_percentage == 25.0
        assert result.minute_remaining == 15
        assert result.minute_severity is Severity.OK

    def test_zero_limit_does_not_divide(self):
        result = classify(UsageCounters(monthly_used=0, monthly_limit=0, minute_used=0, minute_limit=20))
        assert result.monthly_percentage == 0
        assert result.monthly_remaining == 0
        assert result.severity == "ok"
        assert result.minute_remaining == 20

    def test_used_above_limit_is_clamped(self):
        result = classify(UsageCounters(monthly_used=650, monthly_limit=500, minute_used=25, minute_limit=20))
        assert result.monthly_percentage == 100.0
        assert result.monthly_remaining == 0
        assert result.minute_percentage == 100.0
        assert result.minute_remaining == 0
        assert result.severity is Severity.CRITICAL
        assert result.minute_severity is Severity.CRITICAL

    def test_negative_counters_are_clamped(self):
        result = classify(UsageCounters(monthly_used=-10, monthly_limit=500, minute_used=3, minute_limit=-20))
        assert result.monthly_percentage == 0.0
        assert result.monthly_remaining == 500
        assert result.minute_percentage == 0.0
        assert result.minute_remaining == 0
        assert result.severity is Severity.OK

    def test_non_numeric_values_do_not_raise(self):
        result = classify(UsageCounters(monthly_used=None, monthly_limit="abc", minute_used="4", minute_limit=20))
        assert result.monthly_percentage == 0.0
        assert result.monthly_remaining == 0
        assert result.minute_percentage == 20.0
        assert result.severity is Severity.OK

    def test_warn_tier(self):
        result = classify(UsageCounters(monthly_used=300, monthly_limit=500, minute_used=12, minute_limit=20))
        assert result.monthly_percentage == 60.0
        assert result.severity is Severity.WARN
        assert result.minute_severity is Severity.WARN

    def test_critical_lower_bound_is_inclusive(self):
        result = classify(UsageCounters(monthly_used=400, monthly_limit=500, minute_used=0, minute_limit=20))
        assert result.monthly_percentage == 80.0
        assert result.severity is Severity.CRITICAL

    def test_large_counters_keep_exact_remaining(self):
        result = classify(UsageCounters(monthly_used=10**30, monthly_limit=10**30 + 1, minute_used=0, minute_limit=0))
        assert result.monthly_remaining == 1
        assert result.severity is Severity.CRITICAL

    def test_recomputed_fresh_each_call(self):
        counters = UsageCounters(monthly_used=100, monthly_limit=500, minute_used=1, minute_limit=20)
        assert classify(counters) == classify(counters)


class TestSeverityFor:
    @pytest.mark.parametrize(
        "percentage, expected",
        [
            (0.0, Severity.OK),
            (59.99, Severity.OK),
            (60.0, Severity.WARN),
            (79.99, Severity.WARN),
            (80.0, Severity.CRITICAL),
            (100.0, Severity.CRITICAL),
        ],
    )
    def test_tier_boundaries(self, percentage, expected):
        assert severity_for(percentage) is expected


class TestUsageCountersFromJson:
    def test_reads_backend_payload(self):
        counters = UsageCounters.from_json({
            "monthlyUsed": 120,
            "monthlyLimit": 500,
            "monthlyRemaining": 380,
            "monthlyPercentage": 24.0,
            "minuteUsed": 3,
            "minuteLimit": 20,
            "minuteRemaining": 17,
            "warningLevel": False,
        })
        assert counters == UsageCounters(monthly_used=120, monthly_limit=500, minute_used=3, minute_limit=20)

    def test_missing_keys_default_to_zero(self):
        assert UsageCounters.from_json({}) == UsageCounters(0, 0, 0, 0)
