"""Unit tests for the usage plan value objects and the admission rule.

Tests cover:
- Plan validation
- Token bucket consumption, refill and Retry-After
- Quota counting (throttled requests count, quota denials do not)
- Calendar period boundaries and rollover
"""

from datetime import UTC, datetime

import pytest

from src.domain.enums import DenialReason, QuotaPeriod
from src.domain.value_objects import (
    QuotaSettings,
    ThrottleSettings,
    UsagePlan,
    UsageState,
    current_period_start,
    next_period_start,
)


def ts(*args) -> float:
    return datetime(*args, tzinfo=UTC).timestamp()


NOW = ts(2024, 6, 15, 12, 0, 0)


@pytest.mark.unit
class TestPlanValidation:
    """Test plan settings reject non-positive values."""

    @pytest.mark.parametrize(("burst", "rate"), [(0, 1.0), (1, 0.0), (-1, 1.0)])
    def test_throttle_rejects_non_positive(self, burst, rate):
        """Test burst and rate must be positive."""
        with pytest.raises(ValueError):
            ThrottleSettings(burst_capacity=burst, rate_per_second=rate)

    def test_quota_rejects_zero_limit(self):
        """Test quota limit must be positive."""
        with pytest.raises(ValueError):
            QuotaSettings(limit=0)

    def test_ttl_covers_full_refill(self):
        """Test TTL is refill time plus a buffer."""
        assert ThrottleSettings(burst_capacity=20, rate_per_second=10.0).ttl_seconds == 62


@pytest.mark.unit
class TestTokenBucket:
    """Test throttle behaviour of UsageState.admit."""

    def test_fresh_state_is_full(self, usage_plan):
        """Test a new credential starts with a full bucket."""
        state = UsageState.fresh(plan=usage_plan, now=NOW)

        assert state.tokens == 2.0
        assert state.quota_used == 0
        assert state.period_start == ts(2024, 6, 1)

    def test_burst_then_rate_limited(self, usage_plan):
        """Test burst requests pass, the next one is throttled."""
        state = UsageState.fresh(plan=usage_plan, now=NOW)

        state, first = state.admit(plan=usage_plan, now=NOW, credential_id="k")
        state, second = state.admit(plan=usage_plan, now=NOW, credential_id="k")
        state, third = state.admit(plan=usage_plan, now=NOW, credential_id="k")

        assert (first.allowed, first.remaining_tokens) == (True, 1)
        assert (second.allowed, second.remaining_tokens) == (True, 0)
        assert third.allowed is False
        assert third.reason == DenialReason.RATE_LIMITED
        assert third.retry_after == pytest.approx(1.0)
        assert third.credential_id == "k"
        assert third.burst_capacity == 2

    def test_refill_is_lazy_and_capped(self, usage_plan):
        """Test tokens refill with elapsed time up to the burst size."""
        state = UsageState.fresh(plan=usage_plan, now=NOW)
        state, _ = state.admit(plan=usage_plan, now=NOW)
        state, _ = state.admit(plan=usage_plan, now=NOW)

        state, decision = state.admit(plan=usage_plan, now=NOW + 0.5)
        assert decision.allowed is False
        assert decision.retry_after == pytest.approx(0.5)

        state, decision = state.admit(plan=usage_plan, now=NOW + 100)
        assert decision.allowed is True
        assert decision.remaining_tokens == 1

    def test_one_interval_admits_exactly_one_more(self):
        """Test waiting exactly 1/rate after draining the bucket buys one request."""
        plan = UsagePlan(
            name="steady",
            throttle=ThrottleSettings(burst_capacity=3, rate_per_second=4.0),
            quota=QuotaSettings(limit=100),
        )
        state = UsageState.fresh(plan=plan, now=NOW)
        drained = []
        for _ in range(3):
            state, decision = state.admit(plan=plan, now=NOW)
            drained.append(decision.allowed)
        state, over_burst = state.admit(plan=plan, now=NOW)

        later = NOW + 1 / plan.throttle.rate_per_second
        state, refilled = state.admit(plan=plan, now=later)
        state, after = state.admit(plan=plan, now=later)

        assert drained == [True, True, True]
        assert over_burst.reason == DenialReason.RATE_LIMITED
        assert refilled.allowed is True
        assert refilled.remaining_tokens == 0
        assert after.allowed is False
        assert after.reason == DenialReason.RATE_LIMITED

    def test_clock_going_backwards_does_not_add_tokens(self, usage_plan):
        """Test negative elapsed time is treated as zero."""
        state = UsageState(tokens=0.0, last_refill=NOW, quota_used=0, period_start=ts(2024, 6, 1))

        _, decision = state.admit(plan=usage_plan, now=NOW - 10)

        assert decision.allowed is False


@pytest.mark.unit
class TestQuota:
    """Test quota behaviour of UsageState.admit."""

    def test_throttled_requests_count_against_quota(self, usage_plan):
        """Test a rate-limited request still consumes quota."""
        state = UsageState(tokens=0.0, last_refill=NOW, quota_used=0, period_start=ts(2024, 6, 1))

        state, decision = state.admit(plan=usage_plan, now=NOW)

        assert decision.reason == DenialReason.RATE_LIMITED
        assert state.quota_used == 1
        assert decision.quota_remaining == 4

    def test_quota_exhausted_is_not_counted(self, usage_plan):
        """Test QUOTA_EXCEEDED leaves the counter unchanged."""
        state = UsageState(tokens=2.0, last_refill=NOW, quota_used=5, period_start=ts(2024, 6, 1))

        next_state, decision = state.admit(plan=usage_plan, now=NOW)

        assert decision.allowed is False
        assert decision.reason == DenialReason.QUOTA_EXCEEDED
        assert decision.quota_remaining == 0
        assert next_state.quota_used == 5

    def test_quota_takes_precedence_over_throttle(self, usage_plan):
        """Test an exhausted quota is reported even with an empty bucket."""
        state = UsageState(tokens=0.0, last_refill=NOW, quota_used=5, period_start=ts(2024, 6, 1))

        _, decision = state.admit(plan=usage_plan, now=NOW)

        assert decision.reason == DenialReason.QUOTA_EXCEEDED

    def test_period_rollover_resets_quota(self, usage_plan):
        """Test the first request of a new month starts a new count."""
        state = UsageState(tokens=2.0, last_refill=NOW, quota_used=5, period_start=ts(2024, 6, 1))

        next_state, decision = state.admit(plan=usage_plan, now=ts(2024, 7, 1, 0, 0, 1))

        assert decision.allowed is True
        assert next_state.quota_used == 1
        assert next_state.period_start == ts(2024, 7, 1)


@pytest.mark.unit
class TestPeriods:
    """Test calendar-aligned period arithmetic (UTC)."""

    def test_month_boundaries(self):
        """Test month start and the next month start."""
        assert current_period_start(QuotaPeriod.MONTH, NOW) == ts(2024, 6, 1)
        assert next_period_start(QuotaPeriod.MONTH, NOW) == ts(2024, 7, 1)

    def test_december_rolls_into_next_year(self):
        """Test the period after December is January."""
        assert next_period_start(QuotaPeriod.MONTH, ts(2024, 12, 31, 23, 59)) == ts(2025, 1, 1)

    def test_day_boundaries(self):
        """Test day periods start at midnight UTC."""
        assert current_period_start(QuotaPeriod.DAY, NOW) == ts(2024, 6, 15)
        assert next_period_start(QuotaPeriod.DAY, NOW) == ts(2024, 6, 16)
