"""Per-credential usage state and the admission rule.

The state combines the token bucket (``tokens``, ``last_refill``) and the quota
counter (``quota_used``, ``period_start``). ``admit`` is a pure function of the
state, the plan and the current time; storages apply it atomically per
credential.

Admission order:
    1. Period rollover resets ``quota_used``.
    2. Lazy refill: tokens = min(burst, tokens + elapsed * rate).
    3. Quota exhausted -> QUOTA_EXCEEDED (no increment).
    4. Quota incremented (a throttled request still counts).
    5. tokens >= 1 -> consume and allow, else RATE_LIMITED.
"""

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta

from src.domain.enums import DenialReason, QuotaPeriod
from src.domain.value_objects.access_decision import AccessDecision
from src.domain.value_objects.usage_plan import UsagePlan

# Tolerates float drift when elapsed * rate lands just under a whole token.
_TOKEN_EPSILON = 1e-9


def current_period_start(period: QuotaPeriod, now: float) -> float:
    """Start of the quota period containing ``now`` (UTC, epoch seconds).

    Args:
        period: Quota period.
        now: Epoch seconds.

    Returns:
        float: Epoch seconds of the period start.
    """
    moment = datetime.fromtimestamp(now, tz=UTC)
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == QuotaPeriod.MONTH:
        start = start.replace(day=1)
    return start.timestamp()


def next_period_start(period: QuotaPeriod, now: float) -> float:
    """Start of the quota period following the one containing ``now``."""
    start = datetime.fromtimestamp(current_period_start(period, now), tz=UTC)
    if period == QuotaPeriod.MONTH:
        if start.month == 12:
            return start.replace(year=start.year + 1, month=1).timestamp()
        return start.replace(month=start.month + 1).timestamp()
    return (start + timedelta(days=1)).timestamp()


@dataclass(frozen=True, slots=True, kw_only=True)
class UsageState:
    """Token bucket and quota counter of one credential.

    Attributes:
        tokens: Available tokens, within [0, burst_capacity].
        last_refill: Epoch seconds of the last refill computation.
        quota_used: Admissions counted in the current period.
        period_start: Epoch seconds at which the current period began.
    """

    tokens: float
    last_refill: float
    quota_used: int
    period_start: float

    @classmethod
    def fresh(cls, *, plan: UsagePlan, now: float) -> "UsageState":
        """Full bucket, empty quota, period containing ``now``."""
        return cls(
            tokens=float(plan.throttle.burst_capacity),
            last_refill=now,
            quota_used=0,
            period_start=current_period_start(plan.quota.period, now),
        )

    def admit(
        self, *, plan: UsagePlan, now: float, credential_id: str | None = None
    ) -> tuple["UsageState", AccessDecision]:
        """Apply one admission attempt.

        Args:
            plan: Usage plan of the credential.
            now: Epoch seconds.
            credential_id: Included in the decision for logging.

        Returns:
            tuple[UsageState, AccessDecision]: Next state and the decision.
        """
        burst = plan.throttle.burst_capacity
        rate = plan.throttle.rate_per_second
        limit = plan.quota.limit

        quota_used = self.quota_used
        period_start = current_period_start(plan.quota.period, now)
        if period_start > self.period_start:
            quota_used = 0
        else:
            period_start = self.period_start

        elapsed = max(0.0, now - self.last_refill)
        tokens = min(float(burst), self.tokens + elapsed * rate)

        if quota_used >= limit:
            state = replace(
                self,
                tokens=tokens,
                last_refill=now,
                quota_used=quota_used,
                period_start=period_start,
            )
            return state, AccessDecision(
                allowed=False,
                reason=DenialReason.QUOTA_EXCEEDED,
                credential_id=credential_id,
                remaining_tokens=int(tokens + _TOKEN_EPSILON),
                burst_capacity=burst,
                quota_remaining=0,
            )

        quota_used += 1
        if tokens + _TOKEN_EPSILON >= 1.0:
            tokens = max(0.0, tokens - 1.0)
            decision = AccessDecision(
                allowed=True,
                credential_id=credential_id,
                remaining_tokens=int(tokens + _TOKEN_EPSILON),
                burst_capacity=burst,
                quota_remaining=limit - quota_used,
            )
        else:
            decision = AccessDecision(
                allowed=False,
                reason=DenialReason.RATE_LIMITED,
                credential_id=credential_id,
                retry_after=(1.0 - tokens) / rate,
                remaining_tokens=0,
                burst_capacity=burst,
                quota_remaining=limit - quota_used,
            )

        state = UsageState(
            tokens=tokens,
            last_refill=now,
            quota_used=quota_used,
            period_start=period_start,
        )
        return state, decision
