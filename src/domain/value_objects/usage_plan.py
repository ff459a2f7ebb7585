"""Usage plan value objects (throttle + quota per API key).

Usage:
    plan = UsagePlan(
        name="default",
        throttle=ThrottleSettings(burst_capacity=20, rate_per_second=10.0),
        quota=QuotaSettings(limit=100_000, period=QuotaPeriod.MONTH),
    )
"""

from dataclasses import dataclass

from src.domain.enums import QuotaPeriod


@dataclass(frozen=True, slots=True, kw_only=True)
class ThrottleSettings:
    """Token bucket parameters.

    Attributes:
        burst_capacity: Maximum tokens in the bucket.
        rate_per_second: Tokens added per second (sustained rate).

    Raises:
        ValueError: If either value is not positive.
    """

    burst_capacity: int
    rate_per_second: float

    def __post_init__(self) -> None:
        if self.burst_capacity <= 0:
            raise ValueError(
                f"burst_capacity must be positive, got {self.burst_capacity}"
            )
        if self.rate_per_second <= 0:
            raise ValueError(
                f"rate_per_second must be positive, got {self.rate_per_second}"
            )

    @property
    def seconds_per_token(self) -> float:
        """Seconds between two refilled tokens."""
        return 1.0 / self.rate_per_second

    @property
    def ttl_seconds(self) -> int:
        """Seconds for an empty bucket to refill completely, plus a buffer."""
        return int(self.burst_capacity / self.rate_per_second) + 60


@dataclass(frozen=True, slots=True, kw_only=True)
class QuotaSettings:
    """Request budget per period.

    Raises:
        ValueError: If the limit is not positive.
    """

    limit: int
    period: QuotaPeriod = QuotaPeriod.MONTH

    def __post_init__(self) -> None:
        if self.limit <= 0:
            raise ValueError(f"quota limit must be positive, got {self.limit}")


@dataclass(frozen=True, slots=True, kw_only=True)
class UsagePlan:
    """Pairing of throttle and quota applied to a set of API keys."""

    name: str
    throttle: ThrottleSettings
    quota: QuotaSettings
