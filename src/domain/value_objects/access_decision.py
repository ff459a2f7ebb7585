"""Result of an admission check by the access governor.

A denied decision is a successful check; failures of the governor itself are
reported separately as AccessError.
"""

from dataclasses import dataclass

from src.domain.enums import DenialReason


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessDecision:
    """Admission outcome plus the metadata used for response headers.

    Attributes:
        allowed: Whether the request may proceed.
        reason: Why it was refused (None when allowed).
        credential_id: Id of the presenting key, when one was recognised.
        retry_after: Seconds until a token is available (RATE_LIMITED only).
        remaining_tokens: Whole tokens left after this request.
        burst_capacity: Bucket size, for X-RateLimit-Limit.
        quota_remaining: Requests left in the current quota period.
    """

    allowed: bool
    reason: DenialReason | None = None
    credential_id: str | None = None
    retry_after: float = 0.0
    remaining_tokens: int = 0
    burst_capacity: int = 0
    quota_remaining: int = 0

    @property
    def governed(self) -> bool:
        """True when a usage plan was applied (rate-limit headers apply)."""
        return self.burst_capacity > 0
