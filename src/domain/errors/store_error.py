"""Store error types for the store protocol contract.

Store adapters return these from ``execute``; the gateway maps each type to
one HTTP status.

Hierarchy:
    StoreError
    ├── StoreTransientError   (502 throttled / 504 timeout, caller may retry)
    ├── StoreNotFoundError    (404, point lookups only)
    ├── StoreRequestError     (500, store rejected the request as malformed)
    └── ResponseShapeError    (502, result does not fit the response template)

Usage:
    from src.domain.errors import StoreTransientError
    from src.core.enums import ErrorCode

    return Failure(error=StoreTransientError(
        code=ErrorCode.STORE_THROTTLED,
        message="Provisioned throughput exceeded",
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class StoreError(DomainError):
    """Base store failure."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class StoreTransientError(StoreError):
    """Timeout, throttling or transport failure.

    Safe for the caller to retry with backoff; the facade itself never
    retries within one request.

    Attributes:
        is_timeout: True when the store call exceeded its time budget.
    """

    is_timeout: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class StoreNotFoundError(StoreError):
    """Point lookup matched no item."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class StoreRequestError(StoreError):
    """Store rejected the request (validation error, unknown table)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class ResponseShapeError(StoreError):
    """Store result does not have the shape the response template reads."""

    pass
