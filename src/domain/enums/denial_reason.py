"""Reasons the access governor refuses a request.

A denial is an expected steady-state outcome, not an error. The gateway maps
UNAUTHENTICATED to 401 and the two budget reasons to 429.
"""

from enum import Enum


class DenialReason(str, Enum):
    """Why a request was not admitted."""

    UNAUTHENTICATED = "unauthenticated"
    QUOTA_EXCEEDED = "quota_exceeded"
    RATE_LIMITED = "rate_limited"
