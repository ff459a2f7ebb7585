"""Access governor error type.

Note that a denied admission (401/429) is NOT an error; it is a successful
check returning ``AccessDecision(allowed=False)``. This error is for failures
of the governor's own storage (Redis unreachable, script errors). The governor
fails open on them, so callers rarely see one.
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessError(DomainError):
    """Usage-state storage failure."""

    pass  # Inherits all fields from DomainError
