"""Client error type.

Bad route, method or parameters. Surfaced verbatim, never retried.
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ClientError(DomainError):
    """Caller-side request problem.

    Attributes:
        status_code: HTTP status to return (400, 404 or 405).
        parameter: Offending parameter name, when applicable.
    """

    status_code: int = 400
    parameter: str | None = None
