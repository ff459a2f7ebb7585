"""Facade response DTO.

Carries the gateway's outcome back to the presentation layer, which turns a
successful body into a plain response and an ``error`` into RFC 9457 problem
details JSON.

DTOs:
    - HttpResponse: Status, body or error, and headers
"""

from dataclasses import dataclass, field

from src.core.errors import DomainError


@dataclass
class HttpResponse:
    """Result of handling one facade request.

    Attributes:
        status_code: HTTP status.
        body: Rendered body (success only).
        media_type: Content type of ``body``.
        headers: Extra headers (CORS, rate limit, Retry-After).
        error: Error to render as problem details (non-2xx only).
    """

    status_code: int
    body: str | None = None
    media_type: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    error: DomainError | None = None

    @property
    def is_success(self) -> bool:
        return self.error is None and 200 <= self.status_code < 300

    @classmethod
    def failure(
        cls,
        status_code: int,
        error: DomainError,
        headers: dict[str, str] | None = None,
    ) -> "HttpResponse":
        """Error response (body rendered later as problem details)."""
        return cls(status_code=status_code, error=error, headers=dict(headers or {}))
