"""Error response builder for RFC 9457 Problem Details.

Converts the gateway's HttpResponse (status + domain error) into a problem
details JSON response. Status codes are decided by the gateway; this module
only shapes the body.

Exports:
    ErrorResponseBuilder: Utility class for building RFC 9457 responses
    to_response: HttpResponse -> Starlette Response
"""

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from src.application.dtos import HttpResponse
from src.core.config import settings
from src.core.errors import DomainError
from src.presentation.api.middleware.trace_middleware import get_trace_id
from src.presentation.routers.errors.problem_details import (
    PROBLEM_MEDIA_TYPE,
    ErrorDetail,
    ProblemDetails,
    status_title,
)


class ErrorResponseBuilder:
    """Build RFC 9457 Problem Details error responses.

    Example:
        >>> response = ErrorResponseBuilder.from_domain_error(
        ...     error=ClientError(code=ErrorCode.PARAMETER_MISSING, message="...", parameter="id"),
        ...     status_code=400,
        ...     request=request,
        ...     trace_id="550e8400-e29b-41d4-a716-446655440000",
        ... )
    """

    @staticmethod
    def from_domain_error(
        error: DomainError,
        status_code: int,
        request: Request,
        trace_id: str | None,
        headers: dict[str, str] | None = None,
    ) -> JSONResponse:
        """Convert a DomainError to an RFC 9457 JSON response.

        Args:
            error: Error carried by the gateway response
            status_code: HTTP status decided by the gateway
            request: FastAPI Request object (for instance URL)
            trace_id: Request trace ID for debugging
            headers: Extra headers (CORS, rate limit, Retry-After)

        Returns:
            JSONResponse with RFC 9457 ProblemDetails content
        """
        problem = ProblemDetails(
            type=f"{settings.api_base_url}/errors/{error.code.value}",
            title=status_title(status_code),
            status=status_code,
            detail=error.message,
            instance=str(request.url.path),
            errors=None,
            trace_id=trace_id,
        )

        parameter = getattr(error, "parameter", None)
        if parameter:
            problem.errors = [
                ErrorDetail(field=parameter, code=error.code.value, message=error.message)
            ]

        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(exclude_none=True),
            headers=headers,
            media_type=PROBLEM_MEDIA_TYPE,
        )


def to_response(result: HttpResponse, request: Request) -> Response:
    """Render a gateway HttpResponse for Starlette."""
    if result.error is not None:
        return ErrorResponseBuilder.from_domain_error(
            error=result.error,
            status_code=result.status_code,
            request=request,
            trace_id=get_trace_id(),
            headers=result.headers,
        )
    return Response(
        content=result.body or "",
        status_code=result.status_code,
        media_type=result.media_type,
        headers=result.headers,
    )
