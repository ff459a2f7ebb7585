"""Global exception handlers for both FastAPI applications.

The gateway reports pipeline errors as data, so exceptions only reach these
handlers from Starlette's own routing (unknown OPTIONS paths, for example),
FastAPI request validation, or a genuine bug.

Handlers:
    http_exception_handler: Starlette HTTPException -> problem details
    validation_exception_handler: RequestValidationError -> 422 with field errors
    generic_exception_handler: Anything else -> logged 500

Exports:
    register_exception_handlers: Register all exception handlers with an app
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.config import settings
from src.core.container import get_logger
from src.presentation.api.middleware.trace_middleware import get_trace_id
from src.presentation.routers.errors.problem_details import (
    PROBLEM_MEDIA_TYPE,
    ErrorDetail,
    ProblemDetails,
    status_slug,
    status_title,
)

# Request locations FastAPI prefixes onto validation error locs.
_LOCATIONS = frozenset({"body", "query", "path", "header"})


def _problem_response(
    request: Request,
    status_code: int,
    detail: str,
    *,
    errors: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    problem = ProblemDetails(
        type=f"{settings.api_base_url}/errors/{status_slug(status_code)}",
        title=status_title(status_code),
        status=status_code,
        detail=detail,
        instance=str(request.url.path),
        errors=errors,
        trace_id=get_trace_id(),
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
        headers=headers,
        media_type=PROBLEM_MEDIA_TYPE,
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Reshape HTTPException, keeping its headers (e.g. Allow)."""
    assert isinstance(exc, StarletteHTTPException)
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _problem_response(
        request, exc.status_code, detail, headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report each failed field of a RequestValidationError.

    Args:
        request: FastAPI Request object.
        exc: RequestValidationError from Pydantic validation.

    Returns:
        JSONResponse: 422 problem details with one ``errors`` entry per field.
    """
    assert isinstance(exc, RequestValidationError)

    field_errors = []
    for error in exc.errors():
        # ("query", "limit") -> "limit"
        parts = [str(part) for part in error.get("loc", ()) if part not in _LOCATIONS]
        field_errors.append(
            ErrorDetail(
                field=".".join(parts) or "unknown",
                code=error.get("type", "validation_error"),
                message=error.get("msg", "Validation failed"),
            )
        )

    return _problem_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Request validation failed. Check 'errors' for details.",
        errors=field_errors or None,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected exception and answer 500 without internals."""
    get_logger().error(
        "unhandled_exception",
        error=exc,
        request_path=request.url.path,
        request_method=request.method,
    )
    return _problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please contact support with the trace ID.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with a FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
