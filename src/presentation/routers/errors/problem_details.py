"""RFC 9457 Problem Details for HTTP APIs.

Pydantic models for structured error responses, plus the status-code table
shared by the error response builder and the exception handlers.

Exports:
    ErrorDetail: Individual parameter-specific error
    ProblemDetails: RFC 9457 compliant error response schema
    PROBLEM_MEDIA_TYPE: ``application/problem+json``
    status_title / status_slug: Title and type-URI slug per status code
"""

from pydantic import BaseModel, Field

PROBLEM_MEDIA_TYPE = "application/problem+json"

# HTTP status code to (title, slug) mapping
_HTTP_STATUS_INFO: dict[int, tuple[str, str]] = {
    400: ("Bad Request", "bad-request"),
    401: ("Authentication Required", "unauthorized"),
    403: ("Access Denied", "forbidden"),
    404: ("Resource Not Found", "not-found"),
    405: ("Method Not Allowed", "method-not-allowed"),
    422: ("Validation Failed", "validation-failed"),
    429: ("Too Many Requests", "rate-limit-exceeded"),
    500: ("Internal Server Error", "internal-server-error"),
    502: ("Bad Gateway", "bad-gateway"),
    503: ("Service Unavailable", "service-unavailable"),
    504: ("Gateway Timeout", "gateway-timeout"),
}


def status_title(status_code: int) -> str:
    """Human-readable title for an HTTP status code."""
    return _HTTP_STATUS_INFO.get(status_code, ("Error", "error"))[0]


def status_slug(status_code: int) -> str:
    """Kebab-case slug for the RFC 9457 type URL."""
    return _HTTP_STATUS_INFO.get(status_code, ("Error", "error"))[1]


class ErrorDetail(BaseModel):
    """Individual parameter-specific error.

    Attributes:
        field: Name of the offending parameter
        code: Machine-readable error code
        message: Human-readable error message
    """

    field: str = Field(..., description="Parameter name")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 9457 Problem Details for HTTP APIs.

    Attributes:
        type: URI reference identifying the problem type
        title: Short, human-readable summary of the problem type
        status: HTTP status code for this occurrence
        detail: Human-readable explanation specific to this occurrence
        instance: URI reference identifying the specific occurrence
        errors: Optional list of parameter-specific errors
        trace_id: Optional request trace ID for debugging

    Examples:
        >>> problem = ProblemDetails(
        ...     type="http://localhost:8000/errors/parameter_missing",
        ...     title="Bad Request",
        ...     status=400,
        ...     detail="Missing required query parameter 'id'",
        ...     instance="/Item",
        ...     errors=[
        ...         ErrorDetail(
        ...             field="id",
        ...             code="parameter_missing",
        ...             message="Missing required query parameter 'id'",
        ...         )
        ...     ],
        ... )
    """

    type: str = Field(
        ...,
        description="URI reference identifying the problem type",
        examples=["http://localhost:8000/errors/store_item_not_found"],
    )
    title: str = Field(
        ...,
        description="Short, human-readable summary",
        examples=["Resource Not Found"],
    )
    status: int = Field(
        ...,
        description="HTTP status code",
        examples=[404],
    )
    detail: str = Field(
        ...,
        description="Human-readable explanation",
        examples=["No item with id '001-001-999'"],
    )
    instance: str = Field(
        ...,
        description="URI reference identifying this occurrence",
        examples=["/Item"],
    )
    errors: list[ErrorDetail] | None = Field(
        None,
        description="List of parameter-specific errors",
    )
    trace_id: str | None = Field(
        None,
        description="Request trace ID for debugging",
    )
