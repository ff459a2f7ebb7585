"""RFC 9457 error responses."""

from src.presentation.routers.errors.error_response_builder import (
    ErrorResponseBuilder,
    to_response,
)
from src.presentation.routers.errors.exception_handlers import register_exception_handlers
from src.presentation.routers.errors.problem_details import (
    PROBLEM_MEDIA_TYPE,
    ErrorDetail,
    ProblemDetails,
)

__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "ErrorDetail",
    "ErrorResponseBuilder",
    "ProblemDetails",
    "register_exception_handlers",
    "to_response",
]
