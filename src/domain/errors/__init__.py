"""Domain errors package.

Usage:
    from src.domain.errors import PlanningError, StoreTransientError
"""

from src.domain.errors.access_error import AccessError
from src.domain.errors.client_error import ClientError
from src.domain.errors.planning_error import PlanningError
from src.domain.errors.store_error import (
    ResponseShapeError,
    StoreError,
    StoreNotFoundError,
    StoreRequestError,
    StoreTransientError,
)
from src.domain.errors.template_error import TemplateError

__all__ = [
    "AccessError",
    "ClientError",
    "PlanningError",
    "ResponseShapeError",
    "StoreError",
    "StoreNotFoundError",
    "StoreRequestError",
    "StoreTransientError",
    "TemplateError",
]
