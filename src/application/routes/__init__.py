"""Route definitions, registry and built-in catalog."""

from src.application.routes.catalog import SHARE_ROUTE_NAME, build_catalog, build_share_route
from src.application.routes.definition import (
    HTML_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    RESULT_BINDING,
    RouteDefinition,
    RouteParameter,
)
from src.application.routes.registry import (
    CompiledRoute,
    ResolvedRoute,
    RouteConfigurationError,
    RouteRegistry,
)

__all__ = [
    "HTML_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "RESULT_BINDING",
    "SHARE_ROUTE_NAME",
    "CompiledRoute",
    "ResolvedRoute",
    "RouteConfigurationError",
    "RouteDefinition",
    "RouteParameter",
    "RouteRegistry",
    "build_catalog",
    "build_share_route",
]
