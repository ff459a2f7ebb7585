"""Facade routes generated from the route registry."""

from src.presentation.routers.facade.generator import (
    API_KEY_HEADER,
    DEFAULT_CORS_HEADERS,
    preflight_headers,
    register_routes_from_registry,
)

__all__ = [
    "API_KEY_HEADER",
    "DEFAULT_CORS_HEADERS",
    "preflight_headers",
    "register_routes_from_registry",
]
