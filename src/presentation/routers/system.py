"""System router for non-facade application endpoints.

Provides root, health, and configuration endpoints that are not part of the
generated facade surface.

These endpoints are intentionally lightweight and side-effect free to
support health checks and basic diagnostics.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.container import get_route_registry


system_router = APIRouter(tags=["System"])


@system_router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - basic health/status check.

    Returns:
        dict[str, str]: Welcome message with API status and version.
    """
    return {
        "message": settings.app_name,
        "status": "operational",
        "version": settings.app_version,
    }


@system_router.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        dict[str, str]: Health status indicator.
    """
    return {"status": "healthy"}


@system_router.get("/config")
async def get_config() -> JSONResponse:
    """Configuration debug endpoint (development only).

    Returns:
        JSONResponse: Configuration details (sanitized) or 403 in
            non-development environments.
    """
    if not settings.is_development:
        return JSONResponse(
            status_code=403,
            content={"detail": "Config endpoint only available in development"},
        )

    return JSONResponse(
        content={
            "environment": settings.environment.value,
            "debug": settings.debug,
            "api": {
                "name": settings.app_name,
                "version": settings.app_version,
                "base_url": settings.api_base_url,
            },
            "store": {
                "backend": settings.store_backend,
                "table": settings.table_name,
                "feed_index": settings.feed_index_name,
                "timeout_seconds": settings.store_timeout_seconds,
            },
            "usage_plan": {
                "backend": settings.usage_backend,
                "burst_limit": settings.throttle_burst_limit,
                "rate_limit": settings.throttle_rate_limit,
                "monthly_limit": settings.monthly_request_limit,
                "keys_provisioned": len(settings.api_key_pairs),
            },
            "routes": [route.path_template for route in get_route_registry().routes],
            "cors": {
                "origins": settings.cors_origins,
            },
        }
    )
