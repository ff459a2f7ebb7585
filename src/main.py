"""
Main FastAPI application entry point: the API facade.

Routes are generated from the route registry at import time; the lifespan
hook only logs what was mounted so a misconfigured deployment is visible in
the first log line.

Run:
    uvicorn src.main:app
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI

from src.core.config import settings
from src.core.container import get_credential_repository, get_logger, get_route_registry
from src.presentation.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers.errors import register_exception_handlers
from src.presentation.routers.facade import register_routes_from_registry
from src.presentation.routers.system import system_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    logger = get_logger()
    logger.info(
        "facade_started",
        environment=settings.environment.value,
        routes=[route.path_template for route in get_route_registry().routes],
        store_backend=settings.store_backend,
        usage_backend=settings.usage_backend,
        credentials=len(get_credential_repository()),
    )

    yield

    logger.info("facade_stopped")


def create_app() -> FastAPI:
    """Build the facade application."""
    app = FastAPI(
        title=settings.app_name,
        description="Read-only HTTP facade over a key-value document store",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Wire trace middleware (request correlation)
    app.add_middleware(TraceMiddleware)

    # Register global exception handlers (RFC 9457 error responses)
    register_exception_handlers(app)

    # System endpoints first: the facade router ends with a catch-all
    app.include_router(system_router)

    facade_router = APIRouter()
    register_routes_from_registry(facade_router, get_route_registry())
    app.include_router(facade_router)
    return app


app = create_app()
