"""
Sharing (unfurl) application entry point.

A separate deployable serving ``GET /{id}`` link previews and their CORS
preflight. It shares the container with the facade: the Share route runs
in-process over the same store and access governor, and counts against the
SHARE_API_KEY usage plan.

Run:
    uvicorn src.sharing_main:app
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config import settings
from src.core.container import get_logger, get_unfurl_renderer
from src.presentation.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers.errors import register_exception_handlers
from src.presentation.routers.sharing import sharing_router
from src.presentation.routers.system import health


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Compile the share page up front and log startup."""
    get_unfurl_renderer()
    logger = get_logger()
    if not settings.share_api_key:
        logger.warning("share_api_key_missing")
    logger.info("sharing_started", viewer_base_url=settings.viewer_base_url)

    yield

    logger.info("sharing_stopped")


def create_app() -> FastAPI:
    """Build the sharing application."""
    app = FastAPI(
        title=f"{settings.app_name} Sharing",
        version=settings.app_version,
        docs_url=None,
        redoc_url=None,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.add_middleware(TraceMiddleware)
    register_exception_handlers(app)
    # Health before the /{item_id} route so it is not taken for an id
    app.add_api_route("/health", health, methods=["GET"], tags=["System"])
    app.include_router(sharing_router)
    return app


app = create_app()
