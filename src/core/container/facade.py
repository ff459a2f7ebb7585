"""Facade dependency factories.

Application-scoped singletons for the request pipeline: route registries,
planner, access governor, gateway and unfurl renderer.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import settings
from src.core.container.infrastructure import (
    get_credential_repository,
    get_logger,
    get_store,
    get_table_schema,
    get_usage_storage,
)

if TYPE_CHECKING:
    from src.application.planning import StoreOperationPlanner
    from src.application.routes import RouteRegistry
    from src.application.services import AccessGovernor, FacadeGateway, UnfurlRenderer


@lru_cache()
def get_route_registry() -> "RouteRegistry":
    """Registry holding the built-in catalog, frozen.

    Raises:
        RouteConfigurationError: If a built-in route is invalid.
    """
    from src.application.routes import RouteRegistry, build_catalog

    registry = RouteRegistry()
    for route in build_catalog(get_table_schema(), feed_index=settings.feed_index_name):
        registry.register(route)
    registry.freeze()
    return registry


@lru_cache()
def get_planner() -> "StoreOperationPlanner":
    from src.application.planning import StoreOperationPlanner

    return StoreOperationPlanner(get_table_schema())


@lru_cache()
def get_access_governor() -> "AccessGovernor":
    from src.application.services import AccessGovernor

    return AccessGovernor(
        credentials=get_credential_repository(),
        storage=get_usage_storage(),
        logger=get_logger(),
    )


@lru_cache()
def get_facade_gateway() -> "FacadeGateway":
    """Gateway wired to the configured store and usage backends."""
    from src.application.services import FacadeGateway

    return FacadeGateway(
        registry=get_route_registry(),
        governor=get_access_governor(),
        planner=get_planner(),
        store=get_store(),
        logger=get_logger(),
        timeout_seconds=settings.store_timeout_seconds,
        cors_origins=settings.cors_origin_list,
    )


@lru_cache()
def get_share_registry() -> "RouteRegistry":
    """Registry holding only the Share route, frozen.

    Kept apart from the facade registry: ``/{id}`` would match every facade
    path.
    """
    from src.application.routes import RouteRegistry, build_share_route
    from src.application.services import load_share_template

    registry = RouteRegistry()
    registry.register(
        build_share_route(
            get_table_schema(),
            page_template=load_share_template(),
            viewer_base_url=settings.viewer_base_url,
            document=settings.share_document,
            language=settings.share_language,
            translation=settings.share_translation,
        )
    )
    registry.freeze()
    return registry


@lru_cache()
def get_unfurl_renderer() -> "UnfurlRenderer":
    """Unfurl renderer presenting SHARE_API_KEY to the Share route."""
    from src.application.services import FacadeGateway, UnfurlRenderer

    gateway = FacadeGateway(
        registry=get_share_registry(),
        governor=get_access_governor(),
        planner=get_planner(),
        store=get_store(),
        logger=get_logger(),
        timeout_seconds=settings.store_timeout_seconds,
        cors_origins=settings.cors_origin_list,
    )
    return UnfurlRenderer(gateway=gateway, api_key=settings.share_api_key, logger=get_logger())
