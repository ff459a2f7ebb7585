"""Container module - Centralized dependency injection.

Re-exports all factory functions so callers import from one place:

    from src.core.container import get_facade_gateway, get_logger

- infrastructure: Adapters (logging, store, usage storage, credentials)
- facade: Request pipeline (registry, planner, governor, gateway, unfurl)
"""

from src.core.container.infrastructure import (
    get_credential_repository,
    get_logger,
    get_store,
    get_table_schema,
    get_usage_plan,
    get_usage_storage,
)
from src.core.container.facade import (
    get_access_governor,
    get_facade_gateway,
    get_planner,
    get_route_registry,
    get_share_registry,
    get_unfurl_renderer,
)

__all__ = [
    "get_access_governor",
    "get_credential_repository",
    "get_facade_gateway",
    "get_logger",
    "get_planner",
    "get_route_registry",
    "get_share_registry",
    "get_store",
    "get_table_schema",
    "get_unfurl_renderer",
    "get_usage_plan",
    "get_usage_storage",
]
