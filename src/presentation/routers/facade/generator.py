"""Route generator for the facade.

Turns every CompiledRoute in the RouteRegistry into FastAPI routes at
startup:

    GET     {path}   -> FacadeGateway.handle (the whole pipeline)
    OPTIONS {path}   -> CORS preflight, answered here without the pipeline

Parameters are not declared as FastAPI parameters (the gateway binds and
validates them so errors stay in one place); they are published to OpenAPI
through ``openapi_extra``. A final catch-all route hands every other path
and method to the gateway, whose registry answers 404/405.

Usage:
    router = APIRouter()
    register_routes_from_registry(router, get_route_registry())
"""

from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, Security, status
from fastapi.security import APIKeyHeader

from src.application.routes import CompiledRoute, RouteRegistry
from src.application.services import FacadeGateway
from src.core.config import settings
from src.core.container import get_facade_gateway
from src.presentation.routers.errors import to_response

API_KEY_HEADER = "x-api-key"

# API Gateway's default CORS headers.
DEFAULT_CORS_HEADERS = (
    "Content-Type",
    "X-Amz-Date",
    "Authorization",
    "X-Api-Key",
    "X-Amz-Security-Token",
    "X-Amz-User-Agent",
)
CORS_ALLOW_HEADERS = (*DEFAULT_CORS_HEADERS, API_KEY_HEADER)
CORS_ALLOW_METHODS = "OPTIONS,GET"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)

type Endpoint = Callable[..., Coroutine[Any, Any, Response]]


def preflight_headers(
    origin: str | None,
    allowed_origins: list[str],
    allow_headers: tuple[str, ...] = CORS_ALLOW_HEADERS,
) -> dict[str, str]:
    """CORS preflight headers for a request Origin (empty when not allowed)."""
    if "*" in allowed_origins:
        allow_origin = "*"
    elif origin and origin in allowed_origins:
        allow_origin = origin
    else:
        return {}
    headers = {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
        "Access-Control-Allow-Headers": ",".join(allow_headers),
    }
    if allow_origin != "*":
        headers["Vary"] = "Origin"
    return headers


def _build_get_endpoint(route: CompiledRoute) -> Endpoint:
    async def endpoint(
        request: Request,
        api_key: str | None = Security(api_key_header),
        gateway: FacadeGateway = Depends(get_facade_gateway),
    ) -> Response:
        result = await gateway.handle(
            method=request.method,
            path=request.url.path,
            query_params=dict(request.query_params),
            path_params=dict(request.path_params),
            credential_key=api_key,
            accept=request.headers.get("accept"),
            origin=request.headers.get("origin"),
        )
        return to_response(result, request)

    endpoint.__name__ = f"get_{route.name.lower()}"
    return endpoint


async def preflight(request: Request) -> Response:
    """Answer a CORS preflight for a facade path."""
    headers = preflight_headers(request.headers.get("origin"), settings.cors_origin_list)
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=headers)


async def unmatched(
    request: Request,
    api_key: str | None = Security(api_key_header),
    gateway: FacadeGateway = Depends(get_facade_gateway),
) -> Response:
    """Hand any unmatched path/method to the gateway (404 / 405)."""
    result = await gateway.handle(
        method=request.method,
        path=request.url.path,
        query_params=dict(request.query_params),
        credential_key=api_key,
        accept=request.headers.get("accept"),
        origin=request.headers.get("origin"),
    )
    return to_response(result, request)


def _openapi_parameters(route: CompiledRoute) -> list[dict[str, Any]]:
    parameters: list[dict[str, Any]] = []
    for param in route.definition.parameters:
        schema: dict[str, Any] = {"type": "string"}
        if param.pattern:
            schema["pattern"] = f"^{param.pattern}$"
        if param.default is not None:
            schema["default"] = param.default
        parameters.append(
            {
                "name": param.name,
                "in": param.source.value,
                "required": not param.optional,
                "description": param.description,
                "schema": schema,
            }
        )
    return parameters


def _build_responses(route: CompiledRoute) -> dict[int | str, dict[str, Any]]:
    responses: dict[int | str, dict[str, Any]] = {
        200: {
            "description": "Rendered store result",
            "content": {content_type: {} for content_type in route.response_templates},
        },
        400: {"description": "Missing or invalid parameter"},
        404: {"description": "Item not found"},
        500: {"description": "Route or template defect"},
        502: {"description": "Store throttled or result not renderable"},
        504: {"description": "Store timed out"},
    }
    if route.definition.requires_credential:
        responses[401] = {"description": "Missing or unknown API key"}
        responses[429] = {"description": "Rate limit or quota exceeded"}
    return responses


def register_routes_from_registry(
    router: APIRouter,
    registry: RouteRegistry,
    *,
    catch_all: bool = True,
) -> None:
    """Generate FastAPI routes from the route registry.

    Args:
        router: FastAPI APIRouter to register routes on
        registry: Frozen route registry
        catch_all: Also register the trailing catch-all route
    """
    for route in registry.routes:
        router.add_api_route(
            path=route.path_template,
            endpoint=_build_get_endpoint(route),
            methods=["GET"],
            tags=["Facade"],
            summary=route.definition.summary or route.name,
            operation_id=f"get{route.name}",
            responses=_build_responses(route),
            openapi_extra={"parameters": _openapi_parameters(route)},
        )
        router.add_api_route(
            path=route.path_template,
            endpoint=preflight,
            methods=["OPTIONS"],
            include_in_schema=False,
            name=f"preflight_{route.name.lower()}",
        )
    if catch_all:
        router.add_api_route(
            path="/{unmatched_path:path}",
            endpoint=unmatched,
            methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"],
            include_in_schema=False,
        )
