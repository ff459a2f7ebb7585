"""Sharing router: link-unfurl pages for shared items.

Serves ``GET /{id}`` on the sharing host. The page carries Open Graph and
Twitter card metadata for crawlers and redirects browsers to the viewer.
``OPTIONS /{id}`` answers CORS preflight; no API key header is offered
since callers never send one.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from src.application.services import UnfurlRenderer
from src.core.config import settings
from src.core.container import get_unfurl_renderer
from src.presentation.routers.errors import to_response
from src.presentation.routers.facade import DEFAULT_CORS_HEADERS, preflight_headers

sharing_router = APIRouter(tags=["Sharing"])


@sharing_router.get(
    "/{item_id}",
    summary="Unfurl page for a shared item",
    responses={
        200: {"description": "Share page", "content": {"text/html": {}}},
        404: {"description": "Item not found"},
        429: {"description": "Share key rate limit or quota exceeded"},
        502: {"description": "Item could not be rendered"},
    },
)
async def unfurl(
    item_id: str,
    request: Request,
    renderer: UnfurlRenderer = Depends(get_unfurl_renderer),
) -> Response:
    """Render the share page for ``item_id``."""
    result = await renderer.render(item_id)
    return to_response(result, request)


@sharing_router.options("/{item_id}", include_in_schema=False)
async def unfurl_preflight(item_id: str, request: Request) -> Response:
    """Answer a CORS preflight for a share page."""
    headers = preflight_headers(
        request.headers.get("origin"), settings.cors_origin_list, DEFAULT_CORS_HEADERS
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=headers)
