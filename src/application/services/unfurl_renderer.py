"""Unfurl renderer: social-preview HTML for one item.

Runs ``GET /{id}`` through a gateway whose registry holds the ``Share``
route (see ``build_share_route``), presenting the configured public key so
unfurls count against that key's plan. The route's HTML response template
is ``templates/share.html.tmpl``. Lookup failures pass through with their
status; a result the page cannot be built from is a 502.

Usage:
    renderer = UnfurlRenderer(gateway=share_gateway, api_key=key, logger=logger)
    response = await renderer.render("001-001-001")
"""

from importlib import resources
from urllib.parse import quote

from src.domain.protocols import LoggerProtocol
from src.application.dtos import HttpResponse
from src.application.routes import HTML_CONTENT_TYPE
from src.application.services.facade_gateway import FacadeGateway

# Headers of the inner lookup that still mean something to the unfurl caller.
_FORWARDED_HEADERS = ("Retry-After",)


def load_share_template() -> str:
    """Read the packaged unfurl page template."""
    return (
        resources.files("src.application.services")
        .joinpath("templates/share.html.tmpl")
        .read_text(encoding="utf-8")
    )


class UnfurlRenderer:
    """Builds the unfurl page for ``GET /{id}``.

    Dependencies (injected via constructor):
        - FacadeGateway: Gateway over the sharing registry
        - LoggerProtocol: Structured logging
    """

    def __init__(
        self,
        *,
        gateway: FacadeGateway,
        api_key: str | None,
        logger: LoggerProtocol,
    ) -> None:
        self._gateway = gateway
        self._api_key = api_key
        self._logger = logger

    async def render(self, item_id: str) -> HttpResponse:
        """Render the unfurl page for one item id.

        Args:
            item_id: Decoded item id from the request path.

        Returns:
            HttpResponse: ``text/html`` page, or the lookup's error status.
        """
        response = await self._gateway.handle(
            method="GET",
            path="/" + quote(item_id, safe=""),
            path_params={"id": item_id},
            credential_key=self._api_key,
            accept=HTML_CONTENT_TYPE,
        )
        headers = {k: v for k, v in response.headers.items() if k in _FORWARDED_HEADERS}
        if not response.is_success:
            assert response.error is not None
            self._logger.info(
                "unfurl_failed",
                item_id=item_id,
                status_code=response.status_code,
                error_code=response.error.code.value,
            )
            return HttpResponse.failure(response.status_code, response.error, headers)
        return HttpResponse(
            status_code=response.status_code,
            body=response.body,
            media_type=response.media_type,
            headers=headers,
        )
