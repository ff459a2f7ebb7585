"""Application services: access governor, facade gateway, unfurl renderer."""

from src.application.services.access_governor import AccessGovernor
from src.application.services.facade_gateway import FacadeGateway, negotiate
from src.application.services.unfurl_renderer import UnfurlRenderer, load_share_template

__all__ = [
    "AccessGovernor",
    "FacadeGateway",
    "UnfurlRenderer",
    "load_share_template",
    "negotiate",
]
