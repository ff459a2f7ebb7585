"""Application DTOs."""

from src.application.dtos.http_response import HttpResponse

__all__ = ["HttpResponse"]
