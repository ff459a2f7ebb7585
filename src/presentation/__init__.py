"""Presentation layer - FastAPI routers and HTTP concerns.

This layer is thin: generated facade routes hand each request to the
FacadeGateway and translate its HttpResponse to HTTP, rendering errors as
RFC 9457 problem details.

Structure:
- routers/facade/: Routes generated from the route registry
- routers/sharing.py: Unfurl page route (sharing app)
- routers/system.py: Root, health and config endpoints
- routers/errors/: Problem details and exception handlers
- api/middleware/: Request tracing
"""
