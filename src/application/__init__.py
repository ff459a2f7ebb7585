"""Application layer - request pipeline and its building blocks.

Structure:
- templating/: VTL-flavoured template engine (request and response programs)
- planning/: Rendered request -> validated store operation descriptor
- routes/: Route definitions, registry and built-in catalog
- services/: Access governor, facade gateway, unfurl renderer
- dtos/: HttpResponse handed to the presentation layer

The application layer orchestrates domain logic; adapters live in
infrastructure and are injected through the container.
"""
