"""API tests package.

Tests the request/response cycle through TestClient:
- Generated routes and the catch-all
- x-api-key handling
- RFC 9457 problem details and status codes

Note:
    The gateway dependency is overridden with one built over the seeded
    in-memory store, so no backend configuration is needed.
"""
