"""Test suite for the facade.

Test structure:
- unit/: Unit tests - components in isolation, in-memory store and usage storage
- api/: API tests - HTTP requests through FastAPI TestClient

No external services are needed: Redis and DynamoDB are mocked.
"""
