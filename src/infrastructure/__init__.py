"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- store/: In-memory and DynamoDB (boto3) stores
- usage/: In-memory and Redis usage state storage
- credentials/: API keys provisioned from settings
- logging/: structlog console adapter

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
