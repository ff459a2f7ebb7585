"""Store adapters (StoreProtocol implementations)."""

from src.infrastructure.store.dynamodb_store import DynamoDbStore
from src.infrastructure.store.in_memory_store import InMemoryStore

__all__ = ["DynamoDbStore", "InMemoryStore"]
