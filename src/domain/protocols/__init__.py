"""Domain protocols (ports).

Infrastructure adapters implement these; the application layer depends only
on the protocols.
"""

from src.domain.protocols.credential_repository import CredentialRepository
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.store_protocol import StoreProtocol
from src.domain.protocols.usage_storage_protocol import UsageStorageProtocol

__all__ = [
    "CredentialRepository",
    "LoggerProtocol",
    "StoreProtocol",
    "UsageStorageProtocol",
]
