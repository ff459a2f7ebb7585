"""Domain entities.

Pure business logic entities with no framework dependencies.
"""

from src.domain.entities.credential import Credential, hash_api_key

__all__ = ["Credential", "hash_api_key"]
