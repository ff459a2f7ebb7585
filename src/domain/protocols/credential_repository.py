"""Credential repository protocol (port).

Credentials are provisioned out of band; the core only looks them up.
"""

from typing import Protocol

from src.domain.entities.credential import Credential


class CredentialRepository(Protocol):
    """Read-only lookup of provisioned credentials."""

    def find_by_key(self, raw_key: str) -> Credential | None:
        """Return the enabled credential for a raw API key, or None."""
        ...

    def find_by_id(self, credential_id: str) -> Credential | None:
        """Return the credential with the given key id, or None."""
        ...
