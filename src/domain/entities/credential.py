"""Credential entity (API key bound to a usage plan).

Credentials are provisioned out of band. Only the SHA-256 hash of the raw key
is held; the raw key is hashed on every lookup and never kept or logged.
"""

import hashlib
from dataclasses import dataclass

from src.domain.value_objects.usage_plan import UsagePlan


def hash_api_key(raw_key: str) -> str:
    """Return the SHA-256 hex digest used to look up a raw API key."""
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True, kw_only=True)
class Credential:
    """An API key and the plan that governs it.

    Attributes:
        id: Opaque key id (safe to log, e.g. "PublicAccess").
        key_hash: SHA-256 hex digest of the raw key.
        plan: Throttle and quota applied to this key.
        enabled: Disabled keys are treated as unknown.
    """

    id: str
    key_hash: str
    plan: UsagePlan
    enabled: bool = True
