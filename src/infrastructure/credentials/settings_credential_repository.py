"""Credential repository backed by configuration.

API keys are provisioned out of band as ``id:key`` pairs (``API_KEYS``).
Only the SHA-256 hash of each raw key is retained; lookups hash the
presented key and compare digests. Every key shares one usage plan.
"""

from collections.abc import Iterable

from src.domain.entities import Credential, hash_api_key
from src.domain.value_objects import UsagePlan


class SettingsCredentialRepository:
    """In-memory credential table built at startup.

    Args:
        key_pairs: ``(key_id, raw_key)`` pairs.
        plan: Usage plan applied to every key.
        disabled_ids: Key ids that are provisioned but refused.

    Raises:
        ValueError: On duplicate key ids or duplicate raw keys.
    """

    def __init__(
        self,
        key_pairs: Iterable[tuple[str, str]],
        plan: UsagePlan,
        disabled_ids: Iterable[str] = (),
    ) -> None:
        disabled = set(disabled_ids)
        self._by_hash: dict[str, Credential] = {}
        self._by_id: dict[str, Credential] = {}
        for key_id, raw_key in key_pairs:
            credential = Credential(
                id=key_id,
                key_hash=hash_api_key(raw_key),
                plan=plan,
                enabled=key_id not in disabled,
            )
            if key_id in self._by_id:
                raise ValueError(f"Duplicate API key id {key_id!r}")
            if credential.key_hash in self._by_hash:
                raise ValueError(f"API key {key_id!r} duplicates another key")
            self._by_id[key_id] = credential
            self._by_hash[credential.key_hash] = credential

    def find_by_key(self, raw_key: str) -> Credential | None:
        credential = self._by_hash.get(hash_api_key(raw_key))
        if credential is None or not credential.enabled:
            return None
        return credential

    def find_by_id(self, credential_id: str) -> Credential | None:
        return self._by_id.get(credential_id)

    def __len__(self) -> int:
        return len(self._by_id)
