"""Usage storage protocol (port) for per-credential throttle/quota state.

Storages own the UsageState of every credential and apply
``UsageState.admit`` as ONE atomic check-and-update per credential, so two
concurrent requests on the same key can never both spend the last token or
the last quota unit. Unrelated credentials must not contend.

Implementations:
    - InMemoryUsageStorage: per-credential asyncio.Lock (single process)
    - RedisUsageStorage: atomic Lua script (shared across processes)
"""

from typing import Protocol

from src.core.result import Result
from src.domain.errors import AccessError
from src.domain.value_objects.access_decision import AccessDecision
from src.domain.value_objects.usage_plan import UsagePlan


class UsageStorageProtocol(Protocol):
    """Atomic admission against stored usage state."""

    async def admit(
        self,
        *,
        credential_id: str,
        plan: UsagePlan,
        now: float,
    ) -> Result[AccessDecision, AccessError]:
        """Refill, check quota, check throttle and record the outcome.

        Args:
            credential_id: Key id whose state is updated.
            plan: Plan governing that key.
            now: Current epoch seconds.

        Returns:
            Result[AccessDecision, AccessError]: The decision, or a storage
            failure.
        """
        ...

    async def reset(self, *, credential_id: str) -> Result[None, AccessError]:
        """Forget stored state (bucket full, quota zero on next admission)."""
        ...
