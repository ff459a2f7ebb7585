"""In-process usage storage.

Holds UsageState per credential in a dict. Each credential has its own
asyncio.Lock so admission is one atomic step per key while unrelated keys
never contend. State is lost on restart and not shared between processes;
use RedisUsageStorage when running more than one worker.
"""

import asyncio
from collections import defaultdict

from src.core.result import Result, Success
from src.domain.errors import AccessError
from src.domain.value_objects import AccessDecision, UsagePlan, UsageState


class InMemoryUsageStorage:
    """Dict-backed usage storage (single process)."""

    def __init__(self) -> None:
        self._states: dict[str, UsageState] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def admit(
        self,
        *,
        credential_id: str,
        plan: UsagePlan,
        now: float,
    ) -> Result[AccessDecision, AccessError]:
        async with self._locks[credential_id]:
            state = self._states.get(credential_id) or UsageState.fresh(plan=plan, now=now)
            state, decision = state.admit(plan=plan, now=now, credential_id=credential_id)
            self._states[credential_id] = state
        return Success(value=decision)

    async def reset(self, *, credential_id: str) -> Result[None, AccessError]:
        async with self._locks[credential_id]:
            self._states.pop(credential_id, None)
        return Success(value=None)

    def state_of(self, credential_id: str) -> UsageState | None:
        """Current stored state (inspection/testing)."""
        return self._states.get(credential_id)
