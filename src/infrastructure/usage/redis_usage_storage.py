"""Redis-backed usage storage using an atomic Lua script.

Usage state lives in one hash per credential (``usage:{credential_id}``).
The admit script performs rollover, refill, quota and token bucket in one
EVALSHA call, so concurrent requests across processes are serialised per key
by Redis itself. The period start is computed here (calendar arithmetic) and
passed in; the script only compares it.

Failures are returned as Failure(AccessError); the governor decides to fail
open. A NOSCRIPT reply (Redis restarted and lost its script cache) reloads
the script once.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any

from redis.exceptions import NoScriptError, RedisError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import DenialReason
from src.domain.errors import AccessError
from src.domain.value_objects import (
    AccessDecision,
    UsagePlan,
    current_period_start,
    next_period_start,
)

KEY_PREFIX = "usage"
# Keeps a finished period's counter around briefly past the rollover.
_TTL_BUFFER_SECONDS = 3600


@dataclass(slots=True)
class _LuaRefs:
    """Holds loaded Lua script SHA references."""

    admit_sha: str | None = None


def _text(value: Any) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else str(value)


class RedisUsageStorage:
    """Usage storage shared across processes through Redis.

    Args:
        redis_client: An async Redis client (redis.asyncio.Redis compatible).
    """

    def __init__(self, *, redis_client: Any) -> None:
        self.redis = redis_client
        self._lua = _LuaRefs()
        self._script_lock = asyncio.Lock()

    @staticmethod
    def key_for(credential_id: str) -> str:
        return f"{KEY_PREFIX}:{credential_id}"

    async def admit(
        self,
        *,
        credential_id: str,
        plan: UsagePlan,
        now: float,
    ) -> Result[AccessDecision, AccessError]:
        """Run the admit script for one credential.

        Returns:
            Success(AccessDecision): Decision computed by Redis.
            Failure(AccessError): Redis unreachable or the script failed.
        """
        period = plan.quota.period
        args = (
            plan.throttle.burst_capacity,
            float(plan.throttle.rate_per_second),
            plan.quota.limit,
            float(now),
            current_period_start(period, now),
            int(next_period_start(period, now) - now) + _TTL_BUFFER_SECONDS,
        )
        try:
            try:
                resp = await self._evalsha(credential_id, args)
            except NoScriptError:
                self._lua.admit_sha = None
                resp = await self._evalsha(credential_id, args)
        except (RedisError, OSError) as exc:
            return Failure(
                error=AccessError(
                    code=ErrorCode.RATE_LIMIT_CHECK_FAILED,
                    message=f"Usage check failed: {exc}",
                    details={"credential_id": credential_id},
                )
            )

        # resp: [allowed(0/1), reason, retry_after, remaining_tokens, quota_remaining]
        allowed = bool(int(resp[0]))
        reason = _text(resp[1])
        return Success(
            value=AccessDecision(
                allowed=allowed,
                reason=None if allowed else DenialReason(reason),
                credential_id=credential_id,
                retry_after=float(_text(resp[2])),
                remaining_tokens=int(resp[3]),
                burst_capacity=plan.throttle.burst_capacity,
                quota_remaining=int(resp[4]),
            )
        )

    async def reset(self, *, credential_id: str) -> Result[None, AccessError]:
        """Delete the credential's usage hash.

        Unlike admission, reset reports real errors to callers.
        """
        try:
            await self.redis.delete(self.key_for(credential_id))
            return Success(value=None)
        except (RedisError, OSError) as exc:
            return Failure(
                error=AccessError(
                    code=ErrorCode.RATE_LIMIT_RESET_FAILED,
                    message=f"Failed to reset usage for '{credential_id}': {exc}",
                    details={"credential_id": credential_id},
                )
            )

    async def _evalsha(self, credential_id: str, args: tuple[Any, ...]) -> list[Any]:
        sha = await self._ensure_admit_script()
        return await self.redis.evalsha(sha, 1, self.key_for(credential_id), *args)

    async def _ensure_admit_script(self) -> str:
        """Load the admit Lua script into Redis and cache the SHA."""
        if self._lua.admit_sha:
            return self._lua.admit_sha
        async with self._script_lock:
            if self._lua.admit_sha:
                return self._lua.admit_sha
            script = await _read_lua_script("lua_scripts/admit.lua")
            sha: str = await self.redis.script_load(script)
            self._lua.admit_sha = sha
            return sha


def _read_lua_script_sync(path: Path) -> str:
    """Synchronous helper to read Lua script (called via run_in_executor)."""
    return path.read_text(encoding="utf-8")


async def _read_lua_script(rel_path: str) -> str:
    """Read a Lua script file relative to this module without blocking the loop."""
    full_path = Path(__file__).parent / rel_path
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(_read_lua_script_sync, full_path))
