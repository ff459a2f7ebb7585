"""Access governor: credential check, quota and throttle per API key.

Authorization order:
    1. Route open (no credential required) -> allow, no state touched.
    2. Unknown, missing or disabled key -> deny UNAUTHENTICATED.
    3. Usage storage applies rollover, quota and token bucket atomically.

Storage failures fail open: the request is allowed without rate-limit
headers and a warning is logged. A broken limiter must not take the read
path down with it.

Usage:
    governor = AccessGovernor(credentials=repo, storage=storage, logger=logger)
    result = await governor.authorize(api_key, requires_credential=True)
"""

import time
from collections.abc import Callable

from src.core.result import Failure, Result, Success
from src.domain.enums import DenialReason
from src.domain.errors import AccessError
from src.domain.protocols import (
    CredentialRepository,
    LoggerProtocol,
    UsageStorageProtocol,
)
from src.domain.value_objects import AccessDecision


class AccessGovernor:
    """Admits or refuses requests per credential.

    Dependencies (injected via constructor):
        - CredentialRepository: Key hash -> credential lookup
        - UsageStorageProtocol: Atomic per-credential usage state
        - LoggerProtocol: Structured logging
    """

    def __init__(
        self,
        *,
        credentials: CredentialRepository,
        storage: UsageStorageProtocol,
        logger: LoggerProtocol,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._credentials = credentials
        self._storage = storage
        self._logger = logger
        self._clock = clock

    async def authorize(
        self,
        credential_key: str | None,
        requires_credential: bool,
    ) -> Result[AccessDecision, AccessError]:
        """Decide whether one request may proceed.

        Args:
            credential_key: Raw API key from the request (may be None).
            requires_credential: Whether the route is credentialed.

        Returns:
            Success(AccessDecision): Allowed, or denied with a reason. Storage
                failures also return Success (fail open).
        """
        if not requires_credential:
            return Success(value=AccessDecision(allowed=True))

        credential = self._credentials.find_by_key(credential_key) if credential_key else None
        if credential is None:
            self._logger.info("access_denied", reason=DenialReason.UNAUTHENTICATED.value)
            return Success(
                value=AccessDecision(allowed=False, reason=DenialReason.UNAUTHENTICATED)
            )

        result = await self._storage.admit(
            credential_id=credential.id,
            plan=credential.plan,
            now=self._clock(),
        )
        match result:
            case Success(value=decision):
                if not decision.allowed:
                    self._logger.info(
                        "access_denied",
                        credential_id=credential.id,
                        reason=decision.reason.value if decision.reason else None,
                        retry_after=round(decision.retry_after, 3),
                    )
                return Success(value=decision)
            case Failure(error=error):
                # Fail open
                self._logger.warning(
                    "usage_storage_failed_open",
                    credential_id=credential.id,
                    error_code=error.code.value,
                    error_message=error.message,
                )
                return Success(value=AccessDecision(allowed=True, credential_id=credential.id))

    async def reset(self, credential_id: str) -> Result[None, AccessError]:
        """Clear stored usage state for one credential (operator action)."""
        return await self._storage.reset(credential_id=credential_id)
