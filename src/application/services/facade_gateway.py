"""Facade gateway: the request pipeline behind every generated endpoint.

Pipeline (one pass, first failure wins):
    resolve route         -> 404 / 405
    bind parameters       -> 400
    authorize             -> 401 / 429
    render request + plan -> 500 (template/route defect), 400 for a start key
                             outside the queried prefix
    execute store call    -> 504 timeout, 502 throttled, 500 rejected,
                             404 point lookup without item
    render response       -> 200, or 502 when the result does not fit

The store call is the only suspending step and runs under a time budget; it
is never retried here. Usage state is committed before the store call, so an
abandoned call cannot corrupt it.
"""

import asyncio
import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from fastapi import status

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import DenialReason, OperationKind, ParameterSource
from src.domain.errors import (
    ClientError,
    ResponseShapeError,
    StoreError,
    StoreNotFoundError,
    StoreRequestError,
    StoreTransientError,
)
from src.domain.protocols import LoggerProtocol, StoreProtocol
from src.domain.value_objects import AccessDecision
from src.application.dtos import HttpResponse
from src.application.planning import StoreOperationPlanner
from src.application.routes import RESULT_BINDING, CompiledRoute, RouteRegistry
from src.application.services.access_governor import AccessGovernor

_DENIAL_STATUS: dict[DenialReason, tuple[int, ErrorCode, str]] = {
    DenialReason.UNAUTHENTICATED: (
        status.HTTP_401_UNAUTHORIZED,
        ErrorCode.CREDENTIAL_INVALID,
        "A valid API key is required",
    ),
    DenialReason.QUOTA_EXCEEDED: (
        status.HTTP_429_TOO_MANY_REQUESTS,
        ErrorCode.QUOTA_EXCEEDED,
        "Request quota for the current period is exhausted",
    ),
    DenialReason.RATE_LIMITED: (
        status.HTTP_429_TOO_MANY_REQUESTS,
        ErrorCode.RATE_LIMIT_EXCEEDED,
        "Too many requests",
    ),
}

# Planning failures caused by a caller-supplied value rather than a route defect.
_CALLER_PLANNING_CODES = frozenset({ErrorCode.PLAN_START_KEY_OUT_OF_RANGE})


def negotiate(accept: str | None, available: Mapping[str, Any]) -> str:
    """Pick a content type from an Accept header.

    Media ranges are tried in header order (quality values are ignored);
    anything unmatched falls back to the first (default) content type.
    """
    default = next(iter(available))
    if not accept:
        return default
    for media_range in accept.split(","):
        media_type = media_range.split(";", 1)[0].strip().lower()
        if media_type in available:
            return media_type
        if media_type == "*/*":
            return default
        if media_type.endswith("/*"):
            family = media_type[:-1]
            for candidate in available:
                if candidate.startswith(family):
                    return candidate
    return default


class FacadeGateway:
    """Runs the resolve -> authorize -> plan -> execute -> render pipeline.

    Dependencies (injected via constructor):
        - RouteRegistry: Frozen route table
        - AccessGovernor: Credential, quota and throttle
        - StoreOperationPlanner: Rendered request -> descriptor
        - StoreProtocol: Native store
        - LoggerProtocol: Structured logging
    """

    def __init__(
        self,
        *,
        registry: RouteRegistry,
        governor: AccessGovernor,
        planner: StoreOperationPlanner,
        store: StoreProtocol,
        logger: LoggerProtocol,
        timeout_seconds: float,
        cors_origins: list[str] | None = None,
    ) -> None:
        self._registry = registry
        self._governor = governor
        self._planner = planner
        self._store = store
        self._logger = logger
        self._timeout_seconds = timeout_seconds
        self._cors_origins = list(cors_origins or [])

    async def handle(
        self,
        *,
        method: str,
        path: str,
        query_params: Mapping[str, str] | None = None,
        path_params: Mapping[str, str] | None = None,
        credential_key: str | None = None,
        accept: str | None = None,
        origin: str | None = None,
    ) -> HttpResponse:
        """Handle one facade request.

        Args:
            method: HTTP method.
            path: Request path (e.g. ``/Item``).
            query_params: Query string values.
            path_params: Already-decoded path values; resolved from ``path``
                when omitted.
            credential_key: Raw ``x-api-key`` header value.
            accept: Accept header.
            origin: Origin header (CORS).

        Returns:
            HttpResponse: Rendered body, or an error for problem details.
        """
        match self._registry.resolve(path, method):
            case Failure(error=error):
                return HttpResponse.failure(error.status_code, error)
            case Success(value=resolved):
                route = resolved.route
                bound_path = {**resolved.path_params, **(path_params or {})}

        match self._bind(route, bound_path, query_params or {}):
            case Failure(error=error):
                return HttpResponse.failure(error.status_code, error)
            case Success(value=context):
                pass

        requires_credential = route.definition.requires_credential
        match await self._governor.authorize(credential_key, requires_credential):
            case Success(value=decision):
                pass
            case Failure():
                decision = AccessDecision(allowed=True)
        headers = self._headers(decision, requires_credential, origin)
        if not decision.allowed:
            return self._denied(decision, headers)

        response = await self._run(route, context, accept, headers)
        self._logger.info(
            "facade_request_completed",
            route=route.name,
            status_code=response.status_code,
            credential_id=decision.credential_id,
        )
        return response

    def _bind(
        self,
        route: CompiledRoute,
        path_values: Mapping[str, str],
        query_values: Mapping[str, str],
    ) -> Result[Mapping[str, str], ClientError]:
        """Build the read-only template context from declared parameters."""
        context: dict[str, str] = {}
        for param in route.definition.parameters:
            source = path_values if param.source == ParameterSource.PATH else query_values
            value = source.get(param.name)
            if value is None or value == "":
                if not param.optional:
                    return Failure(
                        error=ClientError(
                            code=ErrorCode.PARAMETER_MISSING,
                            message=f"Missing required {param.source.value} parameter '{param.name}'",
                            parameter=param.name,
                        )
                    )
                if param.default is not None:
                    context[param.name] = param.default
                continue
            pattern = route.patterns.get(param.name)
            if pattern is not None and not pattern.fullmatch(value):
                return Failure(
                    error=ClientError(
                        code=ErrorCode.PARAMETER_INVALID,
                        message=f"Parameter '{param.name}' has an invalid value",
                        parameter=param.name,
                    )
                )
            context[param.name] = value
        return Success(value=MappingProxyType(context))

    def _headers(
        self, decision: AccessDecision, requires_credential: bool, origin: str | None
    ) -> dict[str, str]:
        headers: dict[str, str] = {}
        if requires_credential:
            if "*" in self._cors_origins:
                headers["Access-Control-Allow-Origin"] = "*"
            elif origin and origin in self._cors_origins:
                headers["Access-Control-Allow-Origin"] = origin
                headers["Vary"] = "Origin"
        if decision.governed:
            headers["X-RateLimit-Limit"] = str(decision.burst_capacity)
            headers["X-RateLimit-Remaining"] = str(decision.remaining_tokens)
        return headers

    def _denied(self, decision: AccessDecision, headers: dict[str, str]) -> HttpResponse:
        assert decision.reason is not None
        status_code, code, message = _DENIAL_STATUS[decision.reason]
        if decision.reason == DenialReason.RATE_LIMITED:
            headers["Retry-After"] = str(max(1, math.ceil(decision.retry_after)))
        return HttpResponse.failure(
            status_code, DomainError(code=code, message=message), headers
        )

    async def _run(
        self,
        route: CompiledRoute,
        context: Mapping[str, str],
        accept: str | None,
        headers: dict[str, str],
    ) -> HttpResponse:
        match route.request_template.render(context):
            case Failure(error=error):
                self._logger.error(
                    "request_template_failed", route=route.name, template_error=str(error)
                )
                return HttpResponse.failure(status.HTTP_500_INTERNAL_SERVER_ERROR, error, headers)
            case Success(value=rendered):
                pass

        match self._planner.plan(rendered):
            case Failure(error=error):
                status_code = (
                    status.HTTP_400_BAD_REQUEST
                    if error.code in _CALLER_PLANNING_CODES
                    else status.HTTP_500_INTERNAL_SERVER_ERROR
                )
                log = self._logger.error if status_code == 500 else self._logger.warning
                log(
                    "request_planning_failed",
                    route=route.name,
                    status_code=status_code,
                    error_code=error.code.value,
                    error_message=error.message,
                )
                return HttpResponse.failure(status_code, error, headers)
            case Success(value=descriptor):
                pass

        try:
            result = await asyncio.wait_for(
                self._store.execute(descriptor), timeout=self._timeout_seconds
            )
        except TimeoutError:
            result = Failure(
                error=StoreTransientError(
                    code=ErrorCode.STORE_TIMEOUT,
                    message=f"Store did not answer within {self._timeout_seconds}s",
                    is_timeout=True,
                )
            )

        match result:
            case Failure(error=error):
                return self._store_failure(route, error, headers)
            case Success(value=native):
                pass

        if descriptor.kind == OperationKind.POINT_GET and "Item" not in native:
            error = StoreNotFoundError(
                code=ErrorCode.STORE_ITEM_NOT_FOUND,
                message=f"No item with id {descriptor.key_predicate.sort!r}",
            )
            return HttpResponse.failure(status.HTTP_404_NOT_FOUND, error, headers)

        content_type = negotiate(accept, route.response_templates)
        response_context = MappingProxyType({**context, RESULT_BINDING: native})
        match route.response_templates[content_type].render(response_context):
            case Failure(error=error):
                self._logger.error(
                    "response_template_failed", route=route.name, template_error=str(error)
                )
                shape_error = ResponseShapeError(
                    code=ErrorCode.STORE_RESPONSE_MISMATCH,
                    message="Store result does not fit the response template",
                    details={"template_error": error.code.value},
                )
                return HttpResponse.failure(status.HTTP_502_BAD_GATEWAY, shape_error, headers)
            case Success(value=body):
                return HttpResponse(
                    status_code=status.HTTP_200_OK,
                    body=body,
                    media_type=content_type,
                    headers=headers,
                )

    def _store_failure(
        self, route: CompiledRoute, error: StoreError, headers: dict[str, str]
    ) -> HttpResponse:
        match error:
            case StoreTransientError(is_timeout=True):
                status_code = status.HTTP_504_GATEWAY_TIMEOUT
            case StoreNotFoundError():
                status_code = status.HTTP_404_NOT_FOUND
            case StoreRequestError():
                status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            case _:
                status_code = status.HTTP_502_BAD_GATEWAY
        log = self._logger.error if status_code == 500 else self._logger.warning
        log(
            "store_call_failed",
            route=route.name,
            status_code=status_code,
            error_code=error.code.value,
            error_message=error.message,
        )
        return HttpResponse.failure(status_code, error, headers)
