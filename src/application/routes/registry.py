"""Route registry.

Routes are registered once at startup. Registration compiles every template
and checks that it only reads declared parameters (plus ``result`` in
response templates); any problem raises RouteConfigurationError so a bad
route stops the process instead of failing per request. ``freeze()`` makes
the registry read-only, after which it is shared across requests without
locking.

Usage:
    registry = RouteRegistry()
    for route in build_catalog(schema):
        registry.register(route)
    registry.freeze()

    match registry.resolve("/Item", "GET"):
        case Success(value=resolved): ...
        case Failure(error=error): ...  # 404 / 405
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from urllib.parse import unquote

from fastapi import status

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import ParameterSource
from src.domain.errors import ClientError
from src.application.routes.definition import RESULT_BINDING, RouteDefinition
from src.application.templating import Template, compile_template

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_SUPPORTED_METHODS = frozenset({"GET"})


class RouteConfigurationError(Exception):
    """Raised at startup for an invalid route definition."""


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A validated route with its compiled templates."""

    definition: RouteDefinition
    request_template: Template
    response_templates: Mapping[str, Template]
    path_pattern: re.Pattern[str]
    patterns: Mapping[str, re.Pattern[str]]

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def path_template(self) -> str:
        return self.definition.path_template


@dataclass(frozen=True, slots=True)
class ResolvedRoute:
    """Route matched for one request, with its bound path parameters."""

    route: CompiledRoute
    path_params: Mapping[str, str]


def _compile_path(path: str) -> re.Pattern[str]:
    pattern = "".join(
        f"(?P<{part[1:-1]}>[^/]+)" if _PLACEHOLDER.fullmatch(part) else re.escape(part)
        for part in re.split(r"(\{[^}]*\})", path)
        if part
    )
    return re.compile(f"^{pattern}$")


def _compile(route: RouteDefinition, label: str, source: str) -> Template:
    match compile_template(source):
        case Success(value=template):
            return template
        case Failure(error=error):
            raise RouteConfigurationError(f"Route {route.name!r}: {label} does not compile: {error}")


class RouteRegistry:
    """Name/path -> compiled route table."""

    def __init__(self) -> None:
        self._routes: dict[str, CompiledRoute] = {}
        self._paths: dict[str, str] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> tuple[CompiledRoute, ...]:
        """Routes in registration order."""
        return tuple(self._routes.values())

    def get(self, name: str) -> CompiledRoute | None:
        return self._routes.get(name)

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    def register(self, route: RouteDefinition) -> CompiledRoute:
        """Validate, compile and add a route.

        Args:
            route: Definition to add.

        Returns:
            CompiledRoute: The registered route.

        Raises:
            RouteConfigurationError: Registry frozen, duplicate name/path or
                parameter, path/parameter mismatch, template syntax error,
                undeclared template reference, or no response template.
        """
        if self._frozen:
            raise RouteConfigurationError(f"Registry is frozen; cannot register {route.name!r}")
        if not _IDENTIFIER.fullmatch(route.name):
            raise RouteConfigurationError(f"Invalid route name {route.name!r}")
        if route.name in self._routes:
            raise RouteConfigurationError(f"Duplicate route name {route.name!r}")

        path = route.path_template
        if not path.startswith("/"):
            raise RouteConfigurationError(f"Route {route.name!r}: path must start with '/'")
        if path in self._paths:
            raise RouteConfigurationError(
                f"Route {route.name!r}: path {path!r} already bound to {self._paths[path]!r}"
            )

        names = [p.name for p in route.parameters]
        if len(set(names)) != len(names):
            raise RouteConfigurationError(f"Route {route.name!r}: duplicate parameter names")
        patterns: dict[str, re.Pattern[str]] = {}
        for param in route.parameters:
            if not _IDENTIFIER.fullmatch(param.name) or param.name == RESULT_BINDING:
                raise RouteConfigurationError(f"Route {route.name!r}: invalid parameter name {param.name!r}")
            if param.default is not None and not param.optional:
                raise RouteConfigurationError(
                    f"Route {route.name!r}: required parameter {param.name!r} cannot have a default"
                )
            if param.source == ParameterSource.PATH and param.optional:
                raise RouteConfigurationError(
                    f"Route {route.name!r}: path parameter {param.name!r} cannot be optional"
                )
            if param.pattern is not None:
                try:
                    patterns[param.name] = re.compile(param.pattern)
                except re.error as e:
                    raise RouteConfigurationError(
                        f"Route {route.name!r}: bad pattern for {param.name!r}: {e}"
                    ) from e

        placeholders = _PLACEHOLDER.findall(path)
        path_params = [p.name for p in route.parameters if p.source == ParameterSource.PATH]
        if sorted(placeholders) != sorted(path_params):
            raise RouteConfigurationError(
                f"Route {route.name!r}: path placeholders {placeholders} do not match "
                f"path parameters {path_params}"
            )

        if not route.response_templates:
            raise RouteConfigurationError(f"Route {route.name!r}: no response template")

        declared = set(names)
        request_template = _compile(route, "request template", route.request_template)
        undeclared = request_template.references - declared
        if undeclared:
            raise RouteConfigurationError(
                f"Route {route.name!r}: request template reads undeclared {sorted(undeclared)}"
            )
        response_templates: dict[str, Template] = {}
        for content_type, source in route.response_templates.items():
            template = _compile(route, f"{content_type} response template", source)
            undeclared = template.references - declared - {RESULT_BINDING}
            if undeclared:
                raise RouteConfigurationError(
                    f"Route {route.name!r}: {content_type} response template reads "
                    f"undeclared {sorted(undeclared)}"
                )
            response_templates[content_type] = template

        compiled = CompiledRoute(
            definition=route,
            request_template=request_template,
            response_templates=MappingProxyType(response_templates),
            path_pattern=_compile_path(path),
            patterns=MappingProxyType(patterns),
        )
        self._routes[route.name] = compiled
        self._paths[path] = route.name
        return compiled

    def resolve(self, path: str, method: str) -> Result[ResolvedRoute, ClientError]:
        """Match a request path and method.

        Returns:
            Success(ResolvedRoute): Matched route and decoded path parameters.
            Failure(ClientError): 404 for an unknown path, 405 for a method
                other than GET on a known path.
        """
        for route in self._routes.values():
            match = route.path_pattern.match(path)
            if match is None:
                continue
            if method.upper() not in _SUPPORTED_METHODS:
                return Failure(
                    error=ClientError(
                        code=ErrorCode.METHOD_NOT_ALLOWED,
                        message=f"Method {method.upper()} not allowed on {path}",
                        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
                    )
                )
            params = {name: unquote(value) for name, value in match.groupdict().items()}
            return Success(value=ResolvedRoute(route=route, path_params=MappingProxyType(params)))
        return Failure(
            error=ClientError(
                code=ErrorCode.ROUTE_NOT_FOUND,
                message=f"No route for {path}",
                status_code=status.HTTP_404_NOT_FOUND,
            )
        )
