"""Route definitions.

A RouteDefinition binds one HTTP GET endpoint to one store operation through
two template programs: the request template (parameters -> native store
request) and one response template per content type (native result -> body).
Definitions are plain immutable data; RouteRegistry compiles and validates
them at startup.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from src.domain.enums import ParameterSource

RESULT_BINDING = "result"
"""Name under which response templates see the native store result."""

JSON_CONTENT_TYPE = "application/json"
HTML_CONTENT_TYPE = "text/html"


@dataclass(frozen=True, slots=True, kw_only=True)
class RouteParameter:
    """One declared route parameter.

    Attributes:
        name: Parameter name, as referenced by templates.
        source: Path segment or query string.
        optional: Absent values are allowed (and left unbound).
        default: Value bound when an optional parameter is absent.
        pattern: Regex the value must fully match (400 otherwise).
        description: OpenAPI description.
    """

    name: str
    source: ParameterSource = ParameterSource.QUERY
    optional: bool = False
    default: str | None = None
    pattern: str | None = None
    description: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class RouteDefinition:
    """Declarative endpoint -> store operation binding.

    Attributes:
        name: Unique route name; also the first path segment by default.
        parameters: Ordered parameter declarations.
        request_template: Template rendering the native store request.
        response_templates: Content type -> template. The first entry is the
            default content type.
        requires_credential: Whether an API key is required.
        path: Explicit path template (e.g. ``/{id}``); derived when omitted.
        summary: OpenAPI summary.
    """

    name: str
    parameters: tuple[RouteParameter, ...]
    request_template: str
    response_templates: Mapping[str, str] = field(default_factory=dict)
    requires_credential: bool = True
    path: str | None = None
    summary: str = ""

    @property
    def path_template(self) -> str:
        """``/{name}`` followed by one ``/{param}`` per path parameter, unless overridden."""
        if self.path is not None:
            return self.path
        segments = [self.name] + [
            f"{{{p.name}}}" for p in self.parameters if p.source == ParameterSource.PATH
        ]
        return "/" + "/".join(segments)

    @property
    def default_content_type(self) -> str | None:
        return next(iter(self.response_templates), None)
