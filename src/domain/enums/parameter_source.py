"""Where a route parameter is read from."""

from enum import Enum


class ParameterSource(str, Enum):
    """Source of a route parameter value.

    Attributes:
        PATH: A `{name}` segment of the route path.
        QUERY: A query-string argument.
    """

    PATH = "path"
    QUERY = "query"
