"""Planning error type.

Returned by the store operation planner when a rendered request does not
encode one of the supported operation shapes. Routes are validated at
startup, so a planning error at request time points at a template defect or
an unusual parameter value (e.g. an empty id in a batch list).
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class PlanningError(DomainError):
    """Rendered request could not be turned into a store operation."""

    pass  # Inherits all fields from DomainError
