"""Template error type.

Returned when a template cannot be compiled (malformed directive) or cannot
be rendered against a context (unresolved reference, type mismatch, invalid
embedded JSON).
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class TemplateError(DomainError):
    """Template compilation or evaluation failure.

    Attributes:
        code: TEMPLATE_* ErrorCode.
        message: Human-readable message.
        line: 1-based line of the offending directive, when known.
        column: 1-based column of the offending directive, when known.
    """

    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        """Include the source position when known."""
        if self.line is None:
            return f"{self.code.value}: {self.message}"
        return f"{self.code.value}: {self.message} (line {self.line}, column {self.column})"
