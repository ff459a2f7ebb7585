"""Internal exception carrying a TemplateError through the parser/evaluator.

Never escapes the templating package: ``compile_template`` and
``Template.render`` convert it into ``Failure(TemplateError)``.
"""

from src.core.enums import ErrorCode
from src.domain.errors import TemplateError


class TemplateFailure(Exception):
    """Raised inside the engine; converted to a Result at the boundary."""

    def __init__(self, code: ErrorCode, message: str, offset: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.offset = offset

    def to_error(self, source: str) -> TemplateError:
        """Build the TemplateError, translating the offset to line/column."""
        if self.offset is None:
            return TemplateError(code=self.code, message=self.message)
        line = source.count("\n", 0, self.offset) + 1
        column = self.offset - (source.rfind("\n", 0, self.offset) + 1) + 1
        return TemplateError(
            code=self.code, message=self.message, line=line, column=column
        )
