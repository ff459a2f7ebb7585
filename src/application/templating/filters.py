"""Built-in template filters.

Filters are pure functions ``(value, args) -> value``. The set is closed:
templates cannot define their own. ``MISSING`` flows through the pipeline
for unresolved references; only ``default`` accepts it.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.core.enums import ErrorCode
from src.application.templating.failure import TemplateFailure


class _Missing:
    """Sentinel for an unresolved reference."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Filter implementation plus its accepted argument count."""

    func: Callable[[Any, tuple[str, ...]], Any]
    min_args: int = 0
    max_args: int = 0


def _require_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise TemplateFailure(
            ErrorCode.TEMPLATE_TYPE_MISMATCH,
            f"Filter '{name}' expects a string, got {type(value).__name__}",
        )
    return value


def _escape_quotes(value: Any, args: tuple[str, ...]) -> str:
    return _require_str("escape_quotes", value).replace('"', "&quot;")


def _lower(value: Any, args: tuple[str, ...]) -> str:
    return _require_str("lower", value).lower()


def _upper(value: Any, args: tuple[str, ...]) -> str:
    return _require_str("upper", value).upper()


def _json(value: Any, args: tuple[str, ...]) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except TypeError as e:
        raise TemplateFailure(
            ErrorCode.TEMPLATE_TYPE_MISMATCH, f"Value is not JSON-serializable: {e}"
        ) from e


def _escape_json(value: Any, args: tuple[str, ...]) -> str:
    return json.dumps(_require_str("escape_json", value), ensure_ascii=False)[1:-1]


def _split(value: Any, args: tuple[str, ...]) -> list[str]:
    separator = args[0] if args else ","
    if not separator:
        raise TemplateFailure(ErrorCode.TEMPLATE_TYPE_MISMATCH, "split separator is empty")
    return _require_str("split", value).split(separator)


def _parse_json(value: Any, args: tuple[str, ...]) -> Any:
    text = _require_str("parse_json", value)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise TemplateFailure(
            ErrorCode.TEMPLATE_JSON_INVALID,
            f"Embedded JSON is invalid: {e.msg} at position {e.pos}",
        ) from e


def _default(value: Any, args: tuple[str, ...]) -> Any:
    if value is MISSING or value is None or value == "":
        return args[0]
    return value


FILTERS: dict[str, FilterSpec] = {
    "escape_quotes": FilterSpec(_escape_quotes),
    "lower": FilterSpec(_lower),
    "upper": FilterSpec(_upper),
    "json": FilterSpec(_json),
    "escape_json": FilterSpec(_escape_json),
    "split": FilterSpec(_split, max_args=1),
    "parse_json": FilterSpec(_parse_json),
    "default": FilterSpec(_default, min_args=1, max_args=1),
}

MISSING_TOLERANT = frozenset({"default"})
