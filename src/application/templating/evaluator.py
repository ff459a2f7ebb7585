"""Tree-walking evaluator.

Single pass over the node tuple. The read-only context is never mutated;
``#set`` and loop variables live in a chain of block scopes, one per
``#foreach`` iteration and ``#if`` branch, so a binding never outlives the
block that made it.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from src.core.enums import ErrorCode
from src.application.templating.failure import TemplateFailure
from src.application.templating.filters import FILTERS, MISSING, MISSING_TOLERANT
from src.application.templating.nodes import (
    LOOP_VARIABLE,
    Condition,
    Expr,
    ForEach,
    IfBlock,
    LiteralExpr,
    Node,
    PathExpr,
    SetDirective,
    Substitution,
    Text,
)


class _Scope:
    __slots__ = ("bindings", "parent")

    def __init__(self, parent: "_Scope | None" = None) -> None:
        self.parent = parent
        self.bindings: dict[str, Any] = {}

    def lookup(self, name: str) -> Any:
        scope: _Scope | None = self
        while scope is not None:
            if name in scope.bindings:
                return scope.bindings[name]
            scope = scope.parent
        return MISSING

    def assign(self, name: str, value: Any) -> None:
        """Rebind ``name`` where it is already bound, else bind it here."""
        scope: _Scope | None = self
        while scope is not None:
            if name in scope.bindings:
                scope.bindings[name] = value
                return
            scope = scope.parent
        self.bindings[name] = value


def _traverse(value: Any, segment: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(segment, MISSING)
    if isinstance(value, Sequence) and not isinstance(value, str) and segment.isdigit():
        index = int(segment)
        return value[index] if index < len(value) else MISSING
    return MISSING


def _to_text(value: Any, label: str, offset: int) -> str:
    """Convert a scalar for output; objects and lists need the json filter."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    raise TemplateFailure(
        ErrorCode.TEMPLATE_TYPE_MISMATCH,
        f"Cannot substitute {type(value).__name__} '{label}' as text (use the json filter)",
        offset,
    )


def _label(expr: Expr) -> str:
    return f"${expr.dotted}" if isinstance(expr, PathExpr) else repr(expr.value)


def _is_empty(value: Any) -> bool:
    return value is MISSING or value is None or value is False or (
        isinstance(value, str | list | tuple | dict) and len(value) == 0
    )


class Evaluator:
    """Renders a node tuple against one context."""

    def __init__(self, context: Mapping[str, Any]) -> None:
        self._context = context

    def render(self, nodes: tuple[Node, ...]) -> str:
        out: list[str] = []
        self._block(nodes, _Scope(), out)
        return "".join(out)

    def _block(self, nodes: tuple[Node, ...], scope: _Scope, out: list[str]) -> None:
        for node in nodes:
            match node:
                case Text(value=value):
                    out.append(value)
                case Substitution(expr=expr, offset=offset):
                    value = self._value(expr, scope, offset)
                    if value is MISSING:
                        raise TemplateFailure(
                            ErrorCode.TEMPLATE_REFERENCE_UNRESOLVED,
                            f"Unresolved reference '{_label(expr)}'",
                            offset,
                        )
                    out.append(_to_text(value, _label(expr), offset))
                case SetDirective(name=name, expr=expr, offset=offset):
                    value = self._value(expr, scope, offset)
                    if value is MISSING:
                        raise TemplateFailure(
                            ErrorCode.TEMPLATE_REFERENCE_UNRESOLVED,
                            f"Unresolved reference '{_label(expr)}' in #set",
                            offset,
                        )
                    scope.assign(name, value)
                case ForEach():
                    self._foreach(node, scope, out)
                case IfBlock():
                    branch = node.body if self._test(node.condition, scope, node.offset) else node.orelse
                    self._block(branch, _Scope(scope), out)

    def _foreach(self, node: ForEach, scope: _Scope, out: list[str]) -> None:
        sequence = self._value(node.sequence, scope, node.offset)
        if sequence is MISSING:
            raise TemplateFailure(
                ErrorCode.TEMPLATE_REFERENCE_UNRESOLVED,
                f"Unresolved reference '{_label(node.sequence)}' in #foreach",
                node.offset,
            )
        if not isinstance(sequence, list | tuple):
            raise TemplateFailure(
                ErrorCode.TEMPLATE_TYPE_MISMATCH,
                f"#foreach needs a list, got {type(sequence).__name__}",
                node.offset,
            )
        count = len(sequence)
        for index, item in enumerate(sequence):
            iteration = _Scope(scope)
            iteration.bindings[node.variable] = item
            iteration.bindings[LOOP_VARIABLE] = {
                "index": index,
                "count": index + 1,
                "hasNext": index + 1 < count,
                "first": index == 0,
                "last": index + 1 == count,
            }
            self._block(node.body, iteration, out)

    def _test(self, condition: Condition, scope: _Scope, offset: int) -> bool:
        left = self._value(condition.left, scope, offset, tolerant=True)
        if condition.operator is None:
            return not _is_empty(left)
        assert condition.right is not None
        right = self._value(condition.right, scope, offset, tolerant=True)
        left_text = "" if left is MISSING else _to_text(left, _label(condition.left), offset)
        right_text = "" if right is MISSING else _to_text(right, _label(condition.right), offset)
        equal = left_text == right_text
        return equal if condition.operator == "==" else not equal

    def _value(self, expr: Expr, scope: _Scope, offset: int, tolerant: bool = False) -> Any:
        if isinstance(expr, LiteralExpr):
            value: Any = expr.value
        else:
            value = scope.lookup(expr.root)
            if value is MISSING:
                value = self._context.get(expr.root, MISSING)
            for segment in expr.segments:
                if value is MISSING:
                    break
                value = _traverse(value, segment)
        for call in expr.filters:
            if value is MISSING and call.name not in MISSING_TOLERANT:
                if tolerant:
                    return MISSING
                raise TemplateFailure(
                    ErrorCode.TEMPLATE_REFERENCE_UNRESOLVED,
                    f"Unresolved reference '{_label(expr)}'",
                    offset,
                )
            try:
                value = FILTERS[call.name].func(value, call.args)
            except TemplateFailure as e:
                e.offset = offset
                raise
        return value
