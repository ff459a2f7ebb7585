"""Compiled template and the compile entry point.

Usage:
    from src.application.templating import compile_template

    match compile_template('{"id": ${id|json}}'):
        case Success(value=template):
            result = template.render({"id": "001-001-001"})
        case Failure(error=error):
            ...
"""

from collections.abc import Mapping
from typing import Any

from src.core.result import Failure, Result, Success
from src.domain.errors import TemplateError
from src.application.templating.evaluator import Evaluator
from src.application.templating.failure import TemplateFailure
from src.application.templating.nodes import (
    LOOP_VARIABLE,
    Condition,
    Expr,
    ForEach,
    IfBlock,
    Node,
    PathExpr,
    SetDirective,
    Substitution,
)
from src.application.templating.parser import parse


def _expr_roots(expr: Expr | None, bound: frozenset[str], found: set[str]) -> None:
    if isinstance(expr, PathExpr) and expr.root not in bound:
        found.add(expr.root)


def _collect_references(
    nodes: tuple[Node, ...], bound: frozenset[str], found: set[str]
) -> None:
    """Walk nodes collecting root names not bound by an enclosing #set/#foreach."""
    local = set(bound)
    for node in nodes:
        match node:
            case Substitution(expr=expr):
                _expr_roots(expr, frozenset(local), found)
            case SetDirective(name=name, expr=expr):
                _expr_roots(expr, frozenset(local), found)
                local.add(name)
            case ForEach(variable=variable, sequence=sequence, body=body):
                _expr_roots(sequence, frozenset(local), found)
                _collect_references(body, frozenset(local | {variable, LOOP_VARIABLE}), found)
            case IfBlock(condition=Condition(left=left, right=right), body=body, orelse=orelse):
                _expr_roots(left, frozenset(local), found)
                _expr_roots(right, frozenset(local), found)
                _collect_references(body, frozenset(local), found)
                _collect_references(orelse, frozenset(local), found)


class Template:
    """Immutable compiled template.

    Rendering is deterministic: identical context in, byte-identical text out.
    """

    __slots__ = ("_nodes", "_references", "_source")

    def __init__(self, source: str, nodes: tuple[Node, ...]) -> None:
        self._source = source
        self._nodes = nodes
        found: set[str] = set()
        _collect_references(nodes, frozenset(), found)
        self._references = frozenset(found)

    @property
    def source(self) -> str:
        return self._source

    @property
    def references(self) -> frozenset[str]:
        """Root names read from the context (not bound inside the template)."""
        return self._references

    def render(self, context: Mapping[str, Any]) -> Result[str, TemplateError]:
        """Render against a read-only context.

        Args:
            context: Parameter values, plus ``result`` for response templates.

        Returns:
            Success(str): Rendered text.
            Failure(TemplateError): Unresolved reference, type mismatch or
                invalid embedded JSON.
        """
        try:
            return Success(value=Evaluator(context).render(self._nodes))
        except TemplateFailure as e:
            return Failure(error=e.to_error(self._source))


def compile_template(source: str) -> Result[Template, TemplateError]:
    """Parse template source.

    Returns:
        Success(Template): Compiled template.
        Failure(TemplateError): Malformed directive, unknown filter or bad
            expression, with line/column of the offending directive.
    """
    try:
        nodes = parse(source)
    except TemplateFailure as e:
        return Failure(error=e.to_error(source))
    return Success(value=Template(source, nodes))
