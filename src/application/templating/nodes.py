"""Template AST (tagged variants).

A compiled template is a tuple of nodes. Expressions are a path or a string
literal followed by a filter pipeline; there are no operators, calls or
user-defined functions.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FilterCall:
    """``| name:"arg":"arg"`` applied to an expression value."""

    name: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PathExpr:
    """Dotted reference: ``root.seg.seg`` plus filters."""

    root: str
    segments: tuple[str, ...]
    filters: tuple[FilterCall, ...] = ()

    @property
    def dotted(self) -> str:
        """Reference as written, without filters."""
        return ".".join((self.root, *self.segments))


@dataclass(frozen=True, slots=True)
class LiteralExpr:
    """String literal plus filters."""

    value: str
    filters: tuple[FilterCall, ...] = ()


type Expr = PathExpr | LiteralExpr


@dataclass(frozen=True, slots=True)
class Condition:
    """Single predicate: non-empty test, or ``==`` / ``!=`` comparison."""

    left: Expr
    operator: str | None = None
    right: Expr | None = None


@dataclass(frozen=True, slots=True)
class Text:
    """Literal output."""

    value: str


@dataclass(frozen=True, slots=True)
class Substitution:
    """``$path`` / ``${expr}``."""

    expr: Expr
    offset: int


@dataclass(frozen=True, slots=True)
class SetDirective:
    """``#set($name = expr)``, bound in the enclosing block only."""

    name: str
    expr: Expr
    offset: int


@dataclass(frozen=True, slots=True)
class ForEach:
    """``#foreach($var in expr) body #end``."""

    variable: str
    sequence: Expr
    body: tuple[Node, ...]
    offset: int


@dataclass(frozen=True, slots=True)
class IfBlock:
    """``#if(cond) body #else orelse #end``."""

    condition: Condition
    body: tuple[Node, ...]
    orelse: tuple[Node, ...]
    offset: int


type Node = Text | Substitution | SetDirective | ForEach | IfBlock

LOOP_VARIABLE = "foreach"
"""Name bound inside every loop body (``$foreach.hasNext`` etc.)."""
