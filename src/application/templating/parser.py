"""Template parser: source text -> tuple of nodes.

Two passes. The scanner splits the source into literal text, substitutions
and directives (resolving comments and ``\\$`` / ``\\#`` escapes). The block
builder then nests ``#foreach`` / ``#if`` bodies, and each directive's
argument is parsed by the small expression grammar:

    expr      := (path | string) ("|" name (":" arg)*)*
    condition := expr (("==" | "!=") expr)?
    set       := "$" name "=" expr
    foreach   := "$" name "in" expr
"""

import re
from dataclasses import dataclass

from src.core.enums import ErrorCode
from src.application.templating.failure import TemplateFailure
from src.application.templating.filters import FILTERS
from src.application.templating.nodes import (
    Condition,
    Expr,
    FilterCall,
    ForEach,
    IfBlock,
    LiteralExpr,
    Node,
    PathExpr,
    SetDirective,
    Substitution,
    Text,
)

_SEGMENT = r"(?:[A-Za-z_][A-Za-z0-9_]*|\d+)"
_UNBRACED_PATH = re.compile(rf"[A-Za-z_][A-Za-z0-9_]*(?:\.{_SEGMENT})*")
_DIRECTIVE = re.compile(
    r"#(?:\{(set|foreach|if|else|end)\}|(set|foreach|if|else|end)(?![A-Za-z0-9_]))"
)
_EXPR_TOKEN = re.compile(
    rf"""
    \s*(?:
        (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
      | (?P<path>\$?[A-Za-z_][A-Za-z0-9_]*(?:\.{_SEGMENT})*)
      | (?P<number>-?\d+)
      | (?P<op>==|!=|=|\||:)
    )""",
    re.VERBOSE,
)
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


@dataclass(frozen=True, slots=True)
class _Token:
    kind: str
    text: str
    offset: int


def _syntax_error(message: str, offset: int | None) -> TemplateFailure:
    return TemplateFailure(ErrorCode.TEMPLATE_SYNTAX_INVALID, message, offset)


def _find_closing(source: str, open_index: int, opener: str, closer: str) -> int:
    """Index of the bracket closing ``source[open_index]``, skipping string literals."""
    depth = 0
    i = open_index
    quote: str | None = None
    while i < len(source):
        ch = source[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise _syntax_error(f"Unclosed '{opener}'", open_index)


def _scan(source: str) -> list[_Token]:
    tokens: list[_Token] = []
    buffer: list[str] = []
    i = 0
    n = len(source)

    def flush() -> None:
        if buffer:
            tokens.append(_Token("text", "".join(buffer), i))
            buffer.clear()

    while i < n:
        ch = source[i]
        if ch == "\\" and i + 1 < n and source[i + 1] in "$#":
            buffer.append(source[i + 1])
            i += 2
            continue
        if ch == "#":
            if source.startswith("##", i):
                newline = source.find("\n", i)
                i = n if newline < 0 else newline + 1
                continue
            if source.startswith("#*", i):
                end = source.find("*#", i + 2)
                if end < 0:
                    raise _syntax_error("Unclosed block comment", i)
                i = end + 2
                continue
            match = _DIRECTIVE.match(source, i)
            if match:
                flush()
                keyword = match.group(1) or match.group(2)
                j = match.end()
                if keyword in ("set", "foreach", "if"):
                    while j < n and source[j] in " \t":
                        j += 1
                    if j >= n or source[j] != "(":
                        raise _syntax_error(f"Expected '(' after #{keyword}", i)
                    close = _find_closing(source, j, "(", ")")
                    tokens.append(_Token(keyword, source[j + 1 : close], i))
                    i = close + 1
                else:
                    tokens.append(_Token(keyword, "", i))
                    i = j
                continue
        elif ch == "$":
            if source.startswith("${", i):
                close = _find_closing(source, i + 1, "{", "}")
                flush()
                tokens.append(_Token("subst", source[i + 2 : close], i))
                i = close + 1
                continue
            match = _UNBRACED_PATH.match(source, i + 1)
            if match:
                flush()
                tokens.append(_Token("subst", match.group(0), i))
                i = match.end()
                continue
        buffer.append(ch)
        i += 1
    flush()
    return tokens


def _unquote(literal: str) -> str:
    body = literal[1:-1]
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


class _ExprParser:
    """Recursive-descent parser over one directive argument."""

    def __init__(self, text: str, offset: int) -> None:
        self.offset = offset
        self.tokens: list[tuple[str, str]] = []
        pos = 0
        stripped_end = len(text.rstrip())
        while pos < stripped_end:
            match = _EXPR_TOKEN.match(text, pos)
            if not match or match.end() == pos:
                raise _syntax_error(f"Unexpected input in expression: {text[pos:].strip()!r}", offset)
            kind = match.lastgroup
            assert kind is not None
            self.tokens.append((kind, match.group(kind)))
            pos = match.end()
        self.index = 0

    def peek(self) -> tuple[str, str] | None:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def take(self, kind: str, text: str | None = None) -> str:
        token = self.peek()
        if token is None or token[0] != kind or (text is not None and token[1] != text):
            expected = text or kind
            found = token[1] if token else "end of expression"
            raise _syntax_error(f"Expected {expected}, found {found!r}", self.offset)
        self.index += 1
        return token[1]

    def at(self, kind: str, text: str | None = None) -> bool:
        token = self.peek()
        return token is not None and token[0] == kind and (text is None or token[1] == text)

    def done(self) -> None:
        if self.peek() is not None:
            raise _syntax_error(f"Unexpected {self.peek()[1]!r} in expression", self.offset)

    def variable(self) -> str:
        """``$name`` (or bare ``name``) with no dotted segments."""
        name = self.take("path").removeprefix("$")
        if not _IDENTIFIER.fullmatch(name):
            raise _syntax_error(f"Expected a variable name, found {name!r}", self.offset)
        return name

    def expr(self) -> Expr:
        token = self.peek()
        if token is None:
            raise _syntax_error("Empty expression", self.offset)
        kind, text = token
        self.index += 1
        filters = self.filters()
        if kind == "string":
            return LiteralExpr(value=_unquote(text), filters=filters)
        if kind == "number":
            return LiteralExpr(value=text, filters=filters)
        if kind == "path":
            root, *segments = text.removeprefix("$").split(".")
            return PathExpr(root=root, segments=tuple(segments), filters=filters)
        raise _syntax_error(f"Unexpected {text!r} in expression", self.offset)

    def filters(self) -> tuple[FilterCall, ...]:
        calls: list[FilterCall] = []
        while self.at("op", "|"):
            self.index += 1
            name = self.take("path")
            spec = FILTERS.get(name)
            if spec is None:
                raise _syntax_error(f"Unknown filter '{name}'", self.offset)
            args: list[str] = []
            while self.at("op", ":"):
                self.index += 1
                token = self.peek()
                if token is None or token[0] not in ("string", "number"):
                    raise _syntax_error(f"Filter '{name}' argument must be a literal", self.offset)
                self.index += 1
                args.append(_unquote(token[1]) if token[0] == "string" else token[1])
            if not spec.min_args <= len(args) <= spec.max_args:
                raise _syntax_error(
                    f"Filter '{name}' takes {spec.min_args}-{spec.max_args} arguments, got {len(args)}",
                    self.offset,
                )
            calls.append(FilterCall(name=name, args=tuple(args)))
        return tuple(calls)


def _parse_condition(text: str, offset: int) -> Condition:
    parser = _ExprParser(text, offset)
    left = parser.expr()
    if parser.at("op", "==") or parser.at("op", "!="):
        operator = parser.take("op")
        right = parser.expr()
        parser.done()
        return Condition(left=left, operator=operator, right=right)
    parser.done()
    return Condition(left=left)


def _parse_set(text: str, offset: int) -> SetDirective:
    parser = _ExprParser(text, offset)
    name = parser.variable()
    parser.take("op", "=")
    expr = parser.expr()
    parser.done()
    return SetDirective(name=name, expr=expr, offset=offset)


def _parse_substitution(text: str, offset: int) -> Substitution:
    parser = _ExprParser(text, offset)
    expr = parser.expr()
    parser.done()
    return Substitution(expr=expr, offset=offset)


class _BlockBuilder:
    """Nests scanner tokens into ``#foreach`` / ``#if`` bodies."""

    def __init__(self, tokens: list[_Token]) -> None:
        self.tokens = tokens
        self.index = 0

    def build(self) -> tuple[Node, ...]:
        nodes, terminator = self.block()
        if terminator is not None:
            raise _syntax_error(f"Unexpected #{terminator.kind}", terminator.offset)
        return nodes

    def block(self) -> tuple[tuple[Node, ...], _Token | None]:
        """Parse until ``#else`` / ``#end`` / end of input; return the terminator."""
        nodes: list[Node] = []
        while self.index < len(self.tokens):
            token = self.tokens[self.index]
            self.index += 1
            match token.kind:
                case "text":
                    nodes.append(Text(value=token.text))
                case "subst":
                    nodes.append(_parse_substitution(token.text, token.offset))
                case "set":
                    nodes.append(_parse_set(token.text, token.offset))
                case "foreach":
                    nodes.append(self.foreach(token))
                case "if":
                    nodes.append(self.if_block(token))
                case "else" | "end":
                    return tuple(nodes), token
        return tuple(nodes), None

    def foreach(self, opener: _Token) -> ForEach:
        parser = _ExprParser(opener.text, opener.offset)
        variable = parser.variable()
        parser.take("path", "in")
        sequence = parser.expr()
        parser.done()
        body, terminator = self.block()
        if terminator is None or terminator.kind != "end":
            raise _syntax_error("Unclosed #foreach (missing #end)", opener.offset)
        return ForEach(variable=variable, sequence=sequence, body=body, offset=opener.offset)

    def if_block(self, opener: _Token) -> IfBlock:
        condition = _parse_condition(opener.text, opener.offset)
        body, terminator = self.block()
        orelse: tuple[Node, ...] = ()
        if terminator is not None and terminator.kind == "else":
            orelse, terminator = self.block()
        if terminator is None or terminator.kind != "end":
            raise _syntax_error("Unclosed #if (missing #end)", opener.offset)
        return IfBlock(condition=condition, body=body, orelse=orelse, offset=opener.offset)


def parse(source: str) -> tuple[Node, ...]:
    """Parse template source into nodes.

    Raises:
        TemplateFailure: On any syntax error.
    """
    return _BlockBuilder(_scan(source)).build()
