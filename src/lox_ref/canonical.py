"""
Canonical text form of syntax trees.

``dumps`` writes a lossless s-expression; ``loads`` reads it back with a lark
LALR parser and rebuilds the tree through the variant constructors, so every
construction check applies to the rebuilt tree as well.

    (Expr.Binary (Expr.Literal 1) <PLUS "+" nil 1> (Expr.Literal 2))

Nodes are ``(Family.Variant field ...)``, tokens ``<TYPE "lexeme" literal line>``,
sequences ``[ ... ]``; atoms are ``nil``, ``true``, ``false``, numbers and
JSON-escaped strings.
"""
from __future__ import annotations

import dataclasses
import json
import math
from typing import Any, Dict, Iterable, Optional, Type

from lark import Lark, Transformer, UnexpectedInput, v_args
from lark.exceptions import VisitError

from .syntax import FAMILIES
from .syntax.expr import (
    Assign, Binary, Call, ExprVisitor, Grouping, Literal, Logical, Ternary, Unary, Variable,
)
from .syntax.nodes import Node, variants
from .syntax.stmt import Block, Expression, Function, If, Print, StmtVisitor, Var, While
from .token_types import TT, Token


class CanonicalFormError(Exception):
    """Text that is not a canonical tree, or a tree that has no canonical form."""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line is not None and line > 0 else message
        )


GRAMMAR = r"""
    ?start: value

    ?value: node
          | token
          | seq
          | atom

    node: "(" VARIANT value* ")"
    token: "<" KIND ESCAPED_STRING atom NUMBER ">"
    seq: "[" value* "]"

    ?atom: "nil"          -> nil
         | "true"         -> true
         | "false"        -> false
         | NUMBER         -> number
         | ESCAPED_STRING -> string

    VARIANT: /[A-Z][A-Za-z0-9]*\.[A-Z][A-Za-z0-9]*/
    KIND: /[A-Z][A-Z_]*/
    NUMBER: /-?\d+(\.\d+)?([eE][+-]?\d+)?/

    %import common.ESCAPED_STRING
    %import common.WS
    %ignore WS
"""

_PARSER: Optional[Lark] = None


def _parser() -> Lark:
    global _PARSER

    if _PARSER is None:
        _PARSER = Lark(GRAMMAR, parser="lalr", start="start")

    return _PARSER


# ============================================================================
# Writing
# ============================================================================

def _atom(value: Any) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise CanonicalFormError(f"Non-finite number {value!r} has no canonical form")
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value)

    raise CanonicalFormError(f"{type(value).__name__} value has no canonical form")


class CanonicalWriter(ExprVisitor[str], StmtVisitor[str]):
    """Every variant renders the same way: its qualified name, then its fields in order."""

    def write(self, node: Node) -> str:
        return node.accept(self)

    def visit_assign_expr(self, expr: Assign) -> str:
        return self._form(expr)

    def visit_binary_expr(self, expr: Binary) -> str:
        return self._form(expr)

    def visit_call_expr(self, expr: Call) -> str:
        return self._form(expr)

    def visit_grouping_expr(self, expr: Grouping) -> str:
        return self._form(expr)

    def visit_literal_expr(self, expr: Literal) -> str:
        return self._form(expr)

    def visit_logical_expr(self, expr: Logical) -> str:
        return self._form(expr)

    def visit_unary_expr(self, expr: Unary) -> str:
        return self._form(expr)

    def visit_ternary_expr(self, expr: Ternary) -> str:
        return self._form(expr)

    def visit_variable_expr(self, expr: Variable) -> str:
        return self._form(expr)

    def visit_block_stmt(self, stmt: Block) -> str:
        return self._form(stmt)

    def visit_expression_stmt(self, stmt: Expression) -> str:
        return self._form(stmt)

    def visit_function_stmt(self, stmt: Function) -> str:
        return self._form(stmt)

    def visit_if_stmt(self, stmt: If) -> str:
        return self._form(stmt)

    def visit_print_stmt(self, stmt: Print) -> str:
        return self._form(stmt)

    def visit_while_stmt(self, stmt: While) -> str:
        return self._form(stmt)

    def visit_var_stmt(self, stmt: Var) -> str:
        return self._form(stmt)

    def _form(self, node: Node) -> str:
        parts = [node.variant_name()]

        for field in dataclasses.fields(node):  # type: ignore[arg-type]
            parts.append(self._value(getattr(node, field.name)))

        return "(" + " ".join(parts) + ")"

    def _value(self, value: Any) -> str:
        if isinstance(value, Node):
            return value.accept(self)
        if isinstance(value, Token):
            return f"<{value.type.name} {json.dumps(value.lexeme)} {_atom(value.literal)} {value.line}>"
        if isinstance(value, tuple):
            return "[" + " ".join(self._value(item) for item in value) + "]"

        return _atom(value)


def dumps(node: Node) -> str:
    return CanonicalWriter().write(node)


# ============================================================================
# Reading
# ============================================================================

def _number(text: str) -> Any:
    if any(ch in text for ch in ".eE"):
        return float(text)
    return int(text)


@v_args(inline=True)
class TreeBuilder(Transformer):
    """Rebuild tokens and nodes bottom-up from the parse tree."""

    def __init__(self, registry: Dict[str, Type[Node]]):
        super().__init__()
        self.registry = registry

    def node(self, variant, *fields):
        cls = self.registry.get(str(variant))
        if cls is None:
            raise CanonicalFormError(f"Unknown variant '{variant}'", variant.line, variant.column)

        try:
            return cls(*fields)
        except TypeError as exc:
            raise CanonicalFormError(f"Cannot build {variant}: {exc}", variant.line, variant.column) from exc

    def token(self, kind, lexeme, literal, line):
        try:
            token_type = TT[str(kind)]
        except KeyError:
            raise CanonicalFormError(f"Unknown token type '{kind}'", kind.line, kind.column) from None

        try:
            line_no = int(line)
        except ValueError:
            raise CanonicalFormError(f"Token line must be an integer, got {line}", line.line, line.column) from None

        return Token(token_type, json.loads(lexeme), literal, line_no)

    def seq(self, *items):
        return list(items)

    def nil(self):
        return None

    def true(self):
        return True

    def false(self):
        return False

    def number(self, tok):
        return _number(str(tok))

    def string(self, tok):
        return json.loads(tok)


def build_registry(families: Iterable[Type[Node]] = FAMILIES) -> Dict[str, Type[Node]]:
    registry: Dict[str, Type[Node]] = {}

    for family in families:
        for cls in variants(family):
            registry[cls.variant_name()] = cls

    return registry


def loads(text: str, families: Iterable[Type[Node]] = FAMILIES) -> Node:
    try:
        tree = _parser().parse(text)
    except UnexpectedInput as exc:
        raise CanonicalFormError(
            f"Malformed canonical tree: {exc}", getattr(exc, "line", None), getattr(exc, "column", None)
        ) from exc

    try:
        result = TreeBuilder(build_registry(families)).transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, CanonicalFormError):
            raise exc.orig_exc from None
        raise

    if not isinstance(result, Node):
        raise CanonicalFormError(f"Expected a node at top level, got {type(result).__name__}")

    return result
