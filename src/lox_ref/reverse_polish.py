"""
Reverse Polish rendering of expressions: (1 + 2) * (4 - 3) --> 1 2 + 4 3 - *

Grouping disappears, since postfix order already encodes it.
"""
from __future__ import annotations

from .ast_printer import format_literal
from .syntax.expr import (
    Assign, Binary, Call, Expr, ExprVisitor, Grouping, Literal, Logical, Ternary, Unary, Variable,
)


class ReversePolish(ExprVisitor[str]):

    def print(self, expr: Expr) -> str:
        return expr.accept(self)

    def visit_assign_expr(self, expr: Assign) -> str:
        return self._rpn("=", expr.value, expr.name.lexeme)

    def visit_binary_expr(self, expr: Binary) -> str:
        return self._rpn(expr.operator.lexeme, expr.left, expr.right)

    def visit_call_expr(self, expr: Call) -> str:
        return self._rpn("call", expr.callee, *expr.arguments)

    def visit_grouping_expr(self, expr: Grouping) -> str:
        return expr.expression.accept(self)

    def visit_literal_expr(self, expr: Literal) -> str:
        return format_literal(expr.value)

    def visit_logical_expr(self, expr: Logical) -> str:
        return self._rpn(expr.operator.lexeme, expr.left, expr.right)

    def visit_unary_expr(self, expr: Unary) -> str:
        return self._rpn(expr.operator.lexeme, expr.right)

    def visit_ternary_expr(self, expr: Ternary) -> str:
        return self._rpn(
            expr.operator1.lexeme + expr.operator2.lexeme,
            expr.condition,
            expr.left,
            expr.right,
        )

    def visit_variable_expr(self, expr: Variable) -> str:
        return expr.name.lexeme

    def _rpn(self, name: str, *operands: object) -> str:
        parts = [op.accept(self) if isinstance(op, Expr) else str(op) for op in operands]
        parts.append(name)
        return " ".join(parts)
