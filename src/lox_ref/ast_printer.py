"""Parenthesized prefix rendering of Expr and Stmt trees, for eyeballing what a parser built."""
from __future__ import annotations

from typing import Union

from .syntax.expr import (
    Assign, Binary, Call, ExprVisitor, Grouping, Literal, Logical, Ternary, Unary, Variable,
)
from .syntax.nodes import Node
from .syntax.stmt import Block, Expression, Function, If, Print, StmtVisitor, Var, While


def format_literal(value: object) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class AstPrinter(ExprVisitor[str], StmtVisitor[str]):
    """(* (- 123) (group 45.67))"""

    def print(self, node: Node) -> str:
        return node.accept(self)

    # ---- expressions ----

    def visit_assign_expr(self, expr: Assign) -> str:
        return self._parenthesize("=", expr.name.lexeme, expr.value)

    def visit_binary_expr(self, expr: Binary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_call_expr(self, expr: Call) -> str:
        return self._parenthesize("call", expr.callee, *expr.arguments)

    def visit_grouping_expr(self, expr: Grouping) -> str:
        return self._parenthesize("group", expr.expression)

    def visit_literal_expr(self, expr: Literal) -> str:
        return format_literal(expr.value)

    def visit_logical_expr(self, expr: Logical) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_unary_expr(self, expr: Unary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.right)

    def visit_ternary_expr(self, expr: Ternary) -> str:
        return self._parenthesize(
            expr.operator1.lexeme + expr.operator2.lexeme,
            expr.condition,
            expr.left,
            expr.right,
        )

    def visit_variable_expr(self, expr: Variable) -> str:
        return expr.name.lexeme

    # ---- statements ----

    def visit_block_stmt(self, stmt: Block) -> str:
        return self._parenthesize("block", *stmt.statements)

    def visit_expression_stmt(self, stmt: Expression) -> str:
        return self._parenthesize(";", stmt.expression)

    def visit_function_stmt(self, stmt: Function) -> str:
        params = "(" + " ".join(p.lexeme for p in stmt.params) + ")"
        return self._parenthesize("fun", stmt.name.lexeme, params, *stmt.body)

    def visit_if_stmt(self, stmt: If) -> str:
        if stmt.else_branch is None:
            return self._parenthesize("if", stmt.condition, stmt.then_branch)
        return self._parenthesize("if", stmt.condition, stmt.then_branch, stmt.else_branch)

    def visit_print_stmt(self, stmt: Print) -> str:
        return self._parenthesize("print", stmt.expression)

    def visit_while_stmt(self, stmt: While) -> str:
        return self._parenthesize("while", stmt.condition, stmt.body)

    def visit_var_stmt(self, stmt: Var) -> str:
        if stmt.initializer is None:
            return self._parenthesize("var", stmt.name.lexeme)
        return self._parenthesize("var", stmt.name.lexeme, stmt.initializer)

    def _parenthesize(self, name: str, *parts: Union[Node, str]) -> str:
        pieces = [name]

        for part in parts:
            pieces.append(part.accept(self) if isinstance(part, Node) else part)

        return "(" + " ".join(pieces) + ")"
