# Generated by lox_ref.tool.generate_ast from the Expr descriptors. Do not edit.
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Tuple, TypeVar

from lox_ref.syntax.nodes import Node
from lox_ref.token_types import Token
from lox_ref.types import UnhandledVariantError

R = TypeVar("R")


class ExprVisitor(ABC, Generic[R]):
    """One operation per Expr variant; a subclass must implement every one."""

    @abstractmethod
    def visit_assign_expr(self, expr: Assign) -> R:
        raise UnhandledVariantError("Expr.Assign", self)

    @abstractmethod
    def visit_binary_expr(self, expr: Binary) -> R:
        raise UnhandledVariantError("Expr.Binary", self)

    @abstractmethod
    def visit_call_expr(self, expr: Call) -> R:
        raise UnhandledVariantError("Expr.Call", self)

    @abstractmethod
    def visit_grouping_expr(self, expr: Grouping) -> R:
        raise UnhandledVariantError("Expr.Grouping", self)

    @abstractmethod
    def visit_literal_expr(self, expr: Literal) -> R:
        raise UnhandledVariantError("Expr.Literal", self)

    @abstractmethod
    def visit_logical_expr(self, expr: Logical) -> R:
        raise UnhandledVariantError("Expr.Logical", self)

    @abstractmethod
    def visit_unary_expr(self, expr: Unary) -> R:
        raise UnhandledVariantError("Expr.Unary", self)

    @abstractmethod
    def visit_ternary_expr(self, expr: Ternary) -> R:
        raise UnhandledVariantError("Expr.Ternary", self)

    @abstractmethod
    def visit_variable_expr(self, expr: Variable) -> R:
        raise UnhandledVariantError("Expr.Variable", self)


class Expr(Node, family="Expr"):
    """Closed family: only the variants declared in this module belong to it."""

    @abstractmethod
    def accept(self, visitor: ExprVisitor[R]) -> R:
        raise NotImplementedError


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_assign_expr(self)


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_binary_expr(self)


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: Tuple[Expr, ...]

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_call_expr(self)


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_grouping_expr(self)


@dataclass(frozen=True)
class Literal(Expr):
    value: object

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_literal_expr(self)


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_logical_expr(self)


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_unary_expr(self)


@dataclass(frozen=True)
class Ternary(Expr):
    condition: Expr
    operator1: Token
    left: Expr
    operator2: Token
    right: Expr

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_ternary_expr(self)


@dataclass(frozen=True)
class Variable(Expr):
    name: Token

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_variable_expr(self)
