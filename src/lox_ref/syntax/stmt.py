# Generated by lox_ref.tool.generate_ast from the Stmt descriptors. Do not edit.
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

from lox_ref.syntax.nodes import Node
from lox_ref.token_types import Token
from lox_ref.types import UnhandledVariantError
from lox_ref.syntax.expr import Expr

R = TypeVar("R")


class StmtVisitor(ABC, Generic[R]):
    """One operation per Stmt variant; a subclass must implement every one."""

    @abstractmethod
    def visit_block_stmt(self, stmt: Block) -> R:
        raise UnhandledVariantError("Stmt.Block", self)

    @abstractmethod
    def visit_expression_stmt(self, stmt: Expression) -> R:
        raise UnhandledVariantError("Stmt.Expression", self)

    @abstractmethod
    def visit_function_stmt(self, stmt: Function) -> R:
        raise UnhandledVariantError("Stmt.Function", self)

    @abstractmethod
    def visit_if_stmt(self, stmt: If) -> R:
        raise UnhandledVariantError("Stmt.If", self)

    @abstractmethod
    def visit_print_stmt(self, stmt: Print) -> R:
        raise UnhandledVariantError("Stmt.Print", self)

    @abstractmethod
    def visit_while_stmt(self, stmt: While) -> R:
        raise UnhandledVariantError("Stmt.While", self)

    @abstractmethod
    def visit_var_stmt(self, stmt: Var) -> R:
        raise UnhandledVariantError("Stmt.Var", self)


class Stmt(Node, family="Stmt"):
    """Closed family: only the variants declared in this module belong to it."""

    @abstractmethod
    def accept(self, visitor: StmtVisitor[R]) -> R:
        raise NotImplementedError


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_block_stmt(self)


@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_expression_stmt(self)


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_function_stmt(self)


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_if_stmt(self)


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_print_stmt(self)


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_while_stmt(self)


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_var_stmt(self)
