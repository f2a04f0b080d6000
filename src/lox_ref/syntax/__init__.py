"""Syntax node families. ``expr`` and ``stmt`` are generated by ``lox_ref.tool.generate_ast``."""

from . import expr, stmt
from .nodes import Node, is_node, variants

FAMILIES = (expr.Expr, stmt.Stmt)

__all__ = [
    "FAMILIES",
    "Node",
    "expr",
    "is_node",
    "stmt",
    "variants",
]
