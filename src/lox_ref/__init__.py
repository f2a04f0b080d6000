"""Syntax tree and lexical environment core for a tree-walking Lox interpreter."""

__version__ = "0.1.0"
