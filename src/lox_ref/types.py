from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union
from typing_extensions import TypeAlias

from .token_types import Token

# ---------- Bindings ----------

class BindingState(Enum):
    DECLARED = "declared"
    INITIALIZED = "initialized"

@dataclass(frozen=True)
class Binding:
    """One slot in a frame. Unbound is represented by the slot's absence."""
    state: BindingState
    value: Any = None

    @classmethod
    def declared(cls) -> Binding:
        return cls(BindingState.DECLARED)

    @classmethod
    def initialized(cls, value: Any) -> Binding:
        return cls(BindingState.INITIALIZED, value)

    @property
    def is_initialized(self) -> bool:
        return self.state is BindingState.INITIALIZED

    def __repr__(self) -> str:
        if self.is_initialized:
            return f"Initialized({self.value!r})"
        return "Declared"

# Identifier as the evaluator hands it over: a token when a source location is
# known, a bare string otherwise.
Name: TypeAlias = Union[Token, str]

def name_text(name: Name) -> str:
    return name.lexeme if isinstance(name, Token) else name

def name_token(name: Name) -> Optional[Token]:
    return name if isinstance(name, Token) else None

# ---------- Exceptions (keep Lox* canonical) ----------

class LoxRuntimeError(Exception):
    """Recoverable runtime failure; carries what a presenter needs to render it."""
    kind: str = "runtime-error"

    def __init__(self, message: str, token: Optional[Token] = None):
        super().__init__(message)
        self.message = message
        self.token = token

    @property
    def line(self) -> Optional[int]:
        return self.token.line if self.token is not None else None

class UndefinedVariableError(LoxRuntimeError):
    kind = "undefined-variable"

    def __init__(self, name: Name):
        self.name = name_text(name)
        super().__init__(f"Undefined variable '{self.name}'.", name_token(name))

class UninitializedVariableError(LoxRuntimeError):
    kind = "uninitialized-variable"

    def __init__(self, name: Name):
        self.name = name_text(name)
        super().__init__(f"Cannot access uninitialized variable '{self.name}'.", name_token(name))

class NodeConstructionError(TypeError):
    """A producer built a node with fields that do not match its declaration."""
    def __init__(self, variant: str, message: str):
        super().__init__(f"{variant}: {message}")
        self.variant = variant

class UnhandledVariantError(NotImplementedError):
    """A traversal reached a variant it never implemented."""
    def __init__(self, variant: str, visitor: object):
        super().__init__(f"{type(visitor).__name__} does not handle {variant}")
        self.variant = variant
        self.visitor = visitor
