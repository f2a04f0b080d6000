"""Chained lexical scope frames.

A Frame maps identifier text to a Binding and links to at most one enclosing
frame, fixed at creation. Frames are plain objects: a closure that captures a
frame keeps it (and its ancestors) alive for as long as the closure lives, so
a frame can outlast the block that created it.

Name resolution walks the chain at run time. A static resolver may instead
compute how many frames separate a use from its declaration and call the
``*_at`` forms; both paths share the same tri-state binding rules.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, Optional, Tuple

from .types import (
    Binding,
    Name,
    UndefinedVariableError,
    UninitializedVariableError,
    name_text,
)


class Frame:
    __slots__ = ('_parent', 'vars', '__weakref__')

    def __init__(self, parent: Optional[Frame] = None):
        self._parent = parent
        self.vars: Dict[str, Binding] = {}

    @classmethod
    def root(cls) -> Frame:
        return cls()

    @property
    def parent(self) -> Optional[Frame]:
        return self._parent

    def child(self) -> Frame:
        return Frame(self)

    def __contains__(self, name: Name) -> bool:
        return name_text(name) in self.vars

    def __iter__(self) -> Iterator[str]:
        return iter(self.vars)

    def __repr__(self) -> str:
        return f"Frame(depth={self.depth()}, vars={self.vars!r})"

    def depth(self) -> int:
        depth = 0
        frame = self._parent

        while frame is not None:
            depth += 1
            frame = frame._parent

        return depth

    # ---------- define / get / assign ----------

    def define(self, name: Name, binding: Binding) -> None:
        """Install *binding* in this frame, replacing any earlier one."""
        self.vars[name_text(name)] = binding

    def declare(self, name: Name) -> None:
        self.define(name, Binding.declared())

    def define_value(self, name: Name, value: Any) -> None:
        self.define(name, Binding.initialized(value))

    def get(self, name: Name) -> Any:
        key = name_text(name)
        frame: Optional[Frame] = self

        while frame is not None:
            binding = frame.vars.get(key)

            if binding is not None:
                # A declared slot shadows the enclosing frames even while empty.
                if binding.is_initialized:
                    return binding.value
                raise UninitializedVariableError(name)

            frame = frame._parent

        raise UndefinedVariableError(name)

    def assign(self, name: Name, value: Any) -> None:
        key = name_text(name)
        frame: Optional[Frame] = self

        while frame is not None:
            if key in frame.vars:
                frame.vars[key] = Binding.initialized(value)
                return

            frame = frame._parent

        raise UndefinedVariableError(name)

    def lookup(self, name: Name) -> Optional[Binding]:
        """Return the binding *name* resolves to, or None when unbound."""
        found = self.resolve(name)
        return found[1] if found is not None else None

    def resolve(self, name: Name) -> Optional[Tuple[int, Binding]]:
        """Return (distance, binding) for the nearest frame holding *name*."""
        key = name_text(name)
        frame: Optional[Frame] = self
        distance = 0

        while frame is not None:
            binding = frame.vars.get(key)
            if binding is not None:
                return distance, binding

            frame = frame._parent
            distance += 1

        return None

    # ---------- frame-distance addressing ----------

    def ancestor(self, distance: int) -> Frame:
        if distance < 0:
            raise ValueError(f"frame distance must be non-negative; got {distance}")

        frame: Frame = self

        for _ in range(distance):
            if frame._parent is None:
                raise LookupError(f"frame chain is shorter than {distance}")
            frame = frame._parent

        return frame

    def get_at(self, distance: int, name: Name) -> Any:
        """Read *name* from exactly the frame *distance* levels out."""
        binding = self.ancestor(distance).vars.get(name_text(name))

        if binding is None:
            raise UndefinedVariableError(name)

        if not binding.is_initialized:
            raise UninitializedVariableError(name)

        return binding.value

    def assign_at(self, distance: int, name: Name, value: Any) -> None:
        frame = self.ancestor(distance)
        key = name_text(name)

        if key not in frame.vars:
            raise UndefinedVariableError(name)

        frame.vars[key] = Binding.initialized(value)
