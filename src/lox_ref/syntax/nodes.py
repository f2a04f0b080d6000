"""Base class shared by every generated node family.

Generated variants are frozen dataclasses deriving from a family base, which
derives from Node. Node does the work the generated code leaves out:

- checks each field against its declared annotation as soon as the node is built,
- stores sequences as tuples,
- takes ownership of child nodes (a node has at most one parent),
- keeps each family closed to the variants of its generated module.
"""
from __future__ import annotations

import dataclasses
import typing
from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional, Tuple, Type, Union
from typing_extensions import TypeGuard

from ..types import NodeConstructionError


class Node(ABC):
    _adopted = False

    def __init_subclass__(cls, family: Optional[str] = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        if family is not None:
            cls.family = family
            cls.variants = {}
            return

        base = _family_base(cls)
        if base is None:
            raise TypeError(f"{cls.__qualname__} must derive from a node family")

        if cls.__module__ != base.__module__:
            raise TypeError(
                f"{base.family} is closed; {cls.__qualname__} cannot join it from {cls.__module__}"
            )

        if cls.__name__ in base.variants:
            raise TypeError(f"{base.family} already has a variant named {cls.__name__}")

        base.variants[cls.__name__] = cls

    @classmethod
    def variant_name(cls) -> str:
        return f"{cls.family}.{cls.__name__}"

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        raise NotImplementedError

    def children(self) -> Iterator[Node]:
        """Yield direct child nodes in field order."""
        for field in dataclasses.fields(self):  # type: ignore[arg-type]
            yield from _nodes_in(getattr(self, field.name))

    def __post_init__(self) -> None:
        for name, expected in _field_types(type(self)):
            value = getattr(self, name)

            if _is_sequence_type(expected) and isinstance(value, list):
                value = tuple(value)
                object.__setattr__(self, name, value)

            if not _matches(expected, value):
                raise NodeConstructionError(
                    self.variant_name(),
                    f"field '{name}' expects {_describe(expected)}, got {type(value).__name__}",
                )

        kids = list(self.children())
        seen = set()

        for child in kids:
            if child._adopted or id(child) in seen:
                raise NodeConstructionError(
                    self.variant_name(),
                    f"{child.variant_name()} already belongs to another node",
                )
            seen.add(id(child))

        for child in kids:
            object.__setattr__(child, "_adopted", True)


def is_node(value: object) -> TypeGuard[Node]:
    return isinstance(value, Node)

def variants(family: Type[Node]) -> List[Type[Node]]:
    """Variants of *family* in declaration order."""
    return list(family.variants.values())

def _family_base(cls: type) -> Optional[Type[Node]]:
    for klass in cls.__mro__[1:]:
        if "variants" in vars(klass):
            return klass
    return None

def _nodes_in(value: object) -> Iterator[Node]:
    if isinstance(value, Node):
        yield value
    elif isinstance(value, tuple):
        for item in value:
            yield from _nodes_in(item)

def _field_types(cls: Type[Node]) -> List[Tuple[str, Any]]:
    cached = cls.__dict__.get("_checked_fields")
    if cached is not None:
        return cached

    # Annotations are strings; resolve them in the generated module's namespace.
    hints = typing.get_type_hints(cls)
    checked = [(f.name, hints[f.name]) for f in dataclasses.fields(cls)]
    cls._checked_fields = checked  # type: ignore[attr-defined]
    return checked

def _is_sequence_type(expected: Any) -> bool:
    return typing.get_origin(expected) is tuple

def _matches(expected: Any, value: object) -> bool:
    if expected is object or expected is Any:
        return True

    if expected is type(None):
        return value is None

    origin = typing.get_origin(expected)

    if origin is Union:
        return any(_matches(arg, value) for arg in typing.get_args(expected))

    if origin is tuple:
        if not isinstance(value, tuple):
            return False
        element = typing.get_args(expected)[0]
        return all(_matches(element, item) for item in value)

    return isinstance(value, expected)

def _describe(expected: Any) -> str:
    if expected is type(None):
        return "None"

    origin = typing.get_origin(expected)

    if origin is Union:
        return " or ".join(_describe(arg) for arg in typing.get_args(expected))

    if origin is tuple:
        return f"a sequence of {_describe(typing.get_args(expected)[0])}"

    return getattr(expected, "__name__", repr(expected))

