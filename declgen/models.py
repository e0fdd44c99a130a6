"""Core type-graph models shared across declgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class InterfaceKind(str, Enum):
    """Generic container shapes the classifier understands."""

    LIST = "list"
    DICT = "dict"

    @property
    def arity(self) -> int:
        return 1 if self is InterfaceKind.LIST else 2


@dataclass
class GenericInterface:
    """A closed generic interface implemented by a type, e.g. ``IList<int>``."""

    kind: InterfaceKind
    arguments: Tuple["TypeDescriptor", ...]


@dataclass
class FieldDescriptor:
    """A declared field: its name and the descriptor of its value type."""

    name: str
    type: "TypeDescriptor"


@dataclass
class EnumMember:
    """A single named enum value."""

    name: str
    value: int


@dataclass(eq=False)
class TypeDescriptor:
    """Handle into the host type universe.

    Descriptors compare and hash by identity so registries can key on them.
    """

    name: str
    fields: List[FieldDescriptor] = field(default_factory=list)
    base: Optional["TypeDescriptor"] = None
    is_abstract: bool = False
    is_enum: bool = False
    is_flags: bool = False
    members: List[EnumMember] = field(default_factory=list)
    underlying_bits: int = 32
    interfaces: List[GenericInterface] = field(default_factory=list)
    primitive: Optional[str] = None

    def ancestors(self) -> Iterator["TypeDescriptor"]:
        """Yield the base chain, nearest parent first."""
        current = self.base
        while current is not None:
            yield current
            current = current.base

    def is_subclass_of(self, other: "TypeDescriptor") -> bool:
        """Return True when ``other`` is a strict ancestor of this type."""
        return any(ancestor is other for ancestor in self.ancestors())

    def __repr__(self) -> str:
        return f"TypeDescriptor({self.name!r})"


# Builtin primitive descriptors; ``primitive`` is the key into the classifier's table.
BOOL = TypeDescriptor(name="Boolean", primitive="bool")
INT = TypeDescriptor(name="Int32", primitive="int")
FLOAT = TypeDescriptor(name="Single", primitive="float")
DOUBLE = TypeDescriptor(name="Double", primitive="double")
STRING = TypeDescriptor(name="String", primitive="string")
COLOR = TypeDescriptor(name="Color", primitive="color")

PRIMITIVE_ALIASES = {
    "bool": BOOL,
    "boolean": BOOL,
    "Boolean": BOOL,
    "int": INT,
    "Int32": INT,
    "float": FLOAT,
    "Single": FLOAT,
    "double": DOUBLE,
    "Double": DOUBLE,
    "string": STRING,
    "String": STRING,
    "Color": COLOR,
}


def list_of(element: TypeDescriptor, *, name: str | None = None) -> TypeDescriptor:
    """Build a descriptor implementing the single-parameter list interface."""
    return TypeDescriptor(
        name=name or f"List<{element.name}>",
        interfaces=[GenericInterface(InterfaceKind.LIST, (element,))],
    )


def dict_of(
    key: TypeDescriptor, value: TypeDescriptor, *, name: str | None = None
) -> TypeDescriptor:
    """Build a descriptor implementing the two-parameter dictionary interface."""
    return TypeDescriptor(
        name=name or f"Dictionary<{key.name}, {value.name}>",
        interfaces=[GenericInterface(InterfaceKind.DICT, (key, value))],
    )


__all__ = [
    "BOOL",
    "COLOR",
    "DOUBLE",
    "EnumMember",
    "FLOAT",
    "FieldDescriptor",
    "GenericInterface",
    "INT",
    "InterfaceKind",
    "PRIMITIVE_ALIASES",
    "STRING",
    "TypeDescriptor",
    "dict_of",
    "list_of",
]
