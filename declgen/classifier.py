"""Maps type descriptors to TypeScript type expressions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Optional, Set, Tuple

from .logging import get_logger
from .models import GenericInterface, InterfaceKind, TypeDescriptor
from .registry import EnumRegistry

ANY = "any"
NULLABLE_STRING = "string | null"

PRIMITIVE_TYPE_NAMES: Dict[str, str] = {
    "bool": "boolean",
    "int": "number",
    "float": "number",
    "double": "number",
    "string": NULLABLE_STRING,
    "color": NULLABLE_STRING,
}


@dataclass(frozen=True)
class ClassifierRoots:
    """Anchor types the classification rules compare against.

    Any root may be None when the catalog does not declare it; the rule that
    depends on it then never matches.
    """

    definition: Optional[TypeDescriptor] = None
    object_root: Optional[TypeDescriptor] = None
    typeable: Optional[TypeDescriptor] = None
    additional: FrozenSet[TypeDescriptor] = field(default_factory=frozenset)


Rule = Callable[[TypeDescriptor], Optional[str]]


class TypeClassifier:
    """Ordered rule table; the first rule returning an expression wins.

    Enum types met along the way are added to ``enums``.
    """

    def __init__(self, roots: ClassifierRoots, enums: EnumRegistry) -> None:
        self.roots = roots
        self.enums = enums
        self.logger = get_logger("classifier")
        self._active: Set[int] = set()
        self._rules: List[Tuple[str, Rule]] = [
            ("primitive", self._primitive),
            ("definition", self._definition),
            ("reference", self._reference),
            ("enum", self._enum),
            ("container", self._container),
        ]

    def classify(self, descriptor: TypeDescriptor) -> str:
        key = id(descriptor)
        if key in self._active:
            self.logger.debug("Cyclic container reference through %s", descriptor.name)
            return ANY
        self._active.add(key)
        try:
            for _, rule in self._rules:
                expression = rule(descriptor)
                if expression is not None:
                    return expression
        finally:
            self._active.discard(key)
        return ANY

    # ------------------------------------------------------------------
    # Rules

    def _primitive(self, descriptor: TypeDescriptor) -> Optional[str]:
        if descriptor.primitive is None:
            return None
        return PRIMITIVE_TYPE_NAMES.get(descriptor.primitive)

    def _definition(self, descriptor: TypeDescriptor) -> Optional[str]:
        root = self.roots.definition
        if root is not None and descriptor.is_subclass_of(root):
            return NULLABLE_STRING
        return None

    def _reference(self, descriptor: TypeDescriptor) -> Optional[str]:
        object_root = self.roots.object_root
        if object_root is not None and (
            descriptor is object_root or descriptor.is_subclass_of(object_root)
        ):
            return descriptor.name
        typeable = self.roots.typeable
        if typeable is not None and descriptor.is_subclass_of(typeable):
            return descriptor.name
        if descriptor in self.roots.additional:
            return descriptor.name
        return None

    def _enum(self, descriptor: TypeDescriptor) -> Optional[str]:
        if not descriptor.is_enum:
            return None
        self.enums.add(descriptor)
        return descriptor.name

    def _container(self, descriptor: TypeDescriptor) -> Optional[str]:
        interface = self._select_interface(descriptor)
        if interface is None:
            return None
        if interface.kind is InterfaceKind.LIST:
            element = self.classify(interface.arguments[0])
            return f"ReadonlyArray<{element}> | null"
        value = self.classify(interface.arguments[1])
        return f"ReadonlyDict<{value}> | null"

    def _select_interface(self, descriptor: TypeDescriptor) -> Optional[GenericInterface]:
        lists: List[GenericInterface] = []
        dicts: List[GenericInterface] = []
        for interface in descriptor.interfaces:
            if len(interface.arguments) != interface.kind.arity:
                continue
            if interface.kind is InterfaceKind.DICT:
                dicts.append(interface)
            else:
                lists.append(interface)
        if dicts:
            if lists:
                self.logger.debug(
                    "%s implements both list and dictionary shapes; using dictionary",
                    descriptor.name,
                )
            return dicts[0]
        if lists:
            return lists[0]
        return None


__all__ = [
    "ANY",
    "ClassifierRoots",
    "NULLABLE_STRING",
    "PRIMITIVE_TYPE_NAMES",
    "TypeClassifier",
]
