"""Injected type catalog: the host type universe as an explicit graph."""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import yaml

from .logging import get_logger
from .models import (
    PRIMITIVE_ALIASES,
    EnumMember,
    FieldDescriptor,
    GenericInterface,
    InterfaceKind,
    TypeDescriptor,
    dict_of,
    list_of,
)

_MAX_ENUM_BITS = 64


class CatalogError(RuntimeError):
    """Raised when a type catalog is malformed."""


class TypeCatalog:
    """Named types plus a parent -> children index for subclass walks."""

    def __init__(self, types: Iterable[TypeDescriptor] = ()) -> None:
        self._types: Dict[str, TypeDescriptor] = {}
        self._children: Dict[int, List[TypeDescriptor]] = {}
        for descriptor in types:
            self.add(descriptor)

    def add(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        if descriptor.name in self._types:
            raise CatalogError(f"Duplicate type name '{descriptor.name}'")
        self._types[descriptor.name] = descriptor
        if descriptor.base is not None:
            self._children.setdefault(id(descriptor.base), []).append(descriptor)
        return descriptor

    def get(self, name: str) -> Optional[TypeDescriptor]:
        return self._types.get(name)

    def require(self, name: str) -> TypeDescriptor:
        descriptor = self._types.get(name)
        if descriptor is None:
            raise CatalogError(f"Type '{name}' is not declared in the catalog")
        return descriptor

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def children(self, base: TypeDescriptor) -> List[TypeDescriptor]:
        """Direct subclasses of ``base`` in registration order."""
        return list(self._children.get(id(base), []))

    def all_subclasses(self, base: TypeDescriptor) -> List[TypeDescriptor]:
        """Every descendant of ``base`` (abstract or not), excluding ``base``.

        Order is breadth-first and carries no contract; sort when it matters.
        """
        result: List[TypeDescriptor] = []
        pending = deque(self.children(base))
        while pending:
            descriptor = pending.popleft()
            result.append(descriptor)
            pending.extend(self.children(descriptor))
        return result

    def all_concrete_subclasses(self, base: TypeDescriptor) -> List[TypeDescriptor]:
        return [descriptor for descriptor in self.all_subclasses(base) if not descriptor.is_abstract]


# ----------------------------------------------------------------------
# Loading


class _CatalogReader:
    """Two-pass reader: declare every named type, then link bases and fields."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.catalog = TypeCatalog()
        self._named: Dict[str, TypeDescriptor] = {}
        self._opaque: Dict[str, TypeDescriptor] = {}
        self.logger = get_logger("catalog")

    def read(self, entries: Sequence[Any]) -> TypeCatalog:
        pending: List[Tuple[TypeDescriptor, Mapping[str, Any]]] = []
        named: Dict[str, TypeDescriptor] = {}
        for index, entry in enumerate(entries):
            if not isinstance(entry, Mapping):
                raise CatalogError(f"{self.source}: types[{index}] must be a mapping")
            name = entry.get("name")
            if not isinstance(name, str) or not name:
                raise CatalogError(f"{self.source}: types[{index}] is missing a name")
            if name in named or name in PRIMITIVE_ALIASES:
                raise CatalogError(f"{self.source}: duplicate type name '{name}'")
            descriptor = TypeDescriptor(
                name=name,
                is_abstract=bool(entry.get("abstract", False)),
                is_enum=bool(entry.get("enum", False)),
                is_flags=bool(entry.get("flags", False)),
            )
            named[name] = descriptor
            pending.append((descriptor, entry))
        self._named = named

        for descriptor, entry in pending:
            base_name = entry.get("base")
            if base_name is not None:
                base = named.get(str(base_name))
                if base is None:
                    raise CatalogError(
                        f"{self.source}: base '{base_name}' of '{descriptor.name}' is not declared"
                    )
                descriptor.base = base
        self._check_cycles(named.values())

        for descriptor, entry in pending:
            if descriptor.is_enum:
                self._read_enum(descriptor, entry)
            descriptor.fields = self._read_fields(descriptor, entry.get("fields") or [])
            descriptor.interfaces = self._read_interfaces(
                descriptor.name, entry.get("interfaces") or []
            )

        for descriptor in named.values():
            self.catalog.add(descriptor)
        return self.catalog

    def _check_cycles(self, descriptors: Iterable[TypeDescriptor]) -> None:
        for descriptor in descriptors:
            seen = {id(descriptor)}
            current = descriptor.base
            while current is not None:
                if id(current) in seen:
                    raise CatalogError(
                        f"{self.source}: inheritance cycle through '{descriptor.name}'"
                    )
                seen.add(id(current))
                current = current.base

    def _read_enum(self, descriptor: TypeDescriptor, entry: Mapping[str, Any]) -> None:
        bits = entry.get("bits", 32)
        if not isinstance(bits, int) or isinstance(bits, bool) or not 1 <= bits <= _MAX_ENUM_BITS:
            raise CatalogError(f"{self.source}: enum '{descriptor.name}' has invalid bits {bits!r}")
        descriptor.underlying_bits = bits
        members: List[EnumMember] = []
        for raw in entry.get("members") or []:
            if not isinstance(raw, Mapping) or "name" not in raw or "value" not in raw:
                raise CatalogError(
                    f"{self.source}: enum '{descriptor.name}' members need a name and a value"
                )
            value = raw["value"]
            if isinstance(value, str):
                try:
                    value = int(value, 0)
                except ValueError:
                    raise CatalogError(
                        f"{self.source}: enum '{descriptor.name}' value {value!r} is not an integer"
                    ) from None
            if not isinstance(value, int) or isinstance(value, bool):
                raise CatalogError(
                    f"{self.source}: enum '{descriptor.name}' value {value!r} is not an integer"
                )
            if not -(1 << (bits - 1)) <= value < (1 << bits):
                raise CatalogError(
                    f"{self.source}: enum '{descriptor.name}' value {value} does not fit in {bits} bits"
                )
            members.append(EnumMember(name=str(raw["name"]), value=value))
        descriptor.members = members

    def _read_fields(self, owner: TypeDescriptor, raw_fields: Any) -> List[FieldDescriptor]:
        if not isinstance(raw_fields, list):
            raise CatalogError(f"{self.source}: fields of '{owner.name}' must be a list")
        fields: List[FieldDescriptor] = []
        for raw in raw_fields:
            if not isinstance(raw, Mapping) or "name" not in raw or "type" not in raw:
                raise CatalogError(
                    f"{self.source}: fields of '{owner.name}' need a name and a type"
                )
            fields.append(FieldDescriptor(name=str(raw["name"]), type=self.resolve(raw["type"])))
        return fields

    def _read_interfaces(self, owner: str, raw_interfaces: Any) -> List[GenericInterface]:
        if not isinstance(raw_interfaces, list):
            raise CatalogError(f"{self.source}: interfaces of '{owner}' must be a list")
        interfaces: List[GenericInterface] = []
        for raw in raw_interfaces:
            if isinstance(raw, Mapping) and "list" in raw:
                interfaces.append(
                    GenericInterface(InterfaceKind.LIST, (self.resolve(raw["list"]),))
                )
            elif isinstance(raw, Mapping) and "dict" in raw:
                interfaces.append(
                    GenericInterface(InterfaceKind.DICT, self._resolve_pair(owner, raw["dict"]))
                )
            else:
                raise CatalogError(
                    f"{self.source}: interfaces of '{owner}' must be {{list: T}} or {{dict: [K, V]}}"
                )
        return interfaces

    def _resolve_pair(self, owner: str, raw: Any) -> Tuple[TypeDescriptor, TypeDescriptor]:
        if not isinstance(raw, list) or len(raw) != 2:
            raise CatalogError(f"{self.source}: dictionary in '{owner}' needs [key, value]")
        return self.resolve(raw[0]), self.resolve(raw[1])

    def resolve(self, raw: Any) -> TypeDescriptor:
        """Turn a field type (a name or an inline container mapping) into a descriptor."""
        if isinstance(raw, str):
            if raw in PRIMITIVE_ALIASES:
                return PRIMITIVE_ALIASES[raw]
            if raw in self._named:
                return self._named[raw]
            opaque = self._opaque.get(raw)
            if opaque is None:
                self.logger.debug("Treating undeclared type '%s' as opaque", raw)
                opaque = TypeDescriptor(name=raw)
                self._opaque[raw] = opaque
            return opaque
        if isinstance(raw, Mapping):
            keys = set(raw)
            if keys == {"list"}:
                return list_of(self.resolve(raw["list"]))
            if keys == {"dict"}:
                key, value = self._resolve_pair("inline type", raw["dict"])
                return dict_of(key, value)
            if "name" in keys and keys <= {"name", "interfaces"}:
                return self._resolve_named(raw)
        raise CatalogError(f"{self.source}: unsupported field type {raw!r}")

    def _resolve_named(self, raw: Mapping[str, Any]) -> TypeDescriptor:
        name = raw["name"]
        if not isinstance(name, str) or not name:
            raise CatalogError(f"{self.source}: unsupported field type {dict(raw)!r}")
        interfaces = raw.get("interfaces") or []
        known = self._named.get(name) or PRIMITIVE_ALIASES.get(name)
        if known is not None:
            if interfaces:
                raise CatalogError(
                    f"{self.source}: interfaces of declared type '{name}' belong on its types entry"
                )
            return known
        return TypeDescriptor(name=name, interfaces=self._read_interfaces(name, interfaces))


def build_catalog(document: Any, *, source: str = "<catalog>") -> Tuple[TypeCatalog, List[Tuple[str, str, str]]]:
    """Build a catalog from a parsed document.

    Returns the catalog and the ``(group, category, text)`` declaration blocks
    listed under ``declarations``.
    """
    if not isinstance(document, Mapping):
        raise CatalogError(f"{source}: catalog must contain a mapping at the root")
    entries = document.get("types") or []
    if not isinstance(entries, list):
        raise CatalogError(f"{source}: 'types' must be a list")
    catalog = _CatalogReader(source).read(entries)

    declarations: List[Tuple[str, str, str]] = []
    for index, raw in enumerate(document.get("declarations") or []):
        if not isinstance(raw, Mapping) or not all(key in raw for key in ("group", "category", "text")):
            raise CatalogError(
                f"{source}: declarations[{index}] needs group, category and text"
            )
        declarations.append((str(raw["group"]), str(raw["category"]), str(raw["text"])))
    return catalog, declarations


def load_catalog(path: Path) -> Tuple[TypeCatalog, List[Tuple[str, str, str]]]:
    """Read a YAML (or JSON) catalog file from disk."""
    path = Path(path).expanduser()
    text = path.read_text(encoding="utf-8")
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CatalogError(f"Failed to parse {path.name}: {exc}") from exc
    return build_catalog(document or {}, source=path.name)


__all__ = ["CatalogError", "TypeCatalog", "build_catalog", "load_catalog"]
