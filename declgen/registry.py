"""Run-scoped registries for discovered enums and contributed declaration blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence, Tuple

from .logging import get_logger
from .models import TypeDescriptor

DEFAULT_GROUPS: Tuple[str, ...] = ("Database", "Langbase")

_LOGGER = get_logger("registry")


class EnumRegistry:
    """Deduplicating set of enum descriptors discovered during classification."""

    def __init__(self) -> None:
        # dict preserves discovery order; keys compare by identity
        self._types: Dict[TypeDescriptor, None] = {}

    def add(self, descriptor: TypeDescriptor) -> bool:
        """Register an enum type. Returns False when it was already present."""
        if descriptor in self._types:
            return False
        self._types[descriptor] = None
        _LOGGER.debug("Registered enum %s", descriptor.name)
        return True

    def __contains__(self, descriptor: object) -> bool:
        return descriptor in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._types)

    def sorted(self) -> List[TypeDescriptor]:
        return sorted(self._types, key=lambda descriptor: descriptor.name)


class DeclarationRegistry:
    """Pre-rendered declaration blocks keyed by export group, then category.

    The first registration for a (group, category) pair wins; later ones are
    ignored.
    """

    def __init__(self, groups: Sequence[str] = DEFAULT_GROUPS) -> None:
        self._blocks: Dict[str, Dict[str, str]] = {group: {} for group in groups}

    @property
    def groups(self) -> List[str]:
        return list(self._blocks)

    def register(self, group: str, category: str, text: str) -> bool:
        """Store ``text`` for ``category`` under ``group``.

        Raises KeyError for a group outside the fixed set. Returns False when
        the category was already registered.
        """
        try:
            categories = self._blocks[group]
        except KeyError:
            raise KeyError(f"Unknown declaration group '{group}'") from None
        if category in categories:
            _LOGGER.debug("Ignoring duplicate declaration block %s/%s", group, category)
            return False
        categories[category] = text
        return True

    def blocks(self, group: str) -> List[Tuple[str, str]]:
        """Return ``(category, text)`` pairs for ``group`` in registration order."""
        return list(self._blocks.get(group, {}).items())

    def get(self, group: str, category: str) -> str | None:
        return self._blocks.get(group, {}).get(category)


@dataclass
class ExportContext:
    """Mutable state for a single export run. Create a fresh one per run."""

    enums: EnumRegistry = field(default_factory=EnumRegistry)
    declarations: DeclarationRegistry = field(default_factory=DeclarationRegistry)

    def register_extra_block(self, group: str, category: str, text: str) -> bool:
        """Collaborator entry point for contributing a declaration block."""
        return self.declarations.register(group, category, text)


__all__ = ["DEFAULT_GROUPS", "DeclarationRegistry", "EnumRegistry", "ExportContext"]
