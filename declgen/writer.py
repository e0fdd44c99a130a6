"""Declaration file writers: flat, hierarchical, basic and enum artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .catalog import TypeCatalog
from .classifier import TypeClassifier
from .emitters import READONLY_DICT_DECLARATION, EnumEmitter, InterfaceEmitter
from .logging import get_logger
from .models import TypeDescriptor
from .registry import ExportContext

BASIC_HEADER = "// Declaration for basic model types."
ENUM_HEADER = "// Declaration for enum types."


def header_comment(comment: str) -> str:
    return f"// Declaration for {comment} types."


def _assemble(header: Sequence[str], blocks: Iterable[str]) -> str:
    """Header lines, then each block preceded by one blank line."""
    text = "".join(f"{line}\n" for line in header)
    for block in blocks:
        text += f"\n{block}\n"
    return text


def _by_name(types: Iterable[TypeDescriptor]) -> List[TypeDescriptor]:
    return sorted(types, key=lambda descriptor: descriptor.name)


class DeclarationWriter:
    """Renders declaration artifacts for one export run and writes them to disk.

    Enum types discovered while rendering interfaces accumulate in the
    context's enum registry, so the enum file should be rendered last.
    """

    def __init__(
        self,
        catalog: TypeCatalog,
        context: ExportContext,
        classifier: TypeClassifier,
    ) -> None:
        self.catalog = catalog
        self.context = context
        self.interfaces = InterfaceEmitter(classifier)
        self.enums = EnumEmitter()
        self.logger = get_logger("writer")

    # ------------------------------------------------------------------
    # Rendering

    def render_flat(
        self,
        types: Sequence[TypeDescriptor],
        comment: str,
        base: Optional[TypeDescriptor] = None,
    ) -> str:
        """Explicit type list; each type extends ``base`` when it descends from it."""
        blocks: List[str] = []
        if base is not None:
            blocks.append(self.interfaces.emit(base))
        for descriptor in types:
            extends = base if base is not None and descriptor.is_subclass_of(base) else None
            blocks.append(self.interfaces.emit(descriptor, extends=extends))
        return _assemble([header_comment(comment)], blocks)

    def render_hierarchical(
        self, base: TypeDescriptor, comment: str, group: Optional[str] = None
    ) -> str:
        """Every descendant of ``base``, sorted by name, extending its direct parent."""
        blocks = [
            self.interfaces.emit(descriptor, extends=descriptor.base)
            for descriptor in _by_name(self.catalog.all_subclasses(base))
        ]
        if group is not None:
            blocks.extend(text for _, text in self.context.declarations.blocks(group))
        return _assemble([header_comment(comment)], blocks)

    def render_basic(self, types: Iterable[TypeDescriptor]) -> str:
        """Value-holder types without inheritance, after the ReadonlyDict helper."""
        unique = {id(descriptor): descriptor for descriptor in types}
        blocks = [self.interfaces.emit(descriptor) for descriptor in _by_name(unique.values())]
        return _assemble([BASIC_HEADER, READONLY_DICT_DECLARATION], blocks)

    def render_enums(self) -> str:
        blocks = [self.enums.emit(descriptor) for descriptor in self.context.enums.sorted()]
        return _assemble([ENUM_HEADER], blocks)

    # ------------------------------------------------------------------
    # Writing

    def write_flat(
        self,
        path: Path,
        types: Sequence[TypeDescriptor],
        comment: str,
        base: Optional[TypeDescriptor] = None,
    ) -> Path:
        return self._write(path, self.render_flat(types, comment, base))

    def write_hierarchical(
        self, path: Path, base: TypeDescriptor, comment: str, group: Optional[str] = None
    ) -> Path:
        return self._write(path, self.render_hierarchical(base, comment, group))

    def write_basic(self, path: Path, types: Iterable[TypeDescriptor]) -> Path:
        return self._write(path, self.render_basic(types))

    def write_enums(self, path: Path) -> Path:
        return self._write(path, self.render_enums())

    def _write(self, path: Path, text: str) -> Path:
        path = Path(path)
        path.write_text(text, encoding="utf-8")
        self.logger.info("Wrote %s", path)
        return path


__all__ = ["BASIC_HEADER", "DeclarationWriter", "ENUM_HEADER", "header_comment"]
