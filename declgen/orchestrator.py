"""Export orchestration: one run writes every declaration artifact."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .catalog import CatalogError, TypeCatalog
from .classifier import ClassifierRoots, TypeClassifier
from .config import DeclGenConfig
from .logging import get_logger
from .models import TypeDescriptor
from .registry import DeclarationRegistry, EnumRegistry, ExportContext
from .writer import DeclarationWriter


@dataclass
class ExportResult:
    """Outcome of an export run."""

    output_dir: Path
    files: List[Path] = field(default_factory=list)
    enums: List[str] = field(default_factory=list)


class Exporter:
    """Coordinates the declaration writers over a single type catalog."""

    def __init__(self, catalog: TypeCatalog, config: DeclGenConfig | None = None) -> None:
        self.catalog = catalog
        self.config = config or DeclGenConfig(root=Path.cwd())
        self.logger = get_logger("orchestrator")

    def new_context(
        self, extra_blocks: Iterable[Tuple[str, str, str]] = ()
    ) -> ExportContext:
        """Return empty registries for a run, seeded with ``(group, category, text)`` blocks."""
        context = ExportContext(
            enums=EnumRegistry(),
            declarations=DeclarationRegistry(self.config.groups),
        )
        for group, category, text in extra_blocks:
            context.register_extra_block(group, category, text)
        return context

    def roots(self) -> ClassifierRoots:
        names = self.config.roots
        additional = frozenset(
            descriptor
            for descriptor in (self.catalog.get(name) for name in self.config.additional_types)
            if descriptor is not None
        )
        return ClassifierRoots(
            definition=self.catalog.get(names.definition),
            object_root=self.catalog.get(names.object_root),
            typeable=self.catalog.get(names.typeable),
            additional=additional,
        )

    def writer(self, context: ExportContext) -> DeclarationWriter:
        classifier = TypeClassifier(self.roots(), context.enums)
        return DeclarationWriter(self.catalog, context, classifier)

    def basic_types(self) -> List[TypeDescriptor]:
        """Concrete typeable descendants plus the additional value types."""
        types: List[TypeDescriptor] = []
        typeable = self.catalog.get(self.config.roots.typeable)
        if typeable is not None:
            types.extend(self.catalog.all_concrete_subclasses(typeable))
        for name in self.config.additional_types:
            descriptor = self.catalog.get(name)
            if descriptor is None:
                self.logger.warning("Additional type '%s' is not in the catalog", name)
                continue
            types.append(descriptor)
        return types

    def run(self, output_dir: Path, context: Optional[ExportContext] = None) -> ExportResult:
        """Write every artifact into ``output_dir``.

        ``context`` carries blocks registered by collaborators; a fresh one is
        created when omitted. The enum file is written last.
        """
        output_dir = Path(output_dir)
        context = context if context is not None else self.new_context()
        writer = self.writer(context)
        result = ExportResult(output_dir=output_dir)
        self.logger.info("Exporting %d catalog types to %s", len(self.catalog), output_dir)

        object_root = self.catalog.require(self.config.roots.object_root)
        base_types = [self.catalog.require(name) for name in self.config.base_types]
        result.files.append(
            writer.write_flat(output_dir / self.config.base_file, base_types, "base", base=object_root)
        )

        for category in self.config.categories:
            root = self.catalog.get(category.root)
            if root is None:
                raise CatalogError(
                    f"Category '{category.name}' root '{category.root}' is not in the catalog"
                )
            result.files.append(
                writer.write_hierarchical(
                    output_dir / category.file, root, category.comment, category.group
                )
            )

        result.files.append(writer.write_basic(output_dir / self.config.basic_file, self.basic_types()))
        result.files.append(writer.write_enums(output_dir / self.config.enum_file))
        result.enums = [descriptor.name for descriptor in context.enums.sorted()]
        self.logger.info("Export finished: %d files, %d enums", len(result.files), len(result.enums))
        return result


__all__ = ["ExportResult", "Exporter"]
