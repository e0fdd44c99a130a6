"""Renders ``declare interface`` blocks."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..classifier import TypeClassifier
from ..models import FieldDescriptor, TypeDescriptor

READONLY_DICT_DECLARATION = "\n".join(
    [
        "declare interface ReadonlyDict<T> {",
        "  readonly [key: string]: T",
        "}",
    ]
)


class InterfaceEmitter:
    """Builds one interface block per type from its own declared fields."""

    def __init__(self, classifier: TypeClassifier) -> None:
        self.classifier = classifier

    def emit(
        self,
        descriptor: TypeDescriptor,
        fields: Optional[Sequence[FieldDescriptor]] = None,
        extends: Optional[TypeDescriptor] = None,
    ) -> str:
        """Return the block without a trailing newline.

        ``fields`` defaults to the type's own declared fields; inherited
        fields are expressed through ``extends`` and never repeated.
        """
        header = f"declare interface {descriptor.name}"
        if extends is not None:
            header += f" extends {extends.name}"
        lines: List[str] = [header + " {"]
        for field in descriptor.fields if fields is None else fields:
            lines.append(f"  readonly {field.name}: {self.classifier.classify(field.type)};")
        lines.append("}")
        return "\n".join(lines)
