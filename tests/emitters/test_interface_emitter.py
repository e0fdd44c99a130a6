"""Tests for the interface emitter."""

from __future__ import annotations

from declgen.classifier import ClassifierRoots, TypeClassifier
from declgen.emitters import READONLY_DICT_DECLARATION, InterfaceEmitter
from declgen.models import BOOL, INT, FieldDescriptor, list_of
from declgen.registry import EnumRegistry


def _emitter(catalog) -> InterfaceEmitter:
    roots = ClassifierRoots(
        definition=catalog.get("Def"),
        object_root=catalog.get("EObj"),
        typeable=catalog.get("ITypeable"),
        additional=frozenset({catalog.require("FloatRange")}),
    )
    return InterfaceEmitter(TypeClassifier(roots, EnumRegistry()))


def test_emit_lists_own_fields_with_extends(game_catalog) -> None:
    faction = game_catalog.require("DataFaction")
    block = _emitter(game_catalog).emit(faction, extends=faction.base)

    assert block == "\n".join(
        [
            "declare interface DataFaction extends EData {",
            "  readonly isPlayer: boolean;",
            "  readonly techLevel: TechLevel;",
            "  readonly basicMemberKind: string | null;",
            "  readonly hairTags: ReadonlyArray<string | null> | null;",
            "  readonly startingGoodwill: FloatRange;",
            "}",
        ]
    )


def test_emit_without_extends_or_fields(game_catalog) -> None:
    block = _emitter(game_catalog).emit(game_catalog.require("ELang"))
    assert block == "declare interface ELang {\n}"


def test_emit_uses_supplied_field_order(game_catalog) -> None:
    fields = [FieldDescriptor("b", INT), FieldDescriptor("a", list_of(BOOL))]
    block = _emitter(game_catalog).emit(game_catalog.require("Stat"), fields=fields)
    assert block.splitlines()[1:3] == [
        "  readonly b: number;",
        "  readonly a: ReadonlyArray<boolean> | null;",
    ]


def test_readonly_dict_helper_shape() -> None:
    assert READONLY_DICT_DECLARATION.splitlines() == [
        "declare interface ReadonlyDict<T> {",
        "  readonly [key: string]: T",
        "}",
    ]
