"""Tests for declgen.orchestrator."""

from __future__ import annotations

from pathlib import Path

import pytest

from declgen.catalog import CatalogError, TypeCatalog
from declgen.config import CategoryConfig, DeclGenConfig
from declgen.orchestrator import Exporter

EXPECTED_FILES = ["base.d.ts", "data.d.ts", "lang.d.ts", "aggr.d.ts", "basic.d.ts", "enum.d.ts"]


def test_run_writes_every_artifact(tmp_path: Path, game_catalog: TypeCatalog) -> None:
    result = Exporter(game_catalog).run(tmp_path)

    assert [path.name for path in result.files] == EXPECTED_FILES
    for name in EXPECTED_FILES:
        assert (tmp_path / name).exists()
    assert result.enums == ["Gender", "TechLevel"]


def test_base_file_lists_fixed_roots(tmp_path: Path, game_catalog: TypeCatalog) -> None:
    Exporter(game_catalog).run(tmp_path)
    text = (tmp_path / "base.d.ts").read_text(encoding="utf-8")

    headers = [line for line in text.splitlines() if line.startswith("declare")]
    assert headers == [
        "declare interface EObj {",
        "declare interface EData extends EObj {",
        "declare interface ELang extends EObj {",
        "declare interface EAggr extends EObj {",
    ]


def test_data_file_matches_expected_output(tmp_path: Path, game_catalog: TypeCatalog) -> None:
    exporter = Exporter(game_catalog)
    context = exporter.new_context(
        [("Database", "Faction", "declare interface DatabaseFaction {\n}")]
    )
    exporter.run(tmp_path, context)

    assert (tmp_path / "data.d.ts").read_text(encoding="utf-8") == (
        "// Declaration for data types.\n"
        "\n"
        "declare interface DataAnimal extends DataPawn {\n"
        "  readonly wildness: number;\n"
        "}\n"
        "\n"
        "declare interface DataFaction extends EData {\n"
        "  readonly isPlayer: boolean;\n"
        "  readonly techLevel: TechLevel;\n"
        "  readonly basicMemberKind: string | null;\n"
        "  readonly hairTags: ReadonlyArray<string | null> | null;\n"
        "  readonly startingGoodwill: FloatRange;\n"
        "}\n"
        "\n"
        "declare interface DataPawn extends EData {\n"
        "  readonly gender: Gender;\n"
        "  readonly stats: ReadonlyArray<Stat> | null;\n"
        "}\n"
        "\n"
        "declare interface DatabaseFaction {\n"
        "}\n"
    )


def test_group_blocks_only_land_in_their_file(tmp_path: Path, game_catalog: TypeCatalog) -> None:
    exporter = Exporter(game_catalog)
    context = exporter.new_context(
        [
            ("Database", "Faction", "declare interface DatabaseFaction {\n}"),
            ("Langbase", "Faction", "declare interface LangbaseFaction {\n}"),
        ]
    )
    exporter.run(tmp_path, context)

    data = (tmp_path / "data.d.ts").read_text(encoding="utf-8")
    lang = (tmp_path / "lang.d.ts").read_text(encoding="utf-8")
    aggr = (tmp_path / "aggr.d.ts").read_text(encoding="utf-8")
    assert "DatabaseFaction" in data and "LangbaseFaction" not in data
    assert "LangbaseFaction" in lang and "DatabaseFaction" not in lang
    assert "DatabaseFaction" not in aggr
    assert "LangbaseFaction" not in aggr


def test_duplicate_extra_block_keeps_first_text(tmp_path: Path, game_catalog: TypeCatalog) -> None:
    exporter = Exporter(game_catalog)
    context = exporter.new_context()
    context.register_extra_block("Langbase", "Faction", "// first")
    context.register_extra_block("Langbase", "Faction", "// second")
    exporter.run(tmp_path, context)

    lang = (tmp_path / "lang.d.ts").read_text(encoding="utf-8")
    assert "// first" in lang
    assert "// second" not in lang


def test_basic_file_contains_concrete_typeables_and_additional_types(
    tmp_path: Path, game_catalog: TypeCatalog
) -> None:
    Exporter(game_catalog).run(tmp_path)
    text = (tmp_path / "basic.d.ts").read_text(encoding="utf-8")

    headers = [line for line in text.splitlines() if line.startswith("declare interface")]
    assert headers == [
        "declare interface ReadonlyDict<T> {",
        "declare interface FloatRange {",
        "declare interface RangedStat {",
        "declare interface Stat {",
    ]


def test_enum_file_covers_enums_from_every_file(tmp_path: Path, game_catalog: TypeCatalog) -> None:
    Exporter(game_catalog).run(tmp_path)
    text = (tmp_path / "enum.d.ts").read_text(encoding="utf-8")

    assert "declare enum Gender {" in text
    assert "declare enum TechLevel {" in text
    assert "WorkTags" not in text


def test_flag_enum_reached_through_dictionary(catalog_builder, tmp_path: Path) -> None:
    from declgen.models import STRING, dict_of

    b = catalog_builder
    b.type("EObj", abstract=True)
    b.type("EData", "EObj", abstract=True)
    b.type("ELang", "EObj", abstract=True)
    b.type("EAggr", "EObj", abstract=True)
    b.enum("WorkTags", [("None", 0), ("Violent", 2), ("Firefighting", 0x40000)], flags=True)
    b.type("DataWork", "EData", {"tags": dict_of(STRING, b["WorkTags"])})
    catalog = b.build()

    result = Exporter(catalog).run(tmp_path)

    assert result.enums == ["WorkTags"]
    assert "  readonly tags: ReadonlyDict<WorkTags> | null;" in (tmp_path / "data.d.ts").read_text(
        encoding="utf-8"
    )
    assert (tmp_path / "enum.d.ts").read_text(encoding="utf-8").endswith(
        "declare enum WorkTags {\n"
        "  None = 0x0,\n"
        "  Violent = 0x2,\n"
        "  Firefighting = 0x40000,\n"
        "}\n"
    )


def test_repeated_runs_are_identical_and_isolated(tmp_path: Path, game_catalog: TypeCatalog) -> None:
    exporter = Exporter(game_catalog)
    first_dir = tmp_path / "first"
    second_dir = tmp_path / "second"
    first_dir.mkdir()
    second_dir.mkdir()

    first_context = exporter.new_context([("Database", "Faction", "// contributed")])
    exporter.run(first_dir, first_context)
    exporter.run(second_dir)

    for name in EXPECTED_FILES:
        first = (first_dir / name).read_text(encoding="utf-8")
        second = (second_dir / name).read_text(encoding="utf-8")
        if name == "data.d.ts":
            assert "// contributed" in first
            assert "// contributed" not in second
        else:
            assert first == second


def test_missing_category_root_is_reported(tmp_path: Path, game_catalog: TypeCatalog) -> None:
    config = DeclGenConfig(root=tmp_path)
    config.categories = [CategoryConfig(name="mods", root="EMod", file="mods.d.ts", comment="mod")]
    with pytest.raises(CatalogError):
        Exporter(game_catalog, config).run(tmp_path)


def test_unknown_group_in_context_seed_raises(game_catalog: TypeCatalog) -> None:
    with pytest.raises(KeyError):
        Exporter(game_catalog).new_context([("Aggrbase", "Faction", "x")])


def test_missing_output_directory_is_fatal(tmp_path: Path, game_catalog: TypeCatalog) -> None:
    with pytest.raises(OSError):
        Exporter(game_catalog).run(tmp_path / "does-not-exist")
