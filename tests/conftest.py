from __future__ import annotations

import pytest

from declgen.catalog import TypeCatalog
from declgen.models import BOOL, FLOAT, INT, STRING, dict_of, list_of
from tests._fixtures.catalog_builder import CatalogBuilder


@pytest.fixture
def catalog_builder() -> CatalogBuilder:
    """Provide an empty builder for ad-hoc type universes."""
    return CatalogBuilder()


@pytest.fixture
def game_builder(catalog_builder: CatalogBuilder) -> CatalogBuilder:
    """A miniature exporter universe mirroring the real root layout."""
    b = catalog_builder
    b.type("Def", fields={"defName": STRING})
    b.type("FactionDef", "Def")
    b.type("ITypeable")
    b.type("FloatRange", fields={"min": FLOAT, "max": FLOAT})
    b.enum("TechLevel", [("Undefined", 0), ("Animal", 1), ("Neolithic", 2)])
    b.enum("Gender", [("None", 0), ("Male", 1), ("Female", 2)])
    b.enum("WorkTags", [("None", 0), ("Violent", 2), ("Firefighting", 0x40000)], flags=True)

    b.type("EObj", fields={"defName": STRING}, abstract=True)
    b.type("EData", "EObj", {"label": STRING}, abstract=True)
    b.type("ELang", "EObj", abstract=True)
    b.type("EAggr", "EObj", abstract=True)

    b.type("Stat", "ITypeable", {"value": FLOAT, "stuffed": BOOL})
    b.type("AbstractStat", "ITypeable", {"name": STRING}, abstract=True)
    b.type("RangedStat", "AbstractStat", {"range": b["FloatRange"]})

    b.type(
        "DataFaction",
        "EData",
        {
            "isPlayer": BOOL,
            "techLevel": b["TechLevel"],
            "basicMemberKind": b["FactionDef"],
            "hairTags": list_of(STRING),
            "startingGoodwill": b["FloatRange"],
        },
    )
    b.type("DataPawn", "EData", {"gender": b["Gender"], "stats": list_of(b["Stat"])}, abstract=True)
    b.type("DataAnimal", "DataPawn", {"wildness": FLOAT})
    b.type("LangFaction", "ELang", {"leaderTitle": STRING})
    b.type("AggrFaction", "EAggr", {"members": dict_of(STRING, b["DataPawn"]), "count": INT})
    return b


@pytest.fixture
def game_catalog(game_builder: CatalogBuilder) -> TypeCatalog:
    return game_builder.build()
