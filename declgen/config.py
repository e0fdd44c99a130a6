"""Configuration loading for declgen (.declgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".declgen.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RootsConfig:
    """Names of the anchor types in the host type universe."""

    object_root: str = "EObj"
    definition: str = "Def"
    typeable: str = "ITypeable"


@dataclass
class CategoryConfig:
    """One hierarchical output file: every descendant of ``root``."""

    name: str
    root: str
    file: str
    comment: str
    group: Optional[str] = None


def _default_categories() -> List[CategoryConfig]:
    return [
        CategoryConfig(name="data", root="EData", file="data.d.ts", comment="data", group="Database"),
        CategoryConfig(name="lang", root="ELang", file="lang.d.ts", comment="language", group="Langbase"),
        CategoryConfig(name="aggr", root="EAggr", file="aggr.d.ts", comment="aggregation"),
    ]


@dataclass
class DeclGenConfig:
    """Represents the settings defined in .declgen.yml."""

    root: Path
    roots: RootsConfig = field(default_factory=RootsConfig)
    additional_types: List[str] = field(default_factory=lambda: ["FloatRange"])
    base_types: List[str] = field(default_factory=lambda: ["EData", "ELang", "EAggr"])
    base_file: str = "base.d.ts"
    basic_file: str = "basic.d.ts"
    enum_file: str = "enum.d.ts"
    categories: List[CategoryConfig] = field(default_factory=_default_categories)
    groups: List[str] = field(default_factory=lambda: ["Database", "Langbase"])
    output_dir: Optional[Path] = None


def load_config(config_path: Path) -> DeclGenConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DeclGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = DeclGenConfig(root=root)

    roots_data = _as_dict(data.get("roots"))
    if roots_data:
        config.roots = RootsConfig(
            object_root=_as_str(roots_data.get("object")) or config.roots.object_root,
            definition=_as_str(roots_data.get("definition")) or config.roots.definition,
            typeable=_as_str(roots_data.get("typeable")) or config.roots.typeable,
        )

    if "additional_types" in data:
        config.additional_types = _as_str_list(data.get("additional_types"))
    if "base_types" in data:
        config.base_types = _as_str_list(data.get("base_types"))
    if "groups" in data:
        config.groups = _as_str_list(data.get("groups"))

    files_data = _as_dict(data.get("files"))
    config.base_file = _as_str(files_data.get("base")) or config.base_file
    config.basic_file = _as_str(files_data.get("basic")) or config.basic_file
    config.enum_file = _as_str(files_data.get("enum")) or config.enum_file

    if "categories" in data:
        config.categories = _parse_categories(data.get("categories"))
    _check_category_groups(config.categories, config.groups)

    output_dir = _as_str(data.get("output_dir"))
    if output_dir:
        config.output_dir = root / output_dir

    return config


def _check_category_groups(categories: Sequence[CategoryConfig], groups: Sequence[str]) -> None:
    for category in categories:
        if category.group is not None and category.group not in groups:
            raise ConfigError(
                f"category '{category.name}' refers to unknown group '{category.group}'"
            )


def _parse_categories(value: Any) -> List[CategoryConfig]:
    if not isinstance(value, list):
        raise ConfigError("categories must be a list")
    categories: List[CategoryConfig] = []
    for index, raw in enumerate(value):
        item = _as_dict(raw)
        name = _as_str(item.get("name"))
        category_root = _as_str(item.get("root"))
        if not name or not category_root:
            raise ConfigError(f"categories[{index}] needs a name and a root")
        group = _as_str(item.get("group"))
        categories.append(
            CategoryConfig(
                name=name,
                root=category_root,
                file=_as_str(item.get("file")) or f"{name}.d.ts",
                comment=_as_str(item.get("comment")) or name,
                group=group,
            )
        )
    return categories


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CategoryConfig",
    "ConfigError",
    "DeclGenConfig",
    "RootsConfig",
    "load_config",
]
