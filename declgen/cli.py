"""CLI entrypoints for declgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .catalog import CatalogError, load_catalog
from .config import ConfigError, DeclGenConfig, load_config
from .logging import configure_logging
from .orchestrator import Exporter


def _add_common_options(parser: argparse.ArgumentParser, *, suppress_default: bool = False) -> None:
    default = argparse.SUPPRESS if suppress_default else False
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only log warnings and errors.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .declgen.yml (defaults to the catalog's directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="declgen",
        description="Generate TypeScript declaration files from a game data type catalog.",
    )
    _add_common_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser(
        "export",
        help="Write every declaration file for a catalog.",
    )
    _add_common_options(export_parser, suppress_default=True)
    _add_config_option(export_parser)
    export_parser.add_argument("catalog", help="Path to the type catalog (YAML or JSON).")
    export_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Directory for the generated .d.ts files (defaults to config output_dir or '.').",
    )

    show_parser = subparsers.add_parser(
        "show",
        help="Print the interface declaration for a single type.",
    )
    _add_common_options(show_parser, suppress_default=True)
    _add_config_option(show_parser)
    show_parser.add_argument("catalog", help="Path to the type catalog (YAML or JSON).")
    show_parser.add_argument("type_name", metavar="TYPE", help="Name of the type to render.")

    return parser


def _load(args: argparse.Namespace) -> tuple[DeclGenConfig, Exporter, list[tuple[str, str, str]]]:
    catalog_path = Path(args.catalog).expanduser()
    config_path = Path(args.config) if args.config else catalog_path.parent
    config = load_config(config_path)
    catalog, declarations = load_catalog(catalog_path)
    return config, Exporter(catalog, config), declarations


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for declgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(getattr(args, "quiet", False)))

    try:
        config, exporter, declarations = _load(args)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except (ConfigError, CatalogError) as exc:
        parser.exit(1, f"declgen {args.command} failed: {exc}\n")

    if args.command == "export":
        output_dir = Path(args.output) if args.output else (config.output_dir or Path("."))
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            context = exporter.new_context(declarations)
            result = exporter.run(output_dir, context)
        except (KeyError, CatalogError) as exc:
            parser.exit(1, f"declgen export failed: {exc}\n")
        except OSError as exc:
            parser.exit(1, f"declgen export failed: {exc}\nRun with --verbose for more details.\n")
        for path in result.files:
            print(_relativize(path))
    elif args.command == "show":
        descriptor = exporter.catalog.get(args.type_name)
        if descriptor is None:
            parser.exit(1, f"Unknown type '{args.type_name}'\n")
        writer = exporter.writer(exporter.new_context())
        print(writer.interfaces.emit(descriptor, extends=descriptor.base))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
