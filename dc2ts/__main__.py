"""Entry point: python -m dc2ts

Converts dataclasses from a model module into a TypeScript file:

    python -m dc2ts --package myapp.models --target web/models.ts \\
        --interface --camel-case myapp/models.py ExtraModel

Positional arguments are dataclass names, or .py files whose top-level
dataclasses are all converted. Defaults come from [tool.dc2ts] in
pyproject.toml.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Any

from .config import GeneratorConfig, load_pyproject_config
from .converter import TypeScriptConverter
from .discovery import discover_file
from .errors import Dc2TsError
from .loader import load_models
from .model import OMIT_EMPTY, describe_struct, tag_all
from .registry import ConversionRegistry

logger = logging.getLogger("dc2ts")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dc2ts", description="Convert Python dataclasses to TypeScript")
    parser.add_argument("structs", nargs="*", help="Dataclass names or .py files to scan for dataclasses")
    parser.add_argument("--package", required=True, help="Module with the models, e.g. myapp.models")
    parser.add_argument("--target", required=True, help="Target TypeScript file")
    parser.add_argument("--config", default="pyproject.toml", help="pyproject.toml with a [tool.dc2ts] table")
    parser.add_argument("--backup", dest="backup_dir", default=None, help="Directory where backup files are saved")
    parser.add_argument("--interface", dest="create_interface", action="store_true", default=None,
                        help="Create interfaces (not classes)")
    parser.add_argument("--readonly", dest="readonly_fields", action="store_true", default=None,
                        help="Set all fields readonly")
    parser.add_argument("--all-optional", action="store_true", help="Set all fields optional")
    parser.add_argument("--camel-case", dest="camel_case_fields", action="store_true", default=None,
                        help="Convert all field names to camelCase")
    parser.add_argument("--preserve-uppercase", dest="preserve_consecutive_uppercase", action="store_true",
                        default=None, help="Keep runs of capitals when camel-casing (XMLHttp -> xMLHttp)")
    parser.add_argument("--prefix", default=None, help="Prefix for every declaration name")
    parser.add_argument("--suffix", default=None, help="Suffix for every declaration name")
    parser.add_argument("--indent", default=None, help="Indentation string")
    parser.add_argument("--no-export", dest="dont_export", action="store_true", default=None,
                        help="Do not export declarations")
    parser.add_argument("--no-constructor", dest="create_constructor", action="store_false", default=None,
                        help="Do not emit class constructors")
    parser.add_argument("--from-method", dest="create_from_method", action="store_true", default=None,
                        help="Also emit the deprecated static createFrom method")
    parser.add_argument("--import", dest="imports", action="append", default=[],
                        help="TypeScript import for a custom type, repeat for each import")
    parser.add_argument("--verbose", action="store_true", help="Verbose logs")
    return parser


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """File defaults overridden by whichever flags were given."""
    values: dict[str, Any] = load_pyproject_config(Path(args.config))
    for config_field in dataclasses.fields(GeneratorConfig):
        value = getattr(args, config_field.name, None)
        if value is not None:
            values[config_field.name] = value
    if args.imports:
        values["custom_imports"] = [*values.get("custom_imports", ()), *args.imports]
    return GeneratorConfig.from_mapping(values)


def collect_struct_names(entries: list[str]) -> list[str]:
    names: list[str] = []
    for entry in entries:
        entry = entry.strip()
        if entry.endswith(".py"):
            logger.info("Parsing: %s", entry)
            names.extend(discover_file(Path(entry)))
        elif entry:
            names.append(entry)
    return names


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    try:
        config = build_config(args)
        names = collect_struct_names(args.structs)
        models = load_models(args.package, names)

        registry = ConversionRegistry()
        for model in models:
            descriptor = describe_struct(model)
            if args.all_optional:
                descriptor.fields = tag_all(descriptor, [OMIT_EMPTY]).fields
            registry.add(descriptor)

        target = Path(args.target)
        TypeScriptConverter(config, registry).convert_to_file(target)
    except Dc2TsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"Generated {target} ({len(names)} types)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
