"""Generator configuration.

Defaults can be set in the ``[tool.dc2ts]`` table of a pyproject.toml, e.g.:

    [tool.dc2ts]
    create_interface = true
    camel_case_fields = true
    custom_imports = ["import Decimal from 'decimal.js';"]

Command line flags override the file.
"""

from __future__ import annotations

import dataclasses
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigError

PYPROJECT_TABLE = "dc2ts"


@dataclass(frozen=True)
class GeneratorConfig:
    """Options controlling how declarations are emitted."""
    prefix: str = ""
    suffix: str = ""
    indent: str = "    "

    # interface mode emits no constructors or helpers
    create_interface: bool = False
    readonly_fields: bool = False

    camel_case_fields: bool = False
    preserve_consecutive_uppercase: bool = False

    create_constructor: bool = True
    # deprecated: emits `static createFrom(source)` alongside the constructor
    create_from_method: bool = False

    # empty disables backup
    backup_dir: str = ""
    dont_export: bool = False
    custom_imports: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> GeneratorConfig:
        """Build a config from a plain mapping, rejecting unknown keys."""
        known = {f.name: f for f in dataclasses.fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = key.replace("-", "_")
            if name not in known:
                raise ConfigError(f"unknown option {key!r}")
            if name == "custom_imports":
                if isinstance(value, str) or not all(isinstance(v, str) for v in value):
                    raise ConfigError("custom_imports must be a list of strings")
                value = tuple(value)
            elif isinstance(known[name].default, bool) and not isinstance(value, bool):
                raise ConfigError(f"option {key!r} must be a boolean")
            elif isinstance(known[name].default, str) and not isinstance(value, str):
                raise ConfigError(f"option {key!r} must be a string")
            values[name] = value
        return cls(**values)


def load_pyproject_config(path: Path) -> dict[str, Any]:
    """Read the [tool.dc2ts] table; a missing file or table yields {}."""
    if not path.exists():
        return {}
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"cannot parse {path}: {exc}") from exc
    table = data.get("tool", {}).get(PYPROJECT_TABLE, {})
    if not isinstance(table, Mapping):
        raise ConfigError(f"[tool.{PYPROJECT_TABLE}] in {path} must be a table")
    return {key.replace("-", "_"): value for key, value in table.items()}
