"""Find the dataclasses declared in Python source.

Only top-level classes decorated with one of:
  @dataclass
  @dataclasses.dataclass
  @dataclass(...)
  @dataclasses.dataclass(...)
"""

from __future__ import annotations

import ast
from pathlib import Path

from .errors import Dc2TsError


def is_dataclass_decorator(decorator: ast.expr) -> bool:
    if isinstance(decorator, ast.Name) and decorator.id == "dataclass":
        return True
    if isinstance(decorator, ast.Attribute) and decorator.attr == "dataclass":
        return True
    if isinstance(decorator, ast.Call):
        return is_dataclass_decorator(decorator.func)
    return False


def find_dataclass_names(source: str) -> list[str]:
    """Names of top-level dataclasses, in source order."""
    module = ast.parse(source)
    return [
        node.name
        for node in module.body
        if isinstance(node, ast.ClassDef)
        and any(is_dataclass_decorator(dec) for dec in node.decorator_list)
    ]


def discover_file(path: Path) -> list[str]:
    try:
        return find_dataclass_names(path.read_text(encoding="utf-8"))
    except (OSError, SyntaxError) as exc:
        raise Dc2TsError(f"error loading/parsing {path}: {exc}") from exc
