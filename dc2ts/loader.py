"""File and module I/O around a conversion run.

- load_custom_code: hand-written code kept between //[Name:] and //[end]
  markers in a previously generated file
- backup: timestamped copy of the previous output
- load_models: import the dataclasses to convert
"""

from __future__ import annotations

import importlib
from datetime import datetime
from pathlib import Path
from typing import Any

from .errors import Dc2TsError, OutputError

_BEGIN_PREFIX = "//["
_BEGIN_SUFFIX = ":]"
_END_MARKER = "//[end]"


def parse_custom_code(text: str) -> dict[str, str]:
    """Extract preserved code blocks keyed by declaration name."""
    result: dict[str, str] = {}
    current_name = ""
    current_lines: list[str] = []
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped == _END_MARKER:
            if current_name:
                result[current_name] = "".join(current_lines).rstrip(" \t\r\n")
            current_name = ""
            current_lines = []
        elif stripped.startswith(_BEGIN_PREFIX) and stripped.endswith(_BEGIN_SUFFIX):
            current_name = stripped[len(_BEGIN_PREFIX):-len(_BEGIN_SUFFIX)]
            current_lines = []
        elif current_name:
            current_lines.append(line + "\n")
    return result


def load_custom_code(path: Path) -> dict[str, str]:
    """Load preserved code from a previous output; a missing file yields {}."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        raise OutputError(f"cannot read {path}: {exc}") from exc
    return parse_custom_code(text)


def backup_name(path: Path, now: datetime | None = None) -> str:
    """Backup file name, e.g. models.ts-2024-01-31T15_04_05.99.backup"""
    stamp = (now or datetime.now()).strftime("%Y-%m-%dT%H_%M_%S.%f")[:-4]
    return f"{path.name}-{stamp}.backup"


def backup(path: Path, backup_dir: Path) -> Path | None:
    """Copy ``path`` into ``backup_dir``; returns None when there is nothing to back up."""
    try:
        content = path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise OutputError(f"cannot read {path}: {exc}") from exc

    target = backup_dir / backup_name(path)
    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    except OSError as exc:
        raise OutputError(f"cannot write backup {target}: {exc}") from exc
    return target


def load_models(module_name: str, names: list[str]) -> list[Any]:
    """Import ``module_name`` and return the named classes, in order."""
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise Dc2TsError(f"cannot import {module_name}: {exc}") from exc

    models = []
    for name in names:
        model = getattr(module, name, None)
        if model is None:
            raise Dc2TsError(f"{module_name} has no attribute {name!r}")
        models.append(model)
    return models
