"""Exceptions raised while converting dataclasses to TypeScript.

Every fatal condition aborts the whole run; callers never get partial output.
"""

from __future__ import annotations


class Dc2TsError(Exception):
    """Base class for all dc2ts failures."""


class ModelError(Dc2TsError):
    """A field's kind has no TypeScript mapping and nothing overrides it."""

    def __init__(self, declaring: str, field: str, kind: str, type_name: str = "") -> None:
        self.declaring = declaring
        self.field = field
        self.kind = kind
        self.type_name = type_name
        detail = f"{declaring}.{field}"
        if type_name:
            detail += f"/{type_name}"
        super().__init__(f"cannot find type for {kind} ({detail})")


class HandlerError(Dc2TsError):
    """Raised by custom type conversion handlers to abort the run."""


class OutputError(Dc2TsError):
    """Backup, preserved-code load or output write failed."""


class ConfigError(Dc2TsError):
    """Invalid generator configuration."""
