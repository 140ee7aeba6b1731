"""Shared fixtures for the converter tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from dc2ts.config import GeneratorConfig
from dc2ts.converter import TypeScriptConverter
from dc2ts.registry import ConversionRegistry


@pytest.fixture
def registry() -> ConversionRegistry:
    return ConversionRegistry()


# ---------------------------------------------------------------------------
# One-shot conversion
# ---------------------------------------------------------------------------

@pytest.fixture
def convert() -> Callable[..., str]:
    """Return a callable that converts types with a fresh registry.

    Usage in tests::

        text = convert(Point, Shape, enums=[Color], create_interface=True)
    """
    def _convert(*types: Any, enums: tuple[Any, ...] = (), **options: Any) -> str:
        reg = ConversionRegistry()
        for enum_type in enums:
            reg.add_enum(enum_type)
        for type_ in types:
            reg.add(type_)
        return TypeScriptConverter(GeneratorConfig(**options), reg).convert()
    return _convert
