"""Render templates and write generated output.

The output module is the banner followed by the converted declarations;
the hydration helper (convertValues) is rendered into classes that need it.
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any

import jinja2

from .errors import OutputError

TEMPLATE_DIR = Path(__file__).parent / "templates"


@functools.cache
def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_template(name: str, **context: Any) -> str:
    """Render one of the bundled templates."""
    return _environment().get_template(name).render(**context)


def render_convert_values(indent: str) -> str:
    """The convertValues hydration helper, indented one level."""
    return render_template("convert_values.ts.j2", i=indent).rstrip("\n")


def render_module(body: str) -> str:
    """Full output file: banner, then the converted body."""
    return render_template("module.ts.j2", body=body)


def write_output(path: Path, text: str) -> None:
    """Write the generated module to ``path``."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OutputError(f"cannot write {path}: {exc}") from exc
