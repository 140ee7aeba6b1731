"""Derive TypeScript field names from dataclass fields.

Wire name comes from the ``json`` metadata tag:
  - "name"            -> name
  - "name,omitempty"  -> name?   (optional)
  - ",omitempty"      -> <field name>?
  - "-" or " "        -> skipped
  - no tag            -> <field name>, skipped when private (_name)

Optional[X] fields are always optional.

camelCase examples:
  FooBar          -> fooBar
  XMLHttpRequest  -> xmlHttpRequest   (xMLHttpRequest when preserving)
  Hello1World     -> hello1World
  h2w             -> h2W
"""

from __future__ import annotations

import re

from .config import GeneratorConfig
from .model import JSON_TAG, OMIT_EMPTY, FieldDescriptor

IGNORE_SENTINEL = "-"
OPTIONAL_MARK = "?"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def camel_case(text: str, preserve_consecutive_uppercase: bool = False) -> str:
    """Convert PascalCase (or any identifier) to camelCase."""
    result: list[str] = []
    prev_lower = False
    prev_digit = False
    for index, char in enumerate(text):
        if index == 0:
            result.append(char.lower())
        else:
            if prev_digit:
                char = char.upper()
            if prev_lower or not char.isupper():
                result.append(char)
            elif preserve_consecutive_uppercase:
                result.append(char)
            elif index + 1 < len(text) and text[index + 1].isupper():
                # inside a run of capitals
                result.append(char.lower())
            else:
                result.append(char)
        prev_lower = not char.isupper()
        prev_digit = char.isdigit()
    return "".join(result)


def is_identifier(name: str) -> bool:
    """Check if a name can be used unquoted as a TypeScript property."""
    return bool(_IDENTIFIER.match(name))


def strip_optional(field_name: str) -> str:
    """Drop the trailing optional marker from a declared field name."""
    return field_name.replace(OPTIONAL_MARK, "")


def resolve_field_name(field: FieldDescriptor, is_pointer: bool, config: GeneratorConfig) -> tuple[str, bool]:
    """Return (wire name, optional) for a field; an empty name means skip."""
    json_tag = field.tag(JSON_TAG)
    if not json_tag:
        if field.is_private:
            return "", False
        wire_name = field.name
        optional = is_pointer
    else:
        parts = json_tag.split(",")
        # ",omitempty" keeps the field name; a blank name skips the field
        wire_name = parts[0].strip() if parts[0] else field.name
        if not wire_name or wire_name == IGNORE_SENTINEL:
            return "", False
        optional = is_pointer or OMIT_EMPTY in (part.strip() for part in parts[1:])

    if config.camel_case_fields:
        wire_name = camel_case(wire_name, config.preserve_consecutive_uppercase)
    return wire_name, optional


def json_field_name(field: FieldDescriptor, is_pointer: bool, config: GeneratorConfig) -> str:
    """Declared TypeScript name: wire name with a ``?`` suffix when optional."""
    wire_name, optional = resolve_field_name(field, is_pointer, config)
    if not wire_name:
        return ""
    return wire_name + OPTIONAL_MARK if optional else wire_name
