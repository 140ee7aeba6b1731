"""Accumulate the members of one TypeScript class or interface.

Field names handed to the builder are declared names: the wire name with a
trailing ``?`` when optional. Each field gets one declaration line and one
constructor statement, added together so the two lists stay aligned.
"""

from __future__ import annotations

from typing import Callable, Mapping

from . import codegen
from .config import GeneratorConfig
from .errors import ModelError
from .model import (
    PRIMITIVE_TS_TYPES,
    TRANSFORM_PLACEHOLDER,
    FieldDescriptor,
    Kind,
    TypeInfo,
    TypeOptions,
    collapse_array,
)
from .naming import OPTIONAL_MARK, is_identifier, strip_optional

CONVERT_VALUES_CALL = "this.convertValues"


class DeclarationBuilder:
    """Field lines and constructor body for one declaration."""

    def __init__(
        self,
        config: GeneratorConfig,
        entity_name: str,
        type_name: Callable[[TypeInfo], str],
        kinds: Mapping[Kind, str] = PRIMITIVE_TS_TYPES,
    ) -> None:
        self.config = config
        self.entity_name = entity_name
        self.type_name = type_name
        self.kinds = kinds
        self.fields: list[str] = []
        self.constructor_body: list[str] = []

    # ------------------------------------------------------------------
    # Field categories
    # ------------------------------------------------------------------

    def add_field_definition_line(self, line: str) -> None:
        """Add a raw line (doc comment, etc.) to the field block."""
        self.fields.append(self.config.indent + line)

    def add_simple_field(self, field_name: str, field: FieldDescriptor, opts: TypeOptions | None = None) -> None:
        opts = opts or TypeOptions()
        ts_type = opts.ts_type or self.kinds.get(field.type.kind, "")
        if not ts_type or not field_name:
            raise self._no_mapping(field_name, field)

        source = self._source(field_name)
        if opts.ts_transform:
            initializer = opts.ts_transform.replace(TRANSFORM_PLACEHOLDER, source)
        else:
            initializer = source
        self._add(field_name, ts_type, initializer)

    def add_simple_array_field(self, field_name: str, field: FieldDescriptor, opts: TypeOptions | None = None) -> None:
        """Array of non-struct elements; nested lists add one ``[]`` per level."""
        opts = opts or TypeOptions()
        if field_name:
            if opts.ts_type:
                self._add(field_name, opts.ts_type, self._source(field_name))
                return
            element, depth = collapse_array(field.type)
            element_type = self.type_name(element)
            if element_type:
                self._add(field_name, element_type + "[]" * depth, self._source(field_name))
                return
        raise self._no_mapping(field_name, field)

    def add_enum_field(self, field_name: str, field: FieldDescriptor) -> None:
        self._add(field_name, self.type_name(field.type), self._source(field_name))

    def add_struct_field(self, field_name: str, field: FieldDescriptor) -> None:
        struct_type = self.type_name(field.type)
        source = self._source(field_name)
        if struct_type == "any":
            self._add(field_name, struct_type, source)
        else:
            self._add(field_name, struct_type, f"{CONVERT_VALUES_CALL}({source}, {struct_type})")

    def add_array_of_structs_field(self, field_name: str, field: FieldDescriptor) -> None:
        element, depth = collapse_array(field.type)
        struct_type = self.type_name(element)
        source = self._source(field_name)
        if struct_type == "any":
            self._add(field_name, "any" + "[]" * depth, source)
        else:
            self._add(field_name, struct_type + "[]" * depth, f"{CONVERT_VALUES_CALL}({source}, {struct_type})")

    def add_map_field(self, field_name: str, field: FieldDescriptor) -> None:
        """Index signature ``{[key: K]: V}``; struct values are hydrated per key."""
        key = field.type.key.unwrapped()
        value = field.type.elem.unwrapped()
        key_type = self.kinds.get(key.kind) or self.type_name(key)
        source = self._source(field_name)

        value_type = self.type_name(value)
        initializer = source
        if value.kind is Kind.STRUCT and value_type != "any":
            initializer = f"{CONVERT_VALUES_CALL}({source}, {value_type}, true)"

        if not key_type or not value_type:
            raise self._no_mapping(field_name, field)
        self._add(field_name, f"{{[key: {key_type}]: {value_type}}}", initializer)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def needs_convert_values(self) -> bool:
        return any(CONVERT_VALUES_CALL in line for line in self.constructor_body)

    def render(self) -> str:
        """Member block: field lines, then (class mode) constructor and helper."""
        indent = self.config.indent
        parts: list[str] = []
        if self.fields:
            parts.append("\n".join(self.fields) + "\n")
        if self.config.create_interface:
            return "".join(parts)

        if self.config.create_from_method:
            parts.append(
                f"\n{indent}static createFrom(source: any = {{}}) {{\n"
                f"{indent}{indent}return new {self.entity_name}(source);\n"
                f"{indent}}}\n"
            )
        if self.config.create_constructor or self.config.create_from_method:
            lines = [
                f"{indent}constructor(source: any = {{}}) {{",
                f"{indent}{indent}if ('string' === typeof source) source = JSON.parse(source);",
                *self.constructor_body,
                f"{indent}}}",
            ]
            parts.append("\n" + "\n".join(lines) + "\n")
            if self.needs_convert_values:
                parts.append("\n" + codegen.render_convert_values(indent) + "\n")
        return "".join(parts)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _add(self, field_name: str, ts_type: str, initializer: str) -> None:
        indent = self.config.indent
        readonly = "readonly " if self.config.readonly_fields else ""
        self.fields.append(f"{indent}{readonly}{self._declared(field_name)}: {ts_type};")
        self.constructor_body.append(f"{indent}{indent}{self._target(field_name)} = {initializer};")

    @staticmethod
    def _declared(field_name: str) -> str:
        name = strip_optional(field_name)
        marker = OPTIONAL_MARK if field_name.endswith(OPTIONAL_MARK) else ""
        if not is_identifier(name):
            name = f'"{name}"'
        return name + marker

    @staticmethod
    def _target(field_name: str) -> str:
        name = strip_optional(field_name)
        return f"this.{name}" if is_identifier(name) else f'this["{name}"]'

    @staticmethod
    def _source(field_name: str) -> str:
        return f'source["{strip_optional(field_name)}"]'

    def _no_mapping(self, field_name: str, field: FieldDescriptor) -> ModelError:
        return ModelError(
            self.entity_name,
            strip_optional(field_name) or field.name,
            str(field.type.kind),
            field.type.name,
        )
