"""Per-field conversion handlers.

A handler gets one field of a struct being converted, appends whatever it
wants to the DeclarationBuilder and returns text that must be placed before
the declaration (declarations of types the field depends on), or "".

Register custom handlers on the ConversionRegistry:
  - per struct and field type:  descriptor.with_type_handler(datetime, handler)
  - per declaring struct:       registry.manage_type_conversion(handler, MyStruct)
  - as the default:             registry.with_type_conversion_handler(handler)
"""

from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING

from .model import FieldDescriptor, Kind, TypeDescriptor, TypeOptions, collapse_array, referenced_structs

if TYPE_CHECKING:
    from .builder import DeclarationBuilder
    from .converter import TypeScriptConverter

logger = logging.getLogger(__name__)


def join_prepended(before: str, after: str) -> str:
    """Join two chunks of declarations with a blank line."""
    if not before:
        return after
    if not after:
        return before
    return f"{before}\n\n{after}"


class TypeConversionHandler(abc.ABC):
    """Capability: convert one field into declaration and constructor lines."""

    @abc.abstractmethod
    def handle_type_conversion(
        self,
        converter: TypeScriptConverter,
        builder: DeclarationBuilder,
        declaring: TypeDescriptor,
        field: FieldDescriptor,
        options: TypeOptions,
        field_name: str,
        depth: int = 0,
    ) -> str:
        """Emit ``field`` into ``builder``; return dependency text to prepend."""


class DefaultTypeConversionHandler(TypeConversionHandler):
    """Choose an emission strategy per field and convert referenced types."""

    def handle_type_conversion(
        self,
        converter: TypeScriptConverter,
        builder: DeclarationBuilder,
        declaring: TypeDescriptor,
        field: FieldDescriptor,
        options: TypeOptions,
        field_name: str,
        depth: int = 0,
    ) -> str:
        owner = declaring.display_name
        log = converter.log
        prepended = ""

        if options.ts_doc:
            builder.add_field_definition_line(f"/** {options.ts_doc} */")

        if options.ts_transform:
            log(depth, "- simple field %s.%s", owner, field.name)
            builder.add_simple_field(field_name, field, options)
        elif converter.registry.is_enum(field.type.annotation):
            log(depth, "- enum field %s.%s", owner, field.name)
            builder.add_enum_field(field_name, field)
        elif options.ts_type:
            log(depth, "- simple field %s.%s (ts_type)", owner, field.name)
            builder.add_simple_field(field_name, field, options)
        elif field.type.kind is Kind.STRUCT:
            log(depth, "- struct %s.%s (%s)", owner, field.name, field.type.name)
            prepended = converter.convert_type(field.type.annotation, depth + 1)
            builder.add_struct_field(field_name, field)
        elif field.type.kind is Kind.MAP:
            log(depth, "- map field %s.%s", owner, field.name)
            prepended = self._convert_referenced(converter, field, depth)
            builder.add_map_field(field_name, field)
        elif field.type.kind is Kind.SLICE:
            element, _ = collapse_array(field.type)
            if element.kind is Kind.STRUCT:
                log(depth, "- struct slice %s.%s (%s)", owner, field.name, element.name)
                prepended = converter.convert_type(element.annotation, depth + 1)
                builder.add_array_of_structs_field(field_name, field)
            else:
                log(depth, "- slice field %s.%s", owner, field.name)
                prepended = self._convert_referenced(converter, field, depth)
                builder.add_simple_array_field(field_name, field, options)
        else:
            log(depth, "- simple field %s.%s", owner, field.name)
            builder.add_simple_field(field_name, field, options)

        return prepended

    @staticmethod
    def _convert_referenced(converter: TypeScriptConverter, field: FieldDescriptor, depth: int) -> str:
        """Convert every dataclass nested inside a map or slice field."""
        prepended = ""
        for annotation in referenced_structs(field.type):
            prepended = join_prepended(prepended, converter.convert_type(annotation, depth + 1))
        return prepended
