"""Registration of types, enums, overrides and handlers for one converter.

Everything here is set up before a conversion run and only read during it.

Option precedence for a field (last non-empty value wins, per sub-field):
  1. the field's own ts_type / ts_transform / ts_doc metadata
  2. struct-specific overrides (TypeDescriptor.with_field_options), keyed by
     the field's type, in registration order
  3. the global override (ConversionRegistry.manage_type)

So a global override beats a struct-specific one for the same field type.
Only ts_type and ts_transform are overridden; ts_doc always comes from the tag.

Handler lookup for a field:
  1. handler registered on the declaring struct for the field's type
  2. handler registered globally for the declaring struct
  3. the default handler
"""

from __future__ import annotations

from typing import Any, Iterable

from .handlers import DefaultTypeConversionHandler, TypeConversionHandler
from .model import (
    EnumDescriptor,
    FieldDescriptor,
    TypeDescriptor,
    TypeOptions,
    describe_enum,
    describe_struct,
)


class ConversionRegistry:
    """Types to convert plus the overrides that apply while converting them."""

    def __init__(self, default_handler: TypeConversionHandler | None = None) -> None:
        self.structs: list[TypeDescriptor] = []
        self.enums: dict[Any, EnumDescriptor] = {}
        self.field_type_options: dict[Any, TypeOptions] = {}
        self.type_handlers: dict[Any, TypeConversionHandler] = {}
        self.default_handler: TypeConversionHandler = default_handler or DefaultTypeConversionHandler()
        self.imports: list[str] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add(self, obj: Any) -> ConversionRegistry:
        """Register a dataclass (class or instance) or a TypeDescriptor."""
        self.structs.append(describe_struct(obj))
        return self

    def add_type(self, cls: type) -> ConversionRegistry:
        return self.add(cls)

    def add_type_with_name(self, obj: Any, name: str) -> ConversionRegistry:
        """Register a type under an explicit name (required for anonymous types)."""
        self.structs.append(describe_struct(obj, name=name))
        return self

    def add_enum(self, values: Any) -> ConversionRegistry:
        """Register an Enum class, or a list of its members, as a TypeScript enum.

        Registering the same enum again replaces its element list.
        """
        descriptor = describe_enum(values)
        self.enums[descriptor.type] = descriptor
        return self

    def manage_type(self, field_type: Any, options: TypeOptions) -> ConversionRegistry:
        """Override options for every field of ``field_type``, in any struct."""
        self.field_type_options[field_type] = options
        return self

    def manage_type_conversion(self, handler: TypeConversionHandler, *declaring_types: Any) -> ConversionRegistry:
        """Use ``handler`` for every field declared inside the given structs."""
        for declaring_type in declaring_types:
            self.type_handlers[declaring_type] = handler
        return self

    def with_type_conversion_handler(self, handler: TypeConversionHandler) -> ConversionRegistry:
        self.default_handler = handler
        return self

    def add_import(self, line: str) -> ConversionRegistry:
        """Add a custom import line (e.g. ``import Decimal from 'decimal.js';``)."""
        if line not in self.imports:
            self.imports.append(line)
        return self

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_struct(self, key: Any) -> TypeDescriptor | None:
        """First registered descriptor for a type key."""
        for descriptor in self.structs:
            if descriptor.key == key:
                return descriptor
        return None

    def _matching_structs(self, declaring: TypeDescriptor) -> Iterable[TypeDescriptor]:
        if declaring not in self.structs:
            yield declaring
        for descriptor in self.structs:
            if descriptor.key == declaring.key:
                yield descriptor

    def enum_for(self, annotation: Any) -> EnumDescriptor | None:
        return self.enums.get(annotation)

    def is_enum(self, annotation: Any) -> bool:
        return self.enum_for(annotation) is not None

    def resolve_options(self, declaring: TypeDescriptor, field: FieldDescriptor) -> TypeOptions:
        """Effective options for ``field`` (already pointer-unwrapped)."""
        options = field.tag_options()
        field_type = field.type.annotation

        overrides = [
            descriptor.field_options[field_type]
            for descriptor in self._matching_structs(declaring)
            if field_type in descriptor.field_options
        ]
        if field_type in self.field_type_options:
            overrides.append(self.field_type_options[field_type])

        ts_type, ts_transform = options.ts_type, options.ts_transform
        for override in overrides:
            if override.ts_transform:
                ts_transform = override.ts_transform
            if override.ts_type:
                ts_type = override.ts_type
        return TypeOptions(ts_type=ts_type, ts_doc=options.ts_doc, ts_transform=ts_transform)

    def resolve_handler(self, declaring: TypeDescriptor, field: FieldDescriptor) -> TypeConversionHandler:
        field_type = field.type.annotation
        for descriptor in self._matching_structs(declaring):
            if field_type in descriptor.type_handlers:
                return descriptor.type_handlers[field_type]
        if declaring.key in self.type_handlers:
            return self.type_handlers[declaring.key]
        return self.default_handler
