"""Walk the registered type graph and emit TypeScript declarations.

One run: enums first, then registered structs, each in registration order.
Types referenced by fields are converted on first sight and placed before
the declaration that uses them. A run-local visited set makes every type
appear exactly once and stops recursion on cyclic graphs.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from . import codegen, loader
from .builder import DeclarationBuilder
from .config import GeneratorConfig
from .handlers import join_prepended
from .model import (
    PRIMITIVE_TS_TYPES,
    EnumDescriptor,
    Kind,
    TypeDescriptor,
    TypeInfo,
    collapse_array,
    describe_struct,
)
from .naming import json_field_name
from .registry import ConversionRegistry

logger = logging.getLogger(__name__)

CUSTOM_CODE_BEGIN = "//[{name}:]"
CUSTOM_CODE_END = "//[end]"


class TypeScriptConverter:
    """Convert the types of a ConversionRegistry to one TypeScript module."""

    def __init__(self, config: GeneratorConfig | None = None, registry: ConversionRegistry | None = None) -> None:
        self.config = config or GeneratorConfig()
        self.registry = registry or ConversionRegistry()
        self.kinds = dict(PRIMITIVE_TS_TYPES)
        for line in self.config.custom_imports:
            self.registry.add_import(line)

        self._descriptors: dict[Any, TypeDescriptor] = {}
        self._converted: set[Any] | None = None
        self._custom_code: Mapping[str, str] = {}

    def log(self, depth: int, message: str, *args: Any) -> None:
        logger.debug("   " * depth + message, *args)

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def entity_name(self, name: str) -> str:
        return f"{self.config.prefix}{name}{self.config.suffix}"

    def descriptor_for(self, target: Any) -> TypeDescriptor:
        """Registered descriptor for a type, else one described on demand."""
        if isinstance(target, TypeDescriptor):
            return target
        registered = self.registry.find_struct(target)
        if registered is not None:
            return registered
        if target not in self._descriptors:
            self._descriptors[target] = describe_struct(target)
        return self._descriptors[target]

    def display_name(self, descriptor: TypeDescriptor) -> str:
        """Name override, else the registered name, else the type name."""
        if descriptor.name:
            return descriptor.name
        registered = self.registry.find_struct(descriptor.key)
        if registered is not None and registered.name:
            return registered.name
        return descriptor.type_name

    def type_name(self, info: TypeInfo) -> str:
        """TypeScript type for a reference; "" when there is no mapping."""
        info = info.unwrapped()
        enum_descriptor = self.registry.enum_for(info.annotation)
        if enum_descriptor is not None:
            return self.entity_name(enum_descriptor.name)
        if info.kind is Kind.STRUCT:
            name = self.display_name(self.descriptor_for(info.annotation))
            return self.entity_name(name) if name else "any"
        if info.kind is Kind.SLICE:
            element, depth = collapse_array(info)
            element_type = self.type_name(element)
            return element_type + "[]" * depth if element_type else ""
        if info.kind is Kind.MAP:
            key_type = self.kinds.get(info.key.unwrapped().kind) or self.type_name(info.key)
            value_type = self.type_name(info.elem)
            if key_type and value_type:
                return f"{{[key: {key_type}]: {value_type}}}"
            return ""
        return self.kinds.get(info.kind, "")

    # ------------------------------------------------------------------
    # Visited set
    # ------------------------------------------------------------------

    def is_converted(self, key: Any) -> bool:
        if self._converted is None:
            raise RuntimeError("no conversion run in progress")
        return key in self._converted

    def mark_converted(self, key: Any) -> None:
        if self._converted is None:
            raise RuntimeError("no conversion run in progress")
        self._converted.add(key)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def convert(self, custom_code: Mapping[str, str] | None = None) -> str:
        """Convert all registered enums and structs.

        ``custom_code`` maps declaration names to preserved code that is put
        back inside each declaration. Raises on the first error.
        """
        if self._converted is not None:
            raise RuntimeError("conversion already in progress")
        if self.config.create_from_method:
            logger.warning("create_from_method is deprecated, use create_constructor")

        self._converted = set()
        self._custom_code = custom_code or {}
        try:
            declarations: list[str] = []
            for enum_descriptor in self.registry.enums.values():
                code = self.convert_enum(enum_descriptor)
                if code:
                    declarations.append(code.strip())
            for descriptor in self.registry.structs:
                code = self.convert_type(descriptor)
                if code:
                    declarations.append(code.strip())
        finally:
            self._converted = None
            self._custom_code = {}

        sections = []
        if self.registry.imports:
            sections.append("\n".join(self.registry.imports))
        sections.extend(declarations)
        return "\n\n".join(sections)

    def convert_enum(self, descriptor: EnumDescriptor, depth: int = 0) -> str:
        if self.is_converted(descriptor.type):
            return ""
        self.log(depth, "Converting enum %s", descriptor.name)
        self.mark_converted(descriptor.type)

        lines = [f"enum {self.entity_name(descriptor.name)} {{"]
        for element in descriptor.elements:
            lines.append(f"{self.config.indent}{element.name} = {element.literal},")
        lines.append("}")
        result = "\n".join(lines)
        if not self.config.dont_export:
            result = "export " + result
        return result

    def convert_type(self, target: Any, depth: int = 0) -> str:
        """Declaration of ``target`` preceded by any newly converted dependencies.

        Returns "" when the type was already converted in this run, or has no
        name to be declared under.
        """
        descriptor = self.descriptor_for(target)
        if self.is_converted(descriptor.key):
            return ""
        self.mark_converted(descriptor.key)

        name = self.display_name(descriptor)
        if not name:
            logger.warning("Use add_type_with_name to avoid any for %r", descriptor.type)
            return ""
        self.log(depth, "Converting type %s", name)

        entity_name = self.entity_name(name)
        builder = DeclarationBuilder(self.config, entity_name, self.type_name, self.kinds)
        prepended = ""
        for field in descriptor.fields:
            is_pointer = field.is_pointer
            if is_pointer:
                field = field.unwrapped()
            field_name = json_field_name(field, is_pointer, self.config)
            if not field_name:
                continue

            options = self.registry.resolve_options(descriptor, field)
            handler = self.registry.resolve_handler(descriptor, field)
            chunk = handler.handle_type_conversion(self, builder, descriptor, field, options, field_name, depth)
            prepended = join_prepended(prepended, chunk)

        kind = "interface" if self.config.create_interface else "class"
        result = f"{kind} {entity_name} {{\n"
        if not self.config.dont_export:
            result = "export " + result
        result += builder.render()

        code = self._custom_code.get(entity_name)
        if code:
            indent = self.config.indent
            result += (
                f"{indent}{CUSTOM_CODE_BEGIN.format(name=entity_name)}\n"
                f"{code}\n\n"
                f"{indent}{CUSTOM_CODE_END}\n"
            )
        result += "}"

        return join_prepended(prepended, result)

    def convert_to_file(self, path: Path) -> None:
        """Back up ``path``, keep its preserved code, and write the new output.

        Nothing is written if conversion fails.
        """
        path = Path(path)
        if self.config.backup_dir:
            loader.backup(path, Path(self.config.backup_dir))
        custom_code = loader.load_custom_code(path)
        converted = self.convert(custom_code)
        codegen.write_output(path, codegen.render_module(converted))
