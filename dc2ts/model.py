"""Describe dataclasses as a graph of convertible types.

Handles:
- Optional[X] / X | None (pointer: always optional, unwraps to X)
- list/tuple/set/Sequence (slice) and dict/Mapping (map) annotations
- nested dataclasses (struct references)
- embedded dataclass fields, flattened in place ({"embed": True} metadata)
- enum classes and their members
- tag metadata: json, ts_type, ts_transform, ts_doc
"""

from __future__ import annotations

import collections.abc
import dataclasses
import enum
import json
import types
import typing
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Mapping

if TYPE_CHECKING:
    from .handlers import TypeConversionHandler

JSON_TAG = "json"
TS_TYPE_TAG = "ts_type"
TS_TRANSFORM_TAG = "ts_transform"
TS_DOC_TAG = "ts_doc"
EMBED_TAG = "embed"

OMIT_EMPTY = "omitempty"

# Placeholder substituted with the raw source expression in ts_transform
TRANSFORM_PLACEHOLDER = "__VALUE__"


class Kind(str, enum.Enum):
    """Primitive or structural category of an annotation."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    ANY = "any"
    STRUCT = "struct"
    SLICE = "slice"
    MAP = "map"
    POINTER = "pointer"
    ENUM = "enum"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


PRIMITIVE_TS_TYPES: dict[Kind, str] = {
    Kind.BOOL: "boolean",
    Kind.INT: "number",
    Kind.FLOAT: "number",
    Kind.STRING: "string",
    Kind.ANY: "any",
}

_SEQUENCE_ORIGINS = {
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
}

_MAPPING_ORIGINS = {
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
}

_NONE_TYPE = type(None)


@dataclass(frozen=True)
class TypeInfo:
    """Kind of an annotation plus its pointee/element (elem) and map key."""

    annotation: Any
    kind: Kind
    name: str = ""
    elem: TypeInfo | None = None
    key: TypeInfo | None = None

    def unwrapped(self) -> TypeInfo:
        """Return the pointee for pointers, else self."""
        if self.kind is Kind.POINTER and self.elem is not None:
            return self.elem
        return self

    @property
    def is_struct_like(self) -> bool:
        """Struct, or pointer to struct."""
        return self.unwrapped().kind is Kind.STRUCT


def _element_annotation(origin: Any, args: tuple[Any, ...]) -> Any:
    """Pick the element annotation of a sequence type."""
    if not args:
        return Any
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if len(set(args)) == 1:
            return args[0]
        return Any
    return args[0]


def describe(annotation: Any) -> TypeInfo:
    """Classify a type annotation."""
    if annotation is Any or annotation is object or annotation is None or annotation is _NONE_TYPE:
        return TypeInfo(annotation, Kind.ANY)

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is typing.Annotated:
        return describe(args[0])

    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in args if arg is not _NONE_TYPE]
        if len(members) == 1:
            return TypeInfo(annotation, Kind.POINTER, elem=describe(members[0]))
        return TypeInfo(annotation, Kind.ANY)

    if origin in _SEQUENCE_ORIGINS or annotation in _SEQUENCE_ORIGINS:
        return TypeInfo(annotation, Kind.SLICE, elem=describe(_element_annotation(origin, args)))

    if origin in _MAPPING_ORIGINS or annotation in _MAPPING_ORIGINS:
        key, value = args if len(args) == 2 else (Any, Any)
        return TypeInfo(annotation, Kind.MAP, key=describe(key), elem=describe(value))

    if isinstance(annotation, type):
        name = annotation.__name__
        if dataclasses.is_dataclass(annotation):
            return TypeInfo(annotation, Kind.STRUCT, name)
        if issubclass(annotation, bool):
            return TypeInfo(annotation, Kind.BOOL, name)
        if issubclass(annotation, int):
            return TypeInfo(annotation, Kind.INT, name)
        if issubclass(annotation, float):
            return TypeInfo(annotation, Kind.FLOAT, name)
        if issubclass(annotation, str):
            return TypeInfo(annotation, Kind.STRING, name)
        if issubclass(annotation, enum.Enum):
            return TypeInfo(annotation, Kind.ENUM, name)
        return TypeInfo(annotation, Kind.UNKNOWN, name)

    return TypeInfo(annotation, Kind.UNKNOWN, getattr(annotation, "__name__", str(annotation)))


def collapse_array(info: TypeInfo) -> tuple[TypeInfo, int]:
    """Collapse slice-of-slice into (innermost element, array depth)."""
    element = (info.elem or describe(Any)).unwrapped()
    depth = 1
    while element.kind is Kind.SLICE:
        element = (element.elem or describe(Any)).unwrapped()
        depth += 1
    return element, depth


def referenced_structs(info: TypeInfo) -> list[Any]:
    """Dataclasses named by a (possibly nested) slice or map annotation.

    Keys come before values; struct fields are not descended into.
    """
    info = info.unwrapped()
    if info.kind is Kind.STRUCT:
        return [info.annotation]
    result: list[Any] = []
    for part in (info.key, info.elem):
        if part is not None:
            result.extend(a for a in referenced_structs(part) if a not in result)
    return result


@dataclass(frozen=True)
class TypeOptions:
    """Override bundle for a field type; empty strings mean no override."""

    ts_type: str = ""
    ts_doc: str = ""
    ts_transform: str = ""


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    type: TypeInfo
    tags: Mapping[str, Any] = field(default_factory=dict)

    def tag(self, key: str) -> str:
        value = self.tags.get(key)
        return "" if value is None else str(value)

    @property
    def is_pointer(self) -> bool:
        return self.type.kind is Kind.POINTER

    @property
    def is_private(self) -> bool:
        return self.name.startswith("_")

    def unwrapped(self) -> FieldDescriptor:
        """Return a copy whose type is the pointee when this is a pointer field."""
        if not self.is_pointer:
            return self
        return dataclasses.replace(self, type=self.type.unwrapped())

    def tag_options(self) -> TypeOptions:
        return TypeOptions(
            ts_type=self.tag(TS_TYPE_TAG),
            ts_doc=self.tag(TS_DOC_TAG),
            ts_transform=self.tag(TS_TRANSFORM_TAG),
        )


@dataclass(eq=False)
class TypeDescriptor:
    """One structured type registered for (or reached during) conversion.

    ``type`` is the dataclass itself; anonymous descriptors (from tag_all or
    add_field_tags) have ``type=None`` and ``type_name=""`` and are keyed by
    their own identity.
    """

    type: Any
    type_name: str
    fields: list[FieldDescriptor] = field(default_factory=list)
    name: str = ""
    field_options: dict[Any, TypeOptions] = field(default_factory=dict)
    type_handlers: dict[Any, TypeConversionHandler] = field(default_factory=dict)

    @property
    def key(self) -> Any:
        return self if self.type is None else self.type

    @property
    def display_name(self) -> str:
        return self.name or self.type_name

    def with_field_options(self, field_type: Any, options: TypeOptions) -> TypeDescriptor:
        """Override options for every field of ``field_type`` inside this struct."""
        self.field_options[field_type] = options
        return self

    def with_type_handler(self, field_type: Any, handler: TypeConversionHandler) -> TypeDescriptor:
        """Use ``handler`` for every field of ``field_type`` inside this struct."""
        self.type_handlers[field_type] = handler
        return self


def deep_fields(cls: type, _expanding: frozenset[type] = frozenset()) -> list[FieldDescriptor]:
    """Return all fields of a dataclass, embedded dataclass fields flattened in place."""
    hints = typing.get_type_hints(cls)
    expanding = _expanding | {cls}
    result: list[FieldDescriptor] = []
    for dc_field in dataclasses.fields(cls):
        info = describe(hints.get(dc_field.name, dc_field.type))
        target = info.unwrapped()
        if (
            dc_field.metadata.get(EMBED_TAG)
            and target.kind is Kind.STRUCT
            and target.annotation not in expanding
        ):
            result.extend(deep_fields(target.annotation, expanding))
            continue
        result.append(FieldDescriptor(dc_field.name, info, dict(dc_field.metadata)))
    return result


def describe_struct(obj: Any, name: str = "") -> TypeDescriptor:
    """Build a TypeDescriptor from a dataclass (class or instance).

    Anything that is not a dataclass yields a field-less descriptor with no
    type name; it is only emitted when ``name`` is given.
    """
    if isinstance(obj, TypeDescriptor):
        return dataclasses.replace(obj, name=name) if name else obj
    if not dataclasses.is_dataclass(obj):
        return TypeDescriptor(type=obj, type_name="", name=name)
    cls = obj if isinstance(obj, type) else type(obj)
    return TypeDescriptor(type=cls, type_name=cls.__name__, fields=deep_fields(cls), name=name)


def _anonymous_copy(descriptor: TypeDescriptor, fields: list[FieldDescriptor]) -> TypeDescriptor:
    return TypeDescriptor(
        type=None,
        type_name="",
        fields=fields,
        field_options=dict(descriptor.field_options),
        type_handlers=dict(descriptor.type_handlers),
    )


def tag_all(descriptor: TypeDescriptor, options: Iterable[str]) -> TypeDescriptor:
    """Anonymous copy of ``descriptor`` with ``options`` set on every json tag.

    The wire name part of each tag is kept; existing options are replaced.
    Private fields without a json tag stay untagged, so they remain skipped.
    Register the result with a name, it has none of its own.
    """
    opts = list(options)
    fields = []
    for fld in descriptor.fields:
        if fld.is_private and not fld.tag(JSON_TAG):
            fields.append(fld)
            continue
        wire_name = fld.tag(JSON_TAG).split(",")[0]
        tags = {**fld.tags, JSON_TAG: ",".join([wire_name, *opts])}
        fields.append(dataclasses.replace(fld, tags=tags))
    return _anonymous_copy(descriptor, fields)


def add_field_tags(
    descriptor: TypeDescriptor,
    field_tags: Mapping[str, Mapping[str, str]],
) -> TypeDescriptor:
    """Anonymous copy of ``descriptor`` with extra tags set per field name."""
    fields = []
    for fld in descriptor.fields:
        extra = field_tags.get(fld.name)
        if extra:
            fld = dataclasses.replace(fld, tags={**fld.tags, **extra})
        fields.append(fld)
    return _anonymous_copy(descriptor, fields)


@dataclass(frozen=True)
class EnumElement:
    value: Any
    name: str

    @property
    def literal(self) -> str:
        """TypeScript literal of the value."""
        return json.dumps(self.value)


@dataclass
class EnumDescriptor:
    type: Any
    name: str
    elements: list[EnumElement] = field(default_factory=list)


def _ts_name(member: enum.Enum) -> str:
    ts_name = getattr(member, "ts_name", None)
    if callable(ts_name):
        return ts_name()
    return member.name


def describe_enum(values: Any) -> EnumDescriptor:
    """Build an EnumDescriptor from an Enum class or a list of its members.

    Members may define a ``ts_name()`` method to choose their TypeScript name.
    """
    members = list(values)
    if not members:
        raise ValueError(f"no values given for enum {values!r}")
    enum_type = type(members[0])
    for member in members:
        if not isinstance(member, enum.Enum):
            raise TypeError(f"{member!r} is not an enum member")
        if type(member) is not enum_type:
            raise TypeError(f"{member!r} is not a {enum_type.__name__} member")
        try:
            json.dumps(member.value)
        except (TypeError, ValueError) as exc:
            raise TypeError(f"{member!r} has no TypeScript literal: {exc}") from exc
    elements = [EnumElement(member.value, _ts_name(member)) for member in members]
    return EnumDescriptor(enum_type, enum_type.__name__, elements)
