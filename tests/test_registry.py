"""Tests for the conversion registry."""

from datetime import datetime

from dc2ts.handlers import DefaultTypeConversionHandler, TypeConversionHandler
from dc2ts.model import TypeOptions, describe_struct
from dc2ts.registry import ConversionRegistry

from sample_models import Color, Documented, Event, Point, Weekday


class NullHandler(TypeConversionHandler):
    def handle_type_conversion(self, converter, builder, declaring, field, options, field_name, depth=0):
        return ""


def _field(descriptor, name):
    return next(f.unwrapped() for f in descriptor.fields if f.name == name)


class TestRegistration:
    def test_add_keeps_order(self, registry):
        registry.add(Point).add_type(Event)
        assert [d.type for d in registry.structs] == [Point, Event]

    def test_add_type_with_name(self, registry):
        registry.add_type_with_name(Point, "Vector")
        assert registry.find_struct(Point).name == "Vector"

    def test_find_struct_missing(self, registry):
        assert registry.find_struct(Point) is None

    def test_add_enum_replaces(self, registry):
        registry.add_enum(Color)
        registry.add_enum([Color.GREEN])
        assert [e.name for e in registry.enums[Color].elements] == ["GREEN"]

    def test_is_enum(self, registry):
        registry.add_enum(Weekday)
        assert registry.is_enum(Weekday)
        assert not registry.is_enum(Color)
        assert not registry.is_enum(list[Weekday])

    def test_imports_deduplicated(self, registry):
        registry.add_import("import Decimal from 'decimal.js';")
        registry.add_import("import Decimal from 'decimal.js';")
        assert registry.imports == ["import Decimal from 'decimal.js';"]


class TestResolveOptions:
    """Test override precedence: tag < struct-specific < global."""

    def test_tag_only(self, registry):
        descriptor = describe_struct(Documented)
        options = registry.resolve_options(descriptor, _field(descriptor, "when"))
        assert options == TypeOptions(ts_type="Date", ts_transform="new Date(__VALUE__)")

    def test_doc_from_tag(self, registry):
        descriptor = describe_struct(Documented)
        registry.manage_type(str, TypeOptions(ts_type="String", ts_doc="ignored"))
        options = registry.resolve_options(descriptor, _field(descriptor, "title"))
        assert options.ts_doc == "Display title"
        assert options.ts_type == "String"

    def test_struct_specific_beats_tag(self, registry):
        descriptor = describe_struct(Documented).with_field_options(str, TypeOptions(ts_type="MyString"))
        registry.add(descriptor)
        options = registry.resolve_options(descriptor, _field(descriptor, "when"))
        assert options.ts_type == "MyString"
        assert options.ts_transform == "new Date(__VALUE__)"

    def test_global_beats_struct_specific(self, registry):
        descriptor = describe_struct(Event).with_field_options(datetime, TypeOptions(ts_type="string"))
        registry.add(descriptor)
        registry.manage_type(datetime, TypeOptions(ts_type="Date"))
        options = registry.resolve_options(descriptor, _field(descriptor, "when"))
        assert options.ts_type == "Date"

    def test_empty_override_keeps_value(self, registry):
        descriptor = describe_struct(Event).with_field_options(datetime, TypeOptions(ts_type="Date"))
        registry.add(descriptor)
        registry.manage_type(datetime, TypeOptions(ts_transform="new Date(__VALUE__)"))
        options = registry.resolve_options(descriptor, _field(descriptor, "when"))
        assert options == TypeOptions(ts_type="Date", ts_transform="new Date(__VALUE__)")

    def test_overrides_on_registered_descriptor_apply_to_reached_copy(self, registry):
        registry.add(describe_struct(Event).with_field_options(datetime, TypeOptions(ts_type="Date")))
        reached = describe_struct(Event)
        assert registry.resolve_options(reached, _field(reached, "when")).ts_type == "Date"


class TestResolveHandler:
    """Test handler lookup order."""

    def test_default(self, registry):
        descriptor = describe_struct(Event)
        handler = registry.resolve_handler(descriptor, _field(descriptor, "when"))
        assert isinstance(handler, DefaultTypeConversionHandler)

    def test_replaced_default(self, registry):
        null = NullHandler()
        registry.with_type_conversion_handler(null)
        descriptor = describe_struct(Event)
        assert registry.resolve_handler(descriptor, _field(descriptor, "name")) is null

    def test_global_by_declaring_type(self, registry):
        null = NullHandler()
        registry.manage_type_conversion(null, Event, Point)
        descriptor = describe_struct(Event)
        assert registry.resolve_handler(descriptor, _field(descriptor, "name")) is null

    def test_struct_and_field_type_first(self):
        specific, general = NullHandler(), NullHandler()
        registry = ConversionRegistry(default_handler=NullHandler())
        descriptor = describe_struct(Event).with_type_handler(datetime, specific)
        registry.add(descriptor).manage_type_conversion(general, Event)
        assert registry.resolve_handler(descriptor, _field(descriptor, "when")) is specific
        assert registry.resolve_handler(descriptor, _field(descriptor, "name")) is general
