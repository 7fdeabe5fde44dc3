import logging

import pytest

from openapi_to_http.config import GeneratorConfig
from openapi_to_http.errors import MalformedSchemaError
from openapi_to_http.generator.schema import render_schema, type_label
from openapi_to_http.parser.base import JsonSchema


def _schema(data: dict) -> JsonSchema:
    return JsonSchema.model_validate(data)


class TestRenderSchema:
    def test_optional_property(self):
        s = _schema({"type": "object", "properties": {"name": {"type": "string"}}})
        assert render_schema(s) == ["name?: String"]

    def test_required_property(self):
        s = _schema({"type": "object", "properties": {"name": {"type": "string"}}, "required": ["name"]})
        assert render_schema(s) == ["name: String"]

    def test_every_property_once_in_declaration_order(self):
        s = _schema(
            {
                "type": "object",
                "required": ["id", "active"],
                "properties": {
                    "id": {"type": "integer"},
                    "price": {"type": "number"},
                    "active": {"type": "boolean"},
                    "tags": {"type": "array"},
                    "meta": {"type": "object"},
                },
            }
        )
        assert render_schema(s) == [
            "id: Integer",
            "price?: Number",
            "active: Boolean",
            "tags?: Array",
            "meta?: Object",
        ]

    @pytest.mark.parametrize("type_", ["string", "integer", "array", "boolean"])
    def test_non_object_schema_renders_nothing(self, type_):
        assert render_schema(_schema({"type": type_})) == []

    def test_object_without_properties(self):
        assert render_schema(_schema({"type": "object"})) == []

    def test_nested_object_indented(self):
        s = _schema(
            {
                "type": "object",
                "properties": {
                    "address": {
                        "type": "object",
                        "required": ["city"],
                        "properties": {
                            "city": {"type": "string"},
                            "geo": {"type": "object", "properties": {"lat": {"type": "number"}}},
                        },
                    },
                    "name": {"type": "string"},
                },
            }
        )
        assert render_schema(s) == [
            "address?: Object",
            "  city: String",
            "  geo?: Object",
            "    lat?: Number",
            "name?: String",
        ]

    def test_array_of_objects_indented(self):
        s = _schema(
            {
                "type": "object",
                "properties": {
                    "items": {
                        "type": "array",
                        "items": {"type": "object", "required": ["sku"], "properties": {"sku": {"type": "string"}}},
                    }
                },
            }
        )
        assert render_schema(s) == ["items?: Array", "  sku: String"]

    def test_array_of_primitives_not_expanded(self):
        s = _schema({"type": "object", "properties": {"tags": {"type": "array", "items": {"type": "string"}}}})
        assert render_schema(s) == ["tags?: Array"]

    def test_missing_type_falls_back_to_any(self, caplog):
        s = _schema({"type": "object", "properties": {"blob": {"description": "anything"}}})
        with caplog.at_level(logging.WARNING):
            assert render_schema(s) == ["blob?: Any"]
        assert "no type" in caplog.text

    def test_missing_type_strict_raises(self):
        s = _schema({"type": "object", "properties": {"blob": {}}})
        with pytest.raises(MalformedSchemaError):
            render_schema(s, config=GeneratorConfig(strict=True))

    def test_ref_resolved_from_components(self):
        components = {
            "Address": _schema({"type": "object", "properties": {"city": {"type": "string"}}}),
        }
        s = _schema({"type": "object", "properties": {"home": {"$ref": "#/components/schemas/Address"}}})
        assert render_schema(s, components) == ["home?: Object", "  city?: String"]

    def test_root_ref(self):
        components = {"Pet": _schema({"type": "object", "properties": {"name": {"type": "string"}}})}
        assert render_schema(_schema({"$ref": "#/components/schemas/Pet"}), components) == ["name?: String"]

    def test_cyclic_ref_terminates(self):
        components = {
            "Node": _schema(
                {
                    "type": "object",
                    "properties": {
                        "value": {"type": "string"},
                        "children": {"type": "array", "items": {"$ref": "#/components/schemas/Node"}},
                    },
                }
            )
        }
        assert render_schema(_schema({"$ref": "#/components/schemas/Node"}), components) == [
            "value?: String",
            "children?: Array",
        ]

    def test_all_of_merged(self):
        components = {
            "Base": _schema({"type": "object", "required": ["id"], "properties": {"id": {"type": "integer"}}}),
        }
        s = _schema(
            {
                "allOf": [
                    {"$ref": "#/components/schemas/Base"},
                    {"type": "object", "properties": {"name": {"type": "string"}}},
                ]
            }
        )
        assert render_schema(s, components) == ["id: Integer", "name?: String"]

    def test_deterministic(self):
        s = _schema({"type": "object", "properties": {"b": {"type": "string"}, "a": {"type": "string"}}})
        assert render_schema(s) == render_schema(s)


class TestTypeLabel:
    def test_type_list(self):
        assert type_label(_schema({"type": ["string", "null"]})) == "String,Null"

    def test_untyped_with_properties_is_object(self):
        assert type_label(_schema({"properties": {"a": {"type": "string"}}})) == "Object"

    def test_untyped_with_items_is_array(self):
        assert type_label(_schema({"items": {"type": "string"}})) == "Array"

    def test_one_of_labels(self):
        s = _schema({"oneOf": [{"type": "string"}, {"type": "integer"}, {"type": "string"}]})
        assert type_label(s) == "String,Integer"

    def test_unrecognised_type(self):
        assert type_label(_schema({"type": "decimal"})) == "Any"

    def test_dangling_ref(self):
        assert type_label(_schema({"$ref": "#/components/schemas/Missing"}), {}) == "Any"

    def test_dangling_ref_strict(self):
        with pytest.raises(MalformedSchemaError):
            type_label(_schema({"$ref": "#/components/schemas/Missing"}), {}, strict=True)

    def test_boolean_schema_is_any(self):
        s = _schema({"type": "object", "properties": {"anything": True, "nothing": False}})
        assert render_schema(s, config=GeneratorConfig(strict=True)) == ["anything?: Any", "nothing?: Any"]

    def test_control_characters_escaped_in_names(self):
        s = _schema({"type": "object", "properties": {"a\nPOST /admin": {"type": "string"}}})
        assert render_schema(s) == ["a\\nPOST /admin?: String"]
