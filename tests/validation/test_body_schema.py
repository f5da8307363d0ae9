# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Tests for reducing jsonschema errors to (property, constraint) pairs."""

import pytest

from reqcheck.exceptions import ConfigurationError
from reqcheck.validation import JsonSchemaValidator, SchemaError


def _pairs(schema, document):
    return [(e.property, e.constraint) for e in JsonSchemaValidator(schema).validate(document)]


def test_valid_document_has_no_errors():
    schema = {"type": "object", "properties": {"x": {"type": "string"}}}
    assert JsonSchemaValidator(schema).validate({"x": "ok"}) == []


def test_type_mismatch_names_property():
    schema = {"type": "object", "properties": {"x": {"type": "string"}}}
    assert _pairs(schema, {"x": 1}) == [("x", "type")]


def test_missing_required_members_are_named_individually():
    schema = {"type": "object", "required": ["a", "b", "c"]}
    assert _pairs(schema, {"b": 1}) == [("a", "required"), ("c", "required")]


def test_nested_and_array_paths():
    schema = {
        "type": "object",
        "properties": {
            "address": {
                "type": "object",
                "properties": {"zip": {"type": "string"}},
                "required": ["city"],
            },
            "tags": {"type": "array", "items": {"type": "string"}},
        },
    }

    pairs = _pairs(schema, {"address": {"zip": 1}, "tags": ["a", 2]})

    assert pairs == [("address.zip", "type"), ("address.city", "required"), ("tags[1]", "type")]


def test_root_errors_use_root_marker():
    assert _pairs({"type": "object"}, [1, 2]) == [("$", "type")]


def test_errors_keep_validator_order():
    schema = {
        "type": "object",
        "properties": {
            "name": {"type": "string", "minLength": 3},
            "age": {"type": "integer", "minimum": 0},
        },
    }

    assert _pairs(schema, {"name": "Al", "age": -1}) == [("name", "minLength"), ("age", "minimum")]


def test_schema_error_string_form():
    error = SchemaError(property="x", constraint="type", message="1 is not of type 'string'")
    assert str(error) == "x (type)"


def test_declared_draft_is_honoured():
    schema = {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "array",
        "prefixItems": [{"type": "integer"}],
    }
    assert _pairs(schema, ["nope"]) == [("[0]", "type")]


def test_invalid_schema_raises_configuration_error():
    with pytest.raises(ConfigurationError, match="Invalid JSON schema"):
        JsonSchemaValidator({"type": "no-such-type"})


def test_document_too_deep_for_recursive_schema_is_one_depth_error():
    document = []
    for _ in range(5000):
        document = [document]

    errors = JsonSchemaValidator({"type": "array", "items": {"$ref": "#"}}).validate(document)

    assert [(e.property, e.constraint) for e in errors] == [("$", "depth")]
