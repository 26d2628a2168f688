"""
Tests for YAML schema declarations.

Covers:
  - SchemaLoader             — models, blocks, prefixes, errors
  - validate_yaml_file()     — JSON Schema check of a single file
  - validate_schema_dir()    — directory walk
"""
from __future__ import annotations

import datetime
from pathlib import Path

import pytest
import yaml

from schemaforge.exceptions import SchemaDefinitionError
from schemaforge.model import Model
from schemaforge.schema.accessors import AccessorRegistry, getter
from schemaforge.schema.loader import SchemaLoader
from schemaforge.schema.validator import (
    BLOCK_SCHEMA,
    MODEL_SCHEMA,
    ValidationIssue,
    schema_for,
    validate_schema_dir,
    validate_yaml_file,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write_yaml(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data, sort_keys=False))
    return path


def _write_raw(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


CONTACT_YAML = """\
model: Contact
description: A person we talk to
includes:
  - block: address
    prefix: billing
fields:
  firstName: String
  lastName: {type: String, required: true}
  age: {type: Number, min: 0, max: 150}
  tags: [String]
  notes: "[]"
  since: {type: Date, min: 2000-01-01}
  status: {type: String, default: active}
"""

ADDRESS_YAML = """\
block: address
fields:
  city: String
  zip: {type: String, required: true}
"""


@pytest.fixture
def schema_dir(tmp_path: Path) -> Path:
    _write_raw(tmp_path / "blocks" / "address.yaml", ADDRESS_YAML)
    _write_raw(tmp_path / "models" / "contact.yaml", CONTACT_YAML)
    return tmp_path


@pytest.fixture(autouse=True)
def clear_accessor_registry():
    AccessorRegistry.clear()
    yield
    AccessorRegistry.clear()


# ---------------------------------------------------------------------------
# SchemaLoader
# ---------------------------------------------------------------------------


class TestSchemaLoader:
    def test_loads_models(self, schema_dir):
        loader = SchemaLoader(schema_dir)
        loader.load_all()
        assert loader.list_models() == ["Contact"]
        Contact = loader.get_model("Contact")
        assert issubclass(Contact, Model)

    def test_block_fields_come_first_with_prefix(self, schema_dir):
        loader = SchemaLoader(schema_dir)
        loader.load_all()
        keys = list(loader.get_model("Contact").schema)
        assert keys[:2] == ["billingCity", "billingZip"]
        assert "firstName" in keys

    def test_resolved_types(self, schema_dir):
        loader = SchemaLoader(schema_dir)
        loader.load_all()
        schema = loader.get_model("Contact").schema
        assert schema["tags"].type.name == "[String]"
        assert schema["notes"].type.name == "Array"
        assert schema["since"].min == datetime.date(2000, 1, 1)
        assert schema["status"].default == "active"

    def test_loaded_model_validates(self, schema_dir):
        loader = SchemaLoader(schema_dir)
        loader.load_all()
        Contact = loader.get_model("Contact")

        contact = Contact({"billingZip": "12345", "lastName": "Doe", "age": -1})
        assert contact.validation_error is None
        assert not contact.is_valid()
        assert contact.validation_error == '"-1" is lower than 0 for field "age".'

    def test_definition_keeps_source(self, schema_dir):
        loader = SchemaLoader(schema_dir)
        loader.load_all()
        definition = loader.definitions["Contact"]
        assert definition.description == "A person we talk to"
        assert definition.source == schema_dir / "models" / "contact.yaml"

    def test_flat_directory(self, tmp_path):
        _write_yaml(tmp_path / "pet.yaml", {"model": "Pet", "fields": {"name": "String"}})
        loader = SchemaLoader(tmp_path)
        loader.load_all()
        assert loader.list_models() == ["Pet"]

    def test_single_file(self, tmp_path):
        path = _write_yaml(tmp_path / "pet.yaml", {"model": "Pet", "fields": {"name": "String"}})
        loader = SchemaLoader(path)
        loader.load_all()
        assert loader.get_model("Pet") is not None

    def test_files_without_model_key_are_skipped(self, tmp_path):
        _write_yaml(tmp_path / "other.yaml", {"something": "else"})
        loader = SchemaLoader(tmp_path)
        loader.load_all()
        assert loader.list_models() == []

    def test_unknown_block(self, tmp_path):
        _write_yaml(
            tmp_path / "pet.yaml",
            {"model": "Pet", "includes": [{"block": "nope"}], "fields": {}},
        )
        with pytest.raises(SchemaDefinitionError, match="unknown block 'nope'"):
            SchemaLoader(tmp_path).load_all()

    def test_duplicate_model(self, tmp_path):
        _write_yaml(tmp_path / "a.yaml", {"model": "Pet", "fields": {}})
        _write_yaml(tmp_path / "b.yaml", {"model": "Pet", "fields": {}})
        with pytest.raises(SchemaDefinitionError, match="Duplicate model 'Pet'"):
            SchemaLoader(tmp_path).load_all()

    def test_yaml_boolean_key(self, tmp_path):
        _write_raw(tmp_path / "switch.yaml", "model: Switch\nfields:\n  on: Boolean\n")
        with pytest.raises(SchemaDefinitionError, match="non-string field key"):
            SchemaLoader(tmp_path).load_all()

    def test_bad_declaration(self, tmp_path):
        _write_yaml(tmp_path / "pet.yaml", {"model": "Pet", "fields": {"legs": "Integer"}})
        with pytest.raises(SchemaDefinitionError, match="unknown type name 'Integer'"):
            SchemaLoader(tmp_path).load_all()

    def test_named_accessors(self, tmp_path):
        @getter("shout")
        def shout(model, key, value):
            return value.upper() if value else None

        _write_yaml(
            tmp_path / "pet.yaml",
            {"model": "Pet", "fields": {"name": {"type": "String", "get": "shout"}}},
        )
        loader = SchemaLoader(tmp_path)
        loader.load_all()
        assert loader.get_model("Pet")({"name": "rex"}).get("name") == "REX"

    def test_single_file_uses_sibling_blocks(self, schema_dir):
        loader = SchemaLoader(schema_dir / "models" / "contact.yaml")
        loader.load_all()
        assert "billingZip" in loader.get_model("Contact").schema

    @pytest.mark.parametrize(
        "content, message",
        [
            ("model: Pet\nfields: [a, b]\n", "'fields' must be a mapping"),
            ("model: Pet\nincludes: address\nfields: {}\n", "'includes' must be a list"),
            ("model: Pet\nincludes: [address]\nfields: {}\n", "malformed include"),
            ("model: [Pet]\nfields: {}\n", "must be a string"),
        ],
    )
    def test_malformed_declaration(self, tmp_path, content, message):
        _write_raw(tmp_path / "pet.yaml", content)
        with pytest.raises(SchemaDefinitionError, match=message):
            SchemaLoader(tmp_path).load_all()

    def test_malformed_block_fields(self, tmp_path):
        _write_raw(tmp_path / "blocks" / "address.yaml", "block: address\nfields: city\n")
        _write_yaml(tmp_path / "models" / "pet.yaml", {"model": "Pet", "fields": {}})
        with pytest.raises(SchemaDefinitionError, match="Block 'address'"):
            SchemaLoader(tmp_path).load_all()


# ---------------------------------------------------------------------------
# validate_yaml_file
# ---------------------------------------------------------------------------


class TestValidateYamlFile:
    def test_valid_model(self, schema_dir):
        assert validate_yaml_file(schema_dir / "models" / "contact.yaml") == []

    def test_valid_block(self, schema_dir):
        assert validate_yaml_file(schema_dir / "blocks" / "address.yaml") == []

    def test_schema_inferred_from_location(self, schema_dir):
        assert schema_for(schema_dir / "blocks" / "address.yaml") == BLOCK_SCHEMA
        assert schema_for(schema_dir / "models" / "contact.yaml") == MODEL_SCHEMA

    def test_missing_fields(self, tmp_path):
        path = _write_yaml(tmp_path / "pet.yaml", {"model": "Pet"})
        issues = validate_yaml_file(path)
        assert len(issues) == 1
        assert "'fields' is a required property" in issues[0].message

    def test_unknown_option(self, tmp_path):
        path = _write_yaml(
            tmp_path / "pet.yaml",
            {"model": "Pet", "fields": {"name": {"type": "String", "unique": True}}},
        )
        assert validate_yaml_file(path)

    def test_multi_element_array(self, tmp_path):
        path = _write_yaml(
            tmp_path / "pet.yaml",
            {"model": "Pet", "fields": {"tags": ["String", "Number"]}},
        )
        issues = validate_yaml_file(path)
        assert issues
        assert issues[0].path.startswith("fields/tags")

    def test_type_names_are_case_insensitive(self, tmp_path):
        path = _write_yaml(
            tmp_path / "pet.yaml",
            {"model": "Pet", "fields": {"name": "STRING", "tags": "[number]", "born": ["DATE"]}},
        )
        assert validate_yaml_file(path) == []
        loader = SchemaLoader(path)
        loader.load_all()
        assert loader.get_model("Pet").schema["tags"].type.name == "[Number]"

    def test_unknown_type_name(self, tmp_path):
        path = _write_yaml(tmp_path / "pet.yaml", {"model": "Pet", "fields": {"legs": "Integer"}})
        assert validate_yaml_file(path)

    def test_parse_error(self, tmp_path):
        path = _write_raw(tmp_path / "bad.yaml", "model: [unclosed\n")
        issues = validate_yaml_file(path)
        assert "YAML parse error" in issues[0].message

    def test_empty_file(self, tmp_path):
        path = _write_raw(tmp_path / "empty.yaml", "\n")
        issues = validate_yaml_file(path)
        assert "empty" in issues[0].message

    def test_issue_str(self, tmp_path):
        issue = ValidationIssue(file=tmp_path / "a.yaml", message="boom", path="fields/x")
        assert str(issue) == f"[ERROR] {tmp_path / 'a.yaml'} at fields/x: boom"


# ---------------------------------------------------------------------------
# validate_schema_dir
# ---------------------------------------------------------------------------


class TestValidateSchemaDir:
    def test_valid_dir(self, schema_dir):
        assert validate_schema_dir(schema_dir) == []

    def test_collects_issues_across_files(self, schema_dir):
        _write_yaml(schema_dir / "models" / "bad.yaml", {"model": "Bad"})
        _write_yaml(schema_dir / "blocks" / "bad.yaml", {"fields": {}})
        issues = validate_schema_dir(schema_dir)
        assert {issue.file.name for issue in issues} == {"bad.yaml"}
        assert len(issues) == 2

    def test_missing_dir(self, tmp_path):
        issues = validate_schema_dir(tmp_path / "nope")
        assert "does not exist" in issues[0].message
