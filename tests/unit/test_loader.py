"""
Unit tests for definition loading.

Tests cover:
- Loading from modules (DEFINITIONS and get_definitions())
- Loading from nested dicts and JSON files
- Load errors
"""

import json
import sys
import types

import pytest

from app.schema_registry.errors import DefinitionLoadError
from app.schema_registry.schema.loader import (
    definitions_from_dict,
    load_definitions,
    load_definitions_file,
)
from app.schema_registry.schema.types import SchemaDefinition


@pytest.fixture
def fake_module():
    """Install a throwaway definitions module and remove it afterwards."""
    installed = []

    def install(name, **attrs):
        module = types.ModuleType(name)
        for key, value in attrs.items():
            setattr(module, key, value)
        sys.modules[name] = module
        installed.append(name)
        return module

    yield install

    for name in installed:
        sys.modules.pop(name, None)


class TestLoadDefinitions:
    """Tests for load_definitions()."""

    def test_builtin_module(self):
        definitions = load_definitions("app.schema_registry.definitions")

        assert [d.key for d in definitions] == [("parcelEvent", "v1"), ("parcelEvent", "v2")]

    def test_get_definitions_function(self, fake_module):
        d = SchemaDefinition(entity="t", version="v1", source={"type": "int"})
        fake_module("defs_by_function", get_definitions=lambda: [d])

        assert load_definitions("defs_by_function") == [d]

    def test_missing_module(self):
        with pytest.raises(DefinitionLoadError) as exc_info:
            load_definitions("no.such.module_here")

        assert exc_info.value.source == "no.such.module_here"

    def test_module_without_definitions(self, fake_module):
        fake_module("defs_empty")

        with pytest.raises(DefinitionLoadError, match="DEFINITIONS"):
            load_definitions("defs_empty")

    def test_wrong_item_type(self, fake_module):
        fake_module("defs_wrong", DEFINITIONS=[{"entity": "t"}])

        with pytest.raises(DefinitionLoadError, match="expected SchemaDefinition"):
            load_definitions("defs_wrong")


class TestDefinitionsFromDict:
    """Tests for the nested document form."""

    def test_preserves_order(self):
        data = {
            "parcelEvent": {"v1": {"type": "int"}, "v2": {"type": "long"}},
            "shipmentEvent": {"v1": '{"type": "string"}'},
        }

        definitions = definitions_from_dict(data)

        assert [d.key for d in definitions] == [
            ("parcelEvent", "v1"),
            ("parcelEvent", "v2"),
            ("shipmentEvent", "v1"),
        ]
        assert definitions[2].parsed() == {"type": "string"}

    def test_entity_without_versions(self):
        with pytest.raises(DefinitionLoadError, match="non-empty object"):
            definitions_from_dict({"parcelEvent": {}})

    def test_top_level_not_object(self):
        with pytest.raises(DefinitionLoadError):
            definitions_from_dict(["parcelEvent"])

    def test_empty_version_label(self):
        with pytest.raises(DefinitionLoadError, match="version cannot be empty"):
            definitions_from_dict({"parcelEvent": {"": {"type": "int"}}})


class TestLoadDefinitionsFile:
    """Tests for load_definitions_file()."""

    def test_reads_json(self, tmp_path):
        path = tmp_path / "schemas.json"
        path.write_text(json.dumps({"parcelEvent": {"v1": {"type": "int"}}}))

        definitions = load_definitions_file(str(path))

        assert definitions[0].key == ("parcelEvent", "v1")

    def test_missing_file(self, tmp_path):
        with pytest.raises(DefinitionLoadError):
            load_definitions_file(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")

        with pytest.raises(DefinitionLoadError):
            load_definitions_file(str(path))
