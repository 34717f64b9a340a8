"""
Schema module for the schema registry.

This module provides the versioned registry and its resolution surface:
- Type definitions (SchemaDefinition, VersionEntry)
- Schema registry build and storage
- Resolution of (entity, version) to codecs
- Loading of definitions from modules and JSON documents

Invariants:
    - (entity, version) is unique across a registry
    - A registry is immutable once built; runtime additions produce a new one
    - All definitions are compiled before the registry is handed out

How to change safely:
    - Add new versions as new definitions; never edit shipped ones
    - Use the schema CLI to validate definitions before deployment
"""

from .loader import definitions_from_dict, load_definitions, load_definitions_file
from .registry import SchemaRegistry, build_registry
from .resolver import SchemaResolver, entity_resolver, resolve
from .types import EntityName, SchemaDefinition, VersionEntry, VersionID, schema_fingerprint

__all__ = [
    # Types
    "EntityName",
    "VersionID",
    "SchemaDefinition",
    "VersionEntry",
    "schema_fingerprint",
    # Registry
    "SchemaRegistry",
    "build_registry",
    # Resolution
    "resolve",
    "entity_resolver",
    "SchemaResolver",
    # Loading
    "load_definitions",
    "load_definitions_file",
    "definitions_from_dict",
]
