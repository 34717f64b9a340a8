"""
Loading of schema definitions from modules and JSON documents.

Definitions normally live as constants in a Python module (see
app.schema_registry.definitions). This module locates them by import path,
or reads the nested document form:

    {"parcelEvent": {"v1": {...avro schema...}, "v2": {...}}}

Invariants:
    - Loading never compiles anything; compilation happens in the registry
    - Document order is preserved as declaration order
"""

from __future__ import annotations

import importlib
import json
import logging
from collections.abc import Mapping
from typing import Any, List

from ..errors import DefinitionLoadError
from .types import SchemaDefinition

logger = logging.getLogger(__name__)


def load_definitions(module_path: str) -> List[SchemaDefinition]:
    """Import a module and return the definitions it exposes.

    The module must define either a DEFINITIONS iterable or a
    get_definitions() function.

    Raises:
        DefinitionLoadError: If the module cannot be imported or exposes
            neither attribute
    """
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise DefinitionLoadError(module_path, str(e)) from e

    if hasattr(module, "DEFINITIONS"):
        definitions = module.DEFINITIONS
    elif hasattr(module, "get_definitions"):
        definitions = module.get_definitions()
    else:
        raise DefinitionLoadError(module_path, "module has no 'DEFINITIONS' or 'get_definitions()'")

    result = list(definitions)
    for d in result:
        if not isinstance(d, SchemaDefinition):
            raise DefinitionLoadError(
                module_path, f"expected SchemaDefinition, got {type(d).__name__}"
            )
    logger.debug(f"Loaded {len(result)} schema definitions from {module_path}")
    return result


def definitions_from_dict(data: Mapping[str, Any], source: str = "<dict>") -> List[SchemaDefinition]:
    """Convert the nested {entity: {version: schema}} form into definitions.

    Raises:
        DefinitionLoadError: If the document is not shaped as expected
    """
    if not isinstance(data, Mapping):
        raise DefinitionLoadError(source, "top level must be an object of entities")

    definitions: List[SchemaDefinition] = []
    for entity, versions in data.items():
        if not isinstance(versions, Mapping) or not versions:
            raise DefinitionLoadError(
                source, f"entity '{entity}' must map to a non-empty object of versions"
            )
        for version, schema in versions.items():
            try:
                definitions.append(SchemaDefinition(entity=entity, version=version, source=schema))
            except ValueError as e:
                raise DefinitionLoadError(source, str(e)) from e
    return definitions


def load_definitions_file(path: str) -> List[SchemaDefinition]:
    """Read definitions from a JSON document on disk.

    Raises:
        DefinitionLoadError: If the file cannot be read or parsed
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DefinitionLoadError(path, str(e)) from e
    return definitions_from_dict(data, source=path)
