"""
Core type definitions for the schema registry.

This module defines the values that flow through registry build and
resolution:
- SchemaDefinition: Raw description of one version of an entity's record
- VersionEntry: A version ID paired with its compiled codec

Invariants:
    - entity and version are non-empty strings
    - Versions are opaque labels compared by equality only ("v10" is not
      newer than "v9")
    - Definitions and entries are immutable once constructed

How to change safely:
    - Add new versions as new SchemaDefinition constants
    - Never edit a definition that has already been deployed
    - Add optional attributes with defaults only

Example:
    >>> ParcelEventV1 = SchemaDefinition(
    ...     entity="parcelEvent",
    ...     version="v1",
    ...     source='{"type": "record", "name": "ParcelEventV1", "fields": []}',
    ... )
"""

from __future__ import annotations

import copy
import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from ..codec.base import Codec

EntityName = str
VersionID = str


def schema_fingerprint(schema: Any) -> str:
    """Compute SHA-256 fingerprint of a structured schema.

    The schema is serialised as canonical JSON (sorted keys, no whitespace)
    so the fingerprint does not depend on authoring layout.

    Returns:
        Fingerprint string in format 'sha256:<hash>'
    """
    canonical = json.dumps(schema, sort_keys=True, separators=(",", ":"))
    return f"sha256:{hashlib.sha256(canonical.encode('utf-8')).hexdigest()}"


@dataclass(frozen=True)
class SchemaDefinition:
    """Definition of one schema version of an entity.

    Attributes:
        entity: Logical record type the schema belongs to (e.g. "parcelEvent")
        version: Opaque version label, unique within the entity (e.g. "v2")
        source: Raw definition, either JSON text or an already structured mapping
        description: Human-readable description

    Invariants:
        - (entity, version) identifies the definition
        - source is never mutated; parsed() hands out copies
    """

    entity: EntityName
    version: VersionID
    source: Union[str, Mapping[str, Any]]
    description: str = ""

    def __post_init__(self) -> None:
        """Validate schema definition."""
        if not self.entity:
            raise ValueError("Schema entity name cannot be empty")
        if not self.version:
            raise ValueError(f"Schema version cannot be empty for entity '{self.entity}'")
        if not isinstance(self.source, (str, Mapping)):
            raise ValueError(
                f"Schema source for '{self.entity}' version '{self.version}' must be "
                f"a JSON string or a mapping, got {type(self.source).__name__}"
            )

    @property
    def key(self) -> tuple[EntityName, VersionID]:
        """The (entity, version) pair identifying this definition."""
        return self.entity, self.version

    def parsed(self) -> Any:
        """Return the structured form of the definition.

        Raises:
            json.JSONDecodeError: If a string source is not valid JSON
        """
        if isinstance(self.source, str):
            return json.loads(self.source)
        return copy.deepcopy(dict(self.source))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        result: dict[str, Any] = {
            "entity": self.entity,
            "version": self.version,
            "schema": self.parsed(),
        }
        if self.description:
            result["description"] = self.description
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SchemaDefinition:
        """Create from dictionary representation."""
        return cls(
            entity=data["entity"],
            version=data["version"],
            source=data["schema"],
            description=data.get("description", ""),
        )

    def __hash__(self) -> int:
        """Hash based on (entity, version)."""
        return hash(self.key)


@dataclass(frozen=True)
class VersionEntry:
    """A schema version paired with its compiled codec.

    Attributes:
        version: Version label the codec was compiled for
        codec: Compiled codec (never None)
        fingerprint: SHA-256 fingerprint of the codec's canonical schema
    """

    version: VersionID
    codec: Codec
    fingerprint: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "version": self.version,
            "fingerprint": self.fingerprint,
            "schema": self.codec.schema,
        }
