"""
Schema Registry.

The SchemaRegistry maps entity names to their versioned, compiled codecs.
It provides:
- One-shot, all-or-nothing build from a collection of definitions
- Lookup by (entity, version)
- Schema fingerprinting for consistency checks
- Copy-on-write extension for runtime registration

Invariants:
    - A registry is immutable once constructed; extend() returns a new one
    - Every entity present maps to at least one version
    - Every VersionEntry holds a non-None codec
    - A failed build raises and never hands out a partial registry
    - Versions are opaque labels; no ordering is inferred from their text

How to change safely:
    - Add definitions, then rebuild (or extend) the registry
    - Never redefine an (entity, version) that has shipped
    - Share the built registry by reference; do not copy it per consumer

Example:
    >>> from app.schema_registry.definitions import DEFINITIONS
    >>> registry = SchemaRegistry.build(DEFINITIONS, AvroCompiler())
    >>> registry.versions("parcelEvent")
    ['v1', 'v2']
    >>> codec = registry.resolve("parcelEvent", "v2")
"""

from __future__ import annotations

import json
import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..codec.base import Codec, CodecCompileError, CodecCompiler
from ..errors import (
    DuplicateDefinitionError,
    SchemaCompilationError,
    UnknownEntityError,
    UnknownVersionError,
)
from .types import EntityName, SchemaDefinition, VersionEntry, VersionID, schema_fingerprint

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Immutable mapping of entity name -> version -> compiled codec.

    Registries are produced by build() or extend(); constructing one directly
    with no arguments yields an empty registry.

    Thread-safety:
        - All lookups are lock-free; nothing is mutated after construction
        - Codecs are shared by reference between callers

    Attributes:
        fingerprint: SHA-256 hash over every entry's schema fingerprint

    Example:
        >>> registry = SchemaRegistry.build([ParcelEventV1, ParcelEventV2], compiler)
        >>> registry.resolve("parcelEvent", "v1").field_names
        ('ID', 'ParcelNumber', 'CreatedAt', 'UpdatedAt')
    """

    def __init__(
        self,
        entries: Optional[Mapping[EntityName, Mapping[VersionID, VersionEntry]]] = None,
        compiler: Optional[CodecCompiler] = None,
    ) -> None:
        """Wrap already-compiled entries. Use build() to compile definitions."""
        frozen: Dict[EntityName, Mapping[VersionID, VersionEntry]] = {}
        for entity, versions in (entries or {}).items():
            if not versions:
                raise ValueError(f"Entity '{entity}' must have at least one version")
            frozen[entity] = MappingProxyType(dict(versions))
        self._entities: Mapping[EntityName, Mapping[VersionID, VersionEntry]] = MappingProxyType(
            frozen
        )
        self._compiler = compiler
        self._fingerprint = self._compute_fingerprint()

    @classmethod
    def build(
        cls,
        definitions: Iterable[SchemaDefinition],
        compiler: Optional[CodecCompiler] = None,
    ) -> SchemaRegistry:
        """Compile every definition and return a new registry.

        Args:
            definitions: Schema definitions, in declaration order
            compiler: Codec compiler (defaults to the Avro backend)

        Returns:
            Immutable SchemaRegistry with one entry per definition

        Raises:
            DuplicateDefinitionError: If an (entity, version) appears twice
            SchemaCompilationError: If any single definition fails to compile
        """
        return cls().extend(definitions, compiler)

    def extend(
        self,
        definitions: Iterable[SchemaDefinition],
        compiler: Optional[CodecCompiler] = None,
    ) -> SchemaRegistry:
        """Return a new registry with additional definitions compiled in.

        This registry is left untouched. The same all-or-nothing rules as
        build() apply, and redefining an existing key is rejected.

        Raises:
            DuplicateDefinitionError: If a key exists or appears twice
            SchemaCompilationError: If any single definition fails to compile
        """
        if compiler is None:
            compiler = self._compiler
        if compiler is None:
            from ..codec.avro import AvroCompiler

            compiler = AvroCompiler()

        definitions = list(definitions)
        seen = {(entity, entry.version) for entity, entry in self.entries()}
        for definition in definitions:
            if definition.key in seen:
                raise DuplicateDefinitionError(definition.entity, definition.version)
            seen.add(definition.key)

        merged: Dict[EntityName, Dict[VersionID, VersionEntry]] = {
            entity: dict(versions) for entity, versions in self._entities.items()
        }
        for definition in definitions:
            merged.setdefault(definition.entity, {})[definition.version] = _compile_entry(
                definition, compiler
            )

        registry = SchemaRegistry(merged, compiler=compiler)
        logger.info(
            f"Schema registry built with {len(registry.entities())} entities, "
            f"{len(registry)} versions, compiler={registry.compiler_name}, "
            f"fingerprint={registry.fingerprint}"
        )
        return registry

    @property
    def fingerprint(self) -> str:
        """Registry-wide fingerprint."""
        return self._fingerprint

    @property
    def compiler_name(self) -> Optional[str]:
        """Name of the codec backend this registry compiles with."""
        return getattr(self._compiler, "name", None)

    def resolve(self, name: EntityName, version: VersionID) -> Codec:
        """Resolve an (entity, version) pair to its codec.

        Raises:
            UnknownEntityError: If the entity is not registered
            UnknownVersionError: If the entity has no such version
        """
        return self.resolve_entry(name, version).codec

    def resolve_entry(self, name: EntityName, version: VersionID) -> VersionEntry:
        """Resolve an (entity, version) pair to its full VersionEntry."""
        versions = self._entities.get(name)
        if versions is None:
            logger.debug(f"Resolve failed: unknown entity '{name}'")
            raise UnknownEntityError(name)

        entry = versions.get(version)
        if entry is None:
            logger.debug(f"Resolve failed: entity '{name}' has no version '{version}'")
            raise UnknownVersionError(name, version, list(versions))
        return entry

    def has(self, name: EntityName, version: VersionID) -> bool:
        """Whether (entity, version) is registered."""
        return version in self._entities.get(name, {})

    def entities(self) -> List[EntityName]:
        """Registered entity names, in first-declared order."""
        return list(self._entities)

    def versions(self, name: EntityName) -> List[VersionID]:
        """Versions of an entity, in declaration order.

        Raises:
            UnknownEntityError: If the entity is not registered
        """
        versions = self._entities.get(name)
        if versions is None:
            raise UnknownEntityError(name)
        return list(versions)

    def latest(self, name: EntityName) -> VersionEntry:
        """The most recently declared version of an entity.

        "Latest" is declaration order, not a comparison of version labels.

        Raises:
            UnknownEntityError: If the entity is not registered
        """
        versions = self._entities.get(name)
        if versions is None:
            raise UnknownEntityError(name)
        return list(versions.values())[-1]

    def entries(self) -> Iterator[Tuple[EntityName, VersionEntry]]:
        """Iterate over all (entity, entry) pairs."""
        for entity, versions in self._entities.items():
            for entry in versions.values():
                yield entity, entry

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __len__(self) -> int:
        return sum(len(versions) for versions in self._entities.values())

    def __repr__(self) -> str:
        return (
            f"SchemaRegistry(entities={len(self._entities)}, versions={len(self)}, "
            f"fingerprint={self._fingerprint!r})"
        )

    def _compute_fingerprint(self) -> str:
        """Compute SHA-256 fingerprint of the registry.

        Declaration order does not affect the result; keys are sorted.
        """
        return schema_fingerprint(
            {
                entity: {version: entry.fingerprint for version, entry in versions.items()}
                for entity, versions in self._entities.items()
            }
        )

    def to_dict(self) -> dict:
        """Convert registry to dictionary representation.

        Returns:
            Dictionary with an 'entities' list sorted by name; versions keep
            declaration order.
        """
        return {
            "fingerprint": self._fingerprint,
            "compiler": self.compiler_name,
            "entities": [
                {
                    "name": entity,
                    "versions": [entry.to_dict() for entry in self._entities[entity].values()],
                }
                for entity in sorted(self._entities)
            ],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Convert registry to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)


def _compile_entry(definition: SchemaDefinition, compiler: CodecCompiler) -> VersionEntry:
    try:
        codec = compiler.compile(definition)
        if codec is None:
            raise CodecCompileError("compiler returned no codec")
    except Exception as e:
        logger.error(
            f"Failed to compile schema {definition.entity}/{definition.version}: {e}"
        )
        raise SchemaCompilationError(definition.entity, definition.version, e) from e

    logger.debug(f"Registered schema {definition.entity}/{definition.version}")
    return VersionEntry(
        version=definition.version,
        codec=codec,
        fingerprint=schema_fingerprint(codec.schema),
    )


def build_registry(
    definitions: Iterable[SchemaDefinition],
    compiler: Optional[CodecCompiler] = None,
) -> SchemaRegistry:
    """Build a registry from definitions.

    Convenience wrapper around SchemaRegistry.build().

    Raises:
        DuplicateDefinitionError: If an (entity, version) appears twice
        SchemaCompilationError: If any definition fails to compile
    """
    return SchemaRegistry.build(definitions, compiler)
