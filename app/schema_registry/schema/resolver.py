"""
Resolution of (entity, version) pairs to codecs.

This is the query surface other subsystems call: an encoding service, a
message-bus consumer, a CLI. Lookups never mutate anything.

Invariants:
    - resolve() is pure with respect to the registry it is given
    - Resolving the same key twice returns the same codec object
    - Failures are typed (UnknownEntityError, UnknownVersionError), never None

How to change safely:
    - Runtime registration goes through SchemaResolver.register()/swap(),
      which publish a whole new registry; never mutate a published one
    - Keep resolve() free of I/O so it stays safe on hot paths

Example:
    >>> resolver = SchemaResolver(registry)
    >>> codec = resolver.resolve("parcelEvent", "v1")
    >>> parcel_event = entity_resolver(registry, "parcelEvent")
    >>> parcel_event("v2") is registry.resolve("parcelEvent", "v2")
    True
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Optional

from ..codec.base import Codec, CodecCompiler
from ..errors import UnknownEntityError
from .registry import SchemaRegistry
from .types import EntityName, SchemaDefinition, VersionEntry, VersionID

logger = logging.getLogger(__name__)


def resolve(registry: SchemaRegistry, name: EntityName, version: VersionID) -> Codec:
    """Resolve an (entity, version) pair against a registry.

    Args:
        registry: A built registry
        name: Entity name, e.g. "parcelEvent"
        version: Version label, e.g. "v2"

    Returns:
        The shared, read-only codec for that version

    Raises:
        UnknownEntityError: If the entity is not registered
        UnknownVersionError: If the entity has no such version
    """
    return registry.resolve(name, version)


def entity_resolver(registry: SchemaRegistry, name: EntityName) -> Callable[[VersionID], Codec]:
    """Bind a registry and entity, returning a version -> codec callable.

    Raises:
        UnknownEntityError: Immediately, if the entity is not registered
    """
    if name not in registry:
        raise UnknownEntityError(name)

    def _resolve(version: VersionID) -> Codec:
        return registry.resolve(name, version)

    _resolve.__name__ = f"resolve_{name}"
    return _resolve


class SchemaResolver:
    """Resolver over a swappable registry snapshot.

    Reads go straight to the current snapshot without locking. Writers
    serialize on a lock, build a complete new registry, then publish it
    with a single reference assignment, so in-flight reads only ever see a
    fully built registry.

    Attributes:
        registry: The currently published registry

    Example:
        >>> resolver = SchemaResolver(SchemaRegistry.build(DEFINITIONS))
        >>> resolver.register([ParcelEventV3])
        >>> resolver.resolve("parcelEvent", "v3")
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry
        self._write_lock = threading.Lock()

    @property
    def registry(self) -> SchemaRegistry:
        """The currently published registry."""
        return self._registry

    def resolve(self, name: EntityName, version: VersionID) -> Codec:
        """Resolve against the current snapshot. See resolve()."""
        return self._registry.resolve(name, version)

    def resolve_entry(self, name: EntityName, version: VersionID) -> VersionEntry:
        """Resolve to the full VersionEntry against the current snapshot."""
        return self._registry.resolve_entry(name, version)

    def register(
        self,
        definitions: Iterable[SchemaDefinition],
        compiler: Optional[CodecCompiler] = None,
    ) -> SchemaRegistry:
        """Compile and publish additional definitions.

        On any error the current snapshot stays published unchanged.

        Returns:
            The newly published registry

        Raises:
            DuplicateDefinitionError: If a key is already registered
            SchemaCompilationError: If any definition fails to compile
        """
        with self._write_lock:
            updated = self._registry.extend(definitions, compiler)
            self._registry = updated
            logger.info(f"Published schema registry {updated.fingerprint}")
            return updated

    def swap(self, registry: SchemaRegistry) -> SchemaRegistry:
        """Publish a prebuilt registry, returning the previous one."""
        with self._write_lock:
            previous = self._registry
            self._registry = registry
            logger.info(
                f"Swapped schema registry {previous.fingerprint} -> {registry.fingerprint}"
            )
            return previous
