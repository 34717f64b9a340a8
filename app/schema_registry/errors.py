"""
Error types for the schema registry.

This module defines all exception types raised by registry build and
resolution:
- SchemaRegistryError: Base exception
- SchemaCompilationError: A definition failed to compile (fatal to the build)
- DuplicateDefinitionError: The same (entity, version) was supplied twice
- UnknownEntityError: Resolve called with an unregistered entity
- UnknownVersionError: Resolve called with an unregistered version
- DefinitionLoadError: A definitions module or file could not be loaded

Invariants:
    - All errors inherit from SchemaRegistryError
    - Errors name the exact key that failed
    - Error messages are actionable
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence


class SchemaRegistryError(Exception):
    """Base exception for all schema registry errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "SCHEMA_REGISTRY_ERROR"
        self.details = details or {}


class SchemaCompilationError(SchemaRegistryError):
    """A schema definition failed to compile.

    Raised by the registry build; no partial registry is produced.

    Attributes:
        entity: Entity name of the offending definition
        version: Version ID of the offending definition
        cause: The underlying compiler error
    """

    def __init__(self, entity: str, version: str, cause: BaseException) -> None:
        super().__init__(
            f"Failed to compile schema '{entity}' version '{version}': {cause}",
            code="SCHEMA_COMPILATION_ERROR",
            details={"entity": entity, "version": version, "cause": str(cause)},
        )
        self.entity = entity
        self.version = version
        self.cause = cause


class DuplicateDefinitionError(SchemaRegistryError):
    """The same (entity, version) pair was defined more than once."""

    def __init__(self, entity: str, version: str) -> None:
        super().__init__(
            f"Schema '{entity}' version '{version}' is already defined",
            code="DUPLICATE_DEFINITION",
            details={"entity": entity, "version": version},
        )
        self.entity = entity
        self.version = version


class UnknownEntityError(SchemaRegistryError):
    """No schema is registered under this entity name."""

    def __init__(self, entity: str) -> None:
        super().__init__(
            f"Unknown schema entity '{entity}'",
            code="UNKNOWN_ENTITY",
            details={"entity": entity},
        )
        self.entity = entity


class UnknownVersionError(SchemaRegistryError):
    """The entity exists but has no schema with this version.

    Attributes:
        entity: The (registered) entity name
        version: The unregistered version ID
        available: Versions registered for the entity
    """

    def __init__(
        self,
        entity: str,
        version: str,
        available: Optional[Sequence[str]] = None,
    ) -> None:
        available = list(available or [])
        msg = f"Schema '{entity}' has no version '{version}'"
        if available:
            msg += f". Available versions: {', '.join(available)}"

        super().__init__(
            msg,
            code="UNKNOWN_VERSION",
            details={"entity": entity, "version": version, "available": available},
        )
        self.entity = entity
        self.version = version
        self.available = available


class DefinitionLoadError(SchemaRegistryError):
    """Schema definitions could not be loaded from a module or file."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(
            f"Cannot load schema definitions from '{source}': {reason}",
            code="DEFINITION_LOAD_ERROR",
            details={"source": source, "reason": reason},
        )
        self.source = source
        self.reason = reason
