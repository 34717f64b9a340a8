"""
Base protocol and types for the codec abstraction.

The registry never encodes or decodes data itself. It hands each schema
definition to a CodecCompiler and stores whatever Codec comes back. This
module defines both protocols, the codec error hierarchy and the factory
that picks a compiler from configuration.

Invariants:
    - compile() either returns a usable Codec or raises CodecCompileError
    - A Codec is immutable and safe to share between threads
    - encode()/decode() only raise EncodeError/DecodeError for bad input

How to change safely:
    - Protocol changes require updating all implementations
    - New backends must implement CodecCompiler and be added to create_compiler
    - Keep library-specific exceptions wrapped; callers only see CodecError
"""

from __future__ import annotations

from abc import abstractmethod
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Protocol,
    Tuple,
    runtime_checkable,
)
import logging

if TYPE_CHECKING:
    from ..config import CodecConfig
    from ..schema.types import SchemaDefinition

logger = logging.getLogger(__name__)


class CodecError(Exception):
    """Base exception for codec operations."""
    pass


class CodecCompileError(CodecError):
    """A schema definition could not be compiled into a codec."""
    pass


class EncodeError(CodecError):
    """A record does not conform to the codec's schema."""
    pass


class DecodeError(CodecError):
    """Encoded bytes could not be read with the codec's schema."""
    pass


@runtime_checkable
class Codec(Protocol):
    """Protocol for compiled codecs.

    A codec encodes and decodes records for exactly one schema version.

    Example:
        >>> codec = registry.resolve("parcelEvent", "v2")
        >>> data = codec.encode({"ID": "1", "ParcelNumber": "P-1", ...})
        >>> codec.decode(data)["ParcelNumber"]
        'P-1'
    """

    @property
    @abstractmethod
    def schema(self) -> Dict[str, Any]:
        """Canonical structured schema the codec was compiled from."""
        ...

    @property
    @abstractmethod
    def field_names(self) -> Tuple[str, ...]:
        """Record field names in declaration order (empty for non-records)."""
        ...

    @abstractmethod
    def encode(self, record: Dict[str, Any]) -> bytes:
        """Encode a record.

        Raises:
            EncodeError: If the record does not conform to the schema
        """
        ...

    @abstractmethod
    def decode(self, data: bytes) -> Dict[str, Any]:
        """Decode bytes produced by encode().

        Raises:
            DecodeError: If the bytes are malformed for the schema
        """
        ...


@runtime_checkable
class CodecCompiler(Protocol):
    """Protocol for codec compilers.

    Any serialization-library binding that can turn a SchemaDefinition into
    a Codec satisfies this interface.

    Example:
        >>> compiler = AvroCompiler()
        >>> codec = compiler.compile(ParcelEventV1)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short backend name used in logs and snapshots."""
        ...

    @abstractmethod
    def compile(self, definition: SchemaDefinition) -> Codec:
        """Compile a definition into a codec.

        Args:
            definition: The schema definition to compile

        Returns:
            A ready-to-use Codec

        Raises:
            CodecCompileError: If the definition is malformed
        """
        ...


def create_compiler(config: "CodecConfig") -> CodecCompiler:
    """Factory function to create a codec compiler from configuration.

    Args:
        config: Codec configuration

    Returns:
        Appropriate CodecCompiler implementation

    Raises:
        ValueError: If backend is not supported
    """
    from ..config import CodecBackend
    from .avro import AvroCompiler
    from .json_record import JsonRecordCompiler

    if config.backend == CodecBackend.AVRO:
        return AvroCompiler()
    elif config.backend == CodecBackend.JSON:
        return JsonRecordCompiler()
    else:
        raise ValueError(f"Unsupported codec backend: {config.backend}")
