"""
Codec backends for the schema registry.

This module provides a pluggable codec compiler interface supporting:
- Avro binary via fastavro (default)
- JSON records validated by pydantic models

The registry depends only on the CodecCompiler and Codec protocols; the
concrete backend is chosen by configuration.

Invariants:
    - compile() failures surface as CodecCompileError
    - Codecs are immutable and shareable across threads

How to change safely:
    - New backends must implement the CodecCompiler protocol
    - Register new backends in create_compiler() and CodecBackend
"""

from .avro import AvroCodec, AvroCompiler
from .base import (
    Codec,
    CodecCompileError,
    CodecCompiler,
    CodecError,
    DecodeError,
    EncodeError,
    create_compiler,
)
from .json_record import JsonRecordCodec, JsonRecordCompiler

__all__ = [
    # Protocols and errors
    "Codec",
    "CodecCompiler",
    "CodecError",
    "CodecCompileError",
    "EncodeError",
    "DecodeError",
    # Factory
    "create_compiler",
    # Implementations
    "AvroCodec",
    "AvroCompiler",
    "JsonRecordCodec",
    "JsonRecordCompiler",
]
