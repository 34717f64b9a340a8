"""
Avro codec backend.

Compiles Avro schema definitions with fastavro. Records are written in
schemaless (single-object, no container header) binary form, which is what
a message bus payload carries.

Invariants:
    - parse_schema runs once per definition, at compile time
    - encode() validates the record before writing any bytes
    - decode() must consume exactly the bytes it is given
"""

from __future__ import annotations

import copy
import io
import json
import logging
import struct
from typing import TYPE_CHECKING, Any, Dict, Tuple

from fastavro import parse_schema, schemaless_reader, schemaless_writer
from fastavro.schema import SchemaParseException
from fastavro.validation import ValidationError, validate

from .base import CodecCompileError, DecodeError, EncodeError

if TYPE_CHECKING:
    from ..schema.types import SchemaDefinition

logger = logging.getLogger(__name__)


def _record_field_names(schema: Any) -> Tuple[str, ...]:
    if isinstance(schema, dict) and schema.get("type") == "record":
        return tuple(f["name"] for f in schema.get("fields", []))
    return ()


class AvroCodec:
    """Codec for one parsed Avro schema.

    Attributes:
        schema: The schema as authored (a copy is returned on each access)
        field_names: Top-level record field names in declaration order

    Example:
        >>> codec = AvroCompiler().compile(ParcelEventV1)
        >>> codec.decode(codec.encode(record)) == record
        True
    """

    def __init__(self, schema: Any, parsed: Any) -> None:
        self._schema = schema
        self._parsed = parsed
        self._field_names = _record_field_names(schema)

    @property
    def schema(self) -> Dict[str, Any]:
        return copy.deepcopy(self._schema)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return self._field_names

    def encode(self, record: Dict[str, Any]) -> bytes:
        """Encode a record to schemaless Avro binary.

        Raises:
            EncodeError: If the record does not match the schema
        """
        try:
            validate(record, self._parsed, raise_errors=True)
            buf = io.BytesIO()
            schemaless_writer(buf, self._parsed, record)
        except (ValidationError, ValueError, TypeError, KeyError) as e:
            raise EncodeError(f"Record does not match Avro schema: {e}") from e
        return buf.getvalue()

    def decode(self, data: bytes) -> Dict[str, Any]:
        """Decode schemaless Avro binary.

        Raises:
            DecodeError: If data is truncated, malformed, or has trailing bytes
        """
        buf = io.BytesIO(data)
        try:
            record = schemaless_reader(buf, self._parsed)
        except (EOFError, ValueError, IndexError, KeyError, struct.error) as e:
            raise DecodeError(f"Malformed Avro data: {e}") from e

        remaining = len(data) - buf.tell()
        if remaining:
            raise DecodeError(f"Malformed Avro data: {remaining} trailing byte(s)")
        return record

    def __repr__(self) -> str:
        name = self._schema.get("name") if isinstance(self._schema, dict) else self._schema
        return f"AvroCodec({name!r}, fields={len(self._field_names)})"


class AvroCompiler:
    """CodecCompiler producing AvroCodec instances.

    Example:
        >>> compiler = AvroCompiler()
        >>> compiler.compile(ParcelEventV2).field_names[-1]
        'Weight'
    """

    name = "avro"

    def compile(self, definition: SchemaDefinition) -> AvroCodec:
        """Parse the definition with fastavro.

        Raises:
            CodecCompileError: If the definition is not valid JSON or not a
                valid Avro schema
        """
        try:
            schema = definition.parsed()
        except json.JSONDecodeError as e:
            raise CodecCompileError(f"Schema is not valid JSON: {e}") from e

        try:
            # Each definition gets its own named-type scope
            parsed = parse_schema(copy.deepcopy(schema), named_schemas={})
        except (SchemaParseException, ValueError, KeyError, TypeError, AttributeError) as e:
            raise CodecCompileError(f"Invalid Avro schema: {e}") from e

        logger.debug(f"Compiled Avro schema {definition.entity}/{definition.version}")
        return AvroCodec(schema, parsed)
