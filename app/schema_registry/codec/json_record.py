"""
JSON record codec backend.

Compiles the same Avro-style record descriptors used by the Avro backend
into pydantic models, and encodes records as UTF-8 JSON. Useful where a
consumer cannot read Avro binary but the schema should still be enforced.

Supported field types:
    - Primitives: null, boolean, int, long, float, double, string
    - Nullable unions: ["null", <type>]
    - array, map, enum, and nested record

Invariants:
    - Records with unknown fields are rejected
    - Values are never coerced ("1.5" is not a double, "yes" not a boolean)
    - int/long are range-checked; NaN and infinity are rejected on encode
    - Field defaults must match the field type at compile time
    - Avro "bytes"/"fixed" and non-nullable unions are rejected at compile time
"""

from __future__ import annotations

import copy
import json
import logging
from typing import TYPE_CHECKING, Annotated, Any, Dict, List, Literal, Optional, Tuple, Type

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictBool,
    StrictStr,
    TypeAdapter,
    ValidationError,
    create_model,
)

from .base import CodecCompileError, DecodeError, EncodeError

if TYPE_CHECKING:
    from ..schema.types import SchemaDefinition

logger = logging.getLogger(__name__)

# Primitives never coerce; NaN and infinity have no JSON form.
_FiniteFloat = Annotated[float, Strict(), Field(allow_inf_nan=False)]

_PRIMITIVES: Dict[str, Any] = {
    "null": type(None),
    "boolean": StrictBool,
    "int": Annotated[int, Strict(), Field(ge=-(2**31), le=2**31 - 1)],
    "long": Annotated[int, Strict(), Field(ge=-(2**63), le=2**63 - 1)],
    "float": _FiniteFloat,
    "double": _FiniteFloat,
    "string": StrictStr,
}


class _RecordBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class _ModelBuilder:
    """Translates one record descriptor into pydantic models."""

    def __init__(self) -> None:
        self._named: Dict[str, Any] = {}

    def build_record(self, schema: Dict[str, Any]) -> Type[BaseModel]:
        name = schema.get("name")
        if not name:
            raise CodecCompileError("Record schema requires a 'name'")
        fields = schema.get("fields")
        if not isinstance(fields, list):
            raise CodecCompileError(f"Record '{name}' requires a 'fields' list")

        definitions: Dict[str, Any] = {}
        for f in fields:
            if not isinstance(f, dict) or "name" not in f or "type" not in f:
                raise CodecCompileError(f"Record '{name}' has a field without 'name'/'type'")
            annotation = self.resolve_type(f["type"])
            if "default" in f:
                _check_default(name, f["name"], annotation, f["default"])
                definitions[f["name"]] = (annotation, f["default"])
            elif _is_nullable(f["type"]):
                definitions[f["name"]] = (annotation, None)
            else:
                definitions[f["name"]] = (annotation, ...)
        if len(definitions) != len(fields):
            raise CodecCompileError(f"Duplicate field name in record '{name}'")

        try:
            model = create_model(name, __base__=_RecordBase, **definitions)
        except (TypeError, ValueError, NameError) as e:
            raise CodecCompileError(f"Cannot build model for record '{name}': {e}") from e
        self._named[name] = model
        return model

    def resolve_type(self, avro_type: Any) -> Any:
        if isinstance(avro_type, str):
            if avro_type in _PRIMITIVES:
                return _PRIMITIVES[avro_type]
            if avro_type in self._named:
                return self._named[avro_type]
            raise CodecCompileError(f"Unsupported or unknown type '{avro_type}'")

        if isinstance(avro_type, list):
            branches = [b for b in avro_type if b != "null"]
            if len(branches) != 1 or len(avro_type) != 2:
                raise CodecCompileError(
                    f"Only [\"null\", <type>] unions are supported, got {avro_type}"
                )
            return Optional[self.resolve_type(branches[0])]

        if isinstance(avro_type, dict):
            kind = avro_type.get("type")
            if kind == "record":
                return self.build_record(avro_type)
            if kind == "array":
                return List[self.resolve_type(avro_type.get("items"))]
            if kind == "map":
                return Dict[str, self.resolve_type(avro_type.get("values"))]
            if kind == "enum":
                symbols = avro_type.get("symbols")
                if not symbols:
                    raise CodecCompileError("Enum schema requires 'symbols'")
                literal = Literal[tuple(symbols)]
                if avro_type.get("name"):
                    self._named[avro_type["name"]] = literal
                return literal
            if kind in _PRIMITIVES:
                return _PRIMITIVES[kind]
            raise CodecCompileError(f"Unsupported type '{kind}'")

        raise CodecCompileError(f"Invalid type declaration {avro_type!r}")


def _is_nullable(avro_type: Any) -> bool:
    return isinstance(avro_type, list) and "null" in avro_type


def _check_default(record: str, field: str, annotation: Any, default: Any) -> None:
    try:
        TypeAdapter(annotation).validate_python(default)
    except ValidationError as e:
        raise CodecCompileError(
            f"Default for field '{field}' of record '{record}' does not match its type: {e}"
        ) from e


class JsonRecordCodec:
    """Codec that validates records with a pydantic model and emits JSON."""

    def __init__(self, schema: Dict[str, Any], model: Type[BaseModel]) -> None:
        self._schema = schema
        self._model = model
        self._field_names = tuple(f["name"] for f in schema["fields"])

    @property
    def schema(self) -> Dict[str, Any]:
        return copy.deepcopy(self._schema)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return self._field_names

    def encode(self, record: Dict[str, Any]) -> bytes:
        try:
            instance = self._model.model_validate(record)
        except ValidationError as e:
            raise EncodeError(f"Record does not match schema '{self._model.__name__}': {e}") from e
        return instance.model_dump_json().encode("utf-8")

    def decode(self, data: bytes) -> Dict[str, Any]:
        try:
            instance = self._model.model_validate_json(data)
        except ValidationError as e:
            raise DecodeError(f"Malformed JSON record for '{self._model.__name__}': {e}") from e
        return instance.model_dump()

    def __repr__(self) -> str:
        return f"JsonRecordCodec({self._model.__name__!r}, fields={len(self._field_names)})"


class JsonRecordCompiler:
    """CodecCompiler producing JsonRecordCodec instances."""

    name = "json"

    def compile(self, definition: SchemaDefinition) -> JsonRecordCodec:
        """Build a pydantic model for the record descriptor.

        Raises:
            CodecCompileError: If the definition is not a supported record schema
        """
        try:
            schema = definition.parsed()
        except json.JSONDecodeError as e:
            raise CodecCompileError(f"Schema is not valid JSON: {e}") from e

        if not isinstance(schema, dict) or schema.get("type") != "record":
            raise CodecCompileError("JSON record codec requires a top-level record schema")

        model = _ModelBuilder().build_record(schema)
        logger.debug(f"Compiled JSON record model {definition.entity}/{definition.version}")
        return JsonRecordCodec(schema, model)
