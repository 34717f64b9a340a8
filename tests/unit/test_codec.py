"""
Unit tests for codec backends.

Tests cover:
- Avro compilation, encode/decode, and error wrapping
- JSON record compilation, encode/decode, and error wrapping
- Compiler factory
"""

import pytest

from app.schema_registry.codec import (
    AvroCompiler,
    Codec,
    CodecCompileError,
    CodecCompiler,
    DecodeError,
    EncodeError,
    JsonRecordCompiler,
    create_compiler,
)
from app.schema_registry.config import CodecBackend, CodecConfig
from app.schema_registry.definitions import ParcelEventV1, ParcelEventV2
from app.schema_registry.schema.types import SchemaDefinition

PARCEL_V2_RECORD = {
    "ID": "evt-1",
    "ParcelNumber": "PN-0001",
    "CreatedAt": "2024-01-01T00:00:00Z",
    "UpdatedAt": "2024-01-02T00:00:00Z",
    "Weight": 2.5,
}


def definition(source, entity="thing", version="v1"):
    return SchemaDefinition(entity=entity, version=version, source=source)


class TestAvroCompiler:
    """Tests for the fastavro backend."""

    @pytest.fixture
    def compiler(self):
        return AvroCompiler()

    def test_satisfies_protocols(self, compiler):
        assert isinstance(compiler, CodecCompiler)
        assert isinstance(compiler.compile(ParcelEventV1), Codec)

    def test_parcel_field_counts(self, compiler):
        """v1 has four fields, v2 adds Weight."""
        v1 = compiler.compile(ParcelEventV1)
        v2 = compiler.compile(ParcelEventV2)

        assert v1.field_names == ("ID", "ParcelNumber", "CreatedAt", "UpdatedAt")
        assert len(v2.field_names) == 5
        assert v2.field_names[-1] == "Weight"
        assert v2.schema["fields"][-1] == {"name": "Weight", "type": "double"}

    def test_round_trip(self, compiler):
        codec = compiler.compile(ParcelEventV2)

        assert codec.decode(codec.encode(PARCEL_V2_RECORD)) == PARCEL_V2_RECORD

    def test_encode_missing_field_raises(self, compiler):
        codec = compiler.compile(ParcelEventV2)
        bad = {k: v for k, v in PARCEL_V2_RECORD.items() if k != "Weight"}

        with pytest.raises(EncodeError):
            codec.encode(bad)

    def test_encode_wrong_type_raises(self, compiler):
        codec = compiler.compile(ParcelEventV2)

        with pytest.raises(EncodeError):
            codec.encode({**PARCEL_V2_RECORD, "Weight": "heavy"})

    def test_decode_truncated_raises(self, compiler):
        codec = compiler.compile(ParcelEventV2)
        data = codec.encode(PARCEL_V2_RECORD)

        with pytest.raises(DecodeError):
            codec.decode(data[:-3])

    def test_decode_trailing_bytes_raises(self, compiler):
        codec = compiler.compile(ParcelEventV1)
        data = compiler.compile(ParcelEventV2).encode(PARCEL_V2_RECORD)

        with pytest.raises(DecodeError, match="trailing"):
            codec.decode(data)

    def test_invalid_json_raises(self, compiler):
        with pytest.raises(CodecCompileError, match="not valid JSON"):
            compiler.compile(definition('{"type": "record", '))

    def test_unknown_type_raises(self, compiler):
        with pytest.raises(CodecCompileError, match="Invalid Avro schema"):
            compiler.compile(
                definition({"type": "record", "name": "T", "fields": [{"name": "a", "type": "strng"}]})
            )

    def test_schema_is_a_copy(self, compiler):
        codec = compiler.compile(ParcelEventV1)

        codec.schema["fields"].clear()

        assert len(codec.schema["fields"]) == 4

    def test_same_record_name_in_separate_definitions(self, compiler):
        """Named types do not leak between compiled definitions."""
        schema = {"type": "record", "name": "Same", "fields": [{"name": "a", "type": "int"}]}

        compiler.compile(definition(schema, version="v1"))
        codec = compiler.compile(definition(schema, version="v2"))

        assert codec.decode(codec.encode({"a": 7})) == {"a": 7}


class TestJsonRecordCompiler:
    """Tests for the pydantic JSON backend."""

    @pytest.fixture
    def compiler(self):
        return JsonRecordCompiler()

    def test_parcel_round_trip(self, compiler):
        codec = compiler.compile(ParcelEventV2)

        data = codec.encode(PARCEL_V2_RECORD)

        assert data.startswith(b"{")
        assert codec.decode(data) == PARCEL_V2_RECORD
        assert len(codec.field_names) == 5

    def test_unknown_field_rejected(self, compiler):
        codec = compiler.compile(ParcelEventV1)
        record = {k: v for k, v in PARCEL_V2_RECORD.items()}

        with pytest.raises(EncodeError):
            codec.encode(record)

    def test_decode_malformed_raises(self, compiler):
        codec = compiler.compile(ParcelEventV1)

        with pytest.raises(DecodeError):
            codec.decode(b"not json")

    def test_complex_types(self, compiler):
        codec = compiler.compile(
            definition(
                {
                    "type": "record",
                    "name": "Shipment",
                    "fields": [
                        {"name": "id", "type": "string"},
                        {"name": "note", "type": ["null", "string"]},
                        {"name": "tags", "type": {"type": "array", "items": "string"}},
                        {"name": "dims", "type": {"type": "map", "values": "double"}},
                        {
                            "name": "status",
                            "type": {"type": "enum", "name": "Status", "symbols": ["NEW", "DONE"]},
                        },
                        {
                            "name": "origin",
                            "type": {
                                "type": "record",
                                "name": "Address",
                                "fields": [{"name": "city", "type": "string"}],
                            },
                        },
                        {"name": "count", "type": "int", "default": 0},
                    ],
                }
            )
        )
        record = {
            "id": "s-1",
            "tags": ["fragile"],
            "dims": {"h": 1.5},
            "status": "NEW",
            "origin": {"city": "Oslo"},
        }

        decoded = codec.decode(codec.encode(record))

        assert decoded == {**record, "note": None, "count": 0}

    def test_enum_symbol_enforced(self, compiler):
        codec = compiler.compile(
            definition(
                {
                    "type": "record",
                    "name": "T",
                    "fields": [{"name": "s", "type": {"type": "enum", "name": "S", "symbols": ["A"]}}],
                }
            )
        )

        with pytest.raises(EncodeError):
            codec.encode({"s": "B"})

    def test_string_for_double_rejected(self, compiler):
        """Values are never coerced; Avro rejects the same record."""
        record = {**PARCEL_V2_RECORD, "Weight": "12.5"}

        with pytest.raises(EncodeError):
            compiler.compile(ParcelEventV2).encode(record)
        with pytest.raises(EncodeError):
            AvroCompiler().compile(ParcelEventV2).encode(record)

    def test_string_for_boolean_rejected(self, compiler):
        codec = compiler.compile(
            definition({"type": "record", "name": "T", "fields": [{"name": "a", "type": "boolean"}]})
        )

        with pytest.raises(EncodeError):
            codec.encode({"a": "yes"})
        assert codec.decode(codec.encode({"a": True})) == {"a": True}

    def test_int_range_enforced(self, compiler):
        codec = compiler.compile(
            definition(
                {
                    "type": "record",
                    "name": "T",
                    "fields": [{"name": "a", "type": "int"}, {"name": "b", "type": "long"}],
                }
            )
        )

        with pytest.raises(EncodeError):
            codec.encode({"a": 2**40, "b": 1})
        with pytest.raises(EncodeError):
            codec.encode({"a": 1, "b": 2**63})
        assert codec.decode(codec.encode({"a": 2**31 - 1, "b": 2**40})) == {"a": 2**31 - 1, "b": 2**40}

    @pytest.mark.parametrize("weight", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_double_rejected(self, compiler, weight):
        """JSON has no NaN or infinity, so they cannot be encoded."""
        codec = compiler.compile(ParcelEventV2)

        with pytest.raises(EncodeError):
            codec.encode({**PARCEL_V2_RECORD, "Weight": weight})

    def test_encoded_output_always_decodes(self, compiler):
        codec = compiler.compile(ParcelEventV2)
        record = {**PARCEL_V2_RECORD, "Weight": 1e308}

        assert codec.decode(codec.encode(record)) == record

    def test_default_must_match_type(self, compiler):
        with pytest.raises(CodecCompileError, match="Default for field 'a'"):
            compiler.compile(
                definition(
                    {
                        "type": "record",
                        "name": "T",
                        "fields": [{"name": "a", "type": "int", "default": "x"}],
                    }
                )
            )

    def test_bytes_unsupported(self, compiler):
        with pytest.raises(CodecCompileError, match="bytes"):
            compiler.compile(
                definition({"type": "record", "name": "T", "fields": [{"name": "b", "type": "bytes"}]})
            )

    def test_non_record_rejected(self, compiler):
        with pytest.raises(CodecCompileError, match="top-level record"):
            compiler.compile(definition('"string"'))

    def test_wide_union_rejected(self, compiler):
        with pytest.raises(CodecCompileError, match="unions"):
            compiler.compile(
                definition(
                    {"type": "record", "name": "T", "fields": [{"name": "u", "type": ["int", "string"]}]}
                )
            )


class TestCreateCompiler:
    """Tests for the compiler factory."""

    def test_avro(self):
        assert isinstance(create_compiler(CodecConfig(backend=CodecBackend.AVRO)), AvroCompiler)

    def test_json(self):
        assert isinstance(create_compiler(CodecConfig(backend=CodecBackend.JSON)), JsonRecordCompiler)

    def test_default_is_avro(self):
        assert create_compiler(CodecConfig()).name == "avro"
