"""
Parcel event schemas.

v1 carries identity and timestamps; v2 adds the parcel weight.
Timestamps are ISO-8601 strings, weight is in kilograms.
"""

from ..schema.types import SchemaDefinition

ENTITY = "parcelEvent"

ParcelEventV1 = SchemaDefinition(
    entity=ENTITY,
    version="v1",
    source="""{
        "type": "record",
        "name": "ParcelEventV1",
        "fields": [
            {"name": "ID", "type": "string"},
            {"name": "ParcelNumber", "type": "string"},
            {"name": "CreatedAt", "type": "string"},
            {"name": "UpdatedAt", "type": "string"}
        ]
    }""",
    description="Parcel lifecycle event",
)

ParcelEventV2 = SchemaDefinition(
    entity=ENTITY,
    version="v2",
    source="""{
        "type": "record",
        "name": "ParcelEventV2",
        "fields": [
            {"name": "ID", "type": "string"},
            {"name": "ParcelNumber", "type": "string"},
            {"name": "CreatedAt", "type": "string"},
            {"name": "UpdatedAt", "type": "string"},
            {"name": "Weight", "type": "double"}
        ]
    }""",
    description="Parcel lifecycle event with weight",
)

DEFINITIONS = (ParcelEventV1, ParcelEventV2)
