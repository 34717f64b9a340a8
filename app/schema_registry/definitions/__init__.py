"""
Built-in schema definitions.

Every entity module contributes a DEFINITIONS tuple; this package
concatenates them in declaration order. Point SCHEMA_DEFINITIONS_MODULE at
another module exposing DEFINITIONS (or get_definitions()) to serve a
different set.
"""

from . import parcel_event
from .parcel_event import ParcelEventV1, ParcelEventV2

DEFINITIONS = (*parcel_event.DEFINITIONS,)

__all__ = ["DEFINITIONS", "ParcelEventV1", "ParcelEventV2"]
