"""
Schema Registry - versioned schema store with compiled codecs.

This package associates logical entity names ("parcelEvent") with a set of
schema versions, compiles each version into a codec, and resolves
(entity, version) pairs to those codecs on demand.

Architecture:
    ┌──────────────┐     ┌───────────────┐     ┌──────────────────┐
    │  Definitions │────▶│ CodecCompiler │────▶│  SchemaRegistry  │
    │  (static)    │     │ (avro / json) │     │  (immutable)     │
    └──────────────┘     └───────────────┘     └────────┬─────────┘
                                                        │
                                                        ▼
                                               ┌──────────────────┐
                                               │ resolve(name, v) │
                                               └──────────────────┘

Invariants:
    - The registry is built once, all-or-nothing, before serving lookups
    - (entity, version) is unique; versions are opaque labels
    - Lookups are read-only and safe to run concurrently

How to change safely:
    - Add new versions as new definitions; never edit shipped ones
    - Validate definitions with the schema tool before deployment

Version: see _version.py.
"""

from ._version import __version__

__all__ = ["__version__"]
