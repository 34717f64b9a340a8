"""
CLI tools for schema registry administration.

This module provides command-line tools for:
- schema: Inspect, validate, and exercise schema definitions

Invariants:
    - Tools work offline (no running service required)
    - Tools never modify definitions
"""

from .schema_cli import SchemaCLI

__all__ = ["SchemaCLI"]
