"""
Schema CLI tool for the schema registry.

This tool inspects and exercises schema definitions:
- list: Show registered entities and versions
- show: Print the schema a (entity, version) resolves to
- snapshot: Export the built registry to JSON
- validate: Build the registry and report compilation errors
- encode/decode: Convert JSON records to and from codec bytes (hex)

Usage:
    schema-registry-tool list
    schema-registry-tool show --entity parcelEvent --version v2
    schema-registry-tool snapshot -o schemas.lock.json
    schema-registry-tool validate --file schemas.json
    echo '{"ID": "1", ...}' | schema-registry-tool encode -e parcelEvent -v v1

Invariants:
    - Failures cause non-zero exit code
    - Snapshot output is deterministic (sorted JSON)

How to change safely:
    - Add new commands, don't modify existing ones
    - Keep output format stable for CI parsing
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Optional, Sequence

from ..codec import CodecCompiler, CodecError, create_compiler
from ..config import CodecBackend, CodecConfig, DEFAULT_DEFINITIONS_MODULE
from ..errors import SchemaRegistryError
from ..schema import SchemaRegistry, load_definitions, load_definitions_file

logger = logging.getLogger(__name__)


class SchemaCLI:
    """CLI tool for schema inspection.

    Example:
        >>> cli = SchemaCLI()
        >>> print(cli.snapshot(registry))
        >>> cli.encode(registry, "parcelEvent", "v1", record)
    """

    def list_versions(self, registry: SchemaRegistry) -> list[str]:
        """Render one line per entity with its versions."""
        return [
            f"{entity}: {', '.join(registry.versions(entity))}"
            for entity in registry.entities()
        ]

    def show(self, registry: SchemaRegistry, entity: str, version: str) -> str:
        """Return the resolved schema as JSON.

        Raises:
            UnknownEntityError: If the entity is not registered
            UnknownVersionError: If the version is not registered
        """
        entry = registry.resolve_entry(entity, version)
        return json.dumps(entry.to_dict(), indent=2, sort_keys=True)

    def snapshot(self, registry: SchemaRegistry) -> str:
        """Export registry to JSON.

        Args:
            registry: Schema registry to export

        Returns:
            JSON string representation
        """
        return registry.to_json()

    def validate(
        self,
        module_path: Optional[str] = None,
        file_path: Optional[str] = None,
        compiler: Optional[CodecCompiler] = None,
    ) -> list[str]:
        """Build a registry from a module or file and collect errors.

        Returns:
            List of error messages (empty if the definitions build cleanly)
        """
        try:
            _load_registry(module_path, file_path, compiler)
        except SchemaRegistryError as e:
            return [e.message]
        return []

    def encode(
        self, registry: SchemaRegistry, entity: str, version: str, record: dict[str, Any]
    ) -> str:
        """Encode a record and return the bytes as hex."""
        return registry.resolve(entity, version).encode(record).hex()

    def decode(self, registry: SchemaRegistry, entity: str, version: str, data: str) -> dict:
        """Decode hex-encoded bytes into a record."""
        try:
            raw = bytes.fromhex(data.strip())
        except ValueError as e:
            raise CodecError(f"Input is not valid hex: {e}") from e
        return registry.resolve(entity, version).decode(raw)


def _load_registry(
    module_path: Optional[str] = None,
    file_path: Optional[str] = None,
    compiler: Optional[CodecCompiler] = None,
) -> SchemaRegistry:
    """Build a registry from a JSON file or a definitions module.

    Args:
        module_path: Python module path exposing DEFINITIONS
        file_path: JSON document in {entity: {version: schema}} form
        compiler: Codec compiler (defaults to Avro)

    Returns:
        Built SchemaRegistry
    """
    if file_path:
        definitions = load_definitions_file(file_path)
    else:
        definitions = load_definitions(module_path or DEFAULT_DEFINITIONS_MODULE)
    return SchemaRegistry.build(definitions, compiler)


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--module", help="Python module containing schema definitions")
    parser.add_argument("--file", help="Schema JSON file ({entity: {version: schema}})")
    parser.add_argument(
        "--backend",
        choices=[b.value for b in CodecBackend],
        default=CodecBackend.AVRO.value,
        help="Codec backend",
    )


def _add_key_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--entity", "-e", required=True, help="Entity name")
    parser.add_argument("--version", "-v", required=True, help="Version ID")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for schema tool."""
    parser = argparse.ArgumentParser(description="Schema registry tool")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List entities and versions")
    _add_source_args(list_parser)

    show_parser = subparsers.add_parser("show", help="Show a resolved schema")
    _add_source_args(show_parser)
    _add_key_args(show_parser)

    snapshot_parser = subparsers.add_parser("snapshot", help="Export registry to JSON")
    _add_source_args(snapshot_parser)
    snapshot_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    validate_parser = subparsers.add_parser("validate", help="Validate schema definitions")
    _add_source_args(validate_parser)

    encode_parser = subparsers.add_parser("encode", help="Encode a JSON record (stdin) to hex")
    _add_source_args(encode_parser)
    _add_key_args(encode_parser)

    decode_parser = subparsers.add_parser("decode", help="Decode hex (stdin) to a JSON record")
    _add_source_args(decode_parser)
    _add_key_args(decode_parser)

    args = parser.parse_args(argv)
    cli = SchemaCLI()
    compiler = create_compiler(CodecConfig(backend=CodecBackend(args.backend)))

    if args.command == "validate":
        errors = cli.validate(args.module, args.file, compiler)
        if not errors:
            print("Schema definitions are valid")
            sys.exit(0)
        else:
            print(f"Schema validation failed with {len(errors)} error(s):")
            for error in errors:
                print(f"  - {error}")
            sys.exit(1)

    try:
        registry = _load_registry(args.module, args.file, compiler)

        if args.command == "list":
            for line in cli.list_versions(registry):
                print(line)

        elif args.command == "show":
            print(cli.show(registry, args.entity, args.version))

        elif args.command == "snapshot":
            output = cli.snapshot(registry)
            if args.output:
                with open(args.output, "w") as f:
                    f.write(output)
                print(f"Registry exported to {args.output}", file=sys.stderr)
            else:
                print(output)

        elif args.command == "encode":
            record = json.load(sys.stdin)
            print(cli.encode(registry, args.entity, args.version, record))

        elif args.command == "decode":
            record = cli.decode(registry, args.entity, args.version, sys.stdin.read())
            print(json.dumps(record, indent=2, sort_keys=True))

    except SchemaRegistryError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except (CodecError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
