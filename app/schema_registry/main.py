"""
Schema registry - Main entry point.

Builds the registry once from the configured definitions and reports what
is being served. A hosting process (HTTP service, bus consumer) uses
bootstrap() to get the built registry and wires it into its own transport.

Usage:
    python -m app.schema_registry.main

Configuration is entirely via environment variables.
See config.py for all available settings.

Invariants:
    - The registry is fully built before any consumer receives it
    - Compilation failures are reported and turned into a non-zero exit
      code; bootstrap() itself raises instead of exiting

How to change safely:
    - Keep bootstrap() free of printing; run() owns user-facing output
    - Test failure paths through run() return codes
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

import json_log_formatter

from .codec import create_compiler
from .config import LogFormat, RegistryConfig
from .errors import DefinitionLoadError, DuplicateDefinitionError, SchemaCompilationError
from .schema import SchemaRegistry, SchemaResolver, load_definitions

logger = logging.getLogger(__name__)


def setup_logging(config: RegistryConfig) -> None:
    """Configure logging based on configuration.

    Args:
        config: Registry configuration
    """
    level = getattr(logging, config.observability.log_level.upper(), logging.INFO)

    if config.observability.log_format == LogFormat.JSON:
        formatter: logging.Formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]


def bootstrap(config: RegistryConfig) -> SchemaResolver:
    """Load definitions and build the registry.

    Args:
        config: Registry configuration

    Returns:
        Resolver over the freshly built registry

    Raises:
        DefinitionLoadError: If the definitions module cannot be loaded
        DuplicateDefinitionError: If a key is defined twice
        SchemaCompilationError: If any definition fails to compile
    """
    definitions = load_definitions(config.definitions.module)
    compiler = create_compiler(config.codec)
    registry = SchemaRegistry.build(definitions, compiler)
    return SchemaResolver(registry)


def describe(registry: SchemaRegistry) -> str:
    """Render a short human-readable summary of the registry."""
    lines = [f"Schema registry ({registry.compiler_name}) {registry.fingerprint}"]
    for entity in registry.entities():
        lines.append(f"  {entity}:")
        for version in registry.versions(entity):
            codec = registry.resolve(entity, version)
            fields = ", ".join(codec.field_names)
            lines.append(f"    {version}: {len(codec.field_names)} fields ({fields})")
    return "\n".join(lines)


def run(config: Optional[RegistryConfig] = None, out: TextIO = sys.stdout) -> int:
    """Build the registry and print a summary.

    Args:
        config: Optional configuration (loaded from env if not provided)
        out: Stream for the summary

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    config = config or RegistryConfig.from_env()
    config.log_config()

    try:
        resolver = bootstrap(config)
    except (DefinitionLoadError, DuplicateDefinitionError, SchemaCompilationError) as e:
        logger.error(f"Schema registry initialization failed: {e.message}", extra=e.details)
        return 1

    print(describe(resolver.registry), file=out)
    return 0


def main() -> None:
    """CLI entry point."""
    try:
        config = RegistryConfig.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    setup_logging(config)
    sys.exit(run(config))


if __name__ == "__main__":
    main()
