"""
Configuration management for the schema registry.

All configuration is done via environment variables - no config files.
This module provides typed configuration classes with validation.

Invariants:
    - All settings have sensible defaults for local development
    - Invalid enumerated settings fail at load time, not at first use

How to change safely:
    - Add new settings with defaults that maintain backward compatibility
    - Deprecate settings by logging warnings but continuing to support them
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_DEFINITIONS_MODULE = "app.schema_registry.definitions"


class CodecBackend(Enum):
    """Supported codec compiler backends."""

    AVRO = "avro"
    JSON = "json"


class LogFormat(Enum):
    """Supported log output formats."""

    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class CodecConfig:
    """Codec compiler configuration.

    Attributes:
        backend: Which codec library compiles schema definitions
    """

    backend: CodecBackend = CodecBackend.AVRO

    @classmethod
    def from_env(cls) -> CodecConfig:
        """Load configuration from environment variables."""
        backend_str = os.getenv("SCHEMA_CODEC_BACKEND", "avro").lower()
        try:
            backend = CodecBackend(backend_str)
        except ValueError:
            valid = ", ".join(b.value for b in CodecBackend)
            raise ValueError(f"Invalid SCHEMA_CODEC_BACKEND '{backend_str}'. Must be one of: {valid}")
        return cls(backend=backend)


@dataclass(frozen=True)
class DefinitionsConfig:
    """Schema definition source configuration.

    Attributes:
        module: Import path of a module exposing DEFINITIONS or get_definitions()
    """

    module: str = DEFAULT_DEFINITIONS_MODULE

    @classmethod
    def from_env(cls) -> DefinitionsConfig:
        """Load configuration from environment variables."""
        return cls(module=os.getenv("SCHEMA_DEFINITIONS_MODULE", DEFAULT_DEFINITIONS_MODULE))


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log format (json, text)
    """

    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.JSON

    @classmethod
    def from_env(cls) -> ObservabilityConfig:
        """Load configuration from environment variables."""
        format_str = os.getenv("LOG_FORMAT", "json").lower()
        try:
            log_format = LogFormat(format_str)
        except ValueError:
            raise ValueError(f"Invalid LOG_FORMAT '{format_str}'. Must be one of: json, text")
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=log_format,
        )


@dataclass
class RegistryConfig:
    """Complete registry configuration.

    Attributes:
        codec: Codec backend configuration
        definitions: Definition source configuration
        observability: Logging configuration
    """

    codec: CodecConfig = field(default_factory=CodecConfig)
    definitions: DefinitionsConfig = field(default_factory=DefinitionsConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @classmethod
    def from_env(cls) -> RegistryConfig:
        """Load complete configuration from environment variables.

        Raises:
            ValueError: If configuration is missing or invalid.
        """
        config = cls(
            codec=CodecConfig.from_env(),
            definitions=DefinitionsConfig.from_env(),
            observability=ObservabilityConfig.from_env(),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration consistency.

        Raises:
            ValueError: If configuration is invalid.
        """
        if not self.definitions.module:
            raise ValueError("SCHEMA_DEFINITIONS_MODULE cannot be empty")

        # getLevelName maps known names to ints and echoes unknown ones back
        if not isinstance(logging.getLevelName(self.observability.log_level), int):
            raise ValueError(f"Invalid LOG_LEVEL '{self.observability.log_level}'")

    def log_config(self) -> None:
        """Log effective configuration."""
        logger.info(
            "Schema registry configuration loaded",
            extra={
                "codec_backend": self.codec.backend.value,
                "definitions_module": self.definitions.module,
                "log_level": self.observability.log_level,
                "log_format": self.observability.log_format.value,
            },
        )
