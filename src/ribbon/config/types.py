"""Configuration type definitions for ribbon settings.

Pydantic models for the sections nested within Settings:

- YamlConfig: output formatting for YAML documents
- MergeConfig: default conflict resolver
- LoggingConfig: log level of the command-line tool

All types use `extra="allow"` so unknown keys are preserved; use
`get_extra_fields()` to audit a config for typos.
"""

import typing as _typing

import pydantic as _pydantic

import ribbon._merge as _merge
import ribbon.constants as constants

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
"""Log level names accepted by LoggingConfig."""

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    Unknown fields are kept in model_extra instead of being dropped.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Return fields that were provided but not in the schema.

        Returns:
            Dict of field_name → value for all unrecognized fields.
        """
        return dict(self.model_extra) if self.model_extra else {}

    def has_extra_fields(self) -> bool:
        """Check if this config has any unrecognized fields."""
        return bool(self.model_extra)


# =============================================================================
# Sections
# =============================================================================


class YamlConfig(ConfigBase):
    """
    YAML output formatting.

    YAML section: yaml.*
    """

    indent: int = _pydantic.Field(default=2, ge=2, le=9)
    """Spaces per indentation level."""

    sort_keys: bool = False
    """Sort mapping keys instead of keeping insertion order."""

    default_flow_style: bool = False
    """Emit nested collections inline ({a: 1}) instead of block style."""

    allow_unicode: bool = True
    """Write non-ASCII characters as-is instead of escaping them."""


class MergeConfig(ConfigBase):
    """
    Deep merge behavior.

    YAML section: merge.*
    """

    resolver: str = constants.DEFAULT_RESOLVER
    """Name of the conflict resolver (see ribbon.RESOLVERS)."""

    @_pydantic.field_validator("resolver")
    @classmethod
    def _validate_resolver(cls, value: str) -> str:
        """Reject resolver names that are not registered."""
        _merge.get_resolver(value)
        return value


class LoggingConfig(ConfigBase):
    """
    Logging for the command-line tool.

    YAML section: logging.*
    """

    level: str = constants.DEFAULT_LOG_LEVEL
    """Root log level (case-insensitive)."""

    @_pydantic.field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        """Normalize to upper case and reject unknown level names."""
        normalized = value.upper()
        if normalized not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return normalized
