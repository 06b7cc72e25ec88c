"""
Shared constants for ribbon.

Single source of truth for defaults used by the configuration layer and
the command-line tool.
"""

DEFAULT_RESOLVER = "new"
"""Name of the conflict resolver used when none is configured."""

PATH_SEPARATOR = "."
"""Separator for dotted key paths on the command line."""

ENV_PREFIX = "RIBBON_"
"""Prefix for environment variables read by Settings."""

ENV_CONFIG_DIR = "RIBBON_CONFIG_DIR"
"""Environment variable overriding the user config directory."""

PROJECT_CONFIG_DIRNAME = ".ribbon"
"""Directory holding project-level configuration."""

CONFIG_FILENAME = "config.yaml"
"""File name of every configuration layer."""

DEFAULT_LOG_LEVEL = "WARNING"
"""Log level used by the command-line tool unless configured otherwise."""
