"""
Configuration module for ribbon.

Uses pydantic-settings for environment variable loading and ribbon's own
deep merge for layered YAML files.
"""

from ribbon.config.settings import Settings, find_project_root
from ribbon.config.sources import (
    ConfigFileError,
    LayeredYamlSettingsSource,
    get_builtin_defaults_path,
    get_project_config_path,
    get_user_config_dir,
    get_user_config_path,
)

__all__ = [
    "ConfigFileError",
    "LayeredYamlSettingsSource",
    "Settings",
    "find_project_root",
    "get_builtin_defaults_path",
    "get_project_config_path",
    "get_user_config_dir",
    "get_user_config_path",
]
