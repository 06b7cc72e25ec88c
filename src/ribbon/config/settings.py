"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with RIBBON_ prefix
3. .env file (if RIBBON_ENV_FILE points at one)
4. Layered YAML config files merged with ribbon's deep merge:
   - Project config: .ribbon/config.yaml (highest)
   - User config: ~/.config/ribbon/config.yaml
   - Built-in defaults: bundled defaults/config.yaml (lowest)

Nested config uses double underscore delimiter:
  RIBBON_MERGE__RESOLVER=combine
  RIBBON_LOGGING__LEVEL=debug
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import ribbon._merge as _merge
import ribbon._types as _types
import ribbon.config.sources as sources
import ribbon.config.types as types
import ribbon.constants as constants


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only RIBBON_ENV_FILE selects one. If it is set but the file does not
    exist, no .env file is loaded.
    """
    if env_file := _os.environ.get("RIBBON_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Find the project root directory.

    Walks up from start_path looking for a directory that contains a
    .ribbon/ config directory. Falls back to start_path itself.

    Args:
        start_path: Starting path for search. Defaults to cwd.
    """
    if start_path is None:
        start_path = _pathlib.Path.cwd()
    start_path = start_path.resolve()

    for candidate in (start_path, *start_path.parents):
        if (candidate / constants.PROJECT_CONFIG_DIRNAME).is_dir():
            return candidate
    return start_path


class Settings(_pydantic_settings.BaseSettings):
    """
    Ribbon configuration settings.

    All settings can be overridden via environment variables with RIBBON_ prefix.
    For nested config, use double underscore: RIBBON_YAML__INDENT=4

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (RIBBON_*)
    3. .env file
    4. Project config (.ribbon/config.yaml)
    5. User config (~/.config/ribbon/config.yaml)
    6. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # RIBBON_MERGE__RESOLVER
        extra="allow",
    )

    yaml: types.YamlConfig = _pydantic.Field(default_factory=types.YamlConfig)
    """YAML output formatting."""

    merge: types.MergeConfig = _pydantic.Field(default_factory=types.MergeConfig)
    """Deep merge behavior."""

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Logging for the command-line tool."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (RIBBON_* env vars)
        3. dotenv_settings (.env file)
        4. layered YAML config files
        5. (defaults via Field definitions), lowest
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.LayeredYamlSettingsSource(settings_cls, find_project_root()),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings without loading any .env file.

        Useful for test isolation and for reproducing issues without .env
        interference.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    def get_resolver(self) -> _types.Resolver:
        """Return the configured conflict resolver."""
        return _merge.get_resolver(self.merge.resolver)

    def dump_options(self) -> dict[str, _typing.Any]:
        """Keyword arguments for ribbon.dump() from the yaml section."""
        return {
            "indent": self.yaml.indent,
            "sort_keys": self.yaml.sort_keys,
            "default_flow_style": self.yaml.default_flow_style,
            "allow_unicode": self.yaml.allow_unicode,
        }
