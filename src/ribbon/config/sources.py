"""Custom pydantic-settings sources for ribbon configuration.

This module provides:

- LayeredYamlSettingsSource: A pydantic-settings source that loads
  configuration from layered YAML files and combines them with ribbon's own
  deep merge.

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .ribbon/config.yaml in the project root
3. User config: ~/.config/ribbon/config.yaml (or RIBBON_CONFIG_DIR)
4. Built-in defaults: bundled config.yaml

Nested mappings merge key by key; any other value in a higher layer
replaces the lower one.

Environment variables:
- RIBBON_CONFIG_DIR: Override user config directory (default: ~/.config/ribbon)
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import ribbon._core as _core
import ribbon._merge as _merge
import ribbon._transform as _transform
import ribbon._yaml as ribbon_yaml
import ribbon.constants as constants
import ribbon.errors as errors

_logger = _logging.getLogger(__name__)


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


class LayeredYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that deep merges layered YAML config files.

    Flow:
    1. Load each YAML file into a Ribbon
    2. Deep merge the ribbons, lowest precedence first
    3. Return the merged tree as a plain dict
    4. Pydantic validates everything

    Layers (lowest to highest precedence):
    1. Built-in defaults (src/ribbon/config/defaults/config.yaml)
    2. User config (~/.config/ribbon/config.yaml)
    3. Project config (.ribbon/config.yaml)
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
        builtin_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Optional project root path for project-level config.
            user_config_path: Override path for user config file (for testing).
                If not provided, uses RIBBON_CONFIG_DIR env var or default XDG path.
            builtin_config_path: Override path for builtin defaults (for testing).
                If not provided, uses the bundled defaults/config.yaml.
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._builtin_config_path = builtin_config_path
        # Layers actually loaded, highest precedence first
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._merged = self._load_config_layers()

    def _load_config_layers(self) -> _core.Ribbon:
        """
        Load and merge all config layers.

        Returns:
            Ribbon with the merged configuration.

        Raises:
            ConfigFileError: If the built-in defaults are missing or empty,
                or any existing layer is unreadable or malformed.
        """
        # Layer 1: built-in defaults (lowest precedence), required
        builtin_path = self._get_builtin_config_path()
        if not builtin_path.exists():
            raise ConfigFileError(
                builtin_path,
                "built-in defaults not found (possible installation problem)",
            )
        merged = self._load_yaml_file(builtin_path)
        if not merged:
            raise ConfigFileError(
                builtin_path,
                "built-in defaults file is empty (possible installation problem)",
            )
        layer_info: list[tuple[str, _pathlib.Path]] = [("built-in", builtin_path)]

        # Layers 2 and 3: user and project config, optional
        optional: list[tuple[str, _pathlib.Path]] = [("user", self._get_user_config_path())]
        if self._project_root:
            optional.append(("project", get_project_config_path(self._project_root)))

        for name, path in optional:
            if not path.exists():
                continue
            content = self._load_yaml_file(path)
            if content:
                _merge.deep_merge_in_place(merged, content)
                layer_info.append((name, path))

        layer_info.reverse()
        self._loaded_layers = layer_info
        return merged

    @property
    def merged(self) -> _core.Ribbon:
        """The merged configuration tree."""
        return self._merged

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """
        Get info about layers that were actually loaded.

        Returns:
            List of (layer_name, path) tuples, highest precedence first.
        """
        return list(self._loaded_layers)

    def get_layer_paths(self) -> list[tuple[str, _pathlib.Path, bool]]:
        """
        Get info about all config layers.

        Returns:
            List of (layer_name, path, exists) tuples in precedence order
            (highest first: project, user, builtin).
        """
        layers: list[tuple[str, _pathlib.Path, bool]] = []

        if self._project_root:
            project_path = get_project_config_path(self._project_root)
            layers.append(("project", project_path, project_path.exists()))

        user_path = self._get_user_config_path()
        layers.append(("user", user_path, user_path.exists()))

        builtin_path = self._get_builtin_config_path()
        layers.append(("built-in", builtin_path, builtin_path.exists()))

        return layers

    def _get_builtin_config_path(self) -> _pathlib.Path:
        """Get path to builtin defaults, respecting override."""
        if self._builtin_config_path is not None:
            return self._builtin_config_path
        return get_builtin_defaults_path()

    def _get_user_config_path(self) -> _pathlib.Path:
        """Get path to user config, respecting override and env var."""
        if self._user_config_path is not None:
            return self._user_config_path
        return get_user_config_path()

    def _load_yaml_file(self, path: _pathlib.Path) -> _core.Ribbon:
        """
        Load a YAML file as a Ribbon.

        Args:
            path: Path to the YAML file.

        Returns:
            Parsed contents; empty Ribbon if the file is empty.

        Raises:
            ConfigFileError: If the file cannot be read, is malformed YAML,
                or contains non-mapping content at the top level.
        """
        _logger.debug("Loading config layer %s", path)
        try:
            content = path.read_text(encoding="utf-8")
        except PermissionError as e:
            raise ConfigFileError(path, f"permission denied: {e}") from e
        except OSError as e:
            raise ConfigFileError(path, f"cannot read file: {e}") from e

        try:
            return ribbon_yaml.load(content)
        except _yaml.YAMLError as e:
            raise ConfigFileError(path, f"invalid YAML: {e}") from e
        except errors.InvalidSourceError as e:
            type_name = type(e.source).__name__
            raise ConfigFileError(
                path,
                f"config must be a YAML mapping (dict), got {type_name}",
            ) from e

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Get value for a field from the merged tree.

        Returns:
            Tuple of (value, field_name, is_complex).
            is_complex is True if the value is a mapping or list.
        """
        value = self._merged.peek(field_name)
        if value is None:
            return None, field_name, False
        plain = _transform.to_plain(value)
        return plain, field_name, isinstance(plain, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """
        Return merged config as a plain dict for Pydantic validation.

        Includes unknown keys; Settings keeps them in model_extra.
        """
        return self._merged.to_dict()


def get_builtin_defaults_path() -> _pathlib.Path:
    """
    Get the path to the built-in defaults config file.

    Returns:
        Path to defaults/config.yaml.
    """
    return _pathlib.Path(__file__).parent / "defaults" / constants.CONFIG_FILENAME


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects RIBBON_CONFIG_DIR environment variable if set,
    otherwise uses XDG standard path.
    """
    config_dir_env = _os.environ.get(constants.ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "ribbon"


def get_user_config_path() -> _pathlib.Path:
    """Get the path to the user config file."""
    return get_user_config_dir() / constants.CONFIG_FILENAME


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """
    Get the path to the project config file.

    Args:
        project_root: The project root directory.

    Returns:
        Path to .ribbon/config.yaml within the project.
    """
    return project_root / constants.PROJECT_CONFIG_DIRNAME / constants.CONFIG_FILENAME
