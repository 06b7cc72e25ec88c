"""
Shared pytest fixtures for ribbon tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import ribbon.config as config
import ribbon.constants as constants


@_pytest.fixture
def user_config_dir(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """Directory used as RIBBON_CONFIG_DIR; created empty."""
    path = tmp_path / "user-config"
    path.mkdir()
    return path


@_pytest.fixture
def clean_env(user_config_dir: _pathlib.Path) -> dict[str, str]:
    """
    Return environment dict with every RIBBON_* variable removed.

    RIBBON_CONFIG_DIR points at an empty temporary directory so the real
    user config is never read. Use with mock.patch.dict to isolate tests
    from the actual environment.
    """
    env = {
        k: v
        for k, v in _os.environ.items()
        if not k.startswith(constants.ENV_PREFIX) and k != "NO_COLOR"
    }
    env[constants.ENV_CONFIG_DIR] = str(user_config_dir)
    return env


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]) -> _typing.Any:
    """
    Context manager that isolates tests from environment variables.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                settings = config.Settings.construct_without_dotenv()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def isolated_workspace(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _pathlib.Path:
    """Create an empty project directory and make it the working directory."""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    monkeypatch.chdir(workspace)
    return workspace


@_pytest.fixture
def clean_settings(isolated_env: _typing.Any, isolated_workspace: _pathlib.Path) -> config.Settings:
    """
    Settings instance isolated from environment, .env file and config files.

    This fixture ensures tests get predictable default settings.
    """
    with isolated_env:
        return config.Settings.construct_without_dotenv()


@_pytest.fixture
def write_yaml(tmp_path: _pathlib.Path) -> _typing.Callable[[str, str], _pathlib.Path]:
    """Factory writing YAML text to a file under tmp_path and returning its path."""

    def _write(name: str, text: str) -> _pathlib.Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
