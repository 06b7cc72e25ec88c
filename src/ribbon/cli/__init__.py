"""
CLI module for ribbon.

Provides the command-line interface using Click.
"""

from ribbon.cli.main import cli, main

__all__ = ["main", "cli"]
