"""
Main CLI entry point for ribbon.

Provides the command-line interface using Click:

    ribbon merge base.yaml override.yaml   # deep merge documents
    ribbon get config.yaml server.port     # read a dotted path
    ribbon set config.yaml server.port 80  # write a dotted path
    ribbon config show                     # effective configuration
"""

import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.syntax as _rich_syntax
import yaml as _yaml

import ribbon
import ribbon.config as config
import ribbon.constants as constants

_logger = _logging.getLogger(__name__)

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_MISSING = object()

_DOCUMENT_PATH = _click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path)


def _configure_logging(level: str) -> None:
    """Send the package's log records to stderr at the given level."""
    package_logger = _logging.getLogger("ribbon")
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    handler = _logging.StreamHandler(_sys.stderr)
    handler.setFormatter(_logging.Formatter("%(levelname)s | %(name)s | %(message)s"))
    package_logger.addHandler(handler)


def _load_document(path: _pathlib.Path) -> ribbon.Ribbon:
    """Load a YAML or JSON document as a Ribbon, failing with a CLI error."""
    _logger.debug("Loading document %s", path)
    try:
        return ribbon.load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise _click.ClickException(f"cannot read {path}: {e}") from e
    except _yaml.YAMLError as e:
        raise _click.ClickException(f"invalid YAML in {path}: {e}") from e
    except ribbon.InvalidSourceError as e:
        type_name = type(e.source).__name__
        raise _click.ClickException(f"{path} must contain a mapping at the top level, got {type_name}") from e


def _parse_path(dotted: str) -> tuple[str, ...]:
    """Split a dotted key path, rejecting empty segments."""
    keys = tuple(dotted.split(constants.PATH_SEPARATOR))
    if not all(keys):
        raise _click.UsageError(f"invalid path {dotted!r}: empty key")
    return keys


def _render(value: _typing.Any, settings: config.Settings, as_json: bool) -> str:
    """Render a value as JSON or YAML text."""
    if as_json:
        return _json.dumps(ribbon.to_plain(value), indent=settings.yaml.indent, ensure_ascii=False)
    if ribbon.is_container(value) or isinstance(value, (dict, list, tuple)):
        return _typing.cast(str, ribbon.dump(value, **settings.dump_options())).rstrip("\n")
    if isinstance(value, str):
        return value
    return _json.dumps(value)


def _should_use_color(cli_flag: bool | None) -> tuple[bool, bool]:
    """Determine whether to use color output.

    Priority:
    1. CLI flag (--color / --no-color) if specified
    2. RIBBON_COLOR env var (1=on, 0=off)
    3. NO_COLOR env var (if set, disable color) - standard convention
    4. Auto-detect: color if stdout is a TTY

    Returns:
        Tuple of (color_enabled, force_color).
        force_color is True when color was explicitly requested (not auto-detected).
    """
    if cli_flag is not None:
        return (cli_flag, cli_flag)

    env_color = _os.environ.get("RIBBON_COLOR")
    if env_color is not None:
        enabled = env_color.lower() in ("1", "true", "yes", "on")
        return (enabled, enabled)

    if _os.environ.get("NO_COLOR") is not None:
        return (False, False)

    return (_sys.stdout.isatty(), False)


def _print_document(
    text: str,
    language: str,
    *,
    color: bool = True,
    force_color: bool = False,
) -> None:
    """Print YAML or JSON text, optionally with syntax highlighting.

    Args:
        text: The text to print
        language: Lexer name ("yaml" or "json")
        color: Whether to use syntax highlighting
        force_color: Force color even when not a TTY (for piping with --color)
    """
    if not color:
        _click.echo(text)
        return

    # When forcing color (explicit --color flag):
    # - force_terminal=True: output color even when piped
    # - no_color=False: override NO_COLOR env var
    # - color_system='truecolor': override FORCE_COLOR=0 env var
    console = _rich_console.Console(
        force_terminal=force_color,
        no_color=False if force_color else None,
        color_system="truecolor" if force_color else "auto",
    )
    syntax = _rich_syntax.Syntax(
        text,
        language,
        theme="monokai",
        background_color="default",
    )
    console.print(syntax)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(ribbon.__version__, "-v", "--version", prog_name="ribbon")
@_click.option("--verbose", is_flag=True, help="Enable debug logging on stderr")
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool) -> None:
    """Ribbon - inspect and deep merge nested YAML/JSON documents."""
    try:
        settings = config.Settings()
    except config.ConfigFileError as e:
        raise _click.ClickException(str(e)) from e
    except _pydantic.ValidationError as e:
        raise _click.ClickException(f"invalid configuration:\n{e}") from e

    _configure_logging("DEBUG" if verbose else settings.logging.level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@_click.argument("files", nargs=-1, required=True, type=_DOCUMENT_PATH)
@_click.option(
    "--resolver",
    type=_click.Choice(sorted(ribbon.RESOLVERS)),
    default=None,
    help="Conflict resolver for leaf values (default: from config)",
)
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable syntax highlighting (default: auto-detect TTY)",
)
@_click.option(
    "-o",
    "--output",
    type=_click.Path(dir_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Write the result to a file instead of stdout",
)
@_click.pass_context
def merge(
    ctx: _click.Context,
    files: tuple[_pathlib.Path, ...],
    resolver: str | None,
    as_json: bool,
    use_color: bool | None,
    output: _pathlib.Path | None,
) -> None:
    """Deep merge documents, later files taking precedence.

    Nested mappings are merged key by key. Conflicting leaf values are
    settled by the resolver: 'new' keeps the later file's value, 'old'
    keeps the earlier one, 'combine' adds numbers and joins strings/lists.

    Examples:
        ribbon merge defaults.yaml site.yaml
        ribbon merge --resolver combine a.yaml b.yaml --json
        ribbon merge base.yaml local.yaml -o effective.yaml
    """
    settings: config.Settings = ctx.obj["settings"]
    resolve = ribbon.get_resolver(resolver) if resolver else settings.get_resolver()

    merged = ribbon.Ribbon()
    for path in files:
        ribbon.deep_merge_in_place(merged, _load_document(path), resolve)

    text = _render(merged, settings, as_json)
    if output is not None:
        output.write_text(text + "\n", encoding="utf-8")
        _logger.info("Wrote merged document to %s", output)
        return

    color_enabled, force_color = _should_use_color(use_color)
    _print_document(
        text,
        "json" if as_json else "yaml",
        color=color_enabled,
        force_color=force_color,
    )


@cli.command(name="get")
@_click.argument("file", type=_DOCUMENT_PATH)
@_click.argument("path")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def get_cmd(ctx: _click.Context, file: _pathlib.Path, path: str, as_json: bool) -> None:
    """Print the value at a dotted PATH without modifying anything.

    Examples:
        ribbon get config.yaml server.port
        ribbon get config.yaml server --json
    """
    settings: config.Settings = ctx.obj["settings"]
    document = _load_document(file)

    try:
        value = document.peek_at_path(_parse_path(path), _MISSING)
    except ribbon.NotAContainerError as e:
        raise _click.UsageError(f"cannot descend into {path!r}: {e}") from e
    if value is _MISSING:
        raise _click.ClickException(f"path not found: {path}")

    _click.echo(_render(value, settings, as_json))


@cli.command(name="set")
@_click.argument("file", type=_DOCUMENT_PATH)
@_click.argument("path")
@_click.argument("value")
@_click.option("--in-place", is_flag=True, help="Rewrite FILE instead of printing")
@_click.pass_context
def set_cmd(
    ctx: _click.Context,
    file: _pathlib.Path,
    path: str,
    value: str,
    in_place: bool,
) -> None:
    """Set VALUE (parsed as YAML) at a dotted PATH.

    Missing intermediate keys are created. Setting a key below a scalar
    value is an error.

    Examples:
        ribbon set config.yaml server.port 8080
        ribbon set config.yaml server.tls '{enabled: true}' --in-place
    """
    settings: config.Settings = ctx.obj["settings"]
    document = _load_document(file)

    try:
        parsed = _yaml.load(value, Loader=ribbon.RibbonLoader)
    except _yaml.YAMLError as e:
        raise _click.BadParameter(f"not valid YAML: {e}", param_hint="VALUE") from e

    try:
        document.set_at_path(_parse_path(path), parsed)
    except ribbon.NotAContainerError as e:
        raise _click.UsageError(f"cannot set {path!r}: {e}") from e

    text = _typing.cast(str, ribbon.dump(document, **settings.dump_options()))
    if in_place:
        file.write_text(text, encoding="utf-8")
        _logger.info("Updated %s", file)
    else:
        _click.echo(text.rstrip("\n"))


@cli.group(name="config")
def config_cmd() -> None:
    """Configuration management commands."""
    pass


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def config_show(ctx: _click.Context, as_json: bool) -> None:
    """Show effective configuration from all sources."""
    settings: config.Settings = ctx.obj["settings"]
    full_config = settings.model_dump(mode="json")

    if as_json:
        _click.echo(_json.dumps(full_config, indent=2))
    else:
        _click.echo(_typing.cast(str, ribbon.dump(full_config)).rstrip("\n"))


@config_cmd.command(name="path")
@_click.option("--all", "show_all", is_flag=True, help="Show all paths even if not found")
def config_path(show_all: bool) -> None:
    """Show configuration file paths and their status.

    Examples:
        ribbon config path        # Show existing config files
        ribbon config path --all  # Show all possible paths
    """
    paths = [
        ("Built-in defaults", config.get_builtin_defaults_path()),
        ("User config", config.get_user_config_path()),
        ("Project config", config.get_project_config_path(config.find_project_root())),
    ]

    for name, path in paths:
        exists = path.exists()
        if exists or show_all:
            status = "✓" if exists else "✗"
            _click.echo(f"{status} {name}: {path}")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="ribbon")


if __name__ == "__main__":
    main()
