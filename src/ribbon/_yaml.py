"""
YAML loader and dumper that speak ribbons natively.

Provides:
- RibbonLoader: SafeLoader producing Ribbon instead of dict for mappings
- RibbonDumper: SafeDumper representing Ribbon and Wrapper as mappings

Key order is preserved in both directions.

Example:
    >>> import yaml
    >>> from ribbon import RibbonLoader
    >>> data = yaml.load('''
    ... server:
    ...   port: 8080
    ... ''', Loader=RibbonLoader)
    >>> data.server.port
    8080
"""

from __future__ import annotations

import typing as _typing

import yaml as _yaml

import ribbon._core as _core
import ribbon._wrapper as _wrapper
import ribbon.errors as errors

# =============================================================================
# Loader
# =============================================================================


def _ribbon_constructor(
    loader: _yaml.SafeLoader,
    node: _yaml.MappingNode,
) -> _core.Ribbon:
    """
    Construct a Ribbon from a YAML mapping node.

    Replaces the default dict constructor so nested mappings become nested
    ribbons. Merge keys (``<<``) are flattened first.

    Raises:
        yaml.constructor.ConstructorError: If a key is unhashable.
    """
    loader.flatten_mapping(node)
    result = _core.Ribbon()
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=True)  # type: ignore[no-untyped-call]
        try:
            hash(key)
        except TypeError as e:
            raise _yaml.constructor.ConstructorError(
                "while constructing a mapping",
                node.start_mark,
                f"found unhashable key ({e})",
                key_node.start_mark,
            ) from e
        value = loader.construct_object(value_node, deep=True)  # type: ignore[no-untyped-call]
        result.put(key, value)
    return result


class RibbonLoader(_yaml.SafeLoader):
    """
    YAML loader producing ribbons.

    Every mapping in the document, at any depth, is loaded as a Ribbon.
    Sequences and scalars load as with SafeLoader.

    Usage:
        >>> import yaml
        >>> data = yaml.load("a: {b: 1}", Loader=RibbonLoader)
        >>> data.a.b
        1
    """

    pass


RibbonLoader.add_constructor(
    _yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _ribbon_constructor,
)


# =============================================================================
# Dumper
# =============================================================================


def _represent_container(dumper: _yaml.SafeDumper, data: _typing.Any) -> _yaml.MappingNode:
    """Represent a Ribbon or Wrapper as a plain YAML mapping."""
    return dumper.represent_dict(dict(data.items()))


class RibbonDumper(_yaml.SafeDumper):
    """YAML dumper that understands Ribbon and Wrapper values."""

    pass


RibbonDumper.add_multi_representer(_core.Ribbon, _represent_container)
RibbonDumper.add_multi_representer(_wrapper.Wrapper, _represent_container)


# =============================================================================
# Convenience Functions
# =============================================================================


def load(stream: _typing.Any) -> _core.Ribbon:
    """
    Load a YAML document as a Ribbon.

    Args:
        stream: YAML content (string, bytes, or file-like object).

    Returns:
        The loaded Ribbon. An empty document gives an empty Ribbon.

    Raises:
        yaml.YAMLError: If the document is malformed.
        InvalidSourceError: If the top level is not a mapping.
    """
    data = _yaml.load(stream, Loader=RibbonLoader)
    if data is None:
        return _core.Ribbon()
    if not isinstance(data, _core.Ribbon):
        raise errors.InvalidSourceError(data)
    return data


def dump(value: _typing.Any, stream: _typing.Any = None, **options: _typing.Any) -> _typing.Any:
    """
    Dump a ribbon (or any plain value) as YAML.

    Options are passed to yaml.dump. Block style, insertion order and
    unicode output are the defaults.

    Returns:
        The YAML text when stream is None, otherwise None.
    """
    options.setdefault("default_flow_style", False)
    options.setdefault("sort_keys", False)
    options.setdefault("allow_unicode", True)
    return _yaml.dump(value, stream, Dumper=RibbonDumper, **options)


def from_yaml(text: str) -> _core.Ribbon:
    """Build a Ribbon from YAML text."""
    return load(text)


def to_yaml(value: _typing.Any, **options: _typing.Any) -> str:
    """Serialize a ribbon as YAML text."""
    return _typing.cast(str, dump(value, None, **options))
