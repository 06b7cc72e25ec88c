"""
Structural transforms over ribbon trees.

- wrap_all / unwrap_all: switch every nested container between its bare
  Ribbon form and its Wrapper form. Both mutate in place and are idempotent.
- to_plain: pure conversion to dicts, lists and leaves; the serialization
  boundary.
- from_plain: build a Ribbon from a plain mapping.
- copy_tree: fresh container nodes with the same shape and wrapping.

Example:
    >>> r = from_plain({"a": {"b": 1}})
    >>> w = wrap_all(r)
    >>> type(w.ribbon.peek("a")).__name__
    'Wrapper'
    >>> unwrap_all(w) is r
    True
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import ribbon._core as _core
import ribbon._wrapper as _wrapper
import ribbon.errors as errors


def is_container(value: _typing.Any) -> bool:
    """True for Ribbon and Wrapper values, False for leaves."""
    return isinstance(value, (_core.Ribbon, _wrapper.Wrapper))


def ribbon_of(value: _typing.Any) -> _core.Ribbon | None:
    """Return the Ribbon behind a container value, or None for leaves."""
    if isinstance(value, _wrapper.Wrapper):
        return value.ribbon
    if isinstance(value, _core.Ribbon):
        return value
    return None


def require_ribbon(value: _typing.Any) -> _core.Ribbon:
    """
    Return the Ribbon behind value.

    Raises:
        NotAContainerError: If value is not a Ribbon or Wrapper.
    """
    node = ribbon_of(value)
    if node is None:
        raise errors.NotAContainerError(None, value)
    return node


def from_plain(source: _typing.Any) -> _core.Ribbon:
    """
    Build a new Ribbon from a plain mapping.

    Nested mappings become nested Ribbons. This is the boundary function
    for data coming from JSON, YAML or any other plain structure. A Ribbon
    or Wrapper source yields an independent copy of its tree.

    Raises:
        InvalidSourceError: If source is not a Mapping and has no to_dict().
    """
    if source is None:
        raise errors.InvalidSourceError(source)
    node = ribbon_of(source)
    if node is not None:
        return _typing.cast(_core.Ribbon, copy_tree(node))
    return _core.Ribbon(source)


def to_plain(value: _typing.Any) -> _typing.Any:
    """
    Convert a ribbon tree into dicts, lists and leaves.

    Ribbons, Wrappers and Mappings become new dicts; lists and tuples become
    new lists. Other values are returned as they are. The input is never
    modified.

    Raises:
        ValueError: If the tree contains itself.
    """
    return _to_plain(value, set())


def _to_plain(value: _typing.Any, active: set[int]) -> _typing.Any:
    node = ribbon_of(value)
    if node is not None:
        items: _abc.Iterable[tuple[_typing.Any, _typing.Any]] = node.items()
        marker = id(node)
    elif isinstance(value, _abc.Mapping):
        items = value.items()
        marker = id(value)
    elif isinstance(value, (list, tuple)):
        marker = id(value)
        _enter(active, marker)
        try:
            return [_to_plain(item, active) for item in value]
        finally:
            active.discard(marker)
    else:
        return value

    _enter(active, marker)
    try:
        return {key: _to_plain(child, active) for key, child in items}
    finally:
        active.discard(marker)


def _enter(active: set[int], marker: int) -> None:
    """Record a node on the current descent path, rejecting cycles."""
    if marker in active:
        raise ValueError("circular reference detected")
    active.add(marker)


def copy_tree(value: _typing.Any) -> _typing.Any:
    """
    Copy every container node of a tree; leaves are shared.

    Wrappers stay Wrappers and bare Ribbons stay bare. Leaves (including
    lists and plain dicts) are returned as they are.

    Raises:
        ValueError: If the tree contains itself.
    """
    return _copy_tree(value, set())


def _copy_tree(value: _typing.Any, active: set[int]) -> _typing.Any:
    node = ribbon_of(value)
    if node is None:
        return value

    _enter(active, id(node))
    try:
        fresh = _core.Ribbon()
        for key, child in node.items():
            fresh.put(key, _copy_tree(child, active))
    finally:
        active.discard(id(node))

    if isinstance(value, _wrapper.Wrapper):
        return _wrapper.Wrapper(fresh)
    return fresh


def wrap_all(value: _typing.Any) -> _wrapper.Wrapper:
    """
    Wrap every container inside value, depth first.

    Bare Ribbon values are replaced by Wrappers; existing Wrappers are kept
    and their contents wrapped. Leaves are untouched.

    Returns:
        value itself when it is a Wrapper, otherwise a new Wrapper around it.

    Raises:
        NotAContainerError: If value is not a Ribbon or Wrapper.
    """
    root = value if isinstance(value, _wrapper.Wrapper) else _wrapper.Wrapper(require_ribbon(value))
    _wrap_entries(root.ribbon, set())
    return root


def _wrap_entries(node: _core.Ribbon, seen: set[int]) -> None:
    if id(node) in seen:
        return  # Shared or circular node, already handled
    seen.add(id(node))

    for key, child in list(node.items()):
        if isinstance(child, _wrapper.Wrapper):
            _wrap_entries(child.ribbon, seen)
        elif isinstance(child, _core.Ribbon):
            _wrap_entries(child, seen)
            node.put(key, _wrapper.Wrapper(child))


def unwrap_all(value: _typing.Any) -> _core.Ribbon:
    """
    Replace every Wrapper inside value by its Ribbon, depth first.

    Returns:
        The root Ribbon (the wrapped one when value is a Wrapper).

    Raises:
        NotAContainerError: If value is not a Ribbon or Wrapper.
    """
    root = require_ribbon(value)
    _unwrap_entries(root, set())
    return root


def _unwrap_entries(node: _core.Ribbon, seen: set[int]) -> None:
    if id(node) in seen:
        return
    seen.add(id(node))

    for key, child in list(node.items()):
        if isinstance(child, _wrapper.Wrapper):
            inner = child.ribbon
            _unwrap_entries(inner, seen)
            node.put(key, inner)
        elif isinstance(child, _core.Ribbon):
            _unwrap_entries(child, seen)
