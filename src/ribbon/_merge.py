"""
Deep merge of ribbon trees.

For every key of the incoming tree, in insertion order:

1. Key missing from base: the incoming value is added (containers are
   copied, so the result never shares nodes with incoming).
2. Both values are containers (Ribbon or Wrapper): merged recursively.
3. Otherwise (leaf/leaf or leaf/container): resolver(key, old, new) when a
   resolver is given, else the incoming value.

Keys only present in base are kept. Existing keys keep their position; new
keys are appended in incoming order. Type mismatches never raise.

Example:
    >>> base = from_plain({"a": 1, "b": {"c": 2}})
    >>> incoming = from_plain({"b": {"c": 3, "d": 4}, "e": 5})
    >>> deep_merge(base, incoming).to_dict()
    {'a': 1, 'b': {'c': 3, 'd': 4}, 'e': 5}

Failure semantics:
    deep_merge never modifies its arguments. deep_merge_in_place is
    best-effort: if the resolver raises, base keeps the changes made for the
    keys processed before the failure.
"""

from __future__ import annotations

import logging as _logging
import numbers as _numbers
import typing as _typing

import ribbon._core as _core
import ribbon._transform as _transform
import ribbon._types as _types

_logger = _logging.getLogger(__name__)


def deep_merge(
    base: _typing.Any,
    incoming: _typing.Any,
    resolver: _types.Resolver | None = None,
) -> _core.Ribbon:
    """
    Merge incoming into a copy of base.

    Every container node of the result is newly allocated, including
    subtrees that only exist in base. Leaves are shared.

    Args:
        base: Ribbon or Wrapper with the existing values.
        incoming: Ribbon or Wrapper with the new values.
        resolver: Called as resolver(key, old, new) for conflicting leaves.
            None means the incoming value wins.

    Returns:
        A new Ribbon with the merged contents.

    Raises:
        NotAContainerError: If base or incoming is not a container.
    """
    base_node = _transform.require_ribbon(base)
    incoming_node = _transform.require_ribbon(incoming)

    result = _typing.cast(_core.Ribbon, _transform.copy_tree(base_node))
    _merge_into(result, incoming_node, resolver)
    return result


def deep_merge_in_place(
    base: _typing.Any,
    incoming: _typing.Any,
    resolver: _types.Resolver | None = None,
) -> _typing.Any:
    """
    Merge incoming into base.

    Args:
        base: Ribbon or Wrapper to modify.
        incoming: Ribbon or Wrapper with the new values. Not modified.
        resolver: Called as resolver(key, old, new) for conflicting leaves.

    Returns:
        base.

    Raises:
        NotAContainerError: If base or incoming is not a container. Raised
            before anything is modified.
    """
    base_node = _transform.require_ribbon(base)
    incoming_node = _transform.require_ribbon(incoming)

    _merge_into(base_node, incoming_node, resolver)
    return base


def _merge_into(
    node: _core.Ribbon,
    incoming: _core.Ribbon,
    resolver: _types.Resolver | None,
) -> None:
    """Recursively merge incoming into node, mutating node only."""
    for key, new_value in list(incoming.items()):
        if key not in node:
            node.put(key, _transform.copy_tree(new_value))
            continue

        old_value = node.peek(key)
        old_node = _transform.ribbon_of(old_value)
        new_node = _transform.ribbon_of(new_value)

        if old_node is not None and new_node is not None:
            _merge_into(old_node, new_node, resolver)
            continue

        if resolver is None:
            if old_node is not None or new_node is not None:
                _logger.debug(
                    "Type mismatch at key %r: %s replaced by %s",
                    key,
                    type(old_value).__name__,
                    type(new_value).__name__,
                )
            node.put(key, _transform.copy_tree(new_value))
        else:
            _logger.debug("Resolving conflict at key %r", key)
            node.put(key, _transform.copy_tree(resolver(key, old_value, new_value)))


# =============================================================================
# Named resolvers
# =============================================================================


def keep_new(key: _types.Key, old: _typing.Any, new: _typing.Any) -> _typing.Any:
    """Incoming value wins (same as passing no resolver)."""
    return new


def keep_old(key: _types.Key, old: _typing.Any, new: _typing.Any) -> _typing.Any:
    """Existing value wins."""
    return old


def _is_number(value: _typing.Any) -> bool:
    return isinstance(value, _numbers.Number) and not isinstance(value, bool)


def combine(key: _types.Key, old: _typing.Any, new: _typing.Any) -> _typing.Any:
    """
    Add values of the same family, else keep the incoming value.

    Numbers are summed, strings concatenated, lists and tuples joined into
    a list.
    """
    if _is_number(old) and _is_number(new):
        return old + new
    if isinstance(old, str) and isinstance(new, str):
        return old + new
    if isinstance(old, (list, tuple)) and isinstance(new, (list, tuple)):
        return [*old, *new]
    return new


RESOLVERS: dict[str, _types.Resolver] = {
    "new": keep_new,
    "old": keep_old,
    "combine": combine,
}
"""Resolvers selectable by name from configuration and the CLI."""


def get_resolver(name: str) -> _types.Resolver:
    """
    Look up a named resolver.

    Raises:
        ValueError: If name is not registered.
    """
    try:
        return RESOLVERS[name]
    except KeyError:
        choices = ", ".join(sorted(RESOLVERS))
        raise ValueError(f"unknown resolver {name!r} (choose from: {choices})") from None
