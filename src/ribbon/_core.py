"""
Ribbon: a nested, auto-vivifying key/value container.

Reading a missing key creates an empty Ribbon, stores it under that key and
returns it, so deep paths can be built in a single expression:

    >>> r = Ribbon()
    >>> r.server.tls.port = 8443
    >>> r.to_dict()
    {'server': {'tls': {'port': 8443}}}

Access surface:
- get(key) / ribbon[key]: default-read (auto-vivifies on a miss)
- put(key, value) / ribbon[key] = value: set, returns value
- set_and_return_self(key, value): set, returns the ribbon for chaining
- peek(key, default): read without creating anything
- get_at_path / set_at_path / peek_at_path: checked descent through nested
  ribbons; a leaf before the last key raises NotAContainerError

Chained access (``r["a"]["b"]``, ``r.a.b``) is not checked: stepping through
a leaf raises whatever the leaf raises, usually TypeError or AttributeError.
Use the path methods when NotAContainerError is wanted.

Any hashable key works with the methods and with [] access. Attribute access
(``r.name``) is sugar for identifier-shaped keys that are not already
attributes of Ribbon; use ``r["keys"]`` for keys that collide with a method.

Iteration, len(), ``in``, keys(), values(), items() and equality never
auto-vivify.

Thread safety: NOT thread-safe. Concurrent mutation of the same ribbon must
be excluded by the caller.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import ribbon._types as _types
import ribbon.errors as errors

if _typing.TYPE_CHECKING:
    import ribbon._wrapper as _wrapper


def _as_ribbon(value: _typing.Any) -> Ribbon | None:
    """Return the Ribbon behind value (itself or a Wrapper's), else None."""
    import ribbon._wrapper as _wrapper

    if isinstance(value, Ribbon):
        return value
    if isinstance(value, _wrapper.Wrapper):
        return value.ribbon
    return None


def _ingest(source: _typing.Any) -> _abc.Mapping[_typing.Any, _typing.Any]:
    """
    Return the plain mapping a ribbon should be built from.

    Raises:
        InvalidSourceError: If source is neither a Mapping nor has a
            callable to_dict() that returns one.
    """
    if isinstance(source, _abc.Mapping):
        return source
    to_dict = getattr(source, "to_dict", None)
    if callable(to_dict):
        converted = to_dict()
        if isinstance(converted, _abc.Mapping):
            return converted
    raise errors.InvalidSourceError(source)


def _copy_in(
    entries: dict[_typing.Any, _typing.Any],
    source: _abc.Mapping[_typing.Any, _typing.Any],
) -> None:
    """Copy source into entries, turning nested mappings into fresh ribbons."""
    for key, value in source.items():
        if isinstance(value, _abc.Mapping):
            value = Ribbon(value)
        entries[key] = value


class Ribbon:
    """
    Ordered mapping with auto-vivification on read.

    Args:
        source: Initial contents. A Ribbon (or Wrapper) is shared by
            reference: both objects see the same entries. A Mapping, or an
            object with a to_dict() method, is copied in; nested mappings
            become new Ribbons.
        **kwargs: Extra entries, copied in after source.

    Raises:
        InvalidSourceError: If source cannot be ingested.
    """

    __slots__ = ("_entries",)

    def __init__(self, source: _typing.Any = None, /, **kwargs: _typing.Any) -> None:
        shared = _as_ribbon(source)
        if shared is not None:
            entries = shared._entries
        else:
            entries = {}
            if source is not None:
                _copy_in(entries, _ingest(source))
        object.__setattr__(self, "_entries", entries)
        if kwargs:
            _copy_in(self._entries, kwargs)

    # =========================================================================
    # Accessor
    # =========================================================================

    def get(self, key: _types.Key) -> _typing.Any:
        """
        Return the value for key, creating an empty Ribbon on a miss.

        The created Ribbon is stored, so a second read returns the same
        instance.
        """
        if key in self._entries:
            return self._entries[key]
        child = Ribbon()
        self._entries[key] = child
        return child

    def put(self, key: _types.Key, value: _typing.Any) -> _typing.Any:
        """Store value under key and return value."""
        self._entries[key] = value
        return value

    def set_and_return_self(self, key: _types.Key, value: _typing.Any) -> Ribbon:
        """Store value under key and return this ribbon.

        Example:
            >>> Ribbon().set_and_return_self("x", 1).set_and_return_self("y", 2)
            Ribbon({'x': 1, 'y': 2})
        """
        self._entries[key] = value
        return self

    def peek(self, key: _types.Key, default: _typing.Any = None) -> _typing.Any:
        """Return the value for key, or default. Never creates an entry."""
        return self._entries.get(key, default)

    def get_at_path(self, path: _types.Path) -> _typing.Any:
        """
        Default-read through every key of path.

        Missing keys along the way (including the last one) are created as
        empty ribbons. An empty path returns this ribbon.

        Raises:
            NotAContainerError: If a key before the last holds a leaf.
        """
        value: _typing.Any = self
        parent_key: _typing.Any = None
        for key in path:
            node = _as_ribbon(value)
            if node is None:
                raise errors.NotAContainerError(parent_key, value)
            value = node.get(key)
            parent_key = key
        return value

    def set_at_path(self, path: _types.Path, value: _typing.Any) -> _typing.Any:
        """
        Set value at path, creating intermediate ribbons as needed.

        Returns:
            The value that was set.

        Raises:
            ValueError: If path is empty.
            NotAContainerError: If an intermediate key holds a leaf. The leaf
                is left untouched.
        """
        if not path:
            raise ValueError("path must contain at least one key")
        parent = self.get_at_path(path[:-1])
        node = _as_ribbon(parent)
        if node is None:
            raise errors.NotAContainerError(path[-2], parent)
        return node.put(path[-1], value)

    def peek_at_path(self, path: _types.Path, default: _typing.Any = None) -> _typing.Any:
        """
        Read the value at path without creating anything.

        Returns default as soon as a key is missing. An empty path returns
        this ribbon.

        Raises:
            NotAContainerError: If an intermediate key holds a leaf.
        """
        value: _typing.Any = self
        parent_key: _typing.Any = None
        for key in path:
            node = _as_ribbon(value)
            if node is None:
                raise errors.NotAContainerError(parent_key, value)
            if key not in node._entries:
                return default
            value = node._entries[key]
            parent_key = key
        return value

    # =========================================================================
    # Map surface (never auto-vivifies)
    # =========================================================================

    def keys(self) -> _abc.KeysView[_typing.Any]:
        return self._entries.keys()

    def values(self) -> _abc.ValuesView[_typing.Any]:
        return self._entries.values()

    def items(self) -> _abc.ItemsView[_typing.Any, _typing.Any]:
        return self._entries.items()

    def __getitem__(self, key: _types.Key) -> _typing.Any:
        """Default-read; see get()."""
        return self.get(key)

    def __setitem__(self, key: _types.Key, value: _typing.Any) -> None:
        self._entries[key] = value

    def __delitem__(self, key: _types.Key) -> None:
        del self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Ribbon, Wrapper or Mapping with the same content."""
        node = _as_ribbon(other)
        if node is not None:
            return self._entries == node._entries
        if isinstance(other, _abc.Mapping):
            return self._entries == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        """Not hashable."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._entries!r})"

    # =========================================================================
    # Identifier sugar
    # =========================================================================

    def __getattr__(self, name: str) -> _typing.Any:
        # Only reached when normal lookup fails, so methods always win.
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        if name.startswith("_"):
            raise AttributeError(f"cannot set private attribute {name!r} on {type(self).__name__}")
        self._entries[name] = value

    def __delattr__(self, name: str) -> None:
        if name.startswith("_") or name not in self._entries:
            raise AttributeError(name)
        del self._entries[name]

    def __getstate__(self) -> dict[str, _typing.Any]:
        # Wrapped so an empty ribbon still has truthy state for pickle.
        return {"entries": self._entries}

    def __setstate__(self, state: dict[str, _typing.Any]) -> None:
        object.__setattr__(self, "_entries", state["entries"])

    # =========================================================================
    # Transforms, merging and serialization
    # =========================================================================

    def copy(self) -> Ribbon:
        """Return an independent copy of the container tree (leaves shared)."""
        import ribbon._transform as _transform

        return _typing.cast(Ribbon, _transform.copy_tree(self))

    def wrap(self) -> _wrapper.Wrapper:
        """Return a Wrapper around this ribbon (no nested wrapping)."""
        import ribbon._wrapper as _wrapper

        return _wrapper.Wrapper(self)

    def to_dict(self) -> dict[_typing.Any, _typing.Any]:
        """Convert this ribbon and every ribbon inside into plain dicts."""
        import ribbon._transform as _transform

        return _typing.cast(dict[_typing.Any, _typing.Any], _transform.to_plain(self))

    def to_yaml(self, **options: _typing.Any) -> str:
        """Serialize this ribbon as YAML. Options go to yaml.dump."""
        import ribbon._yaml as _yaml

        return _yaml.to_yaml(self, **options)

    @classmethod
    def from_yaml(cls, text: str) -> Ribbon:
        """Build a ribbon from a YAML document."""
        import ribbon._yaml as _yaml

        return _yaml.from_yaml(text)

    def deep_merge(
        self,
        other: _typing.Any,
        resolver: _types.Resolver | None = None,
    ) -> Ribbon:
        """Merge other into a new ribbon. See ribbon.deep_merge."""
        import ribbon._merge as _merge

        return _merge.deep_merge(self, other, resolver)

    def deep_merge_in_place(
        self,
        other: _typing.Any,
        resolver: _types.Resolver | None = None,
    ) -> Ribbon:
        """Merge other into this ribbon and return it. See ribbon.deep_merge_in_place."""
        import ribbon._merge as _merge

        _merge.deep_merge_in_place(self, other, resolver)
        return self
