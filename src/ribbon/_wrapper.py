"""
Wrapper: map-like presentation of a Ribbon.

Ribbons reserve attribute names for keys, so most general-purpose methods
live here instead. A Wrapper owns exactly one Ribbon and resolves attribute
lookups in a fixed order:

1. Accessor operations defined on Wrapper (get, put, peek, ...)
2. Methods of the ribbon's underlying dict (keys, items, update, pop, ...)
3. The ribbon itself (methods, then auto-vivifying key access)

Example:
    >>> wrapper = Wrapper()
    >>> wrapper.a.b.c
    Ribbon({})
    >>> list(wrapper.keys())
    ['a']

Nested ribbons returned by attribute access are not wrapped. Use
wrap_all() / unwrap_all() to convert the whole tree.
"""

from __future__ import annotations

import typing as _typing

import ribbon._core as _core
import ribbon._types as _types


def _extract_ribbon(source: _typing.Any) -> _core.Ribbon:
    """Return the ribbon to wrap: shared for Ribbon/Wrapper, copied in otherwise."""
    if isinstance(source, Wrapper):
        return source.ribbon
    if isinstance(source, _core.Ribbon):
        return source
    return _core.Ribbon(source)


class Wrapper:
    """
    Presentation object owning a single Ribbon.

    Args:
        ribbon: The ribbon to wrap. A Wrapper contributes its ribbon; any
            other ingestible source is copied into a new Ribbon. When
            omitted, an empty Ribbon is created on first use.

    Raises:
        InvalidSourceError: If ribbon cannot be ingested.
    """

    __slots__ = ("_ribbon",)

    def __init__(self, ribbon: _typing.Any = None, /) -> None:
        object.__setattr__(self, "_ribbon", None)
        if ribbon is not None:
            self.ribbon = ribbon

    @property
    def ribbon(self) -> _core.Ribbon:
        """The wrapped Ribbon, created lazily."""
        if self._ribbon is None:
            object.__setattr__(self, "_ribbon", _core.Ribbon())
        return _typing.cast(_core.Ribbon, self._ribbon)

    @ribbon.setter
    def ribbon(self, source: _typing.Any) -> None:
        object.__setattr__(self, "_ribbon", _extract_ribbon(source))

    # =========================================================================
    # Accessor operations (checked first)
    # =========================================================================

    def get(self, key: _types.Key) -> _typing.Any:
        """Default-read on the wrapped ribbon (auto-vivifies)."""
        return self.ribbon.get(key)

    def put(self, key: _types.Key, value: _typing.Any) -> _typing.Any:
        return self.ribbon.put(key, value)

    def set_and_return_self(self, key: _types.Key, value: _typing.Any) -> Wrapper:
        """Store value under key and return this wrapper."""
        self.ribbon.put(key, value)
        return self

    def peek(self, key: _types.Key, default: _typing.Any = None) -> _typing.Any:
        return self.ribbon.peek(key, default)

    def get_at_path(self, path: _types.Path) -> _typing.Any:
        return self.ribbon.get_at_path(path)

    def set_at_path(self, path: _types.Path, value: _typing.Any) -> _typing.Any:
        return self.ribbon.set_at_path(path, value)

    def peek_at_path(self, path: _types.Path, default: _typing.Any = None) -> _typing.Any:
        return self.ribbon.peek_at_path(path, default)

    def __getitem__(self, key: _types.Key) -> _typing.Any:
        return self.ribbon.get(key)

    def __setitem__(self, key: _types.Key, value: _typing.Any) -> None:
        self.ribbon.put(key, value)

    def __delitem__(self, key: _types.Key) -> None:
        del self.ribbon[key]

    def __contains__(self, key: object) -> bool:
        return key in self.ribbon

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self.ribbon)

    def __len__(self) -> int:
        return len(self.ribbon)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Wrapper):
            return self.ribbon == other.ribbon
        return self.ribbon.__eq__(other)

    def __hash__(self) -> int:
        """Not hashable."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.ribbon!r})"

    # =========================================================================
    # Forwarding
    # =========================================================================

    def __getattr__(self, name: str) -> _typing.Any:
        """Forward to the underlying dict if it has name, else to the ribbon."""
        if name.startswith("_"):
            raise AttributeError(name)
        entries = self.ribbon._entries
        if hasattr(entries, name):
            return getattr(entries, name)
        return getattr(self.ribbon, name)

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        if name == "ribbon":
            object.__setattr__(self, name, value)
        elif name.startswith("_"):
            raise AttributeError(f"cannot set private attribute {name!r} on {type(self).__name__}")
        else:
            self.ribbon.put(name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self.ribbon, name)

    def __getstate__(self) -> dict[str, _core.Ribbon]:
        return {"ribbon": self.ribbon}

    def __setstate__(self, state: dict[str, _core.Ribbon]) -> None:
        object.__setattr__(self, "_ribbon", state["ribbon"])

    # =========================================================================
    # Transforms, merging and serialization
    # =========================================================================

    def wrap_all(self) -> Wrapper:
        """Wrap every ribbon inside this wrapper's ribbon. Returns self."""
        import ribbon._transform as _transform

        return _transform.wrap_all(self)

    def unwrap_all(self) -> _core.Ribbon:
        """Unwrap every wrapper inside. Returns the wrapped ribbon."""
        import ribbon._transform as _transform

        return _transform.unwrap_all(self)

    def to_dict(self) -> dict[_typing.Any, _typing.Any]:
        """Convert the wrapped ribbon and everything inside into plain dicts."""
        return self.ribbon.to_dict()

    def to_yaml(self, **options: _typing.Any) -> str:
        import ribbon._yaml as _yaml

        return _yaml.to_yaml(self, **options)

    @classmethod
    def from_yaml(cls, text: str) -> Wrapper:
        """Build a wrapped ribbon from a YAML document."""
        import ribbon._yaml as _yaml

        return cls(_yaml.from_yaml(text))

    def deep_merge(
        self,
        other: _typing.Any,
        resolver: _types.Resolver | None = None,
    ) -> Wrapper:
        """Merge other into a new wrapped ribbon."""
        import ribbon._merge as _merge

        return Wrapper(_merge.deep_merge(self, other, resolver))

    def deep_merge_in_place(
        self,
        other: _typing.Any,
        resolver: _types.Resolver | None = None,
    ) -> Wrapper:
        """Merge other into the wrapped ribbon and return this wrapper."""
        import ribbon._merge as _merge

        _merge.deep_merge_in_place(self, other, resolver)
        return self

