"""
Type aliases for ribbon.

- Key: any hashable value usable as a ribbon key
- Path: tuple of keys addressing a nested value
- Resolver: conflict callback used by deep merges
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

Key: _typing.TypeAlias = _typing.Hashable

# Example: ("server", "tls", "cert") addresses server.tls.cert
Path: _typing.TypeAlias = tuple[Key, ...]

# Called as resolver(key, old_value, new_value); returns the value to keep
Resolver: _typing.TypeAlias = _abc.Callable[[Key, _typing.Any, _typing.Any], _typing.Any]
