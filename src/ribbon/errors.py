"""
Exceptions raised by ribbon.

All library errors derive from RibbonError. The concrete errors also derive
from TypeError, since both describe a value of the wrong kind being handed
to a container operation.
"""

from __future__ import annotations

import typing as _typing


class RibbonError(Exception):
    """Base class for ribbon errors."""

    pass


class NotAContainerError(RibbonError, TypeError):
    """Raised when descending through a leaf as if it were a container.

    Also raised when a merge or transform is handed something that is
    neither a Ribbon nor a Wrapper; ``key`` is None in that case.
    """

    def __init__(self, key: _typing.Any, value: _typing.Any) -> None:
        self.key = key
        self.value = value
        described = f"{type(value).__name__} {value!r}"
        if key is None:
            super().__init__(f"not a container: {described}")
        else:
            super().__init__(f"value at key {key!r} is not a container: {described}")


class InvalidSourceError(RibbonError, TypeError):
    """Raised when a ribbon cannot be built from the given source.

    A source must be a Ribbon, a Wrapper, a Mapping, or an object with a
    callable ``to_dict()`` returning a Mapping.
    """

    def __init__(self, source: _typing.Any) -> None:
        self.source = source
        super().__init__(
            f"cannot build a ribbon from {type(source).__name__}: "
            "expected a mapping or an object with to_dict()"
        )
