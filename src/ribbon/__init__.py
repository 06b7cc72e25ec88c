"""
Ribbon - nested, auto-vivifying key/value containers with deep merge.

Reading a missing key creates an empty nested container, so deep structures
can be built in one expression. Two trees can be combined key by key with a
recursive deep merge.

Example:
    >>> import ribbon
    >>> r = ribbon.Ribbon()
    >>> r.database.primary.host = "db1"
    >>> defaults = ribbon.from_plain({"database": {"primary": {"port": 5432}}})
    >>> ribbon.deep_merge(defaults, r).to_dict()
    {'database': {'primary': {'port': 5432, 'host': 'db1'}}}
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("ribbon")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from ribbon._core import Ribbon  # noqa: E402
from ribbon._merge import (  # noqa: E402
    RESOLVERS,
    combine,
    deep_merge,
    deep_merge_in_place,
    get_resolver,
    keep_new,
    keep_old,
)
from ribbon._transform import (  # noqa: E402
    copy_tree,
    from_plain,
    is_container,
    to_plain,
    unwrap_all,
    wrap_all,
)
from ribbon._wrapper import Wrapper  # noqa: E402
from ribbon._yaml import (  # noqa: E402
    RibbonDumper,
    RibbonLoader,
    dump,
    from_yaml,
    load,
    to_yaml,
)
from ribbon.errors import (  # noqa: E402
    InvalidSourceError,
    NotAContainerError,
    RibbonError,
)

__all__ = [
    "__version__",
    "__version_info__",
    "InvalidSourceError",
    "NotAContainerError",
    "RESOLVERS",
    "Ribbon",
    "RibbonDumper",
    "RibbonError",
    "RibbonLoader",
    "Wrapper",
    "combine",
    "copy_tree",
    "deep_merge",
    "deep_merge_in_place",
    "dump",
    "from_plain",
    "from_yaml",
    "get_resolver",
    "is_container",
    "keep_new",
    "keep_old",
    "load",
    "to_plain",
    "to_yaml",
    "unwrap_all",
    "wrap_all",
]
