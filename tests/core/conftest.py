"""
Shared fixtures for ribbon core tests.
"""

import pytest as _pytest

import ribbon


@_pytest.fixture
def base_ribbon() -> ribbon.Ribbon:
    """Two-level ribbon used as the base side of merges."""
    return ribbon.from_plain({"a": 1, "b": {"c": 2}})


@_pytest.fixture
def incoming_ribbon() -> ribbon.Ribbon:
    """Ribbon overlapping base_ribbon at b.c, adding b.d and e."""
    return ribbon.from_plain({"b": {"c": 3, "d": 4}, "e": 5})


@_pytest.fixture
def deep_ribbon() -> ribbon.Ribbon:
    """Deeply nested ribbon with mixed leaf types."""
    return ribbon.from_plain(
        {
            "server": {
                "host": "localhost",
                "ports": [80, 443],
                "tls": {"enabled": True, "cert": {"path": "/etc/cert.pem"}},
            },
            "debug": False,
        }
    )
