"""Port number constants and validation."""

from __future__ import annotations

from enum import Enum
from typing import Any

__all__ = [
    "FIRST_PORT",
    "LAST_PORT",
    "FIRST_SERVICE_PORT",
    "LAST_SERVICE_PORT",
    "NOT_FOUND",
    "Direction",
    "is_valid_port",
]

FIRST_PORT = 1
LAST_PORT = 65535

# IANA registered service ports
FIRST_SERVICE_PORT = 1024
LAST_SERVICE_PORT = 49151

# Returned by the int-only lookups when nothing is free
NOT_FOUND = -1


class Direction(str, Enum):
    """Order in which a port range is walked."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


def is_valid_port(value: Any) -> bool:
    """Return True if value is an integer between 1 and 65535 inclusive."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return FIRST_PORT <= value <= LAST_PORT
