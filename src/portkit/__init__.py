"""portkit - find free local TCP ports and open them in a browser."""

from __future__ import annotations

from portkit.browser import Platform, detect_platform, normalize_url, open_url
from portkit.config import PortkitConfig, ScanConfig, load_config
from portkit.constants import (
    FIRST_PORT,
    FIRST_SERVICE_PORT,
    LAST_PORT,
    LAST_SERVICE_PORT,
    NOT_FOUND,
    Direction,
    is_valid_port,
)
from portkit.errors import (
    InvalidPortRangeError,
    PortkitError,
    PortOutOfRangeError,
    InvalidHostError,
    UnsupportedPlatformError,
)
from portkit.probe import is_port_available
from portkit.scanner import (
    PortRange,
    PortScanner,
    find_available_port,
    find_last_local_open_port,
    find_next_local_open_port,
    try_find_available_port,
)
from portkit.snapshot import get_used_ports

__all__ = [
    # Constants
    "FIRST_PORT",
    "LAST_PORT",
    "FIRST_SERVICE_PORT",
    "LAST_SERVICE_PORT",
    "NOT_FOUND",
    "Direction",
    "is_valid_port",
    # Config
    "ScanConfig",
    "PortkitConfig",
    "load_config",
    # Errors
    "PortkitError",
    "PortOutOfRangeError",
    "InvalidPortRangeError",
    "InvalidHostError",
    "UnsupportedPlatformError",
    # Scanning
    "PortRange",
    "PortScanner",
    "find_available_port",
    "try_find_available_port",
    "find_next_local_open_port",
    "find_last_local_open_port",
    "get_used_ports",
    "is_port_available",
    # Browser
    "Platform",
    "detect_platform",
    "normalize_url",
    "open_url",
]
