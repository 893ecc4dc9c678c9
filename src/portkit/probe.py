"""Bind probe used as the authoritative availability check."""

from __future__ import annotations

import errno
import socket

from portkit.constants import is_valid_port
from portkit.errors import InvalidHostError, PortOutOfRangeError

__all__ = ["LOOPBACK", "is_port_available"]

LOOPBACK = "127.0.0.1"


def _errnos(*names: str) -> frozenset[int]:
    return frozenset(getattr(errno, name) for name in names if hasattr(errno, name))


# Another socket holds the port
_BUSY = _errnos("EADDRINUSE", "EACCES", "WSAEADDRINUSE", "WSAEACCES")
# The address itself is unusable here, whatever the port
_BAD_HOST = _errnos("EADDRNOTAVAIL", "EAFNOSUPPORT", "WSAEADDRNOTAVAIL", "WSAEAFNOSUPPORT")


def is_port_available(port: int, host: str = LOOPBACK) -> bool:
    """Check whether a TCP listener can be bound to a port right now.

    The socket is bound with exclusive address use, put into listening state
    and closed again before returning.

    Args:
        port: The port to check
        host: The address to bind (default: 127.0.0.1)

    Returns:
        True if the bind succeeded, False if the port is taken

    Raises:
        PortOutOfRangeError: If port is outside 1-65535
        InvalidHostError: If host does not resolve or is not a local address
        OSError: For any other socket failure
    """
    if not is_valid_port(port):
        raise PortOutOfRangeError("port", port)

    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    try:
        with socket.socket(family, socket.SOCK_STREAM) as sock:
            # Don't use SO_REUSEADDR - we want to detect if the port is truly in use
            if hasattr(socket, "SO_EXCLUSIVEADDRUSE"):
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_EXCLUSIVEADDRUSE, 1)
            sock.bind((host, port))
            sock.listen(1)
            return True
    except socket.gaierror as e:
        raise InvalidHostError(host, str(e)) from e
    except OSError as e:
        if isinstance(e, PermissionError) or e.errno in _BUSY:
            return False
        if e.errno in _BAD_HOST:
            raise InvalidHostError(host, e.strerror or str(e)) from e
        raise
