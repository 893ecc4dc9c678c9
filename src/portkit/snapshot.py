"""Snapshot of ports currently bound on the local host.

The snapshot is only used to skip ports that are known to be busy before
probing them. It can be stale the moment it is taken and may be incomplete
when the OS refuses to list other users' sockets, so callers must still
verify candidates with :func:`portkit.probe.is_port_available`.
"""

from __future__ import annotations

import logging

import psutil

__all__ = ["get_used_ports"]

logger = logging.getLogger(__name__)


def get_used_ports() -> set[int]:
    """Return the local ports of all TCP listeners, TCP connections and UDP sockets.

    Returns:
        Set of port numbers. Empty if the connection table cannot be read.
    """
    try:
        connections = psutil.net_connections(kind="inet")
    except (psutil.AccessDenied, OSError) as e:
        # macOS needs root to list connections; fall back to probing only
        logger.warning(f"Could not read connection table, probing every port: {e}")
        return set()

    ports: set[int] = set()
    for conn in connections:
        if conn.laddr:
            ports.add(conn.laddr.port)

    logger.debug(f"Snapshot found {len(ports)} used port(s)")
    return ports
