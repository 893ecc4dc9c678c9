"""Find an available TCP port on the local host.

A scan walks a closed port range in ascending or descending order. Ports
found in a snapshot of currently bound sockets are skipped without a
syscall; every other candidate is bind-probed on loopback and the first
one that binds is returned.

A returned port was free when it was probed. Nothing stops another process
from taking it before the caller binds it (time-of-check to time-of-use).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from portkit.constants import (
    FIRST_SERVICE_PORT,
    LAST_SERVICE_PORT,
    NOT_FOUND,
    Direction,
    is_valid_port,
)
from portkit.errors import InvalidPortRangeError, PortOutOfRangeError
from portkit.probe import LOOPBACK, is_port_available
from portkit.snapshot import get_used_ports

if TYPE_CHECKING:
    from portkit.config import ScanConfig

__all__ = [
    "PortRange",
    "PortScanner",
    "find_available_port",
    "try_find_available_port",
    "find_next_local_open_port",
    "find_last_local_open_port",
]

logger = logging.getLogger(__name__)

SnapshotFn = Callable[[], set[int]]
ProbeFn = Callable[[int, str], bool]


@dataclass(frozen=True)
class PortRange:
    """Closed interval of port numbers, validated on construction."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not is_valid_port(self.start):
            raise PortOutOfRangeError("start", self.start)
        if not is_valid_port(self.end):
            raise PortOutOfRangeError("end", self.end)
        if self.start > self.end:
            raise InvalidPortRangeError(self.start, self.end)

    def __contains__(self, port: object) -> bool:
        return isinstance(port, int) and self.start <= port <= self.end

    def __len__(self) -> int:
        return self.end - self.start + 1

    def candidates(self, direction: Direction = Direction.ASCENDING) -> Iterator[int]:
        """Yield every port in the range in the given order."""
        if Direction(direction) is Direction.DESCENDING:
            return iter(range(self.end, self.start - 1, -1))
        return iter(range(self.start, self.end + 1))


def _no_snapshot() -> set[int]:
    return set()


class PortScanner:
    """Scans port ranges for a port that can currently be bound.

    Args:
        host: Address the bind probe uses (default: 127.0.0.1)
        snapshot: Returns the set of ports known to be in use. Called once per scan.
        probe: Returns True if ``(port, host)`` can be bound right now.
        use_snapshot: If False, every candidate is probed.
    """

    def __init__(
        self,
        host: str = LOOPBACK,
        snapshot: SnapshotFn | None = None,
        probe: ProbeFn | None = None,
        use_snapshot: bool = True,
    ) -> None:
        self.host = host
        if use_snapshot:
            self._snapshot = snapshot or get_used_ports
        else:
            self._snapshot = _no_snapshot
        self._probe = probe or is_port_available

    @classmethod
    def from_config(cls, config: ScanConfig) -> PortScanner:
        """Create a scanner from a :class:`~portkit.config.ScanConfig`."""
        return cls(host=config.host, use_snapshot=config.use_snapshot)

    def find_available_port(
        self,
        start: int = FIRST_SERVICE_PORT,
        end: int = LAST_SERVICE_PORT,
        direction: Direction | str = Direction.ASCENDING,
    ) -> int | None:
        """Find the first port in ``[start, end]`` that passes the bind probe.

        Args:
            start: Lowest port of the range (inclusive)
            end: Highest port of the range (inclusive)
            direction: Scan order. The range bounds do not change with it.

        Returns:
            The available port, or None if every candidate is busy

        Raises:
            PortOutOfRangeError: If start or end is outside 1-65535
            InvalidPortRangeError: If start is greater than end
        """
        port_range = PortRange(start, end)
        direction = Direction(direction)

        used_ports = self._snapshot()
        probed = 0
        for port in port_range.candidates(direction):
            if port in used_ports:
                continue
            probed += 1
            if self._probe(port, self.host):
                logger.debug(
                    f"Found available port {port} in {start}-{end} ({direction.value}, {probed} probe(s))"
                )
                return port

        logger.debug(
            f"No available port in {start}-{end} ({direction.value}, "
            f"{len(port_range) - probed} skipped by snapshot, {probed} probe(s))"
        )
        return None

    def try_find_available_port(
        self,
        start: int = FIRST_SERVICE_PORT,
        end: int = LAST_SERVICE_PORT,
        direction: Direction | str = Direction.ASCENDING,
    ) -> tuple[bool, int]:
        """Like :meth:`find_available_port` but returns ``(found, port)``.

        ``port`` is -1 when nothing was found.
        """
        port = self.find_available_port(start, end, direction)
        if port is None:
            return False, NOT_FOUND
        return True, port

    def find_next_local_open_port(self, start: int | None = None) -> int:
        """Scan upwards from ``start`` (default 1024) to 49151. Returns -1 if none is free."""
        if start is None:
            start = FIRST_SERVICE_PORT
        port = self.find_available_port(start, LAST_SERVICE_PORT, Direction.ASCENDING)
        return NOT_FOUND if port is None else port

    def find_last_local_open_port(self, end: int | None = None) -> int:
        """Scan downwards from ``end`` (default 49151) to 1024. Returns -1 if none is free."""
        if end is None:
            end = LAST_SERVICE_PORT
        port = self.find_available_port(FIRST_SERVICE_PORT, end, Direction.DESCENDING)
        return NOT_FOUND if port is None else port


def _default_scanner() -> PortScanner:
    # Built per call so monkeypatched collaborators are picked up
    return PortScanner()


def find_available_port(
    start: int = FIRST_SERVICE_PORT,
    end: int = LAST_SERVICE_PORT,
    direction: Direction | str = Direction.ASCENDING,
    reverse: bool = False,
) -> int | None:
    """Find an available port in ``[start, end]``; see :meth:`PortScanner.find_available_port`.

    ``reverse=True`` is shorthand for ``direction=Direction.DESCENDING``.
    """
    if reverse:
        direction = Direction.DESCENDING
    return _default_scanner().find_available_port(start, end, direction)


def try_find_available_port(
    start: int = FIRST_SERVICE_PORT,
    end: int = LAST_SERVICE_PORT,
    direction: Direction | str = Direction.ASCENDING,
    reverse: bool = False,
) -> tuple[bool, int]:
    """Return ``(True, port)`` for an available port, or ``(False, -1)``."""
    if reverse:
        direction = Direction.DESCENDING
    return _default_scanner().try_find_available_port(start, end, direction)


def find_next_local_open_port(start: int | None = None) -> int:
    return _default_scanner().find_next_local_open_port(start)


def find_last_local_open_port(end: int | None = None) -> int:
    return _default_scanner().find_last_local_open_port(end)
