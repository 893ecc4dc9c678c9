"""Tests for the bind probe and the used-port snapshot."""

from __future__ import annotations

import errno
import socket
import sys
from collections import namedtuple

import psutil
import pytest

from portkit import probe as probe_module
from portkit import snapshot as snapshot_module
from portkit.errors import InvalidHostError, PortOutOfRangeError
from portkit.probe import is_port_available
from portkit.snapshot import get_used_ports

Addr = namedtuple("Addr", ["ip", "port"])
Conn = namedtuple("Conn", ["laddr", "status"])


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestIsPortAvailable:
    """Tests for is_port_available."""

    def test_free_port(self):
        """Test: An unbound port is available."""
        assert is_port_available(_free_port())

    def test_listening_port(self):
        """Test: A port with a listener is not available."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", 0))
            sock.listen(1)
            assert not is_port_available(sock.getsockname()[1])

    def test_bound_port_without_listen(self):
        """Test: A bound but non-listening port is not available."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", 0))
            assert not is_port_available(sock.getsockname()[1])

    def test_probe_releases_port(self):
        """Test: The port can be bound again right after a successful probe."""
        port = _free_port()
        assert is_port_available(port)
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", port))

    def test_repeated_probes_do_not_leak(self):
        """Test: Probing the same port many times keeps succeeding."""
        port = _free_port()
        assert all(is_port_available(port) for _ in range(200))

    @pytest.mark.parametrize("host", ["192.0.2.1", "no-such-host.invalid"])
    def test_unusable_host_raises(self, host):
        """Test: A non-local or unresolvable host is an error, not a busy port."""
        with pytest.raises(InvalidHostError) as exc_info:
            is_port_available(_free_port(), host)
        assert exc_info.value.host == host
        assert exc_info.value.code == "INVALID_HOST"

    def test_other_socket_errors_propagate(self, monkeypatch):
        """Test: Socket failures unrelated to the port are not reported as busy."""

        class Broken:
            def __init__(self, *args):
                raise OSError(errno.EMFILE, "Too many open files")

        monkeypatch.setattr(probe_module.socket, "socket", Broken)
        with pytest.raises(OSError) as exc_info:
            is_port_available(8080)
        assert exc_info.value.errno == errno.EMFILE

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_invalid_port(self, port):
        """Test: Invalid port numbers raise instead of probing."""
        with pytest.raises(PortOutOfRangeError):
            is_port_available(port)


class TestGetUsedPorts:
    """Tests for the used-port snapshot."""

    @pytest.mark.skipif(sys.platform == "darwin", reason="connection table needs root on macOS")
    def test_includes_own_listener(self):
        """Test: A listener opened by this process shows up in the snapshot."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", 0))
            sock.listen(1)
            assert sock.getsockname()[1] in get_used_ports()

    def test_collects_all_local_ports(self, monkeypatch):
        """Test: Listeners, connections and UDP sockets all contribute their local port."""
        conns = [
            Conn(Addr("0.0.0.0", 8080), psutil.CONN_LISTEN),
            Conn(Addr("127.0.0.1", 50123), psutil.CONN_ESTABLISHED),
            Conn(Addr("0.0.0.0", 5353), psutil.CONN_NONE),
            Conn((), psutil.CONN_NONE),
        ]
        monkeypatch.setattr(snapshot_module.psutil, "net_connections", lambda kind: conns)
        assert get_used_ports() == {8080, 50123, 5353}

    def test_access_denied_yields_empty_snapshot(self, monkeypatch, caplog):
        """Test: An unreadable connection table degrades to an empty snapshot."""

        def deny(kind):
            raise psutil.AccessDenied()

        monkeypatch.setattr(snapshot_module.psutil, "net_connections", deny)
        with caplog.at_level("WARNING"):
            assert get_used_ports() == set()
        assert "Could not read connection table" in caplog.text
