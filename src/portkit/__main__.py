"""portkit command line."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from portkit.browser import open_url
from portkit.config import PortkitConfig, ScanConfig, load_config
from portkit.constants import FIRST_PORT, LAST_PORT, Direction
from portkit.errors import PortkitError
from portkit.probe import is_port_available
from portkit.scanner import PortScanner
from portkit.snapshot import get_used_ports

__all__ = ["build_parser", "main", "main_entry"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="portkit", description="Local port discovery and browser launching")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    find = sub.add_parser("find", help="Print the first available port in a range")
    find.add_argument("--start", type=int, help="First port of the range (default: 1024)")
    find.add_argument("--end", type=int, help="Last port of the range (default: 49151)")
    find.add_argument("--reverse", action="store_true", help="Scan from the end of the range downwards")
    find.add_argument("--host", help="Address to probe (default: 127.0.0.1)")
    find.add_argument("--config", type=Path, help="Path to a JSON config file")
    find.add_argument("--no-snapshot", action="store_true", help="Probe every port, skip the connection table")
    find.add_argument("--open", action="store_true", help="Open http://<host>:<port>/ in the browser")

    check = sub.add_parser("check", help="Exit 0 if a port can be bound right now")
    check.add_argument("port", type=int)
    check.add_argument("--host", default="127.0.0.1", help="Address to probe (default: 127.0.0.1)")

    used = sub.add_parser("used", help="List ports currently bound on this host")
    used.add_argument("--start", type=int, default=FIRST_PORT)
    used.add_argument("--end", type=int, default=LAST_PORT)

    browse = sub.add_parser("open", help="Open a URL in the default browser")
    browse.add_argument("url")

    return p


def _resolve_scan_config(args: argparse.Namespace) -> tuple[ScanConfig, bool]:
    config = load_config(args.config) if args.config else PortkitConfig()
    overrides = {}
    if args.start is not None:
        overrides["start"] = args.start
    if args.end is not None:
        overrides["end"] = args.end
    if args.host is not None:
        overrides["host"] = args.host
    if args.reverse:
        overrides["direction"] = Direction.DESCENDING
    if args.no_snapshot:
        overrides["use_snapshot"] = False
    # model_copy skips validation; the scanner validates the range itself
    return config.scan.model_copy(update=overrides), args.open or config.open_browser


def _cmd_find(args: argparse.Namespace) -> int:
    scan, should_open = _resolve_scan_config(args)
    scanner = PortScanner.from_config(scan)
    port = scanner.find_available_port(scan.start, scan.end, scan.direction)
    if port is None:
        logger.error(f"No available port in {scan.start}-{scan.end}")
        return EXIT_NOT_FOUND

    print(port)
    if should_open:
        host = f"[{scan.host}]" if ":" in scan.host else scan.host
        open_url(f"http://{host}:{port}/")
    return EXIT_OK


def _cmd_check(args: argparse.Namespace) -> int:
    available = is_port_available(args.port, args.host)
    print(f"{args.port}: {'available' if available else 'in use'}")
    return EXIT_OK if available else EXIT_ERROR


def _cmd_used(args: argparse.Namespace) -> int:
    for port in sorted(p for p in get_used_ports() if args.start <= p <= args.end):
        print(port)
    return EXIT_OK


def _cmd_open(args: argparse.Namespace) -> int:
    open_url(args.url)
    return EXIT_OK


_COMMANDS = {
    "find": _cmd_find,
    "check": _cmd_check,
    "used": _cmd_used,
    "open": _cmd_open,
}


def main(argv: list[str] | None = None) -> int:
    """Run the command line and return the exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        return _COMMANDS[args.command](args)
    except PortkitError as e:
        logger.error(e.message)
        return EXIT_ERROR
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return EXIT_ERROR
    except OSError as e:
        logger.error(f"Failed to start browser: {e}")
        return EXIT_ERROR


def main_entry() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
