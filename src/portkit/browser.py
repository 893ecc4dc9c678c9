"""Open a URL in the operating system's default web browser."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from collections.abc import Callable
from enum import Enum
from urllib.parse import urlsplit

from portkit.errors import UnsupportedPlatformError

__all__ = ["Platform", "detect_platform", "normalize_url", "open_url"]

logger = logging.getLogger(__name__)

LogCallback = Callable[[str], None]


class Platform(str, Enum):
    """Operating system families with a known way to open a browser."""

    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"
    UNSUPPORTED = "unsupported"


def detect_platform(name: str | None = None) -> Platform:
    """Map a ``sys.platform`` value (default: the running one) to a :class:`Platform`."""
    name = sys.platform if name is None else name
    # os.startfile only exists on native Windows, not Cygwin
    if name == "win32":
        return Platform.WINDOWS
    if name.startswith("linux"):
        return Platform.LINUX
    if name == "darwin":
        return Platform.MACOS
    return Platform.UNSUPPORTED


def normalize_url(url: str) -> str:
    """Prefix ``http://`` unless the URL already starts with http:// or https://.

    Raises:
        ValueError: If the URL is empty or has no host
    """
    if not url or not url.strip():
        raise ValueError("URL cannot be empty")

    if not url.lower().startswith(("http://", "https://")):
        url = "http://" + url

    if not urlsplit(url).netloc:
        raise ValueError(f"Invalid URL: {url}")
    return url


def _open_windows(url: str) -> None:
    # Shell-execute the URL so the registered handler picks it up
    os.startfile(url)  # type: ignore[attr-defined]


def _open_linux(url: str) -> None:
    subprocess.Popen(["xdg-open", url])


def _open_macos(url: str) -> None:
    subprocess.Popen(["open", url])


_LAUNCHERS: dict[Platform, Callable[[str], None]] = {
    Platform.WINDOWS: _open_windows,
    Platform.LINUX: _open_linux,
    Platform.MACOS: _open_macos,
}


def open_url(
    url: str,
    log: LogCallback | None = None,
    platform: Platform | None = None,
) -> None:
    """Open ``url`` in the default browser.

    Args:
        url: URL to open. ``http://`` is assumed when no scheme is given.
        log: Optional callback receiving human-readable status messages
        platform: Override the detected platform

    Raises:
        ValueError: If the URL is empty or invalid
        UnsupportedPlatformError: If the operating system is not Windows, Linux or macOS
        OSError: If the browser process could not be started
    """
    url = normalize_url(url)
    if platform is None:
        platform_name = sys.platform
        platform = detect_platform(platform_name)
    else:
        platform = Platform(platform)
        platform_name = platform.value

    def emit(message: str) -> None:
        if log is not None:
            log(message)

    try:
        launcher = _LAUNCHERS.get(platform)
        if launcher is None:
            raise UnsupportedPlatformError(platform_name)
        launcher(url)
    except Exception as e:
        logger.error(f"Error opening browser: {e}")
        emit(f"An error occurred while opening the browser: {e}")
        raise

    logger.info(f"Opening {url} in the default browser")
    emit(f"Opening {url} in the default browser...")
