"""Error types for portkit."""

from __future__ import annotations

from typing import Any

from portkit.constants import FIRST_PORT, LAST_PORT


class PortkitError(Exception):
    """Base class for portkit errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "UNKNOWN_ERROR"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary."""
        return {"error": self.message, "code": self.code}


class PortOutOfRangeError(PortkitError, ValueError):
    """A port bound lies outside 1-65535."""

    def __init__(self, argument: str, value: Any) -> None:
        self.argument = argument
        self.value = value
        super().__init__(
            f"{argument}={value!r}: value must be an integer between {FIRST_PORT} and {LAST_PORT}",
            "PORT_OUT_OF_RANGE",
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["argument"] = self.argument
        result["value"] = self.value
        return result


class InvalidPortRangeError(PortkitError, ValueError):
    """The start of a range is greater than its end."""

    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end
        super().__init__(
            f"Start port {start} must be less than or equal to end port {end}",
            "INVALID_PORT_RANGE",
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["start"] = self.start
        result["end"] = self.end
        return result


class UnsupportedPlatformError(PortkitError):
    """No browser launcher exists for the host operating system."""

    def __init__(self, platform: str) -> None:
        self.platform = platform
        super().__init__(f"Unsupported operating system: {platform}", "UNSUPPORTED_PLATFORM")


class InvalidHostError(PortkitError, ValueError):
    """The probe address cannot be bound on this host."""

    def __init__(self, host: str, reason: str) -> None:
        self.host = host
        self.reason = reason
        super().__init__(f"Cannot bind to host '{host}': {reason}", "INVALID_HOST")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["host"] = self.host
        return result
