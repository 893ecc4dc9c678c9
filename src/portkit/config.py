"""portkit configuration models."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from portkit.constants import FIRST_SERVICE_PORT, LAST_PORT, LAST_SERVICE_PORT, Direction

__all__ = ["ScanConfig", "PortkitConfig", "load_config"]


class ScanConfig(BaseModel):
    """Defaults for a port scan."""

    host: str = "127.0.0.1"
    start: int = Field(default=FIRST_SERVICE_PORT, ge=1, le=LAST_PORT)
    end: int = Field(default=LAST_SERVICE_PORT, ge=1, le=LAST_PORT)
    direction: Direction = Direction.ASCENDING

    # If False, skip the psutil connection table and bind-probe every port
    use_snapshot: bool = True

    model_config = {"extra": "ignore"}

    @model_validator(mode="after")
    def _check_order(self) -> ScanConfig:
        if self.start > self.end:
            raise ValueError(f"start ({self.start}) must be less than or equal to end ({self.end})")
        return self


class PortkitConfig(BaseModel):
    """Top-level configuration file."""

    scan: ScanConfig = Field(default_factory=ScanConfig)

    # Open http://<host>:<port>/ after a successful `find`
    open_browser: bool = False

    model_config = {"extra": "ignore"}


def load_config(config_path: Path) -> PortkitConfig:
    """Load configuration from a JSON file.

    Args:
        config_path: Path to the config file

    Returns:
        Parsed PortkitConfig

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON or does not match the schema
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e

    try:
        return PortkitConfig(**data)
    except (TypeError, ValidationError) as e:
        raise ValueError(f"Invalid config structure: {e}") from e
