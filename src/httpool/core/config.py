"""Configuration schema and loading for httpool.

Settings are validated pydantic models, frozen after construction, and
passed by value into the components that need them. There is no global
configuration object.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from httpool.clients.options import RequestDefaults
from httpool.pooling.config import PoolConfig


class LoggingSettings(BaseModel):
    """Logging output configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", description="Root log level")
    json_output: bool = Field(default=False, description="Emit JSON lines instead of console output")


class HttpoolSettings(BaseModel):
    """Top-level configuration.

    Every section is optional; omitted sections take their documented
    defaults (GET, 30000 ms timeout, json decoding, concurrency 4).
    """

    model_config = {"frozen": True, "extra": "forbid"}

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    request: RequestDefaults = Field(default_factory=RequestDefaults)


def load_settings(config_path: Path) -> HttpoolSettings:
    """Load settings from a YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated HttpoolSettings instance

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the document is not a mapping
        pydantic.ValidationError: If configuration fails validation

    Example:
        # settings.yaml
        logging:
          level: DEBUG
        pool:
          concurrency: 8
        request:
          timeout_ms: 10000
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    raw: Any = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping, got {type(raw).__name__}")

    return HttpoolSettings(**raw)


def resolve_config(settings: HttpoolSettings) -> dict[str, Any]:
    """Convert validated settings to a JSON-ready dict (explicit values and defaults)."""
    return settings.model_dump(mode="json")
