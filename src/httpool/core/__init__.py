"""Core infrastructure: configuration and logging."""

from httpool.core.config import HttpoolSettings, LoggingSettings, load_settings, resolve_config
from httpool.core.logging import configure_logging, get_logger

__all__ = [
    "HttpoolSettings",
    "LoggingSettings",
    "configure_logging",
    "get_logger",
    "load_settings",
    "resolve_config",
]
