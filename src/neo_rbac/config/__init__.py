"""Configuration for neo-rbac."""

from .settings import Settings, get_settings, settings
from .logging_config import LoggingConfig, setup_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
