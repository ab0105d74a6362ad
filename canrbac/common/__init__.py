"""Common utilities for canrbac."""

from .logger import configure_logging, get_logger, setup_logger
from .config import Settings, get_settings

__all__ = ["Settings", "configure_logging", "get_logger", "get_settings", "setup_logger"]
