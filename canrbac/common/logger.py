"""Logging infrastructure for canrbac.

Every component logs through a child of the ``canrbac`` logger
(``canrbac.rbac_engine``, ``canrbac.rbac_compiler``, ...), so configuring
that one logger controls the whole package. Output goes to the console and
optionally to a rotating file, with ISO 8601 timestamps.
"""

import logging
import logging.handlers
import os
from typing import List, Optional

ROOT_LOGGER = "canrbac"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _build_handlers(
    name: str,
    log_dir: str,
    file_logging: bool,
    console_logging: bool,
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if file_logging:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, f"{name}.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
        ))
    if console_logging:
        handlers.append(logging.StreamHandler())
    return handlers


def setup_logger(
    name: str = ROOT_LOGGER,
    level: str = "INFO",
    log_dir: str = "logs",
    file_logging: bool = False,
    console_logging: bool = True,
    log_format: Optional[str] = None,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Attach handlers to a logger and set its level.

    Handlers are only attached the first time; later calls just update
    the level.

    Args:
        name: Logger name, the package logger by default
        level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL (any case)
        log_dir: Directory for ``<name>.log`` when file logging is on
        file_logging: Write to a rotating file
        console_logging: Write to stderr
        log_format: Custom format string
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep

    Returns:
        The configured logger

    Raises:
        ValueError: If the level is not a known level name
    """
    level_upper = level.upper()
    if level_upper not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. Must be one of: {', '.join(LOG_LEVELS)}"
        )

    logger = logging.getLogger(name)
    logger.setLevel(level_upper)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(log_format or DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    for handler in _build_handlers(
        name, log_dir, file_logging, console_logging, max_bytes, backup_count
    ):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_logging(settings) -> logging.Logger:
    """Configure the package logger from a Settings instance."""
    return setup_logger(
        ROOT_LOGGER,
        level=settings.log_level,
        log_dir=settings.log_dir,
        file_logging=settings.file_logging,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a component logger under the package logger."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
