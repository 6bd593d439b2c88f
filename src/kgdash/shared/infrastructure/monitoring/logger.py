"""
Centralized logging configuration for kg-dashboard.

Only the ``kgdash`` logger tree is configured; the host application keeps
ownership of the root logger. Console output goes to stderr so CLI commands
can print JSON on stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from functools import lru_cache

from ...config.settings import get_settings

PACKAGE_LOGGER = 'kgdash'
QUIET_LOGGERS = ('neo4j', 'matplotlib', 'PIL')


@lru_cache()
def setup_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger once per process.

    Args:
        log_level: Level name overriding ``LOG_LEVEL``
        log_file: File path overriding ``LOG_FILE``

    Returns:
        The package logger
    """
    config = get_settings().logging_config

    level = getattr(logging, (log_level or config['level']).upper(), logging.INFO)
    log_file = log_file or config['file']
    formatter = logging.Formatter(config['format'], datefmt='%Y-%m-%d %H:%M:%S')

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.propagate = False

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return package_logger


@lru_cache()
def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with consistent configuration.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    setup_logging()
    return logging.getLogger(name)
