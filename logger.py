"""Logging configuration for Keesti.

Sets up logging to both file (with date-based naming) and console. Parts of
the application log to children of the "keesti" logger (for example
"keesti.tree" for drag and drop commits) so their records carry their origin
in the log file while sharing the same handlers.
"""

import logging
from datetime import date
from typing import Optional

from config import Config

LOGGER_NAME = "keesti"


def setup_logging(config: Config) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)

    # Clear any existing handlers (in case this is called multiple times)
    logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_formatter = logging.Formatter("%(levelname)s - %(message)s")

    file_handler = logging.FileHandler(get_log_file_path(config), encoding="utf-8")
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(detailed_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.log_level)
    console_handler.setFormatter(console_formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_log_file_path(config: Config):
    """Path of today's log file, keesti-{date}.log under the log directory."""
    return config.log_dir / f"{LOGGER_NAME}-{date.today().isoformat()}.log"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger, or one of its children.

    Args:
        name: Optional component name. "tree" gives the "keesti.tree" logger.

    Returns:
        The keesti logger, or the named child of it.
    """
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
