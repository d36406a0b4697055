"""
Integrity Shared Logger
Module loggers that fall back to the service log settings
"""

import logging
from typing import Optional

from .config import get_settings
from .logging_config import configure_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger, configuring its top-level package logger on first use

    setup_logging() later replaces that configuration, so modules imported
    before the app starts still log exactly once.

    Args:
        name: Logger name (usually __name__)
    """
    settings = get_settings()
    logger = logging.getLogger(name or settings.service_name)

    package_logger = logging.getLogger(logger.name.split(".")[0])
    if not package_logger.handlers:
        configure_logger(package_logger, settings.log_level, settings.json_logs)

    return logger
