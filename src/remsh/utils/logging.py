"""Logging setup utilities for remsh.

Configures logging for the whole application based on the logging
configuration settings.
"""

from __future__ import annotations

import logging
import sys

from remsh.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure logging for the remsh application.

    Sets up the 'remsh' logger with the specified level, format, and
    optional file handler. Calling it again replaces the handlers it
    installed earlier instead of stacking duplicates.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger("remsh")
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (optional)
    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug("Logging initialized at %s level", config.level)
