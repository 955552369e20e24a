"""
Logging configuration for the attendance API.

One stream handler on the root logger; modules get named loggers.
Re-running setup replaces that handler and leaves any others in place.
"""

import logging
import sys
from typing import Union

HANDLER_NAME = "attendance_hub.console"


def setup_logging(level: Union[str, int] = "INFO", debug: bool = False) -> None:
    """
    Configure logging for the service.

    Args:
        level: Log level name or number
        debug: Force DEBUG level regardless of `level`
    """
    if debug:
        level = logging.DEBUG
    elif isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(HANDLER_NAME)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")
    )
    root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
