"""
Logging Configuration Module.

Console logging for the regeneration run. Every module logs through a
child of the ``invoice_regen`` logger, so one call at startup decides
level, format and coloring for the whole package.

Usage:
    from invoice_regen.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Regenerating invoice...")
"""

import logging
import sys
from typing import Optional

import colorama
from colorama import Fore, Style

colorama.init()

ROOT_LOGGER_NAME = "invoice_regen"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Colors each console line by level (warnings yellow, errors red)."""

    COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, '')
        return f"{color}{super().format(record)}{Style.RESET_ALL}"


def setup_logger(
    level: str = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    colorize: bool = True
) -> logging.Logger:
    """
    Configure the package logger with a single console handler.

    Calling it again replaces the previous handler, so the CLI can switch
    levels without duplicating output.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR).
        log_format: Record format string.
        date_format: Timestamp format string.
        colorize: Whether to color console lines.

    Returns:
        The configured ``invoice_regen`` logger.
    """
    numeric_level = getattr(logging, level.upper())
    formatter_class = ColoredFormatter if colorize else logging.Formatter

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(formatter_class(
        log_format or DEFAULT_FORMAT,
        datefmt=date_format or DEFAULT_DATE_FORMAT
    ))

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False

    root_logger.debug("Logging initialized")
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the package namespace.

    Example:
        >>> get_logger("main").name
        'invoice_regen.main'
    """
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logger_from_config(level: Optional[str] = None) -> logging.Logger:
    """
    Initialize logging from the ``logging`` section of settings.yaml.

    Args:
        level: Overrides ``logging.level`` (used by --debug and --quiet).
    """
    from config import get_config

    return setup_logger(
        level=level or get_config("logging.level", "INFO"),
        log_format=get_config("logging.format"),
        date_format=get_config("logging.date_format"),
        colorize=get_config("logging.console.colorize", True)
    )
