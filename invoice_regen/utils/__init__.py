"""
Utility Module for the Invoice Regeneration System.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Exception hierarchy
    - Common helpers (directories, file types, money formatting)
"""

from .logger import setup_logger, get_logger
from .helpers import (
    ensure_directory,
    format_money,
    get_file_extension,
    quantize_amount,
)

__all__ = [
    'setup_logger',
    'get_logger',
    'ensure_directory',
    'format_money',
    'get_file_extension',
    'quantize_amount',
]
