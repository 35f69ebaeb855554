"""
Helper Utilities Module.

This module provides common utility functions used throughout the
invoice regeneration system. Functions here should be generic and
reusable across different modules.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - quantize_amount: Round a Decimal half-up to currency precision
    - format_money: Render a Decimal as a locale currency string (Babel)
"""

from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Union

from babel.numbers import format_currency


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("invoice/new")
        PosixPath('invoice/new')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the file extension from a filepath.

    Returns the extension in lowercase, including the dot.
    Returns empty string if no extension exists.

    Example:
        >>> get_file_extension("invoice-0042.PDF")
        '.pdf'
    """
    return Path(filepath).suffix.lower()


def quantize_amount(value: Decimal, precision: int = 2) -> Decimal:
    """
    Round a Decimal to the currency precision (half-up).

    Example:
        >>> quantize_amount(Decimal("9.495"))
        Decimal('9.50')
    """
    return value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)


def format_money(
    value: Decimal,
    currency: str = "EUR",
    locale: str = "de_DE",
    precision: int = 2
) -> str:
    """
    Format a Decimal as a currency string with Babel.

    The amount is rounded half-up first. The pattern places the sign before
    the symbol and the symbol before the digits; the locale supplies the
    symbol and both separators.

    Args:
        value: Amount to format.
        currency: ISO 4217 currency code.
        locale: Babel locale identifier.
        precision: Number of fractional digits.

    Returns:
        Formatted currency string.

    Example:
        >>> format_money(Decimal("1234.5"))
        '€1.234,50'
        >>> format_money(Decimal("-1.5"))
        '-€1,50'
    """
    rounded = quantize_amount(Decimal(value), precision)
    pattern = "¤#,##0" + ("." + "0" * precision if precision > 0 else "")

    return format_currency(
        rounded,
        currency,
        format=pattern,
        locale=locale,
        currency_digits=False
    )
