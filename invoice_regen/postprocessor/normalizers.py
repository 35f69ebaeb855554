"""
Data Normalizers Module.

This module provides normalization functions for:
    - Monetary strings printed with locale separators
    - Issue dates used for VAT rate selection

Unlike a best-effort cleaner, both normalizers are strict: anything they
cannot parse is an error, never a silently substituted value.

Author: Invoice Tooling Team
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from config import get_config
from invoice_regen.utils.logger import get_logger
from invoice_regen.utils.exceptions import InvalidAmountError, InvalidDateError

# Initialize module logger
logger = get_logger(__name__)


class DateNormalizer:
    """
    Parses invoice issue dates in the supported layouts.

    Attributes:
        input_formats: strptime formats tried in order

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.parse("March 5, 2021")
        datetime.date(2021, 3, 5)
        >>> normalizer.parse("05.03.2021")
        datetime.date(2021, 3, 5)
    """

    DEFAULT_FORMATS = ["%B %d, %Y", "%d.%m.%Y"]

    def __init__(self, input_formats: Optional[List[str]] = None) -> None:
        """Initialize the date normalizer with configuration."""
        self.input_formats = input_formats or get_config(
            "vat.issue_date_formats",
            self.DEFAULT_FORMATS
        )
        logger.debug(f"DateNormalizer initialized (formats: {self.input_formats})")

    def parse(self, date_str: str) -> date:
        """
        Parse a date string.

        Args:
            date_str: Date in one of the configured formats.

        Returns:
            Parsed date.

        Raises:
            InvalidDateError: If no format matches.
        """
        cleaned = ' '.join((date_str or '').split())

        for fmt in self.input_formats:
            try:
                return datetime.strptime(cleaned, fmt).date()
            except ValueError:
                continue

        raise InvalidDateError(date_str, list(self.input_formats))


class AmountNormalizer:
    """
    Normalizes printed currency strings to Decimal values.

    The document's thousands and decimal separators are configured, not
    guessed: "1.234,56" with separators "." and "," becomes 1234.56.

    Attributes:
        symbol: Currency symbol stripped before parsing
        thousands_separator: Digit-group separator removed before parsing
        decimal_separator: Separator converted to "."
        free_shipping_label: Literal meaning an amount of zero

    Example:
        >>> normalizer = AmountNormalizer()
        >>> normalizer.to_decimal("1.234,56")
        Decimal('1234.56')
        >>> normalizer.to_decimal("Free shipping", "shipping")
        Decimal('0')
    """

    _NUMBER = re.compile(r'^-?\d+(\.\d+)?$')

    def __init__(
        self,
        symbol: Optional[str] = None,
        thousands_separator: Optional[str] = None,
        decimal_separator: Optional[str] = None,
        free_shipping_label: Optional[str] = None
    ) -> None:
        """Initialize the amount normalizer with configuration."""
        self.symbol = symbol if symbol is not None else \
            get_config("currency.symbol", "€")
        self.thousands_separator = thousands_separator if thousands_separator is not None else \
            get_config("currency.thousands_separator", ".")
        self.decimal_separator = decimal_separator if decimal_separator is not None else \
            get_config("currency.decimal_separator", ",")
        self.free_shipping_label = free_shipping_label if free_shipping_label is not None else \
            get_config("currency.free_shipping_label", "Free shipping")

        logger.debug("AmountNormalizer initialized")

    def normalize(self, amount_str: str) -> Optional[str]:
        """
        Normalize an amount string to canonical "1234.56" form.

        Returns:
            Canonical string, or None if it cannot be parsed.
        """
        try:
            return str(self.to_decimal(amount_str))
        except InvalidAmountError:
            return None

    def to_decimal(self, amount_str: str, field: str = "amount") -> Decimal:
        """
        Convert a printed amount to a Decimal.

        Args:
            amount_str: Printed amount, e.g. "€1.234,56".
            field: Field name reported on failure.

        Returns:
            Decimal value.

        Raises:
            InvalidAmountError: If the string is not a number.
        """
        if amount_str is None:
            raise InvalidAmountError(field, amount_str, "value is absent")

        if self.is_free_shipping(amount_str):
            return Decimal(0)

        cleaned = self._clean_amount_string(amount_str)

        if not self._NUMBER.match(cleaned):
            raise InvalidAmountError(field, amount_str, f"not a number after cleaning: '{cleaned}'")

        try:
            return Decimal(cleaned)
        except InvalidOperation as e:
            raise InvalidAmountError(field, amount_str, str(e)) from e

    def is_free_shipping(self, amount_str: str) -> bool:
        return amount_str.strip().lower() == self.free_shipping_label.lower()

    def _clean_amount_string(self, amount_str: str) -> str:
        """
        Strip symbol and whitespace, then canonicalize separators.

        Args:
            amount_str: Raw amount string.

        Returns:
            Cleaned amount string using "." as decimal separator.
        """
        amount_str = ''.join(amount_str.split())

        if self.symbol:
            amount_str = amount_str.replace(self.symbol, '')

        if self.thousands_separator:
            amount_str = amount_str.replace(self.thousands_separator, '')

        if self.decimal_separator != '.':
            amount_str = amount_str.replace(self.decimal_separator, '.')

        return amount_str
