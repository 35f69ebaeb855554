"""
VAT Resolver Module.

Resolves the VAT rate for an invoice from its billing address and
issue date.

Resolution order:
    1. Country indicator: a "VAT Number:" line (two-letter code mapped
       through the country-code table) or the last billing line.
    2. First table entry whose country name occurs in that line.
    3. No match: the default country's under-limit rate, or
       UnresolvedVatRateError when no default is configured.
    4. Threshold entries pick their rate by the parsed issue date.

Author: Invoice Tooling Team
"""

from decimal import Decimal
from typing import List, Optional

from config import get_config
from invoice_regen.extraction.invoice_record import InvoiceRecord
from invoice_regen.postprocessor.normalizers import DateNormalizer
from invoice_regen.utils.logger import get_logger
from invoice_regen.utils.exceptions import (
    ConfigurationError,
    MissingRequiredFieldError,
    UnresolvedVatRateError
)
from .rate_table import VatRateTable, get_vat_rate_table

# Initialize module logger
logger = get_logger(__name__)

_UNSET = object()


class VatResolver:
    """
    Resolves a single applicable VAT rate for an invoice.

    Attributes:
        table: VatRateTable used for lookups (shared, read-only)
        default_country: Fallback country, or None to fail on no match
        vat_number_label: Literal identifying a VAT number line
        issue_date_prefix: Label in front of the issue date

    Example:
        >>> resolver = VatResolver()
        >>> resolver.resolve(["Jan de Vries", "Netherlands"], "March 5, 2021")
        Decimal('0.19')
        >>> resolver.resolve(["VAT Number:", "NL123456789B01"], "August 2, 2021")
        Decimal('0.21')
    """

    def __init__(
        self,
        table: Optional[VatRateTable] = None,
        default_country=_UNSET,
        date_normalizer: Optional[DateNormalizer] = None
    ) -> None:
        """
        Initialize the resolver.

        Args:
            table: Rate table. If None, the process-wide table is used.
            default_country: Fallback country name; None disables the
                fallback. If omitted, read from configuration.
            date_normalizer: Parser for issue dates.
        """
        self.table = table or get_vat_rate_table()
        self.default_country = get_config("vat.default_country", "Germany") \
            if default_country is _UNSET else default_country
        self.vat_number_label = get_config("vat.vat_number_label", "VAT Number:")
        self.issue_date_prefix = get_config("vat.issue_date_prefix", "Invoice date:")
        self.date_normalizer = date_normalizer or DateNormalizer()

        if self.default_country is not None and self.table.get(self.default_country) is None:
            raise ConfigurationError(
                f"Default VAT country not in rate table: {self.default_country}"
            )

        logger.debug(
            f"VatResolver initialized ({len(self.table)} countries, "
            f"default={self.default_country})"
        )

    def resolve_record(self, record: InvoiceRecord) -> Decimal:
        """Resolve the rate for an extracted invoice record."""
        issue_date = self.issue_date_from_details(record.invoice_details)
        if record.details.get("invoice_date"):
            issue_date = self._strip_prefix(record.details["invoice_date"])
        return self.resolve(record.bill_to, issue_date)

    def resolve(self, bill_to: List[str], issue_date: Optional[str] = None) -> Decimal:
        """
        Resolve the applicable VAT rate.

        Args:
            bill_to: Billing address lines, country indicator last.
            issue_date: Issue date string; required only when the matched
                entry has a date threshold.

        Returns:
            VAT rate as a Decimal fraction (e.g. Decimal('0.19')).

        Raises:
            UnresolvedVatRateError: No match and no default country.
            MissingRequiredFieldError: Threshold entry without issue date.
            InvalidDateError: Issue date in an unsupported format.
        """
        country = self.country_from_bill_to(bill_to)
        entry = self.table.find(country)

        if entry is None:
            if self.default_country is None:
                raise UnresolvedVatRateError(country)
            rate = self.table.get(self.default_country).rate_under_limit
            logger.debug(
                f"No VAT entry matches '{country}', "
                f"using {self.default_country} rate {rate}"
            )
            return rate

        if not entry.has_threshold:
            logger.debug(f"VAT for {entry.country}: flat {entry.rate_under_limit}")
            return entry.rate_under_limit

        if not issue_date:
            raise MissingRequiredFieldError("invoice_date")

        parsed = self.date_normalizer.parse(issue_date)
        rate = entry.rate_for(parsed)
        logger.debug(
            f"VAT for {entry.country} on {parsed.isoformat()} "
            f"(limit {entry.limit_date.isoformat()}): {rate}"
        )
        return rate

    def country_from_bill_to(self, bill_to: List[str]) -> str:
        """
        Find the country indicator in the billing lines.

        A VAT number is either split over two lines ("VAT Number:" then
        "NL123456789B01") or printed on the last line after the label.

        Returns:
            Country name or address line to match, "" if none.
        """
        if not bill_to:
            return ""

        last = bill_to[-1].strip()
        label = self.vat_number_label

        if len(bill_to) >= 2 and label in bill_to[-2]:
            return self._country_for_vat_number(last)

        if label in last:
            return self._country_for_vat_number(last.split(label, 1)[1])

        return last

    def _country_for_vat_number(self, vat_number: str) -> str:
        code = vat_number.strip()[:2]
        country = self.table.country_for_code(code)
        if country is None:
            logger.debug(f"Unknown VAT country code: '{code}'")
            return ""
        return country

    def issue_date_from_details(self, details: List[str]) -> Optional[str]:
        """
        Locate the issue date among the invoice-detail fragments.

        The labelled line wins; otherwise the second fragment is used,
        which is where the fixed layout prints it.
        """
        for line in details:
            if line.startswith(self.issue_date_prefix):
                return self._strip_prefix(line)

        if len(details) > 1:
            return self._strip_prefix(details[1])
        return None

    def _strip_prefix(self, line: str) -> str:
        if line.startswith(self.issue_date_prefix):
            line = line[len(self.issue_date_prefix):]
        return line.strip()
