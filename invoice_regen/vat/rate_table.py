"""
VAT Rate Table Module.

Static, ordered country -> VAT rate data and the country-code table used
to resolve VAT numbers. Both are loaded once from settings.yaml into
frozen objects and may be shared freely between workers.

Author: Invoice Tooling Team
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from config import ConfigurationManager, get_config
from invoice_regen.utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class VatRate:
    """
    VAT rate(s) applicable to one country.

    A rate with a ``limit_date`` switches from ``rate_under_limit`` to
    ``rate_over_limit`` for invoices issued strictly after that date.
    Without a limit date the entry is a flat rate.

    Attributes:
        country: Country name, matched by substring against address lines.
        rate_under_limit: Rate up to and including the limit date (or the
            flat rate).
        rate_over_limit: Rate after the limit date.
        limit_date: Date the limit was reached.
    """
    country: str
    rate_under_limit: Decimal
    rate_over_limit: Optional[Decimal] = None
    limit_date: Optional[date] = None

    @property
    def has_threshold(self) -> bool:
        return self.limit_date is not None

    def rate_for(self, issue_date: Optional[date]) -> Decimal:
        """
        Select the rate applicable on ``issue_date``.

        Flat entries ignore the date entirely.
        """
        if not self.has_threshold:
            return self.rate_under_limit
        if issue_date is not None and issue_date > self.limit_date:
            return self.rate_over_limit
        return self.rate_under_limit


@dataclass(frozen=True)
class VatRateTable:
    """
    Ordered, read-only VAT rate lookup.

    Lookup by address line uses substring containment and returns the
    first entry in table order, so the order in settings.yaml is the
    tie-breaker.

    Example:
        >>> table = get_vat_rate_table()
        >>> table.find("2511 CV Den Haag, Netherlands").country
        'Netherlands'
        >>> table.country_for_code("NL")
        'Netherlands'
    """
    rates: Tuple[VatRate, ...]
    country_codes: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        # Freeze whatever mapping was passed in
        object.__setattr__(
            self, "country_codes",
            MappingProxyType({k.upper(): v for k, v in dict(self.country_codes).items()})
        )

    def find(self, country_line: str) -> Optional[VatRate]:
        """Return the first entry whose country name occurs in ``country_line``."""
        if not country_line:
            return None
        for entry in self.rates:
            if entry.country in country_line:
                return entry
        return None

    def get(self, country: str) -> Optional[VatRate]:
        """Return the entry for an exact country name."""
        for entry in self.rates:
            if entry.country == country:
                return entry
        return None

    def country_for_code(self, code: str) -> Optional[str]:
        """Map a two-letter VAT country code to a country name."""
        return self.country_codes.get(code.upper())

    def __len__(self) -> int:
        return len(self.rates)

    @classmethod
    def from_config(cls) -> 'VatRateTable':
        """
        Build the table from the ``vat`` section of settings.yaml.

        Raises:
            ConfigurationError: If an entry has unparseable rates or dates.
        """
        limit_format = get_config("vat.limit_date_format", "%d.%m.%Y")
        entries = get_config("vat.rates", [])
        if not entries:
            raise ConfigurationError("No VAT rates configured (vat.rates)")

        rates = tuple(_parse_rate(entry, limit_format) for entry in entries)
        return cls(rates=rates, country_codes=get_config("vat.country_codes", {}) or {})


def _parse_rate(entry: Dict[str, Any], limit_format: str) -> VatRate:
    try:
        country = str(entry["country"])
        if "rate" in entry:
            return VatRate(country, Decimal(str(entry["rate"])))

        return VatRate(
            country,
            rate_under_limit=Decimal(str(entry["under"])),
            rate_over_limit=Decimal(str(entry["over"])),
            limit_date=datetime.strptime(str(entry["limit_date"]), limit_format).date(),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise ConfigurationError(
            "Invalid VAT rate entry",
            {"entry": entry, "reason": str(e)}
        ) from e


def get_vat_rate_table() -> VatRateTable:
    """VAT table of the current configuration, built on first use."""
    return ConfigurationManager().cached("vat_rate_table", VatRateTable.from_config)
