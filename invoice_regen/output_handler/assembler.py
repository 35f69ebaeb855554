"""
Parameter Assembler Module.

Formats reconciled amounts for presentation and merges them with the
free-text fields of the invoice record into the flat mapping consumed by
the HTML template.

Author: Invoice Tooling Team
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from markupsafe import Markup

from config import get_config
from invoice_regen.extraction.invoice_record import InvoiceRecord
from invoice_regen.postprocessor.reconciliation import ReconciledTotals
from invoice_regen.utils.helpers import format_money
from invoice_regen.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class ParameterAssembler:
    """
    Builds template parameters from a record and its reconciled totals.

    Produced keys:
        status, invoice_details, bill_to, ship_to, description, quantity,
        subtotal, discount, shipping, vat_total, vat_percentage,
        total_excl_vat, total, plus any positional invoice-detail fields.

    Example:
        >>> params = ParameterAssembler().assemble(record, totals)
        >>> params["total"]
        '€129,00'
        >>> params["vat_percentage"]
        '19.00%'
    """

    def __init__(
        self,
        currency: Optional[str] = None,
        locale: Optional[str] = None,
        precision: Optional[int] = None,
        line_break: Optional[str] = None
    ) -> None:
        """Initialize the assembler with currency configuration."""
        self.currency = currency or get_config("currency.code", "EUR")
        self.locale = locale or get_config("currency.locale", "de_DE")
        self.precision = precision if precision is not None else \
            get_config("currency.precision", 2)
        self.free_shipping_label = get_config("currency.free_shipping_label", "Free shipping")
        self.line_break = Markup(
            line_break if line_break is not None else get_config("output.line_break", "<br/>")
        )

    def money(self, value: Decimal) -> str:
        """Format an amount with the configured currency settings."""
        return format_money(
            value,
            currency=self.currency,
            locale=self.locale,
            precision=self.precision
        )

    def percentage(self, rate: Decimal) -> str:
        """Format a VAT rate fraction as a percentage, e.g. 0.19 -> '19.00%'."""
        return f"{rate * 100:.2f}%"

    def join_lines(self, lines: List[str]) -> Markup:
        """Join text lines with the line break; each line is escaped."""
        return self.line_break.join(lines)

    def assemble(self, record: InvoiceRecord, totals: ReconciledTotals) -> Dict[str, Any]:
        """
        Build the flat parameter mapping for one invoice.

        Args:
            record: Extracted invoice record.
            totals: Reconciled totals of the same invoice.

        Returns:
            Mapping of template parameter names to display values.
        """
        params: Dict[str, Any] = {
            'status': record.status or '',
            'invoice_details': self.join_lines(record.invoice_details),
            'bill_to': self.join_lines(record.bill_to),
            'ship_to': self.join_lines(record.ship_to),
            'description': record.description or '',
            'quantity': record.quantity or '',
        }
        params.update(record.details)

        if totals.shipping == 0:
            shipping = self.free_shipping_label
        else:
            shipping = self.money(totals.shipping)

        params.update({
            'subtotal': self.money(totals.subtotal),
            # Shown as a deduction
            'discount': self.money(-totals.discount),
            'shipping': shipping,
            'vat_total': self.money(totals.vat_amount),
            'vat_percentage': self.percentage(totals.vat_rate),
            'total_excl_vat': self.money(totals.total_excl_vat),
            'total': self.money(totals.total),
        })

        logger.debug(f"Assembled {len(params)} template parameters")
        return params
