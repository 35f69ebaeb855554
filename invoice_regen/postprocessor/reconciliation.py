"""
Monetary Reconciliation Module.

This module provides the ReconciliationEngine that rebuilds a consistent
monetary breakdown from the independently rounded values printed on an
invoice.

Operations:
    - Normalize printed subtotal, discount, shipping and total
    - Recompute VAT from the subtotal and the resolved rate
    - Absorb the residual (margin) in discount or shipping
    - Recompute total excl. VAT and total

The printed total is preserved: after reconciliation
``total == subtotal + vat_amount + shipping - discount`` holds exactly.

Author: Invoice Tooling Team
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from config import get_config
from invoice_regen.extraction.invoice_record import InvoiceRecord
from invoice_regen.utils.helpers import quantize_amount
from invoice_regen.utils.logger import get_logger
from invoice_regen.utils.exceptions import MissingRequiredFieldError
from .normalizers import AmountNormalizer

# Initialize module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class ReconciledTotals:
    """
    Internally consistent monetary breakdown of one invoice.

    Attributes:
        subtotal: Subtotal excl. VAT as printed
        discount: Discount after absorbing the margin (if chosen)
        shipping: Shipping after absorbing the margin (if chosen)
        vat_rate: Applied VAT rate as a fraction
        vat_amount: subtotal * vat_rate, rounded to currency precision
        total_excl_vat: subtotal + shipping - discount
        total: total_excl_vat + vat_amount
        printed_total: Total printed on the document, if any
        margin: Residual absorbed during reconciliation
        adjusted_field: "discount", "shipping" or None when margin is zero
    """
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    total_excl_vat: Decimal
    total: Decimal
    printed_total: Optional[Decimal] = None
    margin: Decimal = Decimal(0)
    adjusted_field: Optional[str] = None

    def is_balanced(self) -> bool:
        """Check the accounting identity of the breakdown."""
        return (
            self.total == self.subtotal + self.vat_amount + self.shipping - self.discount
            and self.total == self.total_excl_vat + self.vat_amount
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'subtotal': str(self.subtotal),
            'discount': str(self.discount),
            'shipping': str(self.shipping),
            'vat_rate': str(self.vat_rate),
            'vat_amount': str(self.vat_amount),
            'total_excl_vat': str(self.total_excl_vat),
            'total': str(self.total),
            'printed_total': str(self.printed_total) if self.printed_total is not None else None,
            'margin': str(self.margin),
            'adjusted_field': self.adjusted_field,
        }


class ReconciliationEngine:
    """
    Closes the accounting identity between printed invoice amounts.

    Margin policy:
        - a non-zero discount absorbs the margin;
        - otherwise, if shipping is smaller than the margin, the margin
          becomes a discount;
        - otherwise the margin is taken off shipping.

    Attributes:
        normalizer: AmountNormalizer for printed amounts
        precision: Currency precision used to round the VAT amount

    Example:
        >>> engine = ReconciliationEngine()
        >>> totals = engine.reconcile("50,00", None, "Free shipping", "58,00", Decimal("0.19"))
        >>> totals.discount, totals.total
        (Decimal('1.50'), Decimal('58.00'))
    """

    def __init__(
        self,
        normalizer: Optional[AmountNormalizer] = None,
        precision: Optional[int] = None
    ) -> None:
        """Initialize the engine with configuration."""
        self.normalizer = normalizer or AmountNormalizer()
        self.precision = precision if precision is not None else \
            get_config("currency.precision", 2)

        logger.debug(f"ReconciliationEngine initialized (precision={self.precision})")

    def reconcile_record(self, record: InvoiceRecord, vat_rate: Decimal) -> ReconciledTotals:
        """Reconcile the monetary fields of an extracted record."""
        return self.reconcile(
            subtotal=record.subtotal,
            discount=record.discount,
            shipping=record.shipping,
            total=record.total,
            vat_rate=vat_rate
        )

    def reconcile(
        self,
        subtotal: Optional[str],
        discount: Optional[str],
        shipping: Optional[str],
        total: Optional[str],
        vat_rate: Union[Decimal, float, str]
    ) -> ReconciledTotals:
        """
        Build a consistent breakdown from printed amounts.

        Args:
            subtotal: Printed subtotal excl. VAT (required).
            discount: Printed discount, None if absent.
            shipping: Printed shipping, None if absent.
            total: Printed total, None if absent.
            vat_rate: Resolved VAT rate as a fraction. Floats are read
                through their shortest repr, so 0.19 stays 0.19.

        Returns:
            ReconciledTotals satisfying the accounting identity.

        Raises:
            MissingRequiredFieldError: If the subtotal is absent.
            InvalidAmountError: If a present amount cannot be parsed.
        """
        if subtotal is None or not subtotal.strip():
            raise MissingRequiredFieldError("subtotal")

        subtotal_value = self.normalizer.to_decimal(subtotal, "subtotal")
        discount_value = self._optional_amount(discount, "discount")
        shipping_value = self._optional_amount(shipping, "shipping")
        printed_total = None
        if total is not None and total.strip():
            printed_total = self.normalizer.to_decimal(total, "total")

        vat_rate = Decimal(str(vat_rate))
        vat_amount = quantize_amount(subtotal_value * vat_rate, self.precision)

        if printed_total is None:
            logger.debug("No printed total, nothing to reconcile against")
            margin = Decimal(0)
        else:
            margin = subtotal_value + vat_amount + shipping_value - discount_value - printed_total

        adjusted_field = None
        if margin != 0:
            if discount_value != 0 or shipping_value < margin:
                discount_value += margin
                adjusted_field = "discount"
            else:
                shipping_value -= margin
                adjusted_field = "shipping"

            logger.warning(
                f"Printed amounts off by {margin}, absorbed in {adjusted_field}"
            )

        total_excl_vat = subtotal_value + shipping_value - discount_value
        total_value = total_excl_vat + vat_amount

        totals = ReconciledTotals(
            subtotal=subtotal_value,
            discount=discount_value,
            shipping=shipping_value,
            vat_rate=vat_rate,
            vat_amount=vat_amount,
            total_excl_vat=total_excl_vat,
            total=total_value,
            printed_total=printed_total,
            margin=margin,
            adjusted_field=adjusted_field
        )

        logger.debug(f"Reconciled totals: {totals.to_dict()}")
        return totals

    def _optional_amount(self, value: Optional[str], field: str) -> Decimal:
        if value is None or not value.strip():
            return Decimal(0)
        return self.normalizer.to_decimal(value, field)
