"""
Invoice Record Data Class.

This module defines the structure produced by the anchor extractor:
raw, unnormalized invoice fields recovered from one fragment stream.

Author: Invoice Tooling Team
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class InvoiceRecord:
    """
    Raw invoice fields recovered from a fragment stream.

    Monetary fields keep the document's own number formatting
    (e.g. "1.234,56" or "Free shipping"); normalization happens in the
    reconciliation engine.

    Attributes:
        status: Status marker printed after "Invoice" (e.g. "PAID")
        invoice_details: Fragments between "Invoice" and "Bill to:"
        bill_to: Billing address lines
        ship_to: Shipping address lines
        description: Line item description
        quantity: Line item quantity
        subtotal: Printed subtotal (excl. VAT)
        discount: Printed discount
        shipping: Printed shipping cost
        total: Printed total
        details: Invoice-detail fragments mapped onto named fields
            (populated in positional mode only)
        source_file: Source document name
        rows_parsed: Number of fragment rows consumed

    Example:
        >>> record = InvoiceRecord(bill_to=["Jan de Vries", "Netherlands"])
        >>> record.missing_fields[:2]
        ['status', 'description']
    """
    status: Optional[str] = None
    invoice_details: List[str] = field(default_factory=list)
    bill_to: List[str] = field(default_factory=list)
    ship_to: List[str] = field(default_factory=list)

    description: Optional[str] = None
    quantity: Optional[str] = None
    subtotal: Optional[str] = None
    discount: Optional[str] = None
    shipping: Optional[str] = None
    total: Optional[str] = None

    details: Dict[str, str] = field(default_factory=dict)

    source_file: Optional[str] = None
    rows_parsed: int = 0

    SCALAR_FIELDS = (
        'status', 'description', 'quantity',
        'subtotal', 'discount', 'shipping', 'total',
    )
    LIST_FIELDS = ('invoice_details', 'bill_to', 'ship_to')

    @property
    def missing_fields(self) -> List[str]:
        """Scalar or list fields that were not found in the document."""
        missing = [n for n in self.SCALAR_FIELDS if getattr(self, n) in (None, "")]
        missing.extend(n for n in self.LIST_FIELDS if not getattr(self, n))
        return missing

    def set_field(self, field_name: str, value: str) -> None:
        """
        Set a scalar field by name.

        Raises:
            AttributeError: If the record has no such scalar field.
        """
        if field_name not in self.SCALAR_FIELDS:
            raise AttributeError(f"InvoiceRecord has no scalar field '{field_name}'")
        setattr(self, field_name, value)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Returns:
            Dictionary representation of the record.
        """
        return {
            'status': self.status,
            'invoice_details': list(self.invoice_details),
            'bill_to': list(self.bill_to),
            'ship_to': list(self.ship_to),
            'description': self.description,
            'quantity': self.quantity,
            'subtotal': self.subtotal,
            'discount': self.discount,
            'shipping': self.shipping,
            'total': self.total,
            'details': dict(self.details),
            'source_file': self.source_file,
            'rows_parsed': self.rows_parsed,
        }

    def __repr__(self) -> str:
        return (
            f"InvoiceRecord("
            f"source={self.source_file}, "
            f"status={self.status}, "
            f"subtotal={self.subtotal}, "
            f"total={self.total})"
        )
