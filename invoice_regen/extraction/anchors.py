"""
Anchor Schema Module.

The fixed literals that delimit the sections of an invoice, and the
declarative (label, offset) -> field table used inside the line-item
region. Loaded once from settings.yaml; instances are immutable.

Author: Invoice Tooling Team
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from config import get_config
from invoice_regen.utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class LineItemLabel:
    """
    A label inside the line-item region and where its value sits.

    Attributes:
        label: Literal fragment that introduces the value.
        offset: Positive distance from the label to the value fragment.
        field: InvoiceRecord attribute receiving the value.
    """
    label: str
    offset: int
    field: str


DEFAULT_LINE_ITEMS: Tuple[LineItemLabel, ...] = (
    LineItemLabel("Qty", 2, "description"),
    LineItemLabel("Qty", 3, "quantity"),
    LineItemLabel("Discount:", 1, "discount"),
    LineItemLabel("Shipping:", 1, "shipping"),
    LineItemLabel("Subtotal:", 1, "subtotal"),
    LineItemLabel("Total:", 1, "total"),
)

DEFAULT_DETAIL_FIELDS: Tuple[str, ...] = (
    "invoice_number",
    "invoice_date",
    "order_date",
    "order_number",
    "payment_method",
    "shipping_method",
)


@dataclass(frozen=True)
class AnchorSchema:
    """
    Immutable set of anchors describing the fixed invoice layout.

    Attributes:
        header: Fragments of the company header block.
        invoice: Literal introducing the invoice section.
        status_markers: Fragments recognized as a status after "Invoice".
        bill_to: Anchor closing the invoice details section.
        ship_to: Anchor closing the billing address section.
        description: Anchor closing the shipping address section.
        line_items: Declarative label table of the line-item region.
        payment_block: Fragments of the payment-info block; the first
            one terminates the line-item region.
    """
    header: Tuple[str, ...]
    invoice: str = "Invoice"
    status_markers: Tuple[str, ...] = ("PAID",)
    bill_to: str = "Bill to:"
    ship_to: str = "Ship to:"
    description: str = "Description"
    line_items: Tuple[LineItemLabel, ...] = DEFAULT_LINE_ITEMS
    payment_block: Tuple[str, ...] = ("Payment details:",)

    def __post_init__(self):
        if not self.header:
            raise ConfigurationError("Anchor header block must not be empty")
        if not self.payment_block:
            raise ConfigurationError("Anchor payment block must not be empty")
        for item in self.line_items:
            if item.offset < 1:
                raise ConfigurationError(
                    f"Line item offset must be positive: {item.label}",
                    {"label": item.label, "offset": item.offset}
                )

    @property
    def payment_anchor(self) -> str:
        """The literal that terminates the line-item region."""
        return self.payment_block[0]

    def labels_for(self, fragment: str) -> List[LineItemLabel]:
        """Return every table entry whose label equals ``fragment``."""
        return [item for item in self.line_items if item.label == fragment]

    @classmethod
    def from_config(cls) -> 'AnchorSchema':
        """
        Build the schema from the ``anchors`` section of settings.yaml.

        Raises:
            ConfigurationError: If the header or payment block is missing.
        """
        line_items = get_config("anchors.line_items")
        return cls(
            header=tuple(get_config("anchors.header", [])),
            invoice=get_config("anchors.invoice", "Invoice"),
            status_markers=tuple(get_config("anchors.status_markers", ["PAID"])),
            bill_to=get_config("anchors.bill_to", "Bill to:"),
            ship_to=get_config("anchors.ship_to", "Ship to:"),
            description=get_config("anchors.description", "Description"),
            line_items=_parse_line_items(line_items) if line_items else DEFAULT_LINE_ITEMS,
            payment_block=tuple(get_config("anchors.payment_block", [])),
        )


def _parse_line_items(entries: List[Dict[str, Any]]) -> Tuple[LineItemLabel, ...]:
    try:
        return tuple(
            LineItemLabel(str(e["label"]), int(e["offset"]), str(e["field"]))
            for e in entries
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(
            "Invalid anchors.line_items entry",
            {"reason": str(e)}
        ) from e


@dataclass(frozen=True)
class DetailMapping:
    """
    How invoice-detail fragments map onto named fields.

    Attributes:
        mode: "list" keeps fragments verbatim only; "positional" also
            assigns them to ``fields`` in order.
        fields: Target field names for positional mode.
        on_mismatch: "strict" fails on any count mismatch; "truncate"
            drops excess fragments (missing fragments still fail).
    """
    mode: str = "list"
    fields: Tuple[str, ...] = DEFAULT_DETAIL_FIELDS
    on_mismatch: str = "strict"

    def __post_init__(self):
        if self.mode not in ("list", "positional"):
            raise ConfigurationError(f"Unknown invoice details mode: {self.mode}")
        if self.on_mismatch not in ("strict", "truncate"):
            raise ConfigurationError(f"Unknown mismatch policy: {self.on_mismatch}")

    @classmethod
    def from_config(cls) -> 'DetailMapping':
        return cls(
            mode=get_config("extraction.invoice_details.mode", "list"),
            fields=tuple(get_config(
                "extraction.invoice_details.fields", list(DEFAULT_DETAIL_FIELDS)
            )),
            on_mismatch=get_config("extraction.invoice_details.on_mismatch", "strict"),
        )


def max_rows_from_config() -> Optional[int]:
    value = get_config("extraction.max_rows")
    return int(value) if value is not None else None
