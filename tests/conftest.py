"""Shared fixtures for the invoice regeneration tests."""

from typing import List, Optional

import pytest

from config import ConfigurationManager, get_config
from invoice_regen.input_handler import FragmentStream


DETAILS = [
    "Invoice number: 0042",
    "Invoice date: March 5, 2021",
    "Order date: March 4, 2021",
    "Order number: 1001",
    "Payment method: PayPal",
    "Shipping method: DHL",
]

BILL_TO = ["Jan de Vries", "Lange Voorhout 9", "2514 EA Den Haag", "Netherlands"]

SHIP_TO = ["Jan de Vries", "Lange Voorhout 9", "2514 EA Den Haag", "Netherlands"]

LINE_ITEMS = [
    "Qty", "Price",
    "Wireless Headphones", "1", "€100,00",
    "Subtotal:", "€100,00",
    "Shipping:", "€10,00",
    "Total:", "€129,00",
]


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts from the packaged settings.yaml."""
    ConfigurationManager.reset()
    ConfigurationManager()
    yield
    ConfigurationManager.reset()


@pytest.fixture
def config_override():
    """Patch configuration values for one test, e.g. ``vat__default_country=None``."""
    def apply(**values):
        config = ConfigurationManager()._config
        for key_path, value in values.items():
            node = config
            *parents, leaf = key_path.split("__")
            for key in parents:
                node = node.setdefault(key, {})
            node[leaf] = value
        ConfigurationManager().clear_cache()
    return apply


def build_row(
    status: Optional[str] = "PAID",
    details: Optional[List[str]] = None,
    bill_to: Optional[List[str]] = None,
    ship_to: Optional[List[str]] = None,
    line_items: Optional[List[str]] = None
) -> List[str]:
    """Assemble one well-formed row from the configured anchors."""
    row = list(get_config("anchors.header"))
    row.append(get_config("anchors.invoice"))
    if status:
        row.append(status)
    row.extend(DETAILS if details is None else details)
    row.append(get_config("anchors.bill_to"))
    row.extend(BILL_TO if bill_to is None else bill_to)
    row.append(get_config("anchors.ship_to"))
    row.extend(SHIP_TO if ship_to is None else ship_to)
    row.append(get_config("anchors.description"))
    row.extend(LINE_ITEMS if line_items is None else line_items)
    row.extend(get_config("anchors.payment_block"))
    return row


@pytest.fixture
def make_row():
    return build_row


@pytest.fixture
def make_stream():
    def factory(*rows, source="invoice-0042.pdf"):
        return FragmentStream.from_rows(rows or [build_row()], source=source)
    return factory
