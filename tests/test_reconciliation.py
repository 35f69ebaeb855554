"""Tests for the monetary reconciliation engine."""

from decimal import Decimal

import pytest

from invoice_regen.extraction import InvoiceRecord
from invoice_regen.postprocessor import ReconciliationEngine
from invoice_regen.utils.exceptions import InvalidAmountError, MissingRequiredFieldError

RATE = Decimal("0.19")


@pytest.fixture
def engine():
    return ReconciliationEngine()


def test_consistent_amounts_need_no_adjustment(engine):
    totals = engine.reconcile("€100,00", None, "€10,00", "€129,00", RATE)

    assert totals.vat_amount == Decimal("19.00")
    assert totals.margin == 0
    assert totals.adjusted_field is None
    assert totals.discount == 0
    assert totals.shipping == Decimal("10.00")
    assert totals.total_excl_vat == Decimal("110.00")
    assert totals.total == Decimal("129.00")
    assert totals.is_balanced()


def test_margin_becomes_discount_when_shipping_is_free(engine):
    totals = engine.reconcile("€50,00", None, "Free shipping", "€58,00", RATE)

    assert totals.vat_amount == Decimal("9.50")
    assert totals.margin == Decimal("1.50")
    assert totals.discount == Decimal("1.50")
    assert totals.shipping == 0
    assert totals.adjusted_field == "discount"
    assert totals.total_excl_vat == Decimal("48.50")
    assert totals.total == Decimal("58.00")
    assert totals.is_balanced()


def test_existing_discount_absorbs_margin(engine):
    # 100 + 19 + 10 - 5 = 124, printed 123.99
    totals = engine.reconcile("€100,00", "€5,00", "€10,00", "€123,99", RATE)

    assert totals.margin == Decimal("0.01")
    assert totals.discount == Decimal("5.01")
    assert totals.shipping == Decimal("10.00")
    assert totals.total == Decimal("123.99")


def test_shipping_absorbs_margin(engine):
    totals = engine.reconcile("€100,00", None, "€4,99", "€123,98", RATE)

    assert totals.margin == Decimal("0.01")
    assert totals.adjusted_field == "shipping"
    assert totals.shipping == Decimal("4.98")
    assert totals.discount == 0
    assert totals.total == Decimal("123.98")


def test_negative_margin(engine):
    totals = engine.reconcile("€100,00", None, "€10,00", "€129,02", RATE)

    assert totals.margin == Decimal("-0.02")
    assert totals.adjusted_field == "shipping"
    assert totals.shipping == Decimal("10.02")
    assert totals.total == Decimal("129.02")


def test_printed_total_is_preserved(engine):
    totals = engine.reconcile("€1.234,56", "€12,34", "€4,95", "€1.467,00", RATE)

    assert totals.total == totals.printed_total == Decimal("1467.00")
    assert totals.is_balanced()


def test_vat_amount_rounds_half_up(engine):
    # 0.50 * 0.19 = 0.095
    totals = engine.reconcile("€0,50", None, None, None, RATE)

    assert totals.vat_amount == Decimal("0.10")


def test_absent_total_means_no_margin(engine):
    totals = engine.reconcile("€100,00", None, None, None, RATE)

    assert totals.printed_total is None
    assert totals.margin == 0
    assert totals.total == Decimal("119.00")


def test_missing_subtotal(engine):
    with pytest.raises(MissingRequiredFieldError) as exc_info:
        engine.reconcile(None, None, "€10,00", "€129,00", RATE)

    assert exc_info.value.field == "subtotal"


def test_invalid_amount_names_field(engine):
    with pytest.raises(InvalidAmountError) as exc_info:
        engine.reconcile("€100,00", "ten", None, "€129,00", RATE)

    assert exc_info.value.field == "discount"


@pytest.mark.parametrize("subtotal,shipping,total,vat,margin,discount,excl_vat", [
    ("100,00", "10,00", "129,00", "19.00", "0", "0", "110.00"),
    ("50,00", "0,00", "58,00", "9.50", "1.50", "1.50", "48.50"),
])
def test_bare_amounts(engine, subtotal, shipping, total, vat, margin, discount, excl_vat):
    totals = engine.reconcile(subtotal, None, shipping, total, RATE)

    assert totals.vat_amount == Decimal(vat)
    assert totals.margin == Decimal(margin)
    assert totals.discount == Decimal(discount)
    assert totals.total_excl_vat == Decimal(excl_vat)
    assert totals.total == Decimal(total.replace(",", "."))


@pytest.mark.parametrize("subtotal,shipping,total", [
    ("100,00", "10,00", "129,00"),
    ("50,00", "Free shipping", "58,00"),
    ("1.234,56", "4,95", "1.467,00"),
])
def test_totals_close_without_shipping_and_discount(engine, subtotal, shipping, total):
    totals = engine.reconcile(subtotal, None, shipping, total, RATE)

    # total_excl_vat already carries shipping and discount
    shipping_value = discount_value = Decimal(0)
    recomputed = totals.total_excl_vat + shipping_value - discount_value + totals.vat_amount

    assert recomputed == totals.total
    assert totals.total == totals.printed_total


def test_float_rate_is_taken_at_face_value(engine):
    totals = engine.reconcile("100,00", None, None, None, 0.19)

    assert totals.vat_rate == Decimal("0.19")
    assert totals.to_dict()["vat_rate"] == "0.19"
    assert totals.vat_amount == Decimal("19.00")


def test_reconcile_record(engine):
    record = InvoiceRecord(subtotal="€100,00", shipping="€10,00", total="€129,00")

    totals = engine.reconcile_record(record, RATE)

    assert totals.total == Decimal("129.00")
    assert totals.to_dict()["vat_amount"] == "19.00"
