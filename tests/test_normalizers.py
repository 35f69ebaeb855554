"""Tests for amount and date normalization."""

from datetime import date
from decimal import Decimal

import pytest

from invoice_regen.postprocessor import AmountNormalizer, DateNormalizer
from invoice_regen.utils.exceptions import InvalidAmountError, InvalidDateError


@pytest.fixture
def normalizer():
    return AmountNormalizer()


@pytest.mark.parametrize("raw,expected", [
    ("1.234,56", Decimal("1234.56")),
    ("€1.234,56", Decimal("1234.56")),
    ("€ 100,00", Decimal("100.00")),
    ("129,00", Decimal("129.00")),
    ("-€1,50", Decimal("-1.50")),
    ("€1.000.000,00", Decimal("1000000.00")),
    ("42", Decimal("42")),
])
def test_to_decimal(normalizer, raw, expected):
    assert normalizer.to_decimal(raw) == expected


@pytest.mark.parametrize("raw", ["Free shipping", "free shipping", "  FREE SHIPPING "])
def test_free_shipping_is_zero(normalizer, raw):
    assert normalizer.to_decimal(raw, "shipping") == Decimal(0)


@pytest.mark.parametrize("raw", ["", "abc", "€", "12,34,56", "1,2x"])
def test_invalid_amount(normalizer, raw):
    with pytest.raises(InvalidAmountError) as exc_info:
        normalizer.to_decimal(raw, "total")

    assert exc_info.value.field == "total"
    assert exc_info.value.value == raw


def test_absent_amount(normalizer):
    with pytest.raises(InvalidAmountError):
        normalizer.to_decimal(None, "subtotal")


def test_normalize_returns_none_for_garbage(normalizer):
    assert normalizer.normalize("1.234,56") == "1234.56"
    assert normalizer.normalize("n/a") is None


def test_custom_separators():
    normalizer = AmountNormalizer(symbol="$", thousands_separator=",", decimal_separator=".")

    assert normalizer.to_decimal("$1,234.56") == Decimal("1234.56")


class TestDateNormalizer:

    @pytest.mark.parametrize("raw,expected", [
        ("March 5, 2021", date(2021, 3, 5)),
        ("July 15, 2021", date(2021, 7, 15)),
        ("05.03.2021", date(2021, 3, 5)),
        ("  March  5,  2021 ", date(2021, 3, 5)),
    ])
    def test_supported_formats(self, raw, expected):
        assert DateNormalizer().parse(raw) == expected

    @pytest.mark.parametrize("raw", ["2021-03-05", "5 March 2021", "", "31.02.2021"])
    def test_unsupported(self, raw):
        with pytest.raises(InvalidDateError):
            DateNormalizer().parse(raw)
