"""Tests for the anchor field extractor."""

import copy

import pytest

from invoice_regen.extraction import AnchorFieldExtractor, DetailMapping
from invoice_regen.input_handler import FragmentStream
from invoice_regen.utils.exceptions import MalformedDocumentError

from conftest import BILL_TO, DETAILS, LINE_ITEMS, SHIP_TO


@pytest.fixture
def extractor():
    return AnchorFieldExtractor()


def test_well_formed_row(extractor, make_stream):
    record = extractor.extract(make_stream())

    assert record.status == "PAID"
    assert record.invoice_details == DETAILS
    assert record.bill_to == BILL_TO
    assert record.ship_to == SHIP_TO
    assert record.description == "Wireless Headphones"
    assert record.quantity == "1"
    assert record.subtotal == "€100,00"
    assert record.shipping == "€10,00"
    assert record.total == "€129,00"
    assert record.discount is None
    assert record.rows_parsed == 1
    assert record.source_file == "invoice-0042.pdf"


def test_monetary_strings_are_kept_raw(extractor, make_row, make_stream):
    items = ["Qty", "Price", "Desk", "2", "€1.234,56",
             "Subtotal:", "€1.234,56", "Shipping:", "Free shipping", "Total:", "€1.469,13"]
    record = extractor.extract(make_stream(make_row(line_items=items)))

    assert record.subtotal == "€1.234,56"
    assert record.shipping == "Free shipping"


def test_status_marker_is_optional(extractor, make_row, make_stream):
    record = extractor.extract(make_stream(make_row(status=None)))

    assert record.status is None
    # The first detail must not be swallowed as a status
    assert record.invoice_details == DETAILS


def test_discount_label_is_captured(extractor, make_row, make_stream):
    items = LINE_ITEMS[:5] + ["Discount:", "€1,50"] + LINE_ITEMS[5:]
    record = extractor.extract(make_stream(make_row(line_items=items)))

    assert record.discount == "€1,50"
    assert record.subtotal == "€100,00"


def test_absent_optional_labels_stay_none(extractor, make_row, make_stream):
    items = ["Qty", "Price", "Wireless Headphones", "1", "€100,00", "Subtotal:", "€100,00"]
    record = extractor.extract(make_stream(make_row(line_items=items)))

    assert record.subtotal == "€100,00"
    assert record.shipping is None
    assert record.discount is None
    assert record.total is None
    assert "total" in record.missing_fields


@pytest.mark.parametrize("anchor", ["Invoice", "Bill to:", "Ship to:", "Description", "Payment details:"])
def test_missing_anchor_is_named(extractor, make_row, anchor):
    row = make_row()
    row.remove(anchor)

    with pytest.raises(MalformedDocumentError) as exc_info:
        extractor.extract(FragmentStream.from_rows([row]))

    assert exc_info.value.anchor == anchor
    assert exc_info.value.details["row"] == 0


def test_anchors_out_of_order(extractor, make_row):
    row = make_row()
    bill, ship = row.index("Bill to:"), row.index("Ship to:")
    row[bill], row[ship] = row[ship], row[bill]

    with pytest.raises(MalformedDocumentError) as exc_info:
        extractor.extract(FragmentStream.from_rows([row]))

    assert exc_info.value.anchor == "Ship to:"


def test_corrupt_header(extractor, make_row):
    row = make_row()
    row[2] = "20095 Hamburg"

    with pytest.raises(MalformedDocumentError) as exc_info:
        extractor.extract(FragmentStream.from_rows([row]))

    assert exc_info.value.anchor == "header"
    assert exc_info.value.details["position"] == 2


def test_corrupt_payment_block(extractor, make_row):
    row = make_row()
    row[-1] = "BIC: COBADEFFXXX"

    with pytest.raises(MalformedDocumentError) as exc_info:
        extractor.extract(FragmentStream.from_rows([row]))

    assert exc_info.value.anchor == "payment block"


def test_truncated_payment_block(extractor, make_row):
    row = make_row()[:-2]

    with pytest.raises(MalformedDocumentError) as exc_info:
        extractor.extract(FragmentStream.from_rows([row]))

    assert exc_info.value.anchor == "payment block"


def test_label_value_beyond_region(extractor, make_row, make_stream):
    items = LINE_ITEMS[:-1]

    with pytest.raises(MalformedDocumentError) as exc_info:
        extractor.extract(make_stream(make_row(line_items=items)))

    assert exc_info.value.anchor == "Total:"


def test_empty_stream(extractor):
    with pytest.raises(MalformedDocumentError):
        extractor.extract(FragmentStream())


def test_stream_is_not_modified(extractor, make_stream):
    stream = make_stream()
    before = copy.deepcopy(stream.rows)

    extractor.extract(stream)

    assert stream.rows == before


def test_later_rows_augment_record(extractor, make_row, make_stream):
    second = make_row(
        status=None,
        bill_to=["Marie Dupont", "France"],
        line_items=LINE_ITEMS[:-1] + ["€200,00"]
    )
    record = extractor.extract(make_stream(make_row(), second))

    assert record.rows_parsed == 2
    assert record.bill_to == BILL_TO + ["Marie Dupont", "France"]
    assert record.total == "€200,00"
    assert record.status == "PAID"


def test_max_rows_rejects_extra_rows(make_row, make_stream):
    extractor = AnchorFieldExtractor(max_rows=1)

    with pytest.raises(MalformedDocumentError) as exc_info:
        extractor.extract(make_stream(make_row(), make_row()))

    assert exc_info.value.anchor == "header"


def test_max_rows_from_config(config_override, make_row, make_stream):
    config_override(extraction__max_rows=1)
    extractor = AnchorFieldExtractor()

    assert extractor.max_rows == 1
    with pytest.raises(MalformedDocumentError):
        extractor.extract(make_stream(make_row(), make_row()))


class TestPositionalDetails:

    def test_fields_are_mapped_in_order(self, make_stream):
        extractor = AnchorFieldExtractor(detail_mapping=DetailMapping(mode="positional"))
        record = extractor.extract(make_stream())

        assert record.details["invoice_number"] == "Invoice number: 0042"
        assert record.details["shipping_method"] == "Shipping method: DHL"
        assert record.invoice_details == DETAILS

    def test_strict_rejects_missing_fragment(self, make_row, make_stream):
        extractor = AnchorFieldExtractor(detail_mapping=DetailMapping(mode="positional"))

        with pytest.raises(MalformedDocumentError) as exc_info:
            extractor.extract(make_stream(make_row(details=DETAILS[:-1])))

        assert exc_info.value.anchor == "Bill to:"

    def test_strict_rejects_extra_fragment(self, make_row, make_stream):
        extractor = AnchorFieldExtractor(detail_mapping=DetailMapping(mode="positional"))

        with pytest.raises(MalformedDocumentError):
            extractor.extract(make_stream(make_row(details=DETAILS + ["Customer no.: 77"])))

    def test_truncate_drops_extra_fragment(self, make_row, make_stream):
        mapping = DetailMapping(mode="positional", on_mismatch="truncate")
        extractor = AnchorFieldExtractor(detail_mapping=mapping)

        record = extractor.extract(make_stream(make_row(details=DETAILS + ["Customer no.: 77"])))

        assert len(record.details) == 6
        assert "Customer no.: 77" not in record.details.values()
        assert record.invoice_details[-1] == "Customer no.: 77"

    def test_truncate_still_rejects_missing_fragment(self, make_row, make_stream):
        mapping = DetailMapping(mode="positional", on_mismatch="truncate")
        extractor = AnchorFieldExtractor(detail_mapping=mapping)

        with pytest.raises(MalformedDocumentError):
            extractor.extract(make_stream(make_row(details=DETAILS[:2])))
