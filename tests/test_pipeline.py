"""Tests for the regeneration pipeline and the reconciliation report."""

from decimal import Decimal

import pytest
from openpyxl import load_workbook

from invoice_regen.input_handler import FragmentStream
from invoice_regen.output_handler import DocumentOutcome, OutputHandler, ReconciliationReport
from invoice_regen.pipeline import InvoiceRegenerator
from invoice_regen.postprocessor import ReconciliationEngine
from invoice_regen.utils.exceptions import ExcelExportError, MalformedDocumentError

from conftest import build_row


class FakeReader:
    """Returns prepared fragment rows keyed by file name."""

    def __init__(self, rows_by_name):
        self.rows_by_name = rows_by_name

    def __call__(self, path):
        return FragmentStream.from_rows(self.rows_by_name[path.name], source=path.name)


@pytest.fixture
def input_dir(tmp_path):
    directory = tmp_path / "pdf"
    directory.mkdir()
    for name in ("a.pdf", "b.pdf"):
        (directory / name).write_bytes(b"%PDF-1.4 placeholder")
    (directory / "notes.txt").write_text("ignored", encoding="utf-8")
    return directory


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "new"


def make_regenerator(rows_by_name, output_dir, **kwargs):
    return InvoiceRegenerator(
        reader=FakeReader(rows_by_name),
        output_handler=OutputHandler(output_dir=output_dir, pdf_enabled=False),
        **kwargs
    )


def test_process_document(input_dir, output_dir):
    regenerator = make_regenerator({"a.pdf": [build_row()]}, output_dir)

    outcome = regenerator.process_document(input_dir / "a.pdf")

    assert outcome.success
    assert outcome.totals.total == Decimal("129.00")
    assert outcome.record.bill_to[-1] == "Netherlands"
    assert outcome.outputs == [output_dir / "a.pdf.html"]
    assert "€129,00" in outcome.outputs[0].read_text(encoding="utf-8")


def test_run_skips_failing_documents(input_dir, output_dir):
    broken = build_row()
    broken.remove("Ship to:")
    regenerator = make_regenerator({"a.pdf": [broken], "b.pdf": [build_row()]}, output_dir)

    outcomes = regenerator.run(input_dir)

    assert [o.source_name for o in outcomes] == ["a.pdf", "b.pdf"]
    assert not outcomes[0].success
    assert outcomes[0].error_type == "MalformedDocumentError"
    assert "Ship to:" in outcomes[0].error
    assert outcomes[1].success
    assert not (output_dir / "a.pdf.html").exists()
    assert (output_dir / "b.pdf.html").exists()


def test_run_fail_fast(input_dir, output_dir):
    broken = build_row()
    broken.remove("Ship to:")
    regenerator = make_regenerator(
        {"a.pdf": [broken], "b.pdf": [build_row()]}, output_dir, fail_fast=True
    )

    with pytest.raises(MalformedDocumentError):
        regenerator.run(input_dir)

    assert not (output_dir / "b.pdf.html").exists()


def test_run_single_file(input_dir, output_dir):
    regenerator = make_regenerator({"b.pdf": [build_row()]}, output_dir)

    outcomes = regenerator.run(input_dir / "b.pdf")

    assert len(outcomes) == 1
    assert outcomes[0].success


def test_outcome_to_dict(input_dir, output_dir):
    regenerator = make_regenerator({"a.pdf": [build_row()]}, output_dir)

    data = regenerator.process_document(input_dir / "a.pdf").to_dict()

    assert data["success"] is True
    assert data["totals"]["total"] == "129.00"
    assert data["record"]["status"] == "PAID"


class TestReconciliationReport:

    def test_export(self, tmp_path):
        totals = ReconciliationEngine().reconcile("€50,00", None, "Free shipping", "€58,00", Decimal("0.19"))
        outcomes = [
            DocumentOutcome(source_file="/in/a.pdf", success=True, totals=totals),
            DocumentOutcome(source_file="/in/b.pdf", error="Malformed document at 'Ship to:'"),
        ]

        path = ReconciliationReport(output_dir=tmp_path).export(outcomes)

        sheet = load_workbook(path)["Reconciliation"]
        headers = [cell.value for cell in sheet[1]]
        first = dict(zip(headers, [cell.value for cell in sheet[2]]))
        second = dict(zip(headers, [cell.value for cell in sheet[3]]))

        assert path == tmp_path / "reconciliation_report.xlsx"
        assert first["Source File"] == "a.pdf"
        assert first["Margin"] == pytest.approx(1.5)
        assert first["Adjusted Field"] == "discount"
        assert first["Total"] == pytest.approx(58.0)
        assert first["VAT Rate"] == pytest.approx(0.19)
        assert second["Total"] is None
        assert sheet["I2"].number_format == "0.00"
        assert sheet["F2"].number_format == "0.00%"
        assert second["Success"] == "no"
        assert second["Error"] == "Malformed document at 'Ship to:'"

    def test_nothing_to_export(self, tmp_path):
        with pytest.raises(ExcelExportError):
            ReconciliationReport(output_dir=tmp_path).export([])

    def test_written_by_run_when_enabled(self, input_dir, tmp_path, config_override):
        config_override(paths__report_dir=str(tmp_path / "reports"))
        regenerator = InvoiceRegenerator(
            reader=FakeReader({"a.pdf": [build_row()], "b.pdf": [build_row()]}),
            output_handler=OutputHandler(
                output_dir=tmp_path / "new", pdf_enabled=False, excel_enabled=True
            )
        )

        regenerator.run(input_dir)

        assert (tmp_path / "reports" / "reconciliation_report.xlsx").exists()
