"""
Reconciliation Report Module.

This module writes an Excel summary of a regeneration run: one row per
source document with its reconciled totals, the absorbed margin and any
error that stopped processing. Uses openpyxl.

Features:
    - Formatted headers
    - Auto-column width
    - Failed documents highlighted
    - Amounts as numeric cells, summable in Excel

Author: Invoice Tooling Team
"""

from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from config import get_config
from invoice_regen.utils.logger import get_logger
from invoice_regen.utils.helpers import ensure_directory
from invoice_regen.utils.exceptions import ExcelExportError
from .outcome import DocumentOutcome

# Initialize module logger
logger = get_logger(__name__)


class ReconciliationReport:
    """
    Exports run outcomes to an Excel workbook.

    Attributes:
        output_dir: Directory for the report
        filename: Report file name
        sheet_name: Worksheet title

    Example:
        >>> report = ReconciliationReport()
        >>> path = report.export(outcomes)
        >>> print(f"Report saved to: {path}")
    """

    # Header, totals attribute (None for outcome-level columns)
    COLUMNS = [
        ('Source File', None),
        ('Success', None),
        ('Subtotal', 'subtotal'),
        ('Discount', 'discount'),
        ('Shipping', 'shipping'),
        ('VAT Rate', 'vat_rate'),
        ('VAT Amount', 'vat_amount'),
        ('Total excl. VAT', 'total_excl_vat'),
        ('Total', 'total'),
        ('Printed Total', 'printed_total'),
        ('Margin', 'margin'),
        ('Adjusted Field', 'adjusted_field'),
        ('Error', None),
    ]

    NUMBER_FORMATS = {
        'vat_rate': '0.00%',
    }
    MONEY_FORMAT = '0.00'

    def __init__(
        self,
        output_dir: Optional[Union[str, Path]] = None,
        filename: Optional[str] = None
    ) -> None:
        """Initialize the report with configuration."""
        self.output_dir = Path(output_dir or get_config("paths.report_dir", "outputs"))
        self.filename = filename or get_config(
            "output.excel.filename", "reconciliation_report.xlsx"
        )
        self.sheet_name = get_config("output.excel.sheet_name", "Reconciliation")

        logger.debug(f"ReconciliationReport initialized (output_dir: {self.output_dir})")

    def export(self, outcomes: List[DocumentOutcome]) -> Path:
        """
        Write the report workbook.

        Args:
            outcomes: Outcomes of the processed documents.

        Returns:
            Path to the created Excel file.

        Raises:
            ExcelExportError: If there is nothing to export or saving fails.
        """
        if not outcomes:
            raise ExcelExportError("No outcomes", "No outcomes to export")

        ensure_directory(self.output_dir)
        filepath = self.output_dir / self.filename

        workbook = Workbook()
        self._fill_sheet(workbook.active, outcomes)

        try:
            workbook.save(filepath)
        except OSError as e:
            logger.error(f"Excel export failed: {e}")
            raise ExcelExportError(str(filepath), str(e)) from e

        logger.info(f"Reconciliation report saved: {filepath} ({len(outcomes)} documents)")
        return filepath

    def _row_values(self, outcome: DocumentOutcome) -> list:
        values = []
        for header, attribute in self.COLUMNS:
            if header == 'Source File':
                values.append(outcome.source_name)
            elif header == 'Success':
                values.append("yes" if outcome.success else "no")
            elif header == 'Error':
                values.append(outcome.error or '')
            elif outcome.totals is None:
                values.append(None)
            else:
                values.append(getattr(outcome.totals, attribute))
        return values

    def _fill_sheet(self, sheet, outcomes: List[DocumentOutcome]) -> None:
        sheet.title = self.sheet_name

        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
        error_fill = PatternFill(start_color="F8CBAD", end_color="F8CBAD", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        for col, (header_name, _) in enumerate(self.COLUMNS, 1):
            cell = sheet.cell(row=1, column=col, value=header_name)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment
            cell.border = thin_border

        for row_num, outcome in enumerate(outcomes, 2):
            for col, value in enumerate(self._row_values(outcome), 1):
                cell = sheet.cell(row=row_num, column=col, value=value)
                cell.border = thin_border
                attribute = self.COLUMNS[col - 1][1]
                if isinstance(value, Decimal):
                    cell.number_format = self.NUMBER_FORMATS.get(attribute, self.MONEY_FORMAT)
                if not outcome.success:
                    cell.fill = error_fill

        # Adjust column widths
        for col, (header_name, _) in enumerate(self.COLUMNS, 1):
            max_length = len(header_name)
            for row in range(2, len(outcomes) + 2):
                cell_value = sheet.cell(row=row, column=col).value
                if cell_value:
                    max_length = max(max_length, len(str(cell_value)))
            sheet.column_dimensions[get_column_letter(col)].width = min(max_length + 2, 60)

        sheet.freeze_panes = 'A2'
