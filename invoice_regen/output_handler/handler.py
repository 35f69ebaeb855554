"""
Main Output Handler Module.

This module provides the unified OutputHandler class that coordinates
all output operations (HTML rendering, PDF conversion, Excel report).

Author: Invoice Tooling Team
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from config import get_config
from invoice_regen.utils.logger import get_logger
from .converter import PDFConverter
from .excel_exporter import ReconciliationReport
from .outcome import DocumentOutcome
from .renderer import HTMLRenderer

# Initialize module logger
logger = get_logger(__name__)


class OutputHandler:
    """
    Unified output handler for regenerated invoices.

    Writes the HTML document for every invoice and converts it to PDF
    when conversion is enabled. The Excel report is written once per run.

    Attributes:
        pdf_enabled: Whether HTML files are converted to PDF
        excel_enabled: Whether the reconciliation report is written
        renderer: HTMLRenderer instance
        converter: PDFConverter instance

    Example:
        >>> handler = OutputHandler()
        >>> paths = handler.write(params, "invoice-0042.pdf")
        >>> handler.write_report(outcomes)
    """

    def __init__(
        self,
        output_dir: Optional[Union[str, Path]] = None,
        pdf_enabled: Optional[bool] = None,
        excel_enabled: Optional[bool] = None,
        renderer: Optional[HTMLRenderer] = None,
        converter: Optional[PDFConverter] = None
    ) -> None:
        """
        Initialize the output handler.

        Args:
            output_dir: Override config for the document output directory.
            pdf_enabled: Override config for PDF conversion.
            excel_enabled: Override config for the Excel report.
            renderer: Custom renderer.
            converter: Custom converter.
        """
        self.pdf_enabled = pdf_enabled if pdf_enabled is not None else \
            get_config("output.pdf.enabled", True)
        self.excel_enabled = excel_enabled if excel_enabled is not None else \
            get_config("output.excel.enabled", False)

        self.renderer = renderer or HTMLRenderer(output_dir=output_dir)
        self._converter = converter
        self._report = None

        logger.info(
            f"OutputHandler initialized "
            f"(pdf={self.pdf_enabled}, excel={self.excel_enabled})"
        )

    @property
    def converter(self) -> PDFConverter:
        """Get or create the PDF converter."""
        if self._converter is None:
            self._converter = PDFConverter()
        return self._converter

    @property
    def report(self) -> ReconciliationReport:
        """Get or create the reconciliation report."""
        if self._report is None:
            self._report = ReconciliationReport()
        return self._report

    def write(self, params: Dict[str, Any], source_name: str) -> List[Path]:
        """
        Write the regenerated document for one invoice.

        Args:
            params: Assembled template parameters.
            source_name: File name of the source invoice.

        Returns:
            Paths of the files that remain on disk.

        Raises:
            RenderError: If the HTML cannot be produced.
            ConversionError: If PDF conversion is enabled and fails.
        """
        html_path = self.renderer.render_to_file(params, source_name)
        if not self.pdf_enabled:
            return [html_path]

        pdf_path = self.converter.convert(html_path)
        if html_path.exists():
            return [html_path, pdf_path]
        return [pdf_path]

    def write_report(self, outcomes: List[DocumentOutcome]) -> Optional[Path]:
        """
        Write the reconciliation report if enabled.

        Returns:
            Path to the report, or None when the report is disabled.
        """
        if not self.excel_enabled:
            return None
        return self.report.export(outcomes)
