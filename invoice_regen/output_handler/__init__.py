"""
Output Handler Module for the Invoice Regeneration System.

This module provides functionality for:
    - Template parameter assembly and currency formatting
    - HTML rendering with Jinja2
    - PDF conversion through wkhtmltopdf
    - Excel reconciliation reports

Author: Invoice Tooling Team
"""

from .assembler import ParameterAssembler
from .converter import PDFConverter
from .excel_exporter import ReconciliationReport
from .handler import OutputHandler
from .outcome import DocumentOutcome
from .renderer import HTMLRenderer

__all__ = [
    'ParameterAssembler',
    'PDFConverter',
    'ReconciliationReport',
    'OutputHandler',
    'DocumentOutcome',
    'HTMLRenderer',
]
