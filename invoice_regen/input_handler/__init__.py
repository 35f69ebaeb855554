"""
Input Handler Module for the Invoice Regeneration System.

This module provides functionality for:
    - Locating and validating source invoices
    - Reading the PDF text layer into an ordered fragment stream

Author: Invoice Tooling Team
"""

from .fragments import FragmentStream
from .handler import InputHandler
from .pdf_processor import PDFFragmentReader

__all__ = ['FragmentStream', 'InputHandler', 'PDFFragmentReader']
