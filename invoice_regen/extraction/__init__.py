"""
Extraction Module for the Invoice Regeneration System.

Anchor-driven recovery of invoice fields from a fragment stream.

Author: Invoice Tooling Team
"""

from .anchors import AnchorSchema, DetailMapping, LineItemLabel
from .extractor import AnchorFieldExtractor
from .invoice_record import InvoiceRecord

__all__ = [
    'AnchorSchema',
    'DetailMapping',
    'LineItemLabel',
    'AnchorFieldExtractor',
    'InvoiceRecord',
]
