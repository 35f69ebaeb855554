"""
VAT Module for the Invoice Regeneration System.

Country rate table and the resolver that picks the rate for an invoice.
"""

from .rate_table import VatRate, VatRateTable, get_vat_rate_table
from .resolver import VatResolver

__all__ = ['VatRate', 'VatRateTable', 'get_vat_rate_table', 'VatResolver']
