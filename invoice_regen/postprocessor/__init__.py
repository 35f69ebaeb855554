"""
Post-Processing Module for the Invoice Regeneration System.

This module provides functionality for:
    - Amount normalization (locale separators, "Free shipping")
    - Issue date parsing
    - Monetary reconciliation of printed totals

Author: Invoice Tooling Team
"""

from .normalizers import AmountNormalizer, DateNormalizer
from .reconciliation import ReconciledTotals, ReconciliationEngine

__all__ = [
    'AmountNormalizer',
    'DateNormalizer',
    'ReconciledTotals',
    'ReconciliationEngine',
]
