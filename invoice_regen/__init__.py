"""
Invoice Regeneration System - Source Package.

Reads text-based invoice PDFs, recovers their fields by anchor matching,
resolves the applicable VAT rate, reconciles the printed amounts and
regenerates the invoice from an HTML template.

Modules:
    - input_handler: Source discovery and PDF text fragments
    - extraction: Anchor-driven field extraction
    - vat: VAT rate table and country resolution
    - postprocessor: Amount normalization and reconciliation
    - output_handler: Template parameters, HTML, PDF and Excel output

Architecture:
    Input → Extraction → VAT → Reconciliation → Output
"""

__version__ = "1.0.0"
__author__ = "Invoice Tooling Team"

__all__ = [
    'input_handler',
    'extraction',
    'vat',
    'postprocessor',
    'output_handler',
    'utils'
]
