"""
Custom Exceptions Module.

This module defines all custom exceptions used throughout the invoice
regeneration system. Every core failure carries positional context
(which anchor, which field, which value) in its details dictionary so
the batch driver can log exactly why a document was skipped.

Exception Hierarchy:
    InvoiceRegenError (base)
    ├── ConfigurationError
    ├── InputError
    │   ├── FileNotFoundError
    │   └── CorruptedFileError
    ├── ExtractionError
    │   └── MalformedDocumentError
    ├── ReconciliationError
    │   ├── InvalidAmountError
    │   ├── InvalidDateError
    │   └── MissingRequiredFieldError
    ├── VatError
    │   └── UnresolvedVatRateError
    └── OutputError
        ├── RenderError
        ├── ConversionError
        └── ExcelExportError
"""

from typing import Optional


class InvoiceRegenError(Exception):
    """
    Base exception for all invoice regeneration errors.

    All custom exceptions in this system inherit from this class,
    allowing for easy catching of all system-specific errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(InvoiceRegenError):
    """Raised when the settings file is missing or unusable."""
    pass


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(InvoiceRegenError):
    """Base exception for input handling errors."""
    pass


class FileNotFoundError(InputError):
    """Raised when an input file or directory cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class CorruptedFileError(InputError):
    """Raised when a PDF cannot be opened or has no text layer."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Corrupted or unreadable file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# EXTRACTION ERRORS
# =============================================================================

class ExtractionError(InvoiceRegenError):
    """Base exception for fragment stream extraction errors."""
    pass


class MalformedDocumentError(ExtractionError):
    """
    Raised when the fragment stream does not follow the fixed layout.

    Example:
        >>> raise MalformedDocumentError("Ship to:", "anchor not found", position=14)
    """

    def __init__(
        self,
        anchor: str,
        reason: str,
        position: Optional[int] = None,
        row: Optional[int] = None
    ):
        message = f"Malformed document at '{anchor}': {reason}"
        details = {"anchor": anchor, "reason": reason}
        if position is not None:
            details["position"] = position
        if row is not None:
            details["row"] = row
        self.anchor = anchor
        self.reason = reason
        super().__init__(message, details)


# =============================================================================
# RECONCILIATION ERRORS
# =============================================================================

class ReconciliationError(InvoiceRegenError):
    """Base exception for monetary reconciliation errors."""
    pass


class InvalidAmountError(ReconciliationError):
    """Raised when a monetary string cannot be normalized."""

    def __init__(self, field: str, value: str, reason: str = None):
        message = f"Invalid amount for field '{field}': '{value}'"
        details = {"field": field, "value": value, "reason": reason}
        self.field = field
        self.value = value
        super().__init__(message, details)


class InvalidDateError(ReconciliationError):
    """Raised when a date needed for VAT selection cannot be parsed."""

    def __init__(self, value: str, formats: list = None):
        message = f"Invalid date: '{value}'"
        details = {"value": value, "formats": formats or []}
        self.value = value
        super().__init__(message, details)


class MissingRequiredFieldError(ReconciliationError):
    """Raised when a field the arithmetic depends on is absent."""

    def __init__(self, field: str):
        message = f"Required field missing: {field}"
        details = {"field": field}
        self.field = field
        super().__init__(message, details)


# =============================================================================
# VAT ERRORS
# =============================================================================

class VatError(InvoiceRegenError):
    """Base exception for VAT resolution errors."""
    pass


class UnresolvedVatRateError(VatError):
    """Raised when no rate matches and no default country is configured."""

    def __init__(self, country: str):
        message = f"No VAT rate found for country: '{country}'"
        details = {"country": country}
        self.country = country
        super().__init__(message, details)


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(InvoiceRegenError):
    """Base exception for output handling errors."""
    pass


class RenderError(OutputError):
    """Raised when the HTML template cannot be rendered or written."""

    def __init__(self, target: str, reason: str = None):
        message = f"Failed to render invoice: {target}"
        details = {"target": target, "reason": reason}
        super().__init__(message, details)


class ConversionError(OutputError):
    """Raised when HTML to PDF conversion fails."""

    def __init__(self, source: str, reason: str = None):
        message = f"Failed to convert to PDF: {source}"
        details = {"source": source, "reason": reason}
        super().__init__(message, details)


class ExcelExportError(OutputError):
    """Raised when the Excel report cannot be written."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Failed to export Excel file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


__all__ = [
    'InvoiceRegenError',
    'ConfigurationError',
    'InputError',
    'FileNotFoundError',
    'CorruptedFileError',
    'ExtractionError',
    'MalformedDocumentError',
    'ReconciliationError',
    'InvalidAmountError',
    'InvalidDateError',
    'MissingRequiredFieldError',
    'VatError',
    'UnresolvedVatRateError',
    'OutputError',
    'RenderError',
    'ConversionError',
    'ExcelExportError',
]
