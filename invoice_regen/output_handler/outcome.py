"""
Document Outcome Module.

Per-document result of a regeneration run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from invoice_regen.extraction.invoice_record import InvoiceRecord
from invoice_regen.postprocessor.reconciliation import ReconciledTotals


@dataclass
class DocumentOutcome:
    """
    Result of processing one source invoice.

    Attributes:
        source_file: Path of the source document
        success: Whether all stages completed
        error: Error message when a stage failed
        error_type: Exception class name when a stage failed
        record: Extracted record, if extraction succeeded
        totals: Reconciled totals, if reconciliation succeeded
        outputs: Files written for this document
        processing_time: Seconds spent on the document
    """
    source_file: str
    success: bool = False
    error: Optional[str] = None
    error_type: Optional[str] = None
    record: Optional[InvoiceRecord] = None
    totals: Optional[ReconciledTotals] = None
    outputs: List[Path] = field(default_factory=list)
    processing_time: float = 0.0

    @property
    def source_name(self) -> str:
        return Path(self.source_file).name

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source_file': self.source_file,
            'success': self.success,
            'error': self.error,
            'error_type': self.error_type,
            'record': self.record.to_dict() if self.record else None,
            'totals': self.totals.to_dict() if self.totals else None,
            'outputs': [str(p) for p in self.outputs],
            'processing_time': round(self.processing_time, 3),
        }
