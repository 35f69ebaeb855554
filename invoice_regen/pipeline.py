"""
Regeneration Pipeline Module.

Drives one source invoice through every stage:

    PDF text fragments -> anchor extraction -> VAT resolution
        -> reconciliation -> template parameters -> HTML / PDF

A batch run processes documents independently. A failing document is
logged and skipped unless fail-fast mode is on.

Author: Invoice Tooling Team
"""

import time
from pathlib import Path
from typing import Callable, List, Optional, Union

from invoice_regen.extraction import AnchorFieldExtractor
from invoice_regen.input_handler import FragmentStream, InputHandler, PDFFragmentReader
from invoice_regen.output_handler import DocumentOutcome, OutputHandler, ParameterAssembler
from invoice_regen.postprocessor import ReconciliationEngine
from invoice_regen.utils.logger import get_logger
from invoice_regen.utils.exceptions import InvoiceRegenError
from invoice_regen.vat import VatResolver

# Initialize module logger
logger = get_logger(__name__)

FragmentReader = Callable[[Union[str, Path]], FragmentStream]


class InvoiceRegenerator:
    """
    Coordinates the regeneration stages for a batch of invoices.

    Every collaborator can be replaced, which keeps the pipeline testable
    without PDF files or the wkhtmltopdf binary.

    Example:
        >>> regenerator = InvoiceRegenerator()
        >>> outcomes = regenerator.run("invoice/pdf")
        >>> sum(o.success for o in outcomes)
        12
    """

    def __init__(
        self,
        reader: Optional[FragmentReader] = None,
        extractor: Optional[AnchorFieldExtractor] = None,
        resolver: Optional[VatResolver] = None,
        engine: Optional[ReconciliationEngine] = None,
        assembler: Optional[ParameterAssembler] = None,
        output_handler: Optional[OutputHandler] = None,
        input_handler: Optional[InputHandler] = None,
        fail_fast: bool = False
    ) -> None:
        self.reader = reader or PDFFragmentReader()
        self.extractor = extractor or AnchorFieldExtractor()
        self.resolver = resolver or VatResolver()
        self.engine = engine or ReconciliationEngine()
        self.assembler = assembler or ParameterAssembler()
        self.output_handler = output_handler or OutputHandler()
        self.input_handler = input_handler or InputHandler()
        self.fail_fast = fail_fast

    def process_document(self, path: Union[str, Path]) -> DocumentOutcome:
        """
        Regenerate a single invoice.

        Args:
            path: Path to the source invoice.

        Returns:
            DocumentOutcome with the record, totals and written files.

        Raises:
            InvoiceRegenError: Any stage failure, with its context.
        """
        path = Path(path)
        started = time.perf_counter()
        outcome = DocumentOutcome(source_file=str(path))

        stream = self.reader(path)
        record = self.extractor.extract(stream)
        outcome.record = record

        vat_rate = self.resolver.resolve_record(record)
        totals = self.engine.reconcile_record(record, vat_rate)
        outcome.totals = totals

        params = self.assembler.assemble(record, totals)
        outcome.outputs = self.output_handler.write(params, path.name)

        outcome.success = True
        outcome.processing_time = time.perf_counter() - started
        return outcome

    def run(self, input_location: Union[str, Path]) -> List[DocumentOutcome]:
        """
        Regenerate every invoice found at a file or directory.

        Args:
            input_location: A source invoice or a directory of invoices.

        Returns:
            One outcome per discovered document, in processing order.

        Raises:
            InvoiceRegenError: In fail-fast mode, the first failure.
        """
        files = self.input_handler.discover(input_location)
        outcomes = []

        for file_path in files:
            logger.info(f"Processing: {file_path.name}")
            try:
                outcome = self.process_document(file_path)
            except InvoiceRegenError as e:
                if self.fail_fast:
                    raise
                logger.error(f"Skipping {file_path.name}: {e}")
                outcome = DocumentOutcome(
                    source_file=str(file_path),
                    error=e.message,
                    error_type=type(e).__name__
                )
            else:
                logger.info(
                    f"  Regenerated: total {outcome.totals.total}, "
                    f"margin {outcome.totals.margin}"
                )
            outcomes.append(outcome)

        if outcomes:
            report_path = self.output_handler.write_report(outcomes)
            if report_path:
                logger.info(f"Reconciliation report: {report_path}")

        succeeded = sum(1 for o in outcomes if o.success)
        logger.info(f"Regenerated {succeeded} of {len(outcomes)} invoices")
        return outcomes
