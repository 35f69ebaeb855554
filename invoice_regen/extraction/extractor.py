"""
Anchor Field Extractor Module.

This module provides the AnchorFieldExtractor, a single-pass state
machine over a FragmentStream. Literal anchors split each row into
sections; the sections become the raw fields of an InvoiceRecord.

Section order within a row:
    header block -> "Invoice" [status] -> invoice details -> "Bill to:"
    -> billing lines -> "Ship to:" -> shipping lines -> "Description"
    -> line-item region -> payment block

Author: Invoice Tooling Team
"""

from typing import List, Optional, Sequence, Tuple

from invoice_regen.input_handler.fragments import FragmentStream
from invoice_regen.utils.logger import get_logger
from invoice_regen.utils.exceptions import MalformedDocumentError
from .anchors import AnchorSchema, DetailMapping, max_rows_from_config
from .invoice_record import InvoiceRecord

# Initialize module logger
logger = get_logger(__name__)


class AnchorFieldExtractor:
    """
    Extracts raw invoice fields from a fragment stream using anchors.

    The extractor fails fast: any anchor that is missing, out of order
    or corrupt raises MalformedDocumentError naming that anchor. Only the
    optional line-item labels (discount, shipping, ...) may be absent.

    Attributes:
        schema: AnchorSchema with the fixed layout literals
        detail_mapping: How invoice-detail fragments map onto fields
        max_rows: Maximum number of rows accepted (None = unlimited)

    Example:
        >>> extractor = AnchorFieldExtractor()
        >>> record = extractor.extract(stream)
        >>> record.bill_to[-1]
        'Netherlands'
    """

    def __init__(
        self,
        schema: Optional[AnchorSchema] = None,
        detail_mapping: Optional[DetailMapping] = None,
        max_rows: Optional[int] = -1
    ) -> None:
        """
        Initialize the extractor.

        Args:
            schema: Anchor schema. If None, loaded from configuration.
            detail_mapping: Invoice-detail mapping. If None, loaded from
                configuration.
            max_rows: Row limit; -1 reads it from configuration, None
                means unlimited.
        """
        self.schema = schema or AnchorSchema.from_config()
        self.detail_mapping = detail_mapping or DetailMapping.from_config()
        self.max_rows = max_rows_from_config() if max_rows == -1 else max_rows

        logger.debug(
            f"AnchorFieldExtractor initialized "
            f"(details={self.detail_mapping.mode}, max_rows={self.max_rows})"
        )

    def extract(self, stream: FragmentStream) -> InvoiceRecord:
        """
        Run the extractor over every row of a fragment stream.

        Later rows augment the same record: list fields are extended and
        scalar fields are overwritten.

        Args:
            stream: Fragment stream of one document.

        Returns:
            InvoiceRecord with raw string and list fields.

        Raises:
            MalformedDocumentError: If the stream does not match the layout.
        """
        if not stream.rows:
            raise MalformedDocumentError("header", "empty fragment stream")

        if self.max_rows is not None and len(stream.rows) > self.max_rows:
            raise MalformedDocumentError(
                "header",
                f"expected at most {self.max_rows} row(s), found {len(stream.rows)}"
            )

        record = InvoiceRecord(source_file=stream.source)

        for row_index, row in enumerate(stream.rows):
            self._parse_row(row, row_index, record)
            record.rows_parsed += 1

        logger.debug(f"Extracted {record!r}")
        if record.missing_fields:
            logger.debug(f"Fields absent from document: {record.missing_fields}")

        return record

    def _parse_row(self, row: List[str], row_index: int, record: InvoiceRecord) -> None:
        schema = self.schema

        cursor = self._match_block(row, 0, schema.header, "header", row_index)

        if cursor >= len(row) or row[cursor] != schema.invoice:
            found = row[cursor] if cursor < len(row) else None
            raise MalformedDocumentError(
                schema.invoice,
                f"unexpected section, found {found!r}",
                position=cursor,
                row=row_index
            )
        cursor += 1

        # The status marker is only consumed when present
        if cursor < len(row) and row[cursor] in schema.status_markers:
            record.status = row[cursor]
            cursor += 1

        details, cursor = self._collect_until(row, cursor, schema.bill_to, row_index)
        record.invoice_details.extend(details)
        self._map_details(details, record, row_index)

        billing, cursor = self._collect_until(row, cursor, schema.ship_to, row_index)
        record.bill_to.extend(billing)

        shipping, cursor = self._collect_until(row, cursor, schema.description, row_index)
        record.ship_to.extend(shipping)

        cursor = self._scan_line_items(row, cursor, record, row_index)

        self._match_block(row, cursor, schema.payment_block, "payment block", row_index)

    def _match_block(
        self,
        row: List[str],
        start: int,
        block: Sequence[str],
        name: str,
        row_index: int
    ) -> int:
        """
        Require ``block`` to appear fragment-for-fragment at ``start``.

        Returns:
            Cursor position just past the block.
        """
        window = tuple(row[start:start + len(block)])
        if window != tuple(block):
            mismatch = next(
                (i for i, expected in enumerate(block)
                 if i >= len(window) or window[i] != expected),
                len(block)
            )
            raise MalformedDocumentError(
                name,
                f"missing or corrupt {name}",
                position=start + mismatch,
                row=row_index
            )
        return start + len(block)

    def _collect_until(
        self,
        row: List[str],
        start: int,
        anchor: str,
        row_index: int
    ) -> Tuple[List[str], int]:
        """
        Collect fragments from ``start`` up to the next ``anchor``.

        Returns:
            Tuple of (collected fragments, cursor just past the anchor).

        Raises:
            MalformedDocumentError: If the anchor does not follow.
        """
        try:
            anchor_index = row.index(anchor, start)
        except ValueError:
            raise MalformedDocumentError(
                anchor, "anchor not found", position=start, row=row_index
            ) from None

        return row[start:anchor_index], anchor_index + 1

    def _map_details(
        self,
        details: List[str],
        record: InvoiceRecord,
        row_index: int
    ) -> None:
        """Assign invoice-detail fragments to named fields in positional mode."""
        mapping = self.detail_mapping
        if mapping.mode != "positional":
            return

        expected = len(mapping.fields)
        if len(details) != expected:
            if len(details) > expected and mapping.on_mismatch == "truncate":
                logger.warning(
                    f"Dropping {len(details) - expected} extra invoice detail "
                    f"fragment(s): {details[expected:]}"
                )
                details = details[:expected]
            else:
                raise MalformedDocumentError(
                    self.schema.bill_to,
                    f"expected {expected} invoice detail fragments, found {len(details)}",
                    row=row_index
                )

        record.details.update(zip(mapping.fields, details))

    def _scan_line_items(
        self,
        row: List[str],
        start: int,
        record: InvoiceRecord,
        row_index: int
    ) -> int:
        """
        Capture labelled values between "Description" and the payment block.

        Returns:
            Position of the payment anchor.
        """
        payment_anchor = self.schema.payment_anchor
        try:
            end = row.index(payment_anchor, start)
        except ValueError:
            raise MalformedDocumentError(
                payment_anchor, "anchor not found", position=start, row=row_index
            ) from None

        for i in range(start, end):
            for item in self.schema.labels_for(row[i]):
                value_index = i + item.offset
                if value_index >= end:
                    raise MalformedDocumentError(
                        item.label,
                        f"no value for '{item.field}' before '{payment_anchor}'",
                        position=i,
                        row=row_index
                    )
                record.set_field(item.field, row[value_index])

        return end
