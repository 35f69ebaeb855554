"""
PDF Fragment Reader Module.

This module turns the text layer of a digital PDF into a FragmentStream.
Each page becomes one row; each word group separated by layout gaps
becomes one fragment. Uses pdfplumber for digital PDF analysis.

Author: Invoice Tooling Team
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pdfplumber

from config import get_config
from invoice_regen.utils.logger import get_logger
from invoice_regen.utils.exceptions import CorruptedFileError
from .fragments import FragmentStream

# Initialize module logger
logger = get_logger(__name__)


class PDFFragmentReader:
    """
    Reader that extracts ordered text fragments from digital PDFs.

    Words are read with blank characters kept, so multi-word labels such
    as "Bill to:" stay a single fragment while absolutely positioned
    columns separated by gaps wider than the tolerance become separate
    fragments.

    Attributes:
        first_page_only: Whether to read only the first page
        x_tolerance: Horizontal gap tolerance passed to pdfplumber
        y_tolerance: Vertical gap tolerance passed to pdfplumber
        ignored_fragments: Fragments dropped as text-layer artifacts

    Example:
        >>> reader = PDFFragmentReader()
        >>> stream = reader.read("invoice/pdf/invoice-0042.pdf")
        >>> stream.rows[0][:2]
        ['Northwind Handels GmbH', 'Hafenstraße 21']
    """

    def __init__(
        self,
        first_page_only: Optional[bool] = None,
        ignored_fragments: Optional[List[str]] = None
    ) -> None:
        """Initialize the reader with configuration."""
        self.first_page_only = first_page_only if first_page_only is not None else \
            get_config("input.pdf.first_page_only", False)
        self.x_tolerance = get_config("input.pdf.x_tolerance", 3)
        self.y_tolerance = get_config("input.pdf.y_tolerance", 3)
        self.ignored_fragments = set(
            ignored_fragments if ignored_fragments is not None
            else get_config("input.pdf.ignored_fragments", ["", "¬", "Â¬", "-"])
        )

        logger.debug(
            f"PDFFragmentReader initialized (first_page_only={self.first_page_only})"
        )

    def __call__(self, filepath: Union[str, Path]) -> FragmentStream:
        return self.read(filepath)

    def read(self, filepath: Union[str, Path]) -> FragmentStream:
        """
        Read a PDF file into a FragmentStream.

        Args:
            filepath: Path to the PDF file.

        Returns:
            FragmentStream with one row per page.

        Raises:
            CorruptedFileError: If the PDF cannot be opened or has no text.
        """
        filepath = Path(filepath)
        logger.debug(f"Reading text fragments: {filepath.name}")

        rows: List[List[str]] = []
        try:
            with pdfplumber.open(filepath) as pdf:
                for page in pdf.pages:
                    words = page.extract_words(
                        keep_blank_chars=True,
                        x_tolerance=self.x_tolerance,
                        y_tolerance=self.y_tolerance
                    )
                    rows.append(self._words_to_fragments(words))

                    if self.first_page_only:
                        break
        except Exception as e:
            logger.error(f"pdfplumber could not read {filepath.name}: {e}")
            raise CorruptedFileError(str(filepath), str(e)) from e

        stream = FragmentStream(rows=[row for row in rows if row], source=filepath.name)

        if not stream.rows:
            raise CorruptedFileError(str(filepath), "No text layer found")

        logger.debug(f"Read {stream!r}")
        return stream

    def _words_to_fragments(self, words: List[Dict[str, Any]]) -> List[str]:
        """
        Convert pdfplumber word dictionaries to cleaned fragment strings.

        Args:
            words: Words as returned by ``page.extract_words``.

        Returns:
            Fragments in reading order, artifacts removed.
        """
        fragments = []
        for word in words:
            text = word.get("text", "").strip()
            if text in self.ignored_fragments:
                continue
            fragments.append(text)
        return fragments
