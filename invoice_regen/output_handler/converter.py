"""
PDF Converter Module.

Converts rendered HTML invoices to PDF with the external wkhtmltopdf
binary. The PDF takes the HTML file name without its ``.html`` suffix,
so ``invoice-0042.pdf.html`` becomes ``invoice-0042.pdf``.

Author: Invoice Tooling Team
"""

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from config import get_config
from invoice_regen.utils.logger import get_logger
from invoice_regen.utils.exceptions import ConversionError

# Initialize module logger
logger = get_logger(__name__)


class PDFConverter:
    """
    HTML to PDF conversion through wkhtmltopdf.

    Attributes:
        executable: Name or path of the wkhtmltopdf binary
        keep_html: Keep the intermediate HTML file after conversion
        timeout: Seconds before the conversion is aborted
        extra_args: Additional command line arguments

    Example:
        >>> converter = PDFConverter()
        >>> converter.convert("invoice/new/invoice-0042.pdf.html")
        PosixPath('invoice/new/invoice-0042.pdf')
    """

    def __init__(
        self,
        executable: Optional[str] = None,
        keep_html: Optional[bool] = None,
        timeout: Optional[int] = None,
        extra_args: Optional[List[str]] = None
    ) -> None:
        """Initialize the converter with configuration."""
        self.executable = executable or get_config(
            "output.pdf.wkhtmltopdf_path", "wkhtmltopdf"
        )
        self.keep_html = keep_html if keep_html is not None else \
            get_config("output.pdf.keep_html", False)
        self.timeout = timeout if timeout is not None else \
            get_config("output.pdf.timeout", 60)
        self.extra_args = list(extra_args if extra_args is not None else
                               get_config("output.pdf.extra_args", []))

        logger.debug(f"PDFConverter initialized (executable: {self.executable})")

    def _resolve_executable(self) -> str:
        resolved = shutil.which(self.executable)
        if resolved is None:
            raise ConversionError(
                self.executable,
                "wkhtmltopdf not found. Install it or set output.pdf.wkhtmltopdf_path"
            )
        return resolved

    def convert(self, html_path: Union[str, Path]) -> Path:
        """
        Convert an HTML file to PDF.

        Args:
            html_path: Path to the rendered HTML file.

        Returns:
            Path of the generated PDF.

        Raises:
            ConversionError: If the binary is missing or the conversion fails.
        """
        html_path = Path(html_path)
        if not html_path.exists():
            raise ConversionError(str(html_path), "HTML file does not exist")

        target = html_path.with_suffix("")
        command = [self._resolve_executable(), *self.extra_args, str(html_path), str(target)]

        logger.debug(f"Running: {' '.join(command)}")

        try:
            subprocess.run(
                command,
                check=True,
                capture_output=True,
                timeout=self.timeout
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            raise ConversionError(
                str(html_path), f"wkhtmltopdf exited with {e.returncode}: {stderr}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ConversionError(
                str(html_path), f"Timed out after {self.timeout}s"
            ) from e
        except OSError as e:
            raise ConversionError(str(html_path), str(e)) from e

        if not self.keep_html:
            html_path.unlink()

        logger.info(f"PDF written: {target}")
        return target
