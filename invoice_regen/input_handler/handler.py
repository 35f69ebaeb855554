"""
Main Input Handler Module.

This module provides the InputHandler class that finds and validates
the source invoices of a batch run.

Usage:
    from invoice_regen.input_handler import InputHandler

    handler = InputHandler()
    files = handler.discover("invoice/pdf")
"""

from pathlib import Path
from typing import List, Optional, Union

from config import get_config
from invoice_regen.utils.logger import get_logger
from invoice_regen.utils.helpers import get_file_extension
from invoice_regen.utils.exceptions import (
    InputError,
    FileNotFoundError,
    CorruptedFileError
)

# Initialize module logger
logger = get_logger(__name__)


class InputHandler:
    """
    Locates source invoices for a batch run.

    Attributes:
        supported_extensions: Set of accepted file extensions
        recursive: Whether subdirectories are searched

    Example:
        >>> handler = InputHandler()
        >>> for path in handler.discover("invoice/pdf"):
        ...     print(path.name)
    """

    def __init__(
        self,
        supported_extensions: Optional[List[str]] = None,
        recursive: Optional[bool] = None
    ) -> None:
        extensions = supported_extensions or get_config(
            "input.supported_extensions", [".pdf"]
        )
        self.supported_extensions = {ext.lower() for ext in extensions}
        self.recursive = recursive if recursive is not None else \
            get_config("input.recursive", False)

        logger.debug(f"InputHandler initialized with extensions: {self.supported_extensions}")

    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a file exists, is supported and is not empty.

        Args:
            filepath: Path to the file to validate.

        Returns:
            Path object pointing to the validated file.

        Raises:
            FileNotFoundError: If file doesn't exist.
            InputError: If the path is not a supported file.
            CorruptedFileError: If the file is empty.
        """
        path = Path(filepath)

        if not path.exists():
            raise FileNotFoundError(str(filepath))

        if not path.is_file():
            raise InputError(f"Path is not a file: {filepath}")

        extension = get_file_extension(path)
        if extension not in self.supported_extensions:
            raise InputError(
                f"Unsupported file type: '{extension}'",
                {"file_type": extension, "supported_types": sorted(self.supported_extensions)}
            )

        if path.stat().st_size == 0:
            raise CorruptedFileError(str(filepath), "File is empty")

        return path

    def discover(self, location: Union[str, Path]) -> List[Path]:
        """
        Collect the invoices to process from a file or directory.

        Args:
            location: A single invoice file or a directory of invoices.

        Returns:
            Sorted list of invoice paths.

        Raises:
            FileNotFoundError: If the location doesn't exist.
        """
        location = Path(location)

        if not location.exists():
            raise FileNotFoundError(str(location))

        if location.is_file():
            return [self.validate_file(location)]

        pattern = "**/*" if self.recursive else "*"
        files = [
            path for path in location.glob(pattern)
            if path.is_file() and get_file_extension(path) in self.supported_extensions
        ]
        files = sorted(set(files))

        if not files:
            logger.warning(f"No supported files found in: {location}")
        else:
            logger.info(f"Found {len(files)} files to process in {location}")

        return files
