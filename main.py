#!/usr/bin/env python3
"""
Invoice Regeneration System - Main Entry Point.

This is the main entry point for the invoice regeneration system.
It provides both a command-line interface and programmatic access
to the regeneration pipeline.

Usage:
    Command Line:
        python main.py --input invoice/pdf --output invoice/new
        python main.py --input invoice-0042.pdf --no-pdf --debug

    Python:
        from main import run_regeneration
        outcomes = run_regeneration("invoice/pdf")

Author: Invoice Tooling Team
Version: 1.0.0
"""

import argparse
import sys
from typing import List, Optional

from config import ConfigurationManager, get_config
from invoice_regen.utils.logger import get_logger, setup_logger_from_config
from invoice_regen.utils.exceptions import InvoiceRegenError


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Invoice Regeneration System",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Regenerate a directory of invoices:
        python main.py --input invoice/pdf --output invoice/new

    HTML only, with a reconciliation report:
        python main.py --input invoice/pdf --no-pdf --report
        """
    )

    parser.add_argument(
        "--input", "-i",
        type=str,
        default=None,
        help="Input file or directory (default: paths.input_dir)"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output directory (default: paths.output_dir)"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--no-pdf",
        action="store_true",
        help="Keep HTML output, skip wkhtmltopdf conversion"
    )

    parser.add_argument(
        "--report",
        action="store_true",
        help="Write the Excel reconciliation report"
    )

    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first document that fails"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize the regeneration system with configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)

    level = None
    if args.debug:
        level = "DEBUG"
    elif args.quiet:
        level = "WARNING"

    logger = setup_logger_from_config(level)

    logger.info("=" * 60)
    logger.info("INVOICE REGENERATION SYSTEM")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input or config.get('paths.input_dir')}")
    logger.info(f"Output: {args.output or config.get('paths.output_dir')}")

    return config


def run_regeneration(
    input_path: Optional[str] = None,
    output_dir: Optional[str] = None,
    config_path: Optional[str] = None,
    enable_pdf: Optional[bool] = None,
    enable_report: Optional[bool] = None,
    fail_fast: bool = False
) -> list:
    """
    Run the invoice regeneration pipeline.

    Args:
        input_path: Source file or directory. Defaults to paths.input_dir.
        output_dir: Output directory. Defaults to paths.output_dir.
        config_path: Optional custom configuration file path.
        enable_pdf: Override output.pdf.enabled.
        enable_report: Override output.excel.enabled.
        fail_fast: Stop at the first failing document.

    Returns:
        List of DocumentOutcome objects.

    Example:
        >>> outcomes = run_regeneration("invoice/pdf", enable_pdf=False)
        >>> [o.source_name for o in outcomes if not o.success]
        []
    """
    ConfigurationManager(config_path)

    # Import pipeline components
    from invoice_regen.output_handler import OutputHandler
    from invoice_regen.pipeline import InvoiceRegenerator

    output_handler = OutputHandler(
        output_dir=output_dir,
        pdf_enabled=enable_pdf,
        excel_enabled=enable_report
    )
    regenerator = InvoiceRegenerator(output_handler=output_handler, fail_fast=fail_fast)

    return regenerator.run(input_path or get_config("paths.input_dir", "invoice/pdf"))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code: 0 when every document was regenerated, 1 otherwise,
        130 when interrupted.
    """
    args = parse_arguments(argv)

    try:
        initialize_system(args)
        logger = get_logger(__name__)

        outcomes = run_regeneration(
            input_path=args.input,
            output_dir=args.output,
            config_path=args.config,
            enable_pdf=False if args.no_pdf else None,
            enable_report=True if args.report else None,
            fail_fast=args.fail_fast
        )

        if not outcomes:
            logger.error("No files to process")
            return 1

        failed = [o for o in outcomes if not o.success]

        logger.info("=" * 60)
        logger.info(
            f"Regeneration complete. {len(outcomes) - len(failed)} succeeded, "
            f"{len(failed)} failed."
        )
        logger.info("=" * 60)

        return 1 if failed else 0

    except InvoiceRegenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
