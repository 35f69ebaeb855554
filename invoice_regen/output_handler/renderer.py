"""
HTML Renderer Module.

Renders the invoice template with the assembled parameters and writes
one HTML document per source invoice. Uses Jinja2 with autoescaping.

Author: Invoice Tooling Team
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader, PackageLoader, TemplateError

from config import get_config
from invoice_regen.utils.helpers import ensure_directory
from invoice_regen.utils.logger import get_logger
from invoice_regen.utils.exceptions import RenderError

# Initialize module logger
logger = get_logger(__name__)


class HTMLRenderer:
    """
    Renders invoices to HTML files.

    The fixed header and payment blocks are passed to the template from
    the anchor configuration, so the regenerated document carries the
    same company identity as the source.

    Attributes:
        template_name: Template file name
        output_dir: Directory receiving the HTML files
        encoding: Output file encoding

    Example:
        >>> renderer = HTMLRenderer()
        >>> path = renderer.render_to_file(params, "invoice-0042.pdf")
        >>> path.name
        'invoice-0042.pdf.html'
    """

    def __init__(
        self,
        output_dir: Optional[Union[str, Path]] = None,
        template_dir: Optional[Union[str, Path]] = None,
        template_name: Optional[str] = None
    ) -> None:
        """
        Initialize the renderer.

        Args:
            output_dir: Output directory. If None, uses paths.output_dir.
            template_dir: Directory with custom templates. If None, the
                packaged templates are used.
            template_name: Template file name.
        """
        self.output_dir = Path(output_dir or get_config("paths.output_dir", "invoice/new"))
        self.template_name = template_name or get_config(
            "output.html.template", "invoice.html.j2"
        )
        self.encoding = get_config("output.html.encoding", "utf-8")

        if template_dir is not None:
            loader = FileSystemLoader(str(template_dir))
        else:
            loader = PackageLoader("invoice_regen", "templates")

        self.environment = Environment(loader=loader, autoescape=True)
        self.static_params = {
            'company_header': list(get_config("anchors.header", [])),
            'payment_block': list(get_config("anchors.payment_block", [])),
        }

        logger.debug(f"HTMLRenderer initialized (output_dir: {self.output_dir})")

    def render(self, params: Dict[str, Any]) -> str:
        """
        Render the template to a string.

        Raises:
            RenderError: If the template is missing or fails to render.
        """
        try:
            template = self.environment.get_template(self.template_name)
            return template.render(**self.static_params, **params)
        except TemplateError as e:
            raise RenderError(self.template_name, str(e)) from e

    def render_to_file(self, params: Dict[str, Any], source_name: str) -> Path:
        """
        Render the template and write ``<source_name>.html``.

        Args:
            params: Assembled template parameters.
            source_name: File name of the source invoice.

        Returns:
            Path of the written HTML file.

        Raises:
            RenderError: If rendering or writing fails.
        """
        html = self.render(params)
        target = self.output_dir / f"{source_name}.html"

        try:
            ensure_directory(self.output_dir)
            target.write_text(html, encoding=self.encoding)
        except OSError as e:
            raise RenderError(str(target), str(e)) from e

        logger.debug(f"HTML written: {target}")
        return target
