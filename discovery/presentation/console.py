"""Plain-text presenter used by the command line runner.

Output is rendered from a Jinja2 template shipped in
discovery/presentation/templates, one line per ranked provider.
"""

import sys
from typing import Any, Dict, Optional, TextIO

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from discovery.logging import get_logger

from .models import MatchResults, PresentationError
from .payloads import build_display_payload

logger = get_logger(__name__, component="presentation")


class ConsolePresenter:
    """Writes a ranked result set as one line per provider."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        template_dir: str = "templates",
        template_name: str = "console_results.txt.j2",
    ):
        self.stream = stream or sys.stdout
        self.template_name = template_name
        self.env = Environment(
            loader=PackageLoader("discovery.presentation", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def build_context(self, results: MatchResults) -> Dict[str, Any]:
        request = results.request
        return {
            "count": results.count,
            "category": request.category_raw,
            "date": request.date.isoformat(),
            "time": request.time,
            "snapshot_version": results.snapshot_version,
            "results": [build_display_payload(record, request.radius_km) for record in results],
        }

    def render(self, results: MatchResults) -> str:
        """Render the result set to text.

        Raises:
            PresentationError: If template rendering fails
        """
        try:
            template = self.env.get_template(self.template_name)
            return template.render(self.build_context(results))
        except TemplateError as e:
            logger.error(
                f"Template rendering failed: {e}",
                extra={
                    "event": "presentation.render.failed",
                    "template": self.template_name,
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            raise PresentationError(f"Template rendering failed: {e}") from e

    def present(self, results: MatchResults) -> None:
        self.stream.write(self.render(results))
        self.stream.flush()
