"""Slide and email rendering with strict named placeholders.

Templates use ``{{NAME}}`` placeholders. Rendering fails loudly with
TemplateRenderError when a template refers to a name the variable mapping
does not provide; nothing is ever left half-substituted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    UndefinedError,
    select_autoescape,
)

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

SLIDE_TEMPLATES: list[str] = [
    "slide-1-title.html",
    "slide-2-executive.html",
    "slide-3-financial.html",
    "slide-4-program.html",
    "slide-5-measurement.html",
    "slide-6-next-steps.html",
    "slide-7-sources.html",
    "slide-8-thank-you.html",
]


class TemplateRenderError(Exception):
    """A template could not be fully rendered."""

    def __init__(self, template_name: str, reason: str):
        self.template_name = template_name
        self.reason = reason
        super().__init__(f"Failed to render {template_name}: {reason}")


class ReportRenderer:
    """Renders report slides, the combined report document and emails."""

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        booking_url: str = "",
        benchmark_sources: Optional[list[str]] = None,
    ):
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir or _TEMPLATE_DIR)),
            undefined=StrictUndefined,
            autoescape=select_autoescape(enabled_extensions=("html",), default=False),
            keep_trailing_newline=True,
        )
        self._env.globals["BOOKING_URL"] = booking_url
        self._env.globals["BENCHMARK_SOURCES"] = list(benchmark_sources or [])

    @property
    def slide_count(self) -> int:
        return len(SLIDE_TEMPLATES)

    def _render(self, template_name: str, variables: Mapping[str, str]) -> str:
        try:
            template = self._env.get_template(template_name)
            return template.render(**variables)
        except TemplateNotFound as e:
            raise TemplateRenderError(template_name, f"template not found: {e}") from e
        except UndefinedError as e:
            raise TemplateRenderError(template_name, f"unresolved placeholder ({e})") from e

    def render_slide(self, slide_number: int, variables: Mapping[str, str]) -> str:
        """Render one slide, 1-based."""
        if not 1 <= slide_number <= len(SLIDE_TEMPLATES):
            raise ValueError(
                f"slide_number must be 1-{len(SLIDE_TEMPLATES)}, got {slide_number}"
            )
        return self._render(f"slides/{SLIDE_TEMPLATES[slide_number - 1]}", variables)

    def render_slides(self, variables: Mapping[str, str]) -> list[str]:
        return [
            self.render_slide(i, variables) for i in range(1, len(SLIDE_TEMPLATES) + 1)
        ]

    def render_document(self, variables: Mapping[str, str]) -> str:
        """Render every slide into one paginated HTML document."""
        slides = self.render_slides(variables)
        html = self._render("report.html", {**variables, "slides": slides})
        logger.info(f"Rendered report document with {len(slides)} slides")
        return html

    def render_email(self, variables: Mapping[str, str]) -> tuple[str, str]:
        """Return (text_body, html_body) for the report email."""
        text = self._render("email/report.txt", variables)
        html = self._render("email/report.html", variables)
        return text, html

    def render_text_summary(self, variables: Mapping[str, str]) -> str:
        """Plain-text summary used for CRM notes."""
        return self._render("email/summary.txt", variables).strip()
