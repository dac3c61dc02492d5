"""Headless Chromium HTML -> PDF rendering via Playwright."""

from __future__ import annotations

import logging
import re
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

logger = logging.getLogger(__name__)

SLIDE_WIDTH = 1280
SLIDE_HEIGHT = 720

# Container-friendly flags; Chromium has no sandbox inside most PaaS images.
CHROMIUM_ARGS: list[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
    "--disable-extensions",
    "--disable-default-apps",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
]


class PdfRenderError(Exception):
    """The headless browser failed to produce a PDF."""


def report_filename(company_name: str) -> str:
    """'Acme & Co Ltd' -> 'Acme___Co_Ltd_Wellness_ROI_Analysis.pdf'."""
    safe = re.sub(r"[^a-zA-Z0-9]", "_", company_name.strip()) or "Company"
    return f"{safe}_Wellness_ROI_Analysis.pdf"


class PdfRenderer:
    """Converts a rendered report document into a paginated PDF."""

    def __init__(
        self,
        executable_path: Optional[str] = None,
        timeout_ms: int = 60_000,
    ):
        self._executable_path = executable_path
        self._timeout_ms = timeout_ms

    async def render(self, html: str) -> bytes:
        """Render a full HTML document to PDF bytes, one page per slide."""
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(
                    headless=True,
                    executable_path=self._executable_path or None,
                    args=CHROMIUM_ARGS,
                )
                try:
                    page = await browser.new_page(
                        viewport={"width": SLIDE_WIDTH, "height": SLIDE_HEIGHT}
                    )
                    await page.set_content(
                        html, wait_until="networkidle", timeout=self._timeout_ms
                    )
                    pdf_bytes = await page.pdf(
                        width=f"{SLIDE_WIDTH}px",
                        height=f"{SLIDE_HEIGHT}px",
                        print_background=True,
                        margin={"top": "0", "right": "0", "bottom": "0", "left": "0"},
                        prefer_css_page_size=True,
                    )
                finally:
                    await browser.close()
        except PlaywrightError as e:
            logger.error(f"PDF rendering failed: {e}")
            raise PdfRenderError(str(e)) from e

        logger.info(f"Rendered PDF ({len(pdf_bytes)} bytes)")
        return pdf_bytes
