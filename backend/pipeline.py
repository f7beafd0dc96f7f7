"""The clone pipeline: render -> sanitize -> generate -> assemble.

Shared by the HTTP handler and the CLI.  Each call is independent; the only
object reused between calls is the injected :class:`CodeGenerationClient`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from backend.generator.client import CodeGenerationClient
from backend.generator.models import GeneratedCode
from backend.scraper.models import ScrapeResult
from backend.scraper.renderer import render_page

logger = logging.getLogger(__name__)

Renderer = Callable[[str], Awaitable[ScrapeResult]]


@dataclass
class CloneResult:
    """Everything a client needs to preview or download one clone."""

    source_url: str
    scrape: ScrapeResult
    code: GeneratedCode
    processing_seconds: float
    timestamp: datetime

    @property
    def processing_time(self) -> str:
        """Elapsed time formatted as ``"<seconds>s"`` with two decimals."""
        return f"{self.processing_seconds:.2f}s"

    def to_dict(self) -> dict[str, Any]:
        """Wire shape of the ``data`` member of a success envelope."""
        return {
            "html": self.scrape.html,
            "css": self.scrape.css,
            **self.code.to_dict(),
            "metadata": {
                "sourceUrl": self.source_url,
                "processingTime": self.processing_time,
                "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
            },
        }


async def run_clone(
    url: str,
    generator: CodeGenerationClient,
    render: Renderer = render_page,
) -> CloneResult:
    """Clone *url*: render it, then generate backend code from its markup.

    Raises:
        RenderError: If the page could not be rendered.  Generation failures
            never surface here; the client substitutes fallback code.
    """
    started = time.perf_counter()
    logger.info("[clone] Starting clone process for: %s", url)

    logger.info("[clone] Step 1: Scraping website ...")
    scrape = await render(url)
    logger.info("[clone] Scraped HTML length: %d characters", len(scrape.html))

    logger.info("[clone] Step 2: Generating backend code ...")
    code = await generator.generate(scrape.html)

    elapsed = time.perf_counter() - started
    logger.info("[clone] Clone process completed in %.2fs", elapsed)

    return CloneResult(
        source_url=url,
        scrape=scrape,
        code=code,
        processing_seconds=elapsed,
        timestamp=datetime.now(timezone.utc),
    )
