"""Headless page renderer built on Playwright's async API.

Every call launches its own Chromium process and closes it before returning,
whether the render succeeded or not.  Nothing is pooled between calls.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from playwright.async_api import Browser, Page, async_playwright

from backend.errors import RenderError
from backend.scraper.models import RenderOptions, ScrapeResult
from backend.scraper.sanitizer import sanitize_html
from backend.scraper.styles import COMPUTED_STYLE_PROPERTIES, assemble_css

logger = logging.getLogger(__name__)

LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
)

# ---------------------------------------------------------------------------
# In-page scripts
# ---------------------------------------------------------------------------

_AUTO_SCROLL_JS = """
async ({ distance, interval, maxSteps }) => {
  await new Promise((resolve) => {
    let totalHeight = 0;
    let steps = 0;
    const timer = setInterval(() => {
      const scrollHeight = document.body ? document.body.scrollHeight : 0;
      window.scrollBy(0, distance);
      totalHeight += distance;
      steps += 1;
      if (totalHeight >= scrollHeight || steps >= maxSteps) {
        clearInterval(timer);
        window.scrollTo(0, 0);
        resolve();
      }
    }, interval);
  });
}
"""

_EXTRACT_JS = """
({ fullDocument, computedStyles, properties }) => {
  const root = fullDocument || !document.body ? document.documentElement : document.body;
  const styles = Array.from(document.querySelectorAll('style')).map((tag) => tag.textContent || '');
  const stylesheets = Array.from(document.querySelectorAll('link[rel="stylesheet"]'))
    .map((link) => link.getAttribute('href'))
    .filter(Boolean);

  const classStyles = [];
  if (computedStyles) {
    const seen = new Set();
    document.querySelectorAll('body *').forEach((element) => {
      if (typeof element.className !== 'string') return;
      element.className.split(/\\s+/).filter(Boolean).forEach((name) => {
        if (seen.has(name)) return;
        seen.add(name);
        const computed = window.getComputedStyle(element);
        const snapshot = {};
        properties.forEach((prop) => { snapshot[prop] = computed.getPropertyValue(prop); });
        classStyles.push([name, snapshot]);
      });
    });
  }

  return { html: root.outerHTML, styles, stylesheets, classStyles };
}
"""


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

async def _extract(browser: Browser, url: str, opts: RenderOptions) -> dict[str, Any]:
    """Load *url* in a fresh page and pull markup and style data out of it."""
    page = await browser.new_page(
        viewport={"width": opts.viewport_width, "height": opts.viewport_height},
        user_agent=opts.user_agent,
    )

    logger.info("[render] Navigating to %s", url)
    await page.goto(url, wait_until="networkidle", timeout=int(opts.timeout * 1000))

    try:
        return await asyncio.wait_for(_collect(page, opts), timeout=opts.timeout)
    except asyncio.TimeoutError:
        raise RenderError(
            f"Timed out after {opts.timeout:g}s waiting for page content"
        ) from None


async def _collect(page: Page, opts: RenderOptions) -> dict[str, Any]:
    """Settle, optionally scroll, then run the extraction script on *page*."""
    await page.wait_for_timeout(int(opts.settle_delay * 1000))

    if opts.auto_scroll:
        await page.evaluate(
            _AUTO_SCROLL_JS,
            {
                "distance": opts.scroll_step,
                "interval": opts.scroll_interval_ms,
                "maxSteps": opts.max_scroll_steps,
            },
        )
        await page.wait_for_timeout(int(opts.scroll_settle_delay * 1000))

    return await page.evaluate(
        _EXTRACT_JS,
        {
            "fullDocument": opts.full_document,
            "computedStyles": opts.computed_styles,
            "properties": list(COMPUTED_STYLE_PROPERTIES),
        },
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def render_page(url: str, options: RenderOptions | None = None) -> ScrapeResult:
    """Render *url* in headless Chromium and return sanitized HTML plus CSS.

    Args:
        url: Absolute URL.  Callers validate it before getting here.
        options: Render knobs; defaults come from ``settings``.

    Raises:
        RenderError: On launch, navigation (including timeout) or evaluation
            failure.  The browser has already been closed when this is raised.
    """
    opts = options or RenderOptions.from_settings()

    try:
        async with async_playwright() as pw:
            logger.info("[render] Launching browser")
            browser = await pw.chromium.launch(headless=True, args=list(LAUNCH_ARGS))
            try:
                extracted = await _extract(browser, url, opts)
            finally:
                await browser.close()
                logger.info("[render] Browser closed")
    except Exception as exc:
        logger.error("[render] Scraping %s failed: %s", url, exc)
        raise RenderError(f"Failed to scrape website: {exc}") from exc

    html = sanitize_html(extracted.get("html") or "")
    css = assemble_css(
        extracted.get("styles") or [],
        extracted.get("stylesheets") or [],
        (extracted.get("classStyles") or []) if opts.computed_styles else None,
    )
    logger.info("[render] Scraped %d chars of HTML, %d chars of CSS", len(html), len(css))
    return ScrapeResult(html=html, css=css)
