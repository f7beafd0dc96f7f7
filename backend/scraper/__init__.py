"""Scraper package: headless rendering and markup cleanup."""

from backend.scraper.models import RenderOptions, ScrapeResult
from backend.scraper.renderer import render_page
from backend.scraper.sanitizer import sanitize_html

__all__ = ["render_page", "sanitize_html", "RenderOptions", "ScrapeResult"]
