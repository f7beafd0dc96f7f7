"""Data models for the page renderer."""

from __future__ import annotations

from dataclasses import dataclass

from backend.config import Settings, settings


@dataclass
class ScrapeResult:
    """Sanitized markup and collected CSS for a single rendered page."""

    html: str
    css: str


@dataclass
class RenderOptions:
    """Knobs for one :func:`~backend.scraper.renderer.render_page` call.

    Delays and the timeout are in seconds.  The timeout bounds navigation and,
    separately, everything that happens on the page after it has loaded.
    Auto-scroll stops after ``max_scroll_steps`` steps on pages that keep
    growing.
    """

    timeout: float = 45.0
    settle_delay: float = 5.0
    scroll_settle_delay: float = 2.0
    auto_scroll: bool = True
    scroll_step: int = 100
    scroll_interval_ms: int = 100
    max_scroll_steps: int = 200
    full_document: bool = True
    computed_styles: bool = True
    viewport_width: int = 1920
    viewport_height: int = 1080
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> "RenderOptions":
        cfg = cfg or settings
        return cls(
            timeout=cfg.render_timeout,
            settle_delay=cfg.render_settle_delay,
            scroll_settle_delay=cfg.render_scroll_settle_delay,
            auto_scroll=cfg.render_auto_scroll,
            full_document=cfg.render_full_document,
            computed_styles=cfg.render_computed_styles,
        )
