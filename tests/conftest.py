"""Shared fakes for the Playwright browser and the LangChain chat model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest


@dataclass
class FakeBrowser:
    """Handles onto the mocks behind one patched ``async_playwright()``."""

    factory: MagicMock
    launch: AsyncMock
    browser: MagicMock
    page: MagicMock
    scripts: list[str] = field(default_factory=list)


def make_extraction(
    html: str = '<html><body><div class="box">Hi</div></body></html>',
    styles: list[str] | None = None,
    stylesheets: list[str] | None = None,
    class_styles: list[Any] | None = None,
) -> dict[str, Any]:
    """Build the dict the in-page extraction script would return."""
    return {
        "html": html,
        "styles": styles or [],
        "stylesheets": stylesheets or [],
        "classStyles": class_styles or [],
    }


@pytest.fixture()
def fake_browser() -> Callable[..., FakeBrowser]:
    """Return a builder for a fake ``async_playwright`` entry point.

    Patch ``backend.scraper.renderer.async_playwright`` with ``.factory``.
    """

    def _build(
        extraction: dict[str, Any] | None = None,
        goto_error: Exception | None = None,
        launch_error: Exception | None = None,
    ) -> FakeBrowser:
        result = extraction if extraction is not None else make_extraction()
        scripts: list[str] = []

        async def _evaluate(script: str, arg: Any = None) -> Any:
            scripts.append(script)
            if "classStyles" in script:
                return result
            return None

        page = MagicMock()
        page.goto = AsyncMock(side_effect=goto_error)
        page.wait_for_timeout = AsyncMock()
        page.evaluate = AsyncMock(side_effect=_evaluate)

        browser = MagicMock()
        browser.new_page = AsyncMock(return_value=page)
        browser.close = AsyncMock()

        launch = AsyncMock(return_value=browser, side_effect=launch_error)

        pw = MagicMock()
        pw.chromium.launch = launch

        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=pw)
        context.__aexit__ = AsyncMock(return_value=False)

        factory = MagicMock(return_value=context)
        return FakeBrowser(
            factory=factory, launch=launch, browser=browser, page=page, scripts=scripts
        )

    return _build


def make_llm(reply: str | None = None, error: Exception | None = None) -> MagicMock:
    """Fake LangChain chat model whose ``ainvoke`` returns *reply* or raises."""
    message = MagicMock()
    message.content = reply
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=message, side_effect=error)
    return llm
