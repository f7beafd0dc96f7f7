"""Tests for the HTTP layer: /health, /api/clone and the error envelopes.

The generation client is a real :class:`CodeGenerationClient` wrapped around
a fake chat model, injected through ``create_app``.  The renderer is either
an ``AsyncMock`` or the real ``render_page`` running against a patched
Playwright.
"""

from __future__ import annotations

import asyncio
from typing import Generator
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.api.app import create_app
from backend.errors import RenderError
from backend.generator.client import CodeGenerationClient
from backend.generator.fallback import FALLBACK_SQL_SCHEMA
from backend.scraper.models import ScrapeResult
from conftest import make_extraction, make_llm

_MODEL_REPLY = (
    '```json\n{"sqlSchema":"CREATE TABLE t(id INT);","nodeRoute":"module.exports={}"}\n```'
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def render() -> AsyncMock:
    return AsyncMock(return_value=ScrapeResult(html='<div class="box">Hi</div>', css=".box{}"))


@pytest.fixture()
def client(render: AsyncMock) -> Generator[TestClient, None, None]:
    """TestClient with a fake renderer and a fake model."""
    app = create_app(
        generator=CodeGenerationClient(make_llm(_MODEL_REPLY)),
        render=render,
    )
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


# ---------------------------------------------------------------------------
# Health / 404
# ---------------------------------------------------------------------------

class TestHealth:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["message"]


class TestNotFound:
    def test_unknown_route(self, client: TestClient) -> None:
        resp = client.get("/api/does-not-exist")
        assert resp.status_code == 404
        assert resp.json() == {
            "error": "Not Found",
            "message": "The requested endpoint does not exist",
        }

    def test_wrong_method_on_known_route(self, client: TestClient) -> None:
        resp = client.get("/api/clone")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Not Found"


class TestCatchAll:
    def test_escaped_exception_becomes_500_envelope(self) -> None:
        app = create_app(generator=CodeGenerationClient(None), render=AsyncMock())

        async def explode() -> None:
            raise RuntimeError("kaboom")

        app.add_api_route("/explode", explode)
        with TestClient(app, raise_server_exceptions=False) as c:
            resp = c.get("/explode")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal Server Error", "message": "kaboom"}

    def test_catch_all_response_has_no_cors_headers(self) -> None:
        app = create_app(generator=CodeGenerationClient(None), render=AsyncMock())

        async def explode() -> None:
            raise RuntimeError("kaboom")

        app.add_api_route("/explode", explode)
        with TestClient(app, raise_server_exceptions=False) as c:
            resp = c.get("/explode", headers={"Origin": "https://ui.example.com"})

        assert resp.status_code == 500
        assert "access-control-allow-origin" not in resp.headers


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestCloneValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"json": {}},
            {"json": {"url": ""}},
            {"json": {"url": "   "}},
            {"json": {"link": "https://example.com"}},
            {"json": ["https://example.com"]},
            {"content": b"not json", "headers": {"content-type": "application/json"}},
            {},
        ],
    )
    def test_missing_url(self, client: TestClient, render: AsyncMock, kwargs) -> None:
        resp = client.post("/api/clone", **kwargs)
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "URL is required"
        assert body["message"]
        render.assert_not_awaited()

    @pytest.mark.parametrize(
        "url",
        [
            "example.com",
            "not a url",
            "htp:/broken",
            "//example.com/path",
            "http://",
            "https://exa mple.com",
            "javascript:alert(1)",
            "http://example.com:99999",
        ],
    )
    def test_malformed_url_never_reaches_pipeline(
        self, client: TestClient, render: AsyncMock, url: str
    ) -> None:
        resp = client.post("/api/clone", json={"url": url})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid URL"
        render.assert_not_awaited()


# ---------------------------------------------------------------------------
# Success / failure envelopes
# ---------------------------------------------------------------------------

class TestCloneSuccess:
    def test_success_envelope(self, client: TestClient, render: AsyncMock) -> None:
        resp = client.post("/api/clone", json={"url": "https://example.com"})
        assert resp.status_code == 200

        body = resp.json()
        assert body["success"] is True
        data = body["data"]
        assert data["html"] == '<div class="box">Hi</div>'
        assert data["css"] == ".box{}"
        assert data["sqlSchema"] == "CREATE TABLE t(id INT);"
        assert data["nodeRoute"] == "module.exports={}"
        assert data["metadata"]["sourceUrl"] == "https://example.com"
        assert data["metadata"]["processingTime"].endswith("s")
        render.assert_awaited_once_with("https://example.com")

    def test_generation_failure_still_succeeds_with_fallback(self, render: AsyncMock) -> None:
        app = create_app(
            generator=CodeGenerationClient(make_llm(error=RuntimeError("QUOTA exceeded"))),
            render=render,
        )
        with TestClient(app) as c:
            resp = c.post("/api/clone", json={"url": "https://example.com"})

        assert resp.status_code == 200
        assert resp.json()["data"]["sqlSchema"] == FALLBACK_SQL_SCHEMA

    def test_missing_credential_still_succeeds_with_fallback(self, render: AsyncMock) -> None:
        app = create_app(generator=CodeGenerationClient(None), render=render)
        with TestClient(app) as c:
            resp = c.post("/api/clone", json={"url": "https://example.com"})

        assert resp.status_code == 200
        assert resp.json()["data"]["sqlSchema"] == FALLBACK_SQL_SCHEMA


class TestCloneFailure:
    def _app(self):
        return create_app(
            generator=CodeGenerationClient(make_llm(_MODEL_REPLY)),
            render=AsyncMock(side_effect=RenderError("Failed to scrape website: Timeout")),
        )

    def test_render_failure_returns_500_with_details(self, monkeypatch) -> None:
        monkeypatch.setattr("backend.config.settings.app_env", "development")
        with TestClient(self._app()) as c:
            resp = c.post("/api/clone", json={"url": "https://slow.example.com"})

        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Failed to scrape website: Timeout"
        assert body["message"] == "Failed to clone website. Please check the URL and try again."
        assert "RenderError" in body["details"]

    def test_production_hides_details(self, monkeypatch) -> None:
        monkeypatch.setattr("backend.config.settings.app_env", "production")
        with TestClient(self._app()) as c:
            resp = c.post("/api/clone", json={"url": "https://slow.example.com"})

        assert resp.status_code == 500
        assert "details" not in resp.json()

    def test_render_failure_keeps_cors_headers(self) -> None:
        with TestClient(self._app()) as c:
            resp = c.post(
                "/api/clone",
                json={"url": "https://slow.example.com"},
                headers={"Origin": "https://ui.example.com"},
            )

        assert resp.status_code == 500
        assert resp.headers["access-control-allow-origin"] == "*"


# ---------------------------------------------------------------------------
# End-to-end through the real renderer (patched Playwright)
# ---------------------------------------------------------------------------

class TestEndToEnd:
    def test_example_page(self, fake_browser) -> None:
        fake = fake_browser(
            make_extraction(
                html='<html><body><div class="box">Hi</div><script>track()</script></body></html>',
                styles=[".box{color:red}"],
                class_styles=[["box", {"color": "rgb(255, 0, 0)"}]],
            )
        )
        app = create_app(generator=CodeGenerationClient(make_llm(_MODEL_REPLY)))

        with patch("backend.scraper.renderer.async_playwright", fake.factory):
            with TestClient(app) as c:
                resp = c.post("/api/clone", json={"url": "https://example.com"})

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert 'class="box"' in data["html"]
        assert "<script" not in data["html"]
        assert "color:red" in data["css"]
        assert data["sqlSchema"] == "CREATE TABLE t(id INT);"
        assert data["nodeRoute"] == "module.exports={}"
        fake.browser.close.assert_awaited_once()


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

class TestConcurrentRequests:
    async def test_simultaneous_requests_keep_their_own_results(self) -> None:
        async def render(url: str) -> ScrapeResult:
            # Later URLs finish first so responses interleave.
            await asyncio.sleep(0.01 * (5 - int(url[-1])))
            return ScrapeResult(html=f"<p>{url}</p>", css="")

        # ASGITransport skips the lifespan, so wire the state by hand.
        app = create_app()
        app.state.generator = CodeGenerationClient(make_llm(_MODEL_REPLY))
        app.state.render = render

        urls = [f"https://site{i}.example.com/page{i}" for i in range(5)]
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            responses = await asyncio.gather(
                *(ac.post("/api/clone", json={"url": url}) for url in urls)
            )

        for url, resp in zip(urls, responses):
            assert resp.status_code == 200
            data = resp.json()["data"]
            assert data["metadata"]["sourceUrl"] == url
            assert data["html"] == f"<p>{url}</p>"
