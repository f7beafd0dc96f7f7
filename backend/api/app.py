"""FastAPI application factory.

Lifespan
--------
On startup the app builds a single :class:`CodeGenerationClient` from
``settings`` (unless one was injected into :func:`create_app`) and shares it
with every request via ``request.app.state.generator``.  The page renderer is
shared the same way as ``request.app.state.render``.

Routers
-------
    /health     liveness probe
    /api/clone  render a URL and generate backend code for it

Error envelopes
---------------
Unknown routes get a uniform 404 body and any exception escaping a handler is
turned into a 500 body by the catch-all handler below.

Starlette runs the ``Exception`` handler inside ``ServerErrorMiddleware``,
which wraps ``CORSMiddleware``, so those catch-all 500s carry no CORS headers
and a browser on another origin sees them as network errors.  Clone failures
do not take that path: ``/api/clone`` builds its own 500 envelope, which goes
back through the CORS layer like any other response.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.api.routers import clone as clone_router
from backend.api.routers import health as health_router
from backend.generator.client import CodeGenerationClient
from backend.logs import configure_logging
from backend.pipeline import Renderer
from backend.scraper.renderer import render_page

logger = logging.getLogger(__name__)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Uniform envelope for unmatched routes; other HTTP errors keep their status."""
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "message": "The requested endpoint does not exist",
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "message": str(exc.detail)},
    )


async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last line of defence for exceptions that escape a route handler."""
    logger.error("Server error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "message": str(exc)},
    )


def create_app(
    generator: CodeGenerationClient | None = None,
    render: Renderer | None = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        generator: Pre-built generation client.  ``None`` builds one from
            ``settings`` at startup.
        render: Page renderer coroutine.  Defaults to
            :func:`~backend.scraper.renderer.render_page`.
    """
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.generator = generator or CodeGenerationClient.from_settings()
        app.state.render = render or render_page
        logger.info("WebClone backend ready")
        yield
        logger.info("WebClone backend shutting down")

    app = FastAPI(
        title="WebClone API",
        description=(
            "Renders a web page in headless Chromium, returns its cleaned HTML "
            "and CSS, and asks a language model for a matching SQL schema and "
            "Express CRUD route."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, server_error_handler)

    app.include_router(health_router.router, tags=["health"])
    app.include_router(clone_router.router, prefix="/api", tags=["clone"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()
