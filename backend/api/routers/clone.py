"""Clone endpoint.

Routes
------
POST /api/clone    Body: {"url": "https://..."}    -> run_clone

The body is read as raw JSON rather than through a pydantic model so that the
two 400 envelopes ("URL is required" / "Invalid URL") keep their exact shape
instead of FastAPI's default 422 body.
"""

from __future__ import annotations

import json
import logging
import traceback
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from backend.config import settings
from backend.errors import UrlValidationError
from backend.pipeline import run_clone
from backend.validation import validate_url

logger = logging.getLogger(__name__)

router = APIRouter()

FAILURE_MESSAGE = "Failed to clone website. Please check the URL and try again."


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _requested_url(request: Request) -> Any:
    """Return the ``url`` member of the JSON body, or ``None``."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(body, dict):
        return None
    return body.get("url")


def _failure_response(exc: Exception) -> JSONResponse:
    content: dict[str, Any] = {
        "success": False,
        "error": str(exc) or "Internal server error",
        "message": FAILURE_MESSAGE,
    }
    if not settings.is_production:
        content["details"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(status_code=500, content=content)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/clone")
async def clone_endpoint(request: Request) -> Any:
    """Render the requested URL and generate backend code from its markup.

    Returns the success envelope on 200.  Validation problems return 400
    before any rendering starts; a render failure (or any other pipeline
    error) returns the 500 failure envelope.
    """
    try:
        url = validate_url(await _requested_url(request))
    except UrlValidationError as exc:
        logger.info("[clone] Rejected request: %s", exc)
        return JSONResponse(
            status_code=400,
            content={"error": exc.error, "message": exc.message},
        )

    try:
        result = await run_clone(
            url,
            request.app.state.generator,
            render=request.app.state.render,
        )
    except Exception as exc:
        logger.exception("[clone] Error in clone process for %s", url)
        return _failure_response(exc)

    return {"success": True, "data": result.to_dict()}
