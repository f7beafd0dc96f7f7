"""Code generation client: HTML in, SQL schema + Express route out.

Model providers
---------------
``gemini`` (default)
    Google Gemini through ``langchain-google-genai``.
    Requires ``GEMINI_API_KEY``; ``GEMINI_MODEL`` overrides the model.

``openai``
    Requires ``OPENAI_API_KEY``; configure via ``OPENAI_CHAT_MODEL``.

``ollama``
    Local Ollama server at ``OLLAMA_BASE_URL``; no credential needed.

Set ``LLM_PROVIDER`` in your ``.env`` to switch providers.

Failure policy
--------------
:meth:`CodeGenerationClient.generate` never raises.  A missing credential, a
provider error, or an unparseable reply is logged with a category and the
canned fallback code is returned instead.
"""

from __future__ import annotations

import logging
from typing import Any

from backend.config import Settings, settings
from backend.errors import GenerationError
from backend.generator.fallback import fallback_code
from backend.generator.models import GeneratedCode
from backend.generator.parser import parse_generated_code
from backend.generator.prompt import build_prompt

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Error categories, matched against the upper-cased error message
# ---------------------------------------------------------------------------
_ERROR_CATEGORIES: list[tuple[tuple[str, ...], str]] = [
    (("API_KEY", "API KEY"), "Invalid or missing model API key"),
    (("RATE_LIMIT", "RATE LIMIT", "429"), "Model API rate limit exceeded"),
    (("QUOTA", "RESOURCE_EXHAUSTED"), "Model API quota exceeded"),
    (("SAFETY", "BLOCKED"), "Content blocked by the model's safety filter"),
]


def classify_generation_error(exc: BaseException) -> str:
    """Map *exc* to a user-facing category message.

    Unrecognised errors fall through to a generic message that carries the
    original text.
    """
    message = str(exc)
    upper = message.upper()
    for markers, category in _ERROR_CATEGORIES:
        if any(marker in upper for marker in markers):
            return category
    return f"Code generation failed: {message}"


# ---------------------------------------------------------------------------
# LLM construction
# ---------------------------------------------------------------------------

def build_chat_model(cfg: Settings | None = None) -> Any | None:
    """Return a configured LangChain chat model, or ``None`` without a credential.

    Raises:
        ValueError: If ``LLM_PROVIDER`` names an unknown provider.
    """
    cfg = cfg or settings
    provider = cfg.llm_provider.strip().lower()

    if provider == "ollama":
        from langchain_ollama import ChatOllama

        return ChatOllama(
            model=cfg.ollama_chat_model,
            base_url=cfg.ollama_base_url,
            temperature=cfg.generation_temperature,
            num_predict=cfg.generation_max_tokens,
        )

    if provider not in ("gemini", "openai"):
        raise ValueError(
            f"Unknown LLM_PROVIDER {cfg.llm_provider!r}. Use: gemini | openai | ollama"
        )

    if not cfg.active_api_key:
        return None

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=cfg.openai_chat_model,
            api_key=cfg.openai_api_key,
            temperature=cfg.generation_temperature,
            max_tokens=cfg.generation_max_tokens,
        )

    from langchain_google_genai import ChatGoogleGenerativeAI

    return ChatGoogleGenerativeAI(
        model=cfg.gemini_model,
        google_api_key=cfg.gemini_api_key,
        temperature=cfg.generation_temperature,
        max_output_tokens=cfg.generation_max_tokens,
    )


def _reply_text(reply: Any) -> str:
    """Flatten a LangChain message (or plain string) into text."""
    content = reply.content if hasattr(reply, "content") else reply
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict):
                parts.append(str(part.get("text", "")))
            else:
                parts.append(str(part))
        return "".join(parts)
    return str(content or "")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class CodeGenerationClient:
    """Turns sanitized HTML into :class:`GeneratedCode` using one shared model.

    Build it once at startup (see :meth:`from_settings`) and pass it to
    whatever handles requests; it holds no per-request state.
    """

    def __init__(self, llm: Any | None, html_budget: int = 8000) -> None:
        self._llm = llm
        self.html_budget = html_budget

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> "CodeGenerationClient":
        cfg = cfg or settings
        llm = build_chat_model(cfg)
        if llm is None:
            logger.warning(
                "[generate] No API key configured for provider %r; "
                "fallback code will be returned for every request.",
                cfg.llm_provider,
            )
        return cls(llm, html_budget=cfg.generation_html_budget)

    @property
    def configured(self) -> bool:
        return self._llm is not None

    async def _generate(self, html: str) -> GeneratedCode:
        if self._llm is None:
            raise GenerationError("Model API key is not configured")

        logger.info("[generate] Calling model ...")
        reply = await self._llm.ainvoke(build_prompt(html, self.html_budget))
        text = _reply_text(reply)
        logger.info("[generate] Model reply received (%d chars)", len(text))
        return parse_generated_code(text)

    async def generate(self, html: str) -> GeneratedCode:
        """Return generated schema + route for *html*, or the fallback pair."""
        try:
            return await self._generate(html)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "[generate] %s; returning fallback backend code",
                classify_generation_error(exc),
            )
            logger.debug("[generate] Generation failure detail", exc_info=exc)
            return fallback_code()
