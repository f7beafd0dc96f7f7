"""Centralised settings for the WebClone backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "5000")))
    app_env: str = field(
        default_factory=lambda: os.environ.get("APP_ENV", "development")
    )
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))

    @property
    def is_production(self) -> bool:
        """``True`` when tracebacks must be kept out of error responses."""
        return self.app_env.strip().lower() == "production"

    # ------------------------------------------------------------------
    # Code generation model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "gemini")
    )
    gemini_api_key: str = field(
        default_factory=lambda: os.environ.get("GEMINI_API_KEY", "")
    )
    gemini_model: str = field(
        default_factory=lambda: os.environ.get("GEMINI_MODEL", "gemini-1.5-pro")
    )
    openai_api_key: str = field(
        default_factory=lambda: os.environ.get("OPENAI_API_KEY", "")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    generation_temperature: float = field(
        default_factory=lambda: float(os.environ.get("GENERATION_TEMPERATURE", "0.7"))
    )
    generation_max_tokens: int = field(
        default_factory=lambda: int(os.environ.get("GENERATION_MAX_TOKENS", "2000"))
    )
    generation_html_budget: int = field(
        default_factory=lambda: int(os.environ.get("GENERATION_HTML_BUDGET", "8000"))
    )

    # ------------------------------------------------------------------
    # Page renderer
    # ------------------------------------------------------------------
    render_timeout: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_TIMEOUT", "45.0"))
    )
    render_settle_delay: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_SETTLE_DELAY", "5.0"))
    )
    render_scroll_settle_delay: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_SCROLL_SETTLE_DELAY", "2.0"))
    )
    render_auto_scroll: bool = field(
        default_factory=lambda: _env_bool("RENDER_AUTO_SCROLL", "true")
    )
    render_full_document: bool = field(
        default_factory=lambda: _env_bool("RENDER_FULL_DOCUMENT", "true")
    )
    render_computed_styles: bool = field(
        default_factory=lambda: _env_bool("RENDER_COMPUTED_STYLES", "true")
    )

    @property
    def active_api_key(self) -> str:
        """Credential for the configured provider (empty for ``ollama``)."""
        provider = self.llm_provider.strip().lower()
        if provider == "openai":
            return self.openai_api_key
        if provider == "gemini":
            return self.gemini_api_key
        return ""


# Module-level singleton: import this everywhere:
#   from backend.config import settings
settings = Settings()
