"""Logging setup shared by the API server and the CLI."""

from __future__ import annotations

import logging

from backend.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once.

    Repeated calls only adjust the level, so the app factory and the CLI can
    both call this without stacking handlers.
    """
    resolved = (level or settings.log_level).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root.setLevel(resolved)
