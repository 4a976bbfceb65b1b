"""Chat Relay — configuration helpers."""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

logger = logging.getLogger("chat-relay")

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_LOG_LEVEL = "INFO"


class Settings(BaseModel):
    openai_api_key: Optional[str] = None
    openai_base_url: str = DEFAULT_BASE_URL
    openai_model: str = DEFAULT_MODEL
    upstream_timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL

    def __repr__(self) -> str:
        # keep the key out of logs and tracebacks
        return f"Settings(openai_base_url={self.openai_base_url!r}, openai_model={self.openai_model!r})"

    __str__ = __repr__


def _timeout_from_env() -> float:
    raw = os.getenv("UPSTREAM_TIMEOUT_SECONDS")
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0
    if not 0 < timeout < float("inf"):
        logger.warning("Ignoring invalid UPSTREAM_TIMEOUT_SECONDS=%r, using %s", raw, DEFAULT_TIMEOUT_SECONDS)
        return DEFAULT_TIMEOUT_SECONDS
    return timeout


def _log_level_from_env() -> str:
    level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Ignoring unknown LOG_LEVEL=%r, using %s", level, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return level


def get_settings() -> Settings:
    """Build settings from the environment.

    Called per request so a rotated or newly set OPENAI_API_KEY is picked up
    without a restart.
    """
    return Settings(
        # keys pasted from files or `echo` often carry a trailing newline
        openai_api_key=(os.getenv("OPENAI_API_KEY") or "").strip() or None,
        openai_base_url=os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        openai_model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
        upstream_timeout=_timeout_from_env(),
        log_level=_log_level_from_env(),
    )
