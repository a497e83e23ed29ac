"""Configuration settings for Lead Miner.

Environment Variables:
    GEMINI_API_KEY: Gemini credential (falls back to API_KEY)
    GEMINI_MODEL: Model id (default: gemini-2.5-flash)
    GEMINI_MAX_OUTPUT_TOKENS: Output cap per page (default: 8192)
    GEMINI_THINKING_BUDGET: Thinking tokens per page (default: 4096)
    LEAD_MINER_PAGE_DELAY: Pause between pages in seconds (default: 1.0)
    FLASK_SECRET_KEY: Session signing key for the web app
    LOG_LEVEL: Logging level (default: INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from .utils import logger

DEFAULT_MODEL = "gemini-2.5-flash"


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing."""


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_MODEL
    max_output_tokens: int = 8192
    thinking_budget: int = 4096
    page_delay: float = 1.0
    secret_key: str = "dev-secret-change"
    log_level: str = "INFO"

    def require_api_key(self) -> str:
        if not self.gemini_api_key:
            raise ConfigError("GEMINI_API_KEY must be set in the environment to run searches.")
        return self.gemini_api_key


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}.") from None


def _env_log_level(name: str = "LOG_LEVEL") -> str:
    level = os.getenv(name, "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"{name} must be a logging level name, got {level!r}.")
    return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or ""
    log_level = _env_log_level()
    logging.getLogger("lead_miner").setLevel(log_level)

    if not api_key:
        logger.warning("GEMINI_API_KEY is not configured; searches will fail.")

    return Settings(
        gemini_api_key=api_key,
        gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        max_output_tokens=_env_number("GEMINI_MAX_OUTPUT_TOKENS", "8192", int),
        thinking_budget=_env_number("GEMINI_THINKING_BUDGET", "4096", int),
        page_delay=_env_number("LEAD_MINER_PAGE_DELAY", "1.0", float),
        secret_key=os.getenv("FLASK_SECRET_KEY", "dev-secret-change"),
        log_level=log_level,
    )
