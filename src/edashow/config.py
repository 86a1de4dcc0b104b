"""Configuration management."""

from __future__ import annotations

import logging
import os
from pathlib import Path

APP_DIR = Path(os.environ.get("EDASHOW_HOME", Path.home() / ".edashow"))
DB_PATH = Path(os.environ.get("EDASHOW_DB_PATH", APP_DIR / "edashow.db"))

DEFAULT_MODEL = os.environ.get("EDASHOW_DEFAULT_MODEL", "openrouter/deepseek/deepseek-chat")
LLM_TIMEOUT = float(os.environ.get("EDASHOW_LLM_TIMEOUT", "120"))
LOG_LEVEL = os.environ.get("EDASHOW_LOG_LEVEL", "INFO")

REQUIRED_ENV_VARS = {
    "openrouter": "OPENROUTER_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


def configure_logging(level: str | None = None) -> None:
    """Install a basic root handler. Only entry points call this."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def check_api_key(provider: str) -> bool:
    """Whether the API key for a provider is set."""
    var_name = REQUIRED_ENV_VARS.get(provider, "")
    return bool(os.environ.get(var_name))


def get_available_providers() -> list[str]:
    """Providers with an API key configured."""
    return [p for p in REQUIRED_ENV_VARS if check_api_key(p)]


def get_missing_keys() -> list[str]:
    """Providers whose API key is missing."""
    return [p for p in REQUIRED_ENV_VARS if not check_api_key(p)]
