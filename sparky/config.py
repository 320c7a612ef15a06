"""
Central configuration for sparky.
Uses Pydantic BaseSettings for type-safe configuration from environment variables.
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env relative to this file (sparky/config.py → project root)
_ENV_FILE = Path(__file__).parent.parent / ".env"


def _load_env_file() -> None:
    """
    Load .env into os.environ, but only for keys that are currently unset
    or set to empty strings. Non-empty shell values still win.
    """
    if not _ENV_FILE.exists():
        return
    from dotenv import dotenv_values
    for key, value in dotenv_values(_ENV_FILE).items():
        if value and not os.environ.get(key):
            os.environ[key] = value


# Run at import time so Settings() sees the correct values
_load_env_file()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout: float = 60.0

    # ── Generation ──────────────────────────────────────────────────────────────
    temperature: float = 0.7
    max_output_tokens: int = 1024

    # ── Agent loop ──────────────────────────────────────────────────────────────
    max_tool_iterations: int = 5
    # "error" raises MaxIterationsExceeded; "empty" returns an empty reply
    max_iterations_policy: Literal["error", "empty"] = "error"

    # Environment
    data_dir: str = "./data"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    @field_validator("max_tool_iterations")
    @classmethod
    def _positive_iterations(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_tool_iterations must be at least 1")
        return v

    @property
    def store_dir(self) -> str:
        return os.path.join(self.data_dir, "store")

    @property
    def logs_dir(self) -> str:
        return os.path.join(self.data_dir, "logs")


def get_settings() -> "Settings":
    """Return the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


_settings: Settings | None = None


class _SettingsProxy:
    """Lazy proxy so `from sparky.config import settings` works without eager init."""
    def __getattr__(self, name):
        return getattr(get_settings(), name)


settings = _SettingsProxy()  # type: ignore[assignment]
