"""
Runtime configuration read from the environment (and a local .env file).
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


@dataclass(frozen=True)
class Settings:
    llm_model: str = "gemini-2.5-flash"
    llm_base_url: Optional[str] = GEMINI_OPENAI_BASE_URL
    api_key_env: str = "GEMINI_API_KEY"
    refresh_interval: float = 0.05   # seconds between display frames
    analysis_timeout: Optional[float] = None
    cors_origins: Tuple[str, ...] = ("http://localhost:5173",)  # Vite default port
    log_level: str = "INFO"

    @property
    def credential(self) -> str:
        """Analysis credential from the configured environment variable ('' if unset)."""
        return os.getenv(self.api_key_env, "")


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = os.getenv("WELDMASTER_CORS_ORIGINS", "http://localhost:5173")
    return Settings(
        llm_model=os.getenv("WELDMASTER_LLM_MODEL", "gemini-2.5-flash"),
        # Empty string selects the default OpenAI endpoint
        llm_base_url=os.getenv("WELDMASTER_LLM_BASE_URL", GEMINI_OPENAI_BASE_URL) or None,
        api_key_env=os.getenv("WELDMASTER_API_KEY_ENV", "GEMINI_API_KEY"),
        refresh_interval=float(os.getenv("WELDMASTER_REFRESH_INTERVAL", "0.05")),
        analysis_timeout=_optional_float("WELDMASTER_ANALYSIS_TIMEOUT"),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        log_level=os.getenv("WELDMASTER_LOG_LEVEL", "INFO").upper(),
    )
