"""
Configuration for the resume reviser.

Everything comes from environment variables and is read when needed, so a
missing API key only fails the analysis call instead of the whole app.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_MODEL = "gemini-2.5-pro"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

# Local frontend dev servers
DEFAULT_CORS_ORIGINS = [
    "http://localhost:5500",
    "http://127.0.0.1:5500",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    temperature: float = 0.2
    timeout: float = 120.0
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @property
    def generate_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/models/{self.model}:generateContent"


def load_settings() -> Settings:
    api_key = (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip() or None
    origins = os.getenv("CORS_ORIGINS", "")
    return Settings(
        api_key=api_key,
        model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL).strip(),
        api_base=os.getenv("GEMINI_API_BASE", DEFAULT_API_BASE).strip(),
        temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.2")),
        timeout=float(os.getenv("GEMINI_TIMEOUT", "120")),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or list(DEFAULT_CORS_ORIGINS),
    )


def setup_logging(level: str = "INFO") -> None:
    """Console logging only (Render-friendly)."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
    # silence noisy per-request logging
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
